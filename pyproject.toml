[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "backrooms"
version = "0.1.0"
description = "A first-person raycasting exploration game set in procedurally generated backrooms"
requires-python = ">=3.10"
keywords = ["game", "raycasting", "backrooms", "procedural-generation", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
backrooms = "backrooms.app:main"

[tool.hatch.build.targets.wheel]
packages = ["backrooms"]

[tool.pytest.ini_options]
addopts = "-ra"
