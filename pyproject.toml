[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nocsim"
version = "0.1.0"
description = "Building blocks of a cycle-based network-on-chip simulator: data types, topology helpers, reservation table, traffic generation, statistics, power model and wireless token ring"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "network-on-chip",
    "noc",
    "simulation",
    "wireless noc",
    "power model",
    "traffic generation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nocsim"]

[tool.hatch.build.targets.sdist]
include = ["nocsim", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
