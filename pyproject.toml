[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qtnmsim"
version = "0.1.0"
description = "Tritium beta-decay spectrum, magnetic bathtub trap field and primary-electron generation for cyclotron radiation simulations"
requires-python = ">=3.10"
dependencies = []
keywords = ["tritium", "beta decay", "neutrino mass", "magnetic trap", "cyclotron radiation", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qtnmsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
