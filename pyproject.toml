[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sphfluid"
version = "1.0.0"
description = "Smoothed-particle hydrodynamics fluid simulation on a uniform block grid, with a binary FLD particle file format."
requires-python = ">=3.10"
dependencies = []
keywords = ["sph", "fluid", "simulation", "particles", "physics", "hydrodynamics"]
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
packages = ["sphfluid"]

[tool.hatch.build.targets.sdist]
include = ["sphfluid", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
