[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parlgraph"
version = "0.1.0"
description = "Graph containers, hash tables, histograms and adjacency-graph I/O for graph algorithms"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "graph",
    "adjacency graph",
    "edge list",
    "hash table",
    "histogram",
    "counting sort",
    "csr",
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
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["parlgraph"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
