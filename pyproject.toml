[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitbase"
version = "0.1.0"
description = "Building blocks for SQL over git: filter pushdown, index key encoding, commit line statistics, reference helpers and cache keys."
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "sql", "index", "filters", "commit-stats", "crc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Software Development :: Version Control :: Git",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gitbase"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
