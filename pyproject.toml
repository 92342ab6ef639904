[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kvengine"
version = "0.1.0"
description = "A small key-value storage engine with a memtable, write-ahead log and SSTables"
requires-python = ">=3.10"
dependencies = []
keywords = ["key-value", "storage", "memtable", "sstable", "wal", "bloom-filter", "merkle-tree"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kvengine = "kvengine.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kvengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
