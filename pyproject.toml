[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jetpages"
version = "1.0.1"
description = "Page-level structures of Jet (Access) database files: table definitions, usage maps, rows, properties, money values and search arguments"
requires-python = ">=3.10"
dependencies = []
keywords = ["jet", "access", "mdb", "database", "pages", "rows"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jetpages"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
