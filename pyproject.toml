[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yson"
version = "0.1.0"
description = "Streaming JSON writer with layout control, and low-level readers for big-endian binary input"
requires-python = ">=3.10"
dependencies = []
keywords = ["json", "ubjson", "writer", "streaming", "binary"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: File Formats :: JSON",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["yson"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
