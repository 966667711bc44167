[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "remotecache"
version = "0.1.0"
description = "Building blocks for a remote build cache: ActionResult validation, request URL parsing, basic auth for gRPC calls, idle timing and help text"
requires-python = ">=3.10"
dependencies = [
    "passlib",
]
keywords = [
    "build-cache",
    "remote-cache",
    "bazel",
    "reapi",
    "action-cache",
    "content-addressable-storage",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["remotecache"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
