[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asyncresults"
version = "0.1.0"
description = "Thread-safe result objects, promises, lazy and shared results, and when_all/when_any combinators"
requires-python = ">=3.10"
dependencies = []
keywords = ["concurrency", "futures", "promises", "async", "results", "when_all", "when_any"]
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
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["asyncresults"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
