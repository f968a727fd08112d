[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ssdbkit"
version = "2.0.0"
description = "Building blocks for key-value servers: record buffers, config files, logging, IP filtering, sorted sets and worker pools"
requires-python = ">=3.10"
dependencies = [
    "sortedcontainers",
]
keywords = [
    "key-value",
    "server",
    "protocol",
    "config",
    "logging",
    "sorted-set",
    "worker-pool",
    "ip-filter",
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ssdbkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
