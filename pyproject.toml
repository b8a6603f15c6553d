[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swssdb"
version = "0.1.0"
description = "Redis-backed switch state database access: DB configuration, connectors, notifications and network address types"
requires-python = ">=3.10"
keywords = ["redis", "switch", "network", "configuration", "database", "ip", "mac"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: System :: Networking",
]
dependencies = [
    "redis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["swssdb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
