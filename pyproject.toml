[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eraser-config"
version = "1.4.0b0"
description = "Configuration and resource models for a cluster image-cleanup controller: durations, runtime sockets, versioned configs and defaults."
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "containers", "images", "configuration", "cleanup"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["eraser_config"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
