[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sirenkit"
version = "0.1.0"
description = "Configuration loading, framed message channels and UDP monitoring for a microphone-array voice front end"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "voice",
    "wake-word",
    "microphone-array",
    "configuration",
    "ipc",
    "udp",
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
    "Topic :: Multimedia :: Sound/Audio :: Speech",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sirenkit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
