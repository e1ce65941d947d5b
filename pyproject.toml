[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "senne"
version = "0.1.0"
description = "A cycle-stepped 6502 processor core with a line-driven terminal inspector"
requires-python = ">=3.10"
dependencies = []
keywords = ["6502", "emulator", "nes", "cpu", "terminal"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
senne = "senne.app:main"

[tool.hatch.build.targets.wheel]
packages = ["senne"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
