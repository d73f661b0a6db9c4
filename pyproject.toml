[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gemu"
version = "0.1.0"
description = "An early-stage Game Boy CPU emulator: instruction decoding, execution and memory-mapped registers"
requires-python = ">=3.10"
dependencies = []
keywords = ["game boy", "emulator", "cpu", "disassembler"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gemu = "gemu.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gemu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
