[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bfmlir"
version = "0.1.0"
description = "A Brainfuck compiler that builds an MLIR-style IR, optimises it and lowers it to memory loads and stores"
requires-python = ">=3.10"
dependencies = []
keywords = ["brainfuck", "compiler", "mlir", "ir", "optimizer", "lowering"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bfc = "bfmlir.cli:main"
bf-opt = "bfmlir.cli:opt_main"

[tool.hatch.build.targets.wheel]
packages = ["bfmlir"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 120
target-version = "py310"
