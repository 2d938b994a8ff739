"""Brainfuck compiler with an MLIR-style IR, optimisation passes and lowerings."""

__version__ = "0.1.0"