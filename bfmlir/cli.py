"""Command-line entry points: the compiler and the optimizer driver."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from .gen import mlir_gen
from .ir import Module
from .lexer import lex_program
from .lowering import ConversionError, bf_to_bflow, bflow_to_mlir
from .passes import PASSES, PassError, run_pipeline
from .printer import print_module

_LOWERINGS: dict[str, Callable[[Module], Module]] = {
    "bf-to-bflow": bf_to_bflow,
    "bflow-to-mlir": bflow_to_mlir,
}


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_bytes().decode("latin-1")


def _error_text(exc: OSError) -> str:
    return exc.strerror or str(exc)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Compile a ``.bf`` file into a bf-dialect module written to ``-o``."""
    parser = argparse.ArgumentParser(prog="bfc", description="Brainfuck Compiler")
    parser.add_argument("input", nargs="?", default="-", metavar="filename", help="<Input bf file>")
    parser.add_argument("-o", dest="output", default="a.mlir", metavar="filename", help="Output filename")
    args = parser.parse_args(argv)

    if not args.input.endswith(".bf"):
        print("Error: Must input brainfuck src file that ends with .bf.")
        return 1
    try:
        source = _read_source(args.input)
    except OSError as exc:
        print(f"Could not open input file: {_error_text(exc)}", file=sys.stderr)
        return -1

    module = mlir_gen(lex_program(source))
    try:
        with open(args.output, "w", encoding="utf-8") as handle:
            handle.write(print_module(module))
    except OSError:
        print(f"Error: Could not open file {args.output}", file=sys.stderr)
        return 1
    return 0


def opt_main(argv: Optional[Sequence[str]] = None) -> int:
    """Read brainfuck source, apply the requested passes in order and print the module."""
    parser = argparse.ArgumentParser(prog="bf-opt", description="Bf optimizer driver")
    parser.add_argument("input", nargs="?", default="-", metavar="filename")
    parser.add_argument("-o", dest="output", default="-", metavar="filename")
    for name in [*PASSES, *_LOWERINGS]:
        parser.add_argument(f"--{name}", dest="pipeline", action="append_const", const=name)
    args = parser.parse_args(argv)

    try:
        source = _read_source(args.input)
    except OSError as exc:
        print(f"Could not open input file: {_error_text(exc)}", file=sys.stderr)
        return 1

    module = mlir_gen(lex_program(source))
    try:
        for name in args.pipeline or []:
            lowering = _LOWERINGS.get(name)
            if lowering is not None:
                lowering(module)
            else:
                run_pipeline(module, [name])
    except (PassError, ConversionError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    text = print_module(module)
    if args.output == "-":
        sys.stdout.write(text)
        return 0
    try:
        with open(args.output, "w", encoding="utf-8") as handle:
            handle.write(text)
    except OSError:
        print(f"Error: Could not open file {args.output}", file=sys.stderr)
        return 1
    return 0