# bfmlir

A small compiler for Brainfuck programs. It reads Brainfuck source,
builds a high-level `bf` IR inside a `main` function and prints it in an
MLIR-style generic operation syntax. Optimisation passes rewrite that IR,
and two conversions lower it first to the pointer-level `bflow` IR and
then to loads and stores on a global 65535-cell `i16` memory
(`bf_memory`) and a global data pointer (`bf_ptr`).

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install .[test]
pytest
```

## Compiling a program

```
bfc hello.bf -o hello.mlir
```

The input name must end in `.bf`; otherwise `bfc` prints an error and
exits with status 1. Only the eight Brainfuck characters `> < + - , . [ ]`
are read; everything else is ignored. Without `-o` the module is written
to `a.mlir`. `bfc` writes the unoptimised `bf` IR.

## Optimising and lowering

`bf-opt` also reads Brainfuck source (a file, or standard input when no
file or `-` is given), builds the `bf` IR, applies the requested steps in
the order they appear on the command line and prints the result to
standard output, or to the file named by `-o`.

```
bf-opt hello.bf --bf-combine-consecutive-ops --bf-set-zero --bf-offset \
       --bf-mul-loop --bf-to-bflow --bflow-to-mlir
```

The steps are:

- `--bf-combine-consecutive-ops`: merges runs of adjacent shifts and of
  adjacent increments in every block (increment amounts wrap at 16 bits;
  the merged increment keeps the offset of the first one);
- `--bf-set-zero`: replaces `[-]` and `[+]` loops by a single
  `bf.set_zero`;
- `--bf-offset`: in each function's top-level block, folds pointer shifts
  into the offsets of the following increments and set-zero ops, so the
  pointer moves only before input, output, multiply and loop ops and
  before the final return; loop bodies are left alone, and a function is
  marked `already_optimized` so it is processed once;
- `--bf-mul-loop`: turns loops made only of increments, with one `-1` at
  offset 0 and positive amounts elsewhere (such as `[->+++>+++++<<]`
  after `--bf-offset`), into `bf.mul` ops followed by a `bf.set_zero`;
- `--bf-to-bflow`: lowers every `bf` op to `bflow`, `arith`, `llvm`,
  `func` and `scf` ops, declaring private `getchar`/`putchar` functions
  when input or output is used;
- `--bflow-to-mlir`: lowers `bflow` ops to `memref` and `index` ops on the
  global memory and pointer.

An op a conversion cannot legalise is reported as an error and `bf-opt`
exits with status 1.

## Using it from Python

```python
from bfmlir.lexer import lex_program
from bfmlir.gen import mlir_gen
from bfmlir.printer import print_module
from bfmlir.passes import combine_consecutive_ops, set_zero, offset, mul_loop
from bfmlir.lowering import bf_to_bflow, bflow_to_mlir

module = mlir_gen(lex_program("++++[->++<]>."))
combine_consecutive_ops(module)
set_zero(module)
offset(module)
mul_loop(module)
print(print_module(module))

bf_to_bflow(module)
bflow_to_mlir(module)
print(print_module(module))
```

The passes and conversions change the module in place and also return it.
`run_pipeline(module, names)` in `bfmlir.passes` applies optimisation
passes by name (`bf-set-zero`, `--bf-set-zero` and `set-zero` are all
accepted) in the given order; an unknown name raises `PassError`.
`bf_to_bflow` and `bflow_to_mlir` raise `ConversionError` on an op they
cannot legalise. `Module.walk()` yields every op, `Module.lookup(name)`
finds a function or global by symbol, and `Module.main()` returns the
`main` function.

## What it does not do

The package only builds, rewrites and prints the IR. It does not parse
printed IR back in, does not emit LLVM IR, object code or executables,
and does not run Brainfuck programs.