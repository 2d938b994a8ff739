"""Dialect conversions: bf to bflow, and bflow to memref/index operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .ir import (
    Function,
    GenericOp,
    Increment,
    Input,
    Loop,
    Module,
    Mul,
    Operation,
    Output,
    ReadPtr,
    SetZero,
    Shift,
    ShiftPtr,
    WritePtr,
)

I1 = "i1"
I16 = "i16"
I32 = "i32"
INDEX = "index"
MEMORY_SIZE = 65535
MEMORY_SYMBOL = "bf_memory"
POINTER_SYMBOL = "bf_ptr"
MEMORY_TYPE = f"memref<{MEMORY_SIZE}xi16>"
POINTER_TYPE = "memref<index>"
CMPI_NE = 1

BF_TO_BFLOW_LEGAL = frozenset({"bflow", "arith", "builtin", "llvm", "func", "scf"})
BFLOW_TO_MLIR_LEGAL = frozenset({"index", "memref", "llvm", "builtin", "func", "scf", "arith"})


class ConversionError(Exception):
    """Raised when an operation cannot be legalized by a conversion."""


def _dialect(op: Operation) -> str:
    return op.op_name.split(".", 1)[0]


def _symbol_name(op: Operation) -> Optional[str]:
    if isinstance(op, Function):
        return op.name
    if isinstance(op, GenericOp):
        return op.symbol
    return None


Handler = Callable[["_Rewriter", Operation], list]


@dataclass
class _Rewriter:
    """Applies handlers to every operation and checks the rest are legal."""

    module: Module
    legal: frozenset
    handlers: dict
    mapping: dict = field(default_factory=dict)
    created: list = field(default_factory=list)

    def symbol(self, name: str) -> Optional[Operation]:
        found = self.module.lookup(name)
        if found is not None:
            return found
        return next((op for op in self.created if _symbol_name(op) == name), None)

    def declare(self, op: Operation) -> None:
        self.created.append(op)

    def resolve(self, value: Operation) -> Operation:
        return self.mapping.get(value, value)

    def _remap(self, op: Operation) -> None:
        if isinstance(op, GenericOp):
            op.operands[:] = [self.resolve(value) for value in op.operands]
        elif isinstance(op, WritePtr):
            op.value = self.resolve(op.value)

    def convert_block(self, block: list) -> None:
        out: list = []
        for op in list(block):
            self._remap(op)
            handler = self.handlers.get(type(op))
            if handler is not None:
                out.extend(handler(self, op))
                continue
            if _dialect(op) not in self.legal:
                raise ConversionError(f"failed to legalize operation '{op.op_name}'")
            for region in op.regions:
                self.convert_block(region)
            out.append(op)
        block[:] = out

    def run(self) -> Module:
        self.convert_block(self.module.body)
        # Each new symbol goes to the start of the module, so the last one leads.
        self.module.body[:0] = list(reversed(self.created))
        return self.module


def _constant(value: int, type_: str) -> GenericOp:
    return GenericOp("arith.constant", attributes={"value": f"{value} : {type_}"}, result_type=type_)


def _binary(name: str, lhs: Operation, rhs: Operation, type_: str) -> GenericOp:
    return GenericOp(name, operands=[lhs, rhs], result_type=type_)


def _call(name: str, args: Iterable[Operation], result: str) -> GenericOp:
    return GenericOp("func.call", operands=list(args), attributes={"callee": f"@{name}"}, result_type=result)


def _ensure_function(rw: _Rewriter, name: str, inputs: tuple, results: tuple) -> None:
    if rw.symbol(name) is None:
        rw.declare(Function(name, body=None, inputs=inputs, results=results, visibility="private"))


# --- bf to bflow ----------------------------------------------------------


def _lower_increment(rw: _Rewriter, op: Increment) -> list:
    read = ReadPtr(offset=op.offset)
    amount = _constant(op.amount, I16)
    total = _binary("arith.addi", read, amount, I16)
    return [read, amount, total, WritePtr(value=total, offset=op.offset)]


def _lower_shift(rw: _Rewriter, op: Shift) -> list:
    return [ShiftPtr(amount=op.amount)]


def _lower_input(rw: _Rewriter, op: Input) -> list:
    _ensure_function(rw, "getchar", (), (I32,))
    call = _call("getchar", [], I32)
    trunc = GenericOp("llvm.trunc", operands=[call], result_type=I16)
    return [call, trunc, WritePtr(value=trunc, offset=0)]


def _lower_output(rw: _Rewriter, op: Output) -> list:
    _ensure_function(rw, "putchar", (I32,), (I32,))
    read = ReadPtr(offset=0)
    sext = GenericOp("llvm.sext", operands=[read], result_type=I32)
    return [read, sext, _call("putchar", [sext], I32)]


def _lower_loop(rw: _Rewriter, op: Loop) -> list:
    read = ReadPtr(offset=0)
    zero = _constant(0, I16)
    cond = GenericOp("arith.cmpi", operands=[read, zero], attributes={"predicate": CMPI_NE}, result_type=I1)
    before = [read, zero, cond, GenericOp("scf.condition", operands=[cond])]
    after = list(op.body)
    rw.convert_block(after)
    after.append(GenericOp("scf.yield"))
    return [GenericOp("scf.while", regions=[before, after])]


def _lower_set_zero(rw: _Rewriter, op: SetZero) -> list:
    zero = _constant(0, I16)
    return [zero, WritePtr(value=zero, offset=op.offset)]


def _lower_mul(rw: _Rewriter, op: Mul) -> list:
    source = ReadPtr(offset=0)
    multiple = _constant(op.multiple, I16)
    product = _binary("arith.muli", source, multiple, I16)
    target = ReadPtr(offset=op.shift)
    total = _binary("arith.addi", target, product, I16)
    return [source, multiple, product, target, total, WritePtr(value=total, offset=op.shift)]


_BF_HANDLERS: dict[type, Handler] = {
    Increment: _lower_increment,
    Shift: _lower_shift,
    Input: _lower_input,
    Output: _lower_output,
    Loop: _lower_loop,
    SetZero: _lower_set_zero,
    Mul: _lower_mul,
}


def bf_to_bflow(module: Module) -> Module:
    """Lower every bf operation to bflow, arith, llvm, func and scf operations."""
    return _Rewriter(module, BF_TO_BFLOW_LEGAL, _BF_HANDLERS).run()


# --- bflow to memref/index -----------------------------------------------


def _global(rw: _Rewriter, name: str, type_: str, extra: dict) -> GenericOp:
    if rw.symbol(name) is None:
        attributes = {"sym_visibility": '"private"', "type": type_, **extra}
        rw.declare(GenericOp("memref.global", attributes=attributes, symbol=name))
    return GenericOp("memref.get_global", attributes={"name": f"@{name}"}, result_type=type_)


def _memory(rw: _Rewriter) -> GenericOp:
    return _global(rw, MEMORY_SYMBOL, MEMORY_TYPE, {})


def _pointer(rw: _Rewriter) -> GenericOp:
    return _global(rw, POINTER_SYMBOL, POINTER_TYPE, {"initial_value": "dense<0> : tensor<index>"})


def _index_plus(pointer: Operation, amount: int) -> list:
    index = GenericOp("memref.load", operands=[pointer], result_type=INDEX)
    constant = GenericOp("index.constant", attributes={"value": f"{amount} : index"}, result_type=INDEX)
    return [index, constant, _binary("index.add", index, constant, INDEX)]


def _lower_read_ptr(rw: _Rewriter, op: ReadPtr) -> list:
    memory = _memory(rw)
    pointer = _pointer(rw)
    address = _index_plus(pointer, op.offset)
    load = GenericOp("memref.load", operands=[memory, address[-1]], result_type=I16)
    rw.mapping[op] = load
    return [memory, pointer, *address, load]


def _lower_write_ptr(rw: _Rewriter, op: WritePtr) -> list:
    memory = _memory(rw)
    pointer = _pointer(rw)
    address = _index_plus(pointer, op.offset)
    store = GenericOp("memref.store", operands=[op.value, memory, address[-1]])
    return [memory, pointer, *address, store]


def _lower_shift_ptr(rw: _Rewriter, op: ShiftPtr) -> list:
    pointer = _pointer(rw)
    address = _index_plus(pointer, op.amount)
    store = GenericOp("memref.store", operands=[address[-1], pointer])
    return [pointer, *address, store]


_BFLOW_HANDLERS: dict[type, Handler] = {
    ReadPtr: _lower_read_ptr,
    WritePtr: _lower_write_ptr,
    ShiftPtr: _lower_shift_ptr,
}


def bflow_to_mlir(module: Module) -> Module:
    """Lower bflow operations to loads and stores on the global tape and pointer."""
    return _Rewriter(module, BFLOW_TO_MLIR_LEGAL, _BFLOW_HANDLERS).run()