"""Rewrites over the bf dialect: merging, clearing, offsetting and multiply loops."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator

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
    SetZero,
    Shift,
)

OPTIMIZED_ATTR = "already_optimized"


class PassError(Exception):
    """Raised when a pass cannot be found or cannot be applied."""


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return ((value + half) % (1 << bits)) - half


def _blocks(ops: Iterable[Operation]) -> Iterator[list]:
    """Yield every block nested inside ``ops``, innermost blocks first."""
    for op in ops:
        for region in op.regions:
            yield from _blocks(region)
            yield region


def _module_blocks(module: Module) -> Iterator[list]:
    yield from _blocks(module.body)
    yield module.body


def _combine_block(block: list) -> None:
    merged: list = []
    for op in block:
        prev = merged[-1] if merged else None
        if isinstance(op, Shift) and isinstance(prev, Shift):
            prev.amount = _wrap(prev.amount + op.amount, 32)
        elif isinstance(op, Increment) and isinstance(prev, Increment):
            # The surviving operation keeps its own offset.
            prev.amount = _wrap(prev.amount + op.amount, 16)
        else:
            merged.append(op)
    block[:] = merged


def combine_consecutive_ops(module: Module) -> Module:
    """Merge runs of adjacent shifts and of adjacent increments in every block."""
    for block in list(_module_blocks(module)):
        _combine_block(block)
    return module


def _is_clear_loop(op: Operation) -> bool:
    if not isinstance(op, Loop) or len(op.body) != 1:
        return False
    inner = op.body[0]
    return isinstance(inner, Increment) and inner.amount in (1, -1)


def set_zero(module: Module) -> Module:
    """Replace ``[-]`` and ``[+]`` loops with a set-zero operation."""
    for block in list(_module_blocks(module)):
        block[:] = [SetZero(offset=0) if _is_clear_loop(op) else op for op in block]
    return module


def _is_return(op: Operation) -> bool:
    return isinstance(op, GenericOp) and op.op_name == "func.return"


def _offset_block(block: list) -> None:
    pending = 0
    out: list = []
    for op in block:
        match op:
            case Increment():
                out.append(Increment(amount=op.amount, offset=pending))
            case Shift():
                pending += op.amount
            case SetZero():
                out.append(SetZero(offset=pending))
            case Input() | Output() | Mul() | Loop():
                if pending:
                    out.append(Shift(amount=pending))
                    pending = 0
                out.append(op)
            case _:
                out.append(op)
    if pending:
        if out and _is_return(out[-1]):
            out.insert(len(out) - 1, Shift(amount=pending))
        else:
            out.append(Shift(amount=pending))
    block[:] = out


def offset(module: Module) -> Module:
    """Fold pointer shifts in each function's top-level block into operation offsets.

    Shifts are deferred until an input, output, multiply or loop needs the
    pointer, or the end of the function. Loop bodies are left as they are.
    A function is processed only once and is marked as optimized afterwards.
    """
    for func in [op for op in module.walk() if isinstance(op, Function)]:
        if func.body is None or func.attributes.get(OPTIMIZED_ATTR):
            continue
        _offset_block(func.body)
        func.attributes[OPTIMIZED_ATTR] = True
    return module


def _rewrite_mul_loop(loop: Loop) -> list | None:
    has_dec = False
    muls: list = []
    for op in loop.body:
        if not isinstance(op, Increment):
            return None
        if op.amount == -1 and op.offset == 0:
            has_dec = True
        elif op.amount < 1:
            return None
        else:
            muls.append(Mul(shift=op.offset, multiple=op.amount))
    if not has_dec:
        return None
    return [*muls, SetZero(offset=0)]


def mul_loop(module: Module) -> Module:
    """Replace loops made only of offset increments and one ``-1`` at offset 0.

    Each other increment becomes a multiply into its offset, followed by a
    clear of the current cell.
    """
    for block in list(_module_blocks(module)):
        out: list = []
        for op in block:
            replacement = _rewrite_mul_loop(op) if isinstance(op, Loop) else None
            if replacement is None:
                out.append(op)
            else:
                out.extend(replacement)
        block[:] = out
    return module


PASSES: dict[str, Callable[[Module], Module]] = {
    "bf-combine-consecutive-ops": combine_consecutive_ops,
    "bf-set-zero": set_zero,
    "bf-offset": offset,
    "bf-mul-loop": mul_loop,
}


def run_pipeline(module: Module, names: Iterable[str]) -> Module:
    """Run the named passes on ``module`` in order; unknown names raise PassError."""
    selected = []
    for name in names:
        key = name.lstrip("-")
        if not key.startswith("bf-"):
            key = "bf-" + key
        try:
            selected.append(PASSES[key])
        except KeyError:
            raise PassError(f"unknown pass: {name}") from None
    for apply in selected:
        apply(module)
    return module