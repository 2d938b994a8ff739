"""Textual rendering of modules in generic operation syntax."""

from __future__ import annotations

from typing import Any

from .ir import (
    Function,
    GenericOp,
    Increment,
    Module,
    Mul,
    Operation,
    ReadPtr,
    SetZero,
    Shift,
    ShiftPtr,
    WritePtr,
)

_INDENT = "  "


class _Namer:
    """Assigns %N names to results in definition order."""

    def __init__(self) -> None:
        self._names: dict[Operation, str] = {}

    def define(self, op: Operation) -> str:
        name = f"%{len(self._names)}"
        self._names[op] = name
        return name

    def use(self, op: Operation) -> str:
        try:
            return self._names[op]
        except KeyError:
            raise ValueError(f"use of undefined value produced by {op.op_name}") from None


def _format_attr(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value} : i64"
    return str(value)


def _properties(op: Operation) -> dict[str, str]:
    match op:
        case Shift() | ShiftPtr():
            return {"amount": f"{op.amount} : i32"}
        case Increment():
            return {"amount": f"{op.amount} : i16", "offset": f"{op.offset} : i32"}
        case SetZero() | ReadPtr() | WritePtr():
            return {"offset": f"{op.offset} : i32"}
        case Mul():
            return {"multiple": f"{op.multiple} : i16", "shift": f"{op.shift} : i32"}
        case GenericOp():
            props = {key: _format_attr(value) for key, value in op.attributes.items()}
            if op.symbol is not None:
                props["sym_name"] = f'"{op.symbol}"'
            return props
        case _:
            return {}


def _print_function(func: Function, indent: int, out: list[str]) -> None:
    pad = _INDENT * indent
    visibility = f"{func.visibility} " if func.visibility else ""
    sig = f"func.func {visibility}@{func.name}({', '.join(func.inputs)})"
    if len(func.results) == 1:
        sig += f" -> {func.results[0]}"
    elif func.results:
        sig += f" -> ({', '.join(func.results)})"
    if func.attributes:
        attrs = ", ".join(
            key if value is True else f"{key} = {_format_attr(value)}"
            for key, value in sorted(func.attributes.items())
        )
        sig += f" attributes {{{attrs}}}"
    if func.body is None:
        out.append(pad + sig)
        return
    out.append(pad + sig + " {")
    namer = _Namer()
    for op in func.body:
        _print_op(op, namer, indent + 1, out)
    out.append(pad + "}")


def _print_op(op: Operation, namer: _Namer, indent: int, out: list[str]) -> None:
    if isinstance(op, Function):
        _print_function(op, indent, out)
        return
    pad = _INDENT * indent
    operand_names = [namer.use(value) for value in op.operands]
    operand_types = [value.result_type or "()" for value in op.operands]
    prefix = f"{namer.define(op)} = " if op.result_type else ""
    text = f'{prefix}"{op.op_name}"({", ".join(operand_names)})'
    props = _properties(op)
    if props:
        text += " <{" + ", ".join(f"{k} = {v}" for k, v in sorted(props.items())) + "}>"
    signature = f" : ({', '.join(operand_types)}) -> {op.result_type or '()'}"
    regions = list(op.regions)
    if not regions:
        out.append(pad + text + signature)
        return
    out.append(pad + text + " ({")
    for index, region in enumerate(regions):
        if index:
            out.append(pad + "}, {")
        for inner in region:
            _print_op(inner, namer, indent + 1, out)
    out.append(pad + "})" + signature)


def print_module(module: Module) -> str:
    """Return the text of ``module``."""
    out = ["module {"]
    namer = _Namer()
    for op in module.body:
        _print_op(op, namer, 1, out)
    out.append("}")
    return "\n".join(out) + "\n"