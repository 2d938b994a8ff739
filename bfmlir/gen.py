"""Build a bf-dialect module from a token sequence."""

from __future__ import annotations

from typing import Iterable

from .ir import Function, GenericOp, Increment, Input, Loop, Module, Output, Shift
from .lexer import Token


def mlir_gen(tokens: Iterable[Token]) -> Module:
    """Return a module whose ``main`` executes ``tokens``.

    A ``]`` with no open loop ends generation; an unclosed ``[`` takes the
    rest of the program as its body.
    """
    body: list = []
    blocks = [body]
    for raw in tokens:
        token = Token(raw)
        current = blocks[-1]
        match token:
            case Token.SHIFT_RIGHT:
                current.append(Shift(amount=1))
            case Token.SHIFT_LEFT:
                current.append(Shift(amount=-1))
            case Token.INCREMENT:
                current.append(Increment(amount=1, offset=0))
            case Token.DECREMENT:
                current.append(Increment(amount=-1, offset=0))
            case Token.OUTPUT:
                current.append(Output())
            case Token.INPUT:
                current.append(Input())
            case Token.JUMPZ:
                loop = Loop()
                current.append(loop)
                blocks.append(loop.body)
            case Token.JUMPNZ:
                if len(blocks) == 1:
                    break
                blocks.pop()
    body.append(GenericOp("func.return"))
    return Module(body=[Function("main", body=body)])