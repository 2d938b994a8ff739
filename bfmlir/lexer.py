"""Tokenizer for brainfuck source text."""

from __future__ import annotations

from enum import Enum


class Token(str, Enum):
    """The eight brainfuck commands, valued by their source character."""

    SHIFT_RIGHT = ">"
    SHIFT_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    INPUT = ","
    OUTPUT = "."
    JUMPZ = "["
    JUMPNZ = "]"

    def __str__(self) -> str:
        return self.name.lower()


_COMMANDS = {token.value: token for token in Token}


def lex_program(program: str) -> list[Token]:
    """Return the command tokens of ``program``, skipping every other character."""
    return [_COMMANDS[char] for char in program if char in _COMMANDS]