"""In-memory representation of the bf and bflow dialects and their containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Optional, Sequence


class Operation:
    """Common base of every operation; results are the operations themselves."""

    op_name = ""
    result_type: Optional[str] = None
    operands: Sequence["Operation"] = ()
    regions: Sequence[list] = ()


def _walk_ops(ops: Sequence[Operation]) -> Iterator[Operation]:
    for op in ops:
        yield op
        for region in op.regions:
            yield from _walk_ops(region)


# --- bf dialect -----------------------------------------------------------


@dataclass(eq=False)
class Shift(Operation):
    """Move the data pointer by ``amount`` cells."""

    op_name: ClassVar[str] = "bf.shift"
    amount: int


@dataclass(eq=False)
class Increment(Operation):
    """Add ``amount`` to the cell at ``offset`` from the data pointer."""

    op_name: ClassVar[str] = "bf.increment"
    amount: int
    offset: int = 0


@dataclass(eq=False)
class SetZero(Operation):
    """Clear the cell at ``offset`` from the data pointer."""

    op_name: ClassVar[str] = "bf.set_zero"
    offset: int = 0


@dataclass(eq=False)
class Mul(Operation):
    """Add ``multiple`` times the current cell to the cell at ``shift``."""

    op_name: ClassVar[str] = "bf.mul"
    shift: int
    multiple: int


@dataclass(eq=False)
class Input(Operation):
    """Read one character into the current cell."""

    op_name: ClassVar[str] = "bf.input"


@dataclass(eq=False)
class Output(Operation):
    """Write the current cell as a character."""

    op_name: ClassVar[str] = "bf.output"


@dataclass(eq=False)
class Loop(Operation):
    """Repeat ``body`` while the current cell is non-zero."""

    op_name: ClassVar[str] = "bf.loop"
    body: list = field(default_factory=list)

    @property
    def regions(self) -> list[list]:
        return [self.body]


# --- bflow dialect --------------------------------------------------------


@dataclass(eq=False)
class ReadPtr(Operation):
    """Load the cell at ``offset`` from the data pointer."""

    op_name: ClassVar[str] = "bflow.read_ptr"
    offset: int = 0
    result_type: str = "i16"


@dataclass(eq=False)
class WritePtr(Operation):
    """Store ``value`` into the cell at ``offset`` from the data pointer."""

    op_name: ClassVar[str] = "bflow.write_ptr"
    value: Operation
    offset: int = 0

    @property
    def operands(self) -> list[Operation]:
        return [self.value]


@dataclass(eq=False)
class ShiftPtr(Operation):
    """Move the data pointer by ``amount`` cells."""

    op_name: ClassVar[str] = "bflow.shift_ptr"
    amount: int


# --- other dialects and containers ---------------------------------------


@dataclass(eq=False)
class GenericOp(Operation):
    """Any operation of another dialect, described by name, operands and attributes."""

    op_name: str
    operands: list = field(default_factory=list)
    attributes: dict = field(default_factory=dict)
    result_type: Optional[str] = None
    regions: list = field(default_factory=list)
    symbol: Optional[str] = None


@dataclass(eq=False)
class Function(Operation):
    """A function; a ``body`` of ``None`` makes it an external declaration."""

    op_name: ClassVar[str] = "func.func"
    name: str
    body: Optional[list] = field(default_factory=list)
    inputs: tuple = ()
    results: tuple = ()
    visibility: Optional[str] = None
    attributes: dict = field(default_factory=dict)

    @property
    def regions(self) -> list[list]:
        return [] if self.body is None else [self.body]


@dataclass(eq=False)
class Module:
    """The top-level container of functions and globals."""

    body: list = field(default_factory=list)

    def lookup(self, name: str) -> Optional[Operation]:
        """Return the top-level operation defining symbol ``name``, or None."""
        for op in self.body:
            if isinstance(op, Function) and op.name == name:
                return op
            if isinstance(op, GenericOp) and op.symbol == name:
                return op
        return None

    def main(self) -> Function:
        """Return the ``main`` function."""
        found = self.lookup("main")
        if not isinstance(found, Function):
            raise LookupError("module has no main function")
        return found

    def walk(self) -> Iterator[Operation]:
        """Yield every operation in the module, parents before their contents."""
        return _walk_ops(self.body)