from bfmlir.gen import mlir_gen
from bfmlir.ir import GenericOp, Increment, Input, Loop, Output, Shift
from bfmlir.lexer import lex_program


def _body(program):
    return mlir_gen(lex_program(program)).main().body


def test_single_increment_then_return():
    body = _body("+")
    assert len(body) == 2
    assert isinstance(body[0], Increment)
    assert (body[0].amount, body[0].offset) == (1, 0)
    assert isinstance(body[1], GenericOp)
    assert body[1].op_name == "func.return"


def test_shifts_and_io():
    body = _body("><.,")
    assert [type(op) for op in body[:4]] == [Shift, Shift, Output, Input]
    assert [body[0].amount, body[1].amount] == [1, -1]


def test_loop_holds_its_body():
    body = _body("[-]")
    loop = body[0]
    assert isinstance(loop, Loop)
    assert len(loop.body) == 1
    assert loop.body[0].amount == -1


def test_unmatched_close_stops_generation():
    body = _body("+]+")
    increments = [op for op in body if isinstance(op, Increment)]
    assert len(increments) == 1


def test_unclosed_loop_takes_rest():
    body = _body("[+>")
    assert len(body) == 2
    assert [type(op) for op in body[0].body] == [Increment, Shift]


def test_shift_count_matches_source():
    program = "++>>[<+>-]<<.>"
    module = mlir_gen(lex_program(program))
    shifts = [op for op in module.walk() if isinstance(op, Shift)]
    assert len(shifts) == sum(program.count(c) for c in "<>")
    assert sum(op.amount for op in shifts) == program.count(">") - program.count("<")