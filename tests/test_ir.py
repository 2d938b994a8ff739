import pytest

from bfmlir.ir import (
    Function,
    GenericOp,
    Increment,
    Loop,
    Module,
    ReadPtr,
    Shift,
    WritePtr,
)


def _sample_module():
    inc = Increment(amount=1)
    loop = Loop(body=[inc])
    shift = Shift(amount=1)
    main = Function("main", body=[shift, loop, GenericOp("func.return")])
    return Module(body=[main]), main, shift, loop, inc


def test_main_returns_main_function():
    module, main, *_ = _sample_module()
    assert module.main() is main


def test_main_missing_raises():
    with pytest.raises(LookupError):
        Module().main()


def test_lookup_missing_symbol_is_none():
    module, *_ = _sample_module()
    assert module.lookup("getchar") is None


def test_lookup_finds_generic_symbol():
    glob = GenericOp("memref.global", symbol="bf_memory")
    module = Module(body=[glob])
    assert module.lookup("bf_memory") is glob


def test_walk_is_preorder_and_recurses_into_loops():
    module, main, shift, loop, inc = _sample_module()
    ops = list(module.walk())
    assert ops[:4] == [main, shift, loop, inc]
    assert len(ops) == 5


def test_write_ptr_operands_and_read_ptr_type():
    read = ReadPtr(offset=2)
    write = WritePtr(value=read, offset=2)
    assert write.operands == [read]
    assert read.result_type == "i16"
    assert write.result_type is None


def test_declaration_has_no_regions():
    decl = Function("getchar", body=None, results=("i32",), visibility="private")
    assert decl.regions == []
    assert Loop().regions == [[]]


def test_operations_compare_by_identity():
    first = Increment(amount=1)
    second = Increment(amount=1)
    ops = [first, second]
    assert ops.index(second) == 1
    assert ops.count(second) == 1
    assert (second in [first]) is False