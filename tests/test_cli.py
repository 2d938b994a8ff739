import io

import pytest

from bfmlir.cli import main, opt_main
from bfmlir.gen import mlir_gen
from bfmlir.lexer import lex_program
from bfmlir.passes import run_pipeline
from bfmlir.printer import print_module


def _expected(text):
    return print_module(mlir_gen(lex_program(text)))


def _write(tmp_path, text, name="prog.bf"):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_main_writes_module(tmp_path):
    src = _write(tmp_path, "+[-].")
    out = tmp_path / "out.mlir"
    assert main([str(src), "-o", str(out)]) == 0
    assert out.read_text() == _expected("+[-].")


def test_main_default_output_name(tmp_path, monkeypatch):
    _write(tmp_path, "+")
    monkeypatch.chdir(tmp_path)
    assert main(["prog.bf"]) == 0
    assert (tmp_path / "a.mlir").read_text().startswith("module {")


def test_main_ignores_comments(tmp_path):
    src = _write(tmp_path, "hello + world")
    out = tmp_path / "out.mlir"
    assert main([str(src), "-o", str(out)]) == 0
    assert out.read_text() == _expected("+")


def test_main_rejects_non_bf(tmp_path, capsys):
    src = _write(tmp_path, "+", name="prog.txt")
    assert main([str(src)]) == 1
    assert capsys.readouterr().out == "Error: Must input brainfuck src file that ends with .bf.\n"


def test_main_default_input_is_rejected():
    assert main([]) == 1


def test_main_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "missing.bf")]) == -1
    assert "Could not open input file" in capsys.readouterr().err


def test_main_unwritable_output(tmp_path, capsys):
    src = _write(tmp_path, "+")
    assert main([str(src), "-o", str(tmp_path)]) == 1
    assert "Could not open file" in capsys.readouterr().err


def test_opt_main_prints_to_stdout(tmp_path, capsys):
    src = _write(tmp_path, "+>.")
    assert opt_main([str(src)]) == 0
    assert capsys.readouterr().out == _expected("+>.")


def test_opt_main_runs_pass(tmp_path):
    src = _write(tmp_path, "+++>>")
    out = tmp_path / "out.mlir"
    assert opt_main([str(src), "--bf-combine-consecutive-ops", "-o", str(out)]) == 0
    module = run_pipeline(mlir_gen(lex_program("+++>>")), ["bf-combine-consecutive-ops"])
    assert out.read_text() == print_module(module)


def test_opt_main_keeps_flag_order(tmp_path):
    src = _write(tmp_path, "[--]")
    out = tmp_path / "out.mlir"
    args = [str(src), "--bf-set-zero", "--bf-combine-consecutive-ops", "-o", str(out)]
    assert opt_main(args) == 0
    module = run_pipeline(mlir_gen(lex_program("[--]")), ["bf-set-zero", "bf-combine-consecutive-ops"])
    assert out.read_text() == print_module(module)


def test_opt_main_full_lowering(tmp_path):
    src = _write(tmp_path, "+[->+<].,")
    out = tmp_path / "out.mlir"
    assert opt_main([str(src), "--bf-to-bflow", "--bflow-to-mlir", "-o", str(out)]) == 0
    text = out.read_text()
    assert "bf_memory" in text
    assert '"bf.' not in text
    assert '"bflow.' not in text


def test_opt_main_reports_conversion_failure(tmp_path, capsys):
    src = _write(tmp_path, "+")
    assert opt_main([str(src), "--bflow-to-mlir"]) == 1
    assert "error:" in capsys.readouterr().err


def test_opt_main_unknown_flag(tmp_path):
    src = _write(tmp_path, "+")
    with pytest.raises(SystemExit):
        opt_main([str(src), "--no-such-pass"])


def test_opt_main_reads_stdin(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("-."))
    out = tmp_path / "out.mlir"
    assert opt_main(["-o", str(out)]) == 0
    assert out.read_text() == _expected("-.")


def test_opt_main_missing_input(tmp_path):
    assert opt_main([str(tmp_path / "missing.bf")]) == 1