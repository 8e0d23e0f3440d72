import os
import shutil
import subprocess
from unittest import mock

import pytest

from molbc import cli

needs_toolchain = pytest.mark.skipif(
    shutil.which("nasm") is None or shutil.which("ld") is None,
    reason="nasm and ld are required",
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_source(directory, text, name="prog.molb"):
    path = directory / name
    path.write_text(text)
    return str(path)


def test_writes_assembly_without_linking(workdir):
    src = write_source(workdir, "function entry() { return 5; }")
    assert cli.main([src, "--no-link"]) == 0
    asm = (workdir / "out.asm").read_text()
    assert asm.startswith("global _start\n")
    assert "entry:\n    mov rax, 5\n    ret\n" in asm


def test_custom_asm_path(workdir):
    src = write_source(workdir, "function entry() { return 1; }")
    assert cli.main([src, "--no-link", "--asm", "prog.asm"]) == 0
    assert (workdir / "prog.asm").exists()
    assert not (workdir / "out.asm").exists()


def test_missing_argument_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2
    assert "usage" in capsys.readouterr().err


def test_missing_file_is_fatal(workdir):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(workdir / "nope.molb"), "--no-link"])
    assert "could not read" in str(exc.value.code)


def test_undecodable_file_is_fatal(workdir):
    path = workdir / "bad.molb"
    path.write_bytes(b"function entry() { return 1; } \xff\xfe")
    with pytest.raises(SystemExit) as exc:
        cli.main([str(path), "--no-link"])
    assert "could not read" in str(exc.value.code)
    assert "0xff" in str(exc.value.code)
    assert not (workdir / "out.asm").exists()


def test_long_expression_compiles(workdir):
    terms = " + ".join(["1"] * 1200)
    src = write_source(workdir, f"function entry() {{ return {terms}; }}")
    assert cli.main([src, "--no-link"]) == 0
    assert (workdir / "out.asm").read_text().count("    add rbx, rax\n") == 1199


def test_deeply_nested_expression_is_reported(workdir, capsys):
    src = write_source(workdir, "function entry() { return " + "(" * 400 + "1" + ")" * 400 + "; }")
    assert cli.main([src, "--no-link"]) == 1
    assert "error: ParserError('expression nested too deeply')" in capsys.readouterr().err
    assert not (workdir / "out.asm").exists()


@pytest.mark.parametrize("source, name", [
    ("function entry() { return 12a; }", "UnexpectedChar"),
    ("function entry() { return 1 }", "ParserError"),
    ("function start() { return 1; }", "NoEntryFunction"),
    ("function entry() { int x = 1; }", "CodegenError"),
])
def test_stage_errors_write_nothing(workdir, capsys, source, name):
    src = write_source(workdir, source)
    assert cli.main([src, "--no-link"]) == 1
    assert f"error: {name}(" in capsys.readouterr().err
    assert not (workdir / "out.asm").exists()


def test_dumps(workdir, capsys):
    src = write_source(workdir, "function entry() { return 5; }")
    assert cli.main([src, "--no-link", "--dump-tokens", "--dump-ast"]) == 0
    out = capsys.readouterr().out
    assert "Tokens:" in out
    assert "FUNCTION@1:1" in out
    assert "INT_LITERAL(5)@1:27" in out
    assert "AST:" in out
    assert "Function(name='entry'" in out


def test_toolchain_failure_is_reported(workdir, capsys):
    src = write_source(workdir, "function entry() { return 5; }")
    with mock.patch.object(cli, "build", side_effect=cli.ToolchainError(["nasm"], 1)):
        assert cli.main([src]) == 1
    assert "nasm exited abnormally" in capsys.readouterr().err


@needs_toolchain
@pytest.mark.parametrize("source, status", [
    ("function entry() { return 5; }", 5),
    ("function entry() { return (3 - 1) * 4; }", 8),
    ("function entry() { return 10 - 2 - 3; }", 5),
    ("function entry() { return 100 / 7; }", 14),
    ("function entry() { return -3 + 10; }", 7),
    ("function entry() { return (2 < 3) + (4 == 4) + !0; }", 3),
])
def test_exit_status_of_built_program(workdir, source, status):
    src = write_source(workdir, source)
    assert cli.main([src, "-o", "prog"]) == 0
    exe = os.path.join(str(workdir), "prog")
    assert subprocess.run([exe]).returncode == status
