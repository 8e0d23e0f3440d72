import subprocess
from unittest import mock

import pytest

from molbc import toolchain
from molbc.toolchain import ToolchainError


@pytest.fixture
def tools_present():
    with mock.patch.object(toolchain.shutil, "which", return_value="/usr/bin/tool"):
        yield


def completed(cmd, returncode):
    return subprocess.CompletedProcess(cmd, returncode)


def test_build_runs_nasm_then_ld(tools_present):
    with mock.patch.object(toolchain.subprocess, "run",
                           side_effect=lambda cmd: completed(cmd, 0)) as run:
        toolchain.build("out.asm", "out.o", "out")
    assert [c.args[0] for c in run.call_args_list] == [
        ["nasm", "-felf64", "out.asm", "-o", "out.o"],
        ["ld", "out.o", "-o", "out"],
    ]


def test_assembler_failure_stops_before_link(tools_present):
    with mock.patch.object(toolchain.subprocess, "run",
                           side_effect=lambda cmd: completed(cmd, 1)) as run:
        with pytest.raises(ToolchainError) as exc:
            toolchain.build("out.asm", "out.o", "out")
    assert run.call_count == 1
    assert exc.value.returncode == 1
    assert exc.value.cmd[0] == "nasm"


def test_linker_failure_removes_partial_executable(tools_present, tmp_path):
    exe = tmp_path / "out"
    exe.write_text("partial")
    with mock.patch.object(toolchain.subprocess, "run",
                           side_effect=lambda cmd: completed(cmd, 2)):
        with pytest.raises(ToolchainError, match="ld exited abnormally with exit code 2"):
            toolchain.link("out.o", str(exe))
    assert not exe.exists()


def test_missing_tool():
    with mock.patch.object(toolchain.shutil, "which", return_value=None):
        with pytest.raises(ToolchainError, match="nasm not found"):
            toolchain.assemble("out.asm", "out.o")
