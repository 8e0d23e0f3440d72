import logging
import os
import shlex
import shutil
import subprocess

logger = logging.getLogger(__name__)


class ToolchainError(Exception):
    def __init__(self, cmd, returncode=None, message=None):
        self.cmd = list(cmd)
        self.returncode = returncode
        if message is None:
            message = f"{self.cmd[0]} exited abnormally with exit code {returncode}"
        super().__init__(message)


def _run(cmd):
    if shutil.which(cmd[0]) is None:
        raise ToolchainError(cmd, message=f"{cmd[0]} not found on PATH")
    logger.info("[CMD] %s", " ".join(map(shlex.quote, cmd)))
    proc = subprocess.run(cmd)
    if proc.returncode != 0:
        raise ToolchainError(cmd, proc.returncode)


def assemble(asm_path, obj_path):
    _run(["nasm", "-felf64", asm_path, "-o", obj_path])


def link(obj_path, exe_path):
    try:
        _run(["ld", obj_path, "-o", exe_path])
    except ToolchainError:
        if os.path.exists(exe_path):
            os.remove(exe_path)
        raise


def build(asm_path, obj_path, exe_path):
    assemble(asm_path, obj_path)
    link(obj_path, exe_path)
