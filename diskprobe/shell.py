"""Running shell commands and splitting their output."""

from __future__ import annotations

import hashlib
import logging
import shlex
import subprocess

log = logging.getLogger(__name__)


class CommandError(Exception):
    """A shell command exited with a non-zero status.

    The standard output gathered before the failure is kept in ``output``.
    """

    def __init__(self, cmd: str, returncode: int, output: str, stderr: str) -> None:
        super().__init__(f"command {cmd!r} exited with status {returncode}: {stderr.strip()}")
        self.cmd = cmd
        self.returncode = returncode
        self.output = output
        self.stderr = stderr


def bash(cmd: str) -> str:
    """Run ``cmd`` with ``bash -c`` and return its standard output.

    Raises CommandError when the command exits with a non-zero status.
    """
    args = ["bash", "-c", cmd]
    log.info(shlex.join(args))
    proc = subprocess.run(args, capture_output=True, text=True, check=False)
    if proc.returncode != 0:
        raise CommandError(cmd, proc.returncode, proc.stdout, proc.stderr)
    return proc.stdout


def split_lines(outputs: str) -> list[str]:
    """Split command output into lines; a final newline does not add an empty line."""
    if not outputs:
        return []
    lines = outputs.split("\n")
    if outputs.endswith("\n"):
        lines.pop()
    return lines


def find_all(s: str, substr: str) -> list[int]:
    """Return the start index of every non-overlapping occurrence of ``substr``."""
    if not substr:
        raise ValueError("substring must not be empty")
    indexes = []
    start = s.find(substr)
    while start != -1:
        indexes.append(start)
        start = s.find(substr, start + len(substr))
    return indexes


def md5_hex(text: str) -> str:
    """Return the hexadecimal MD5 digest of ``text`` encoded as UTF-8."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()