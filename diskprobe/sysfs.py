"""Reading values from sysfs files."""

from __future__ import annotations

import os
import re

_INT = re.compile(r"[+-]?[0-9]+")


def read_str(path: str | os.PathLike[str]) -> str:
    """Return the whole content of a sysfs file."""
    with open(os.path.normpath(path), encoding="utf-8") as f:
        return f.read()


def read_int(path: str | os.PathLike[str]) -> int:
    """Read a sysfs file holding one integer, with at most one trailing newline."""
    text = read_str(path)
    if text.endswith("\n"):
        text = text[:-1]
    if not _INT.fullmatch(text):
        raise ValueError(f"invalid integer {text!r} in {os.fspath(path)}")
    value = int(text)
    if not -(2**63) <= value < 2**63:
        raise ValueError(f"integer {text!r} in {os.fspath(path)} is out of range")
    return value