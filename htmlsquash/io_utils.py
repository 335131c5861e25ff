"""Utility helpers for file IO and logging."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]

STDIO = "-"


def read_text(path: PathLike) -> str:
    """Read a UTF-8 file, or standard input when ``path`` is ``-``."""
    if str(path) == STDIO:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def emit(content: str, path: PathLike | None = None) -> None:
    """Write UTF-8 output to ``path``, or standard output for None and ``-``."""
    if path is None or str(path) == STDIO:
        sys.stdout.write(content)
        return
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")


def warn(msg: str) -> None:
    print(msg, file=sys.stderr)


__all__ = ["emit", "read_text", "warn"]
