"""
Line sources for the parse pipeline.

File I/O only, no parsing. Yields lines without their terminators
(``\\n``, ``\\r\\n`` or ``\\r``). Handles a UTF-8 BOM via utf-8-sig when the
encoding is utf-8. Streams; does not load the entire file.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterator


def _get_encoding(encoding: str) -> str:
    if encoding.lower() in ("utf-8", "utf8"):
        return "utf-8-sig"  # Strip BOM if present
    return encoding


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def iter_text_lines(text: str) -> Iterator[str]:
    """Split an in-memory buffer into lines. A trailing terminator adds no line."""
    for line in io.StringIO(text, newline=""):
        yield _strip_terminator(line)


def iter_file_lines(path: Path | str, encoding: str = "utf-8") -> Iterator[str]:
    """Stream the lines of a text file."""
    # newline="" keeps \r\n intact so the terminator is stripped exactly once
    with Path(path).open("r", encoding=_get_encoding(encoding), newline="") as f:
        for line in f:
            yield _strip_terminator(line)
