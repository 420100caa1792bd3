"""\
Filesystem utility objects
==========================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Saturday, October 17 2026

This module provides the small filesystem helpers used by the library:
creating the log directory and reading a single line of source code for
stack frame rendering.
"""

from __future__ import annotations

import os

__all__: tuple[str, ...] = (
    "mkdir",
    "read_line",
)


def mkdir(path: str) -> str:
    """Create a directory if it does not exist."""
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)
    return path


def read_line(path: str, lineno: int) -> str | None:
    """Read a single line from a text file.

    :param path: Path of the file to read.
    :param lineno: The 1-based line number to return.
    :return: The line stripped of surrounding blanks, or `None` if the
        file has fewer lines.
    :raises OSError: If the file cannot be opened or read.
    :raises UnicodeDecodeError: If the file is not valid UTF-8 text.
    """
    with open(path, encoding="utf-8") as file:
        for current, line in enumerate(file, start=1):
            if current == lineno:
                return line.strip(" \t\r\n")
    return None
