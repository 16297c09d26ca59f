"""Identifier lookup at a 1-indexed ``row:col`` position."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from fzf_import.utils.source_file import read_lines


IDENTIFIER_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_$")


def is_identifier_char(char: str) -> bool:
    return char in IDENTIFIER_CHARS


def symbol_at(lines: Sequence[str], row: int, col: int) -> str | None:
    """Return the identifier covering ``(row, col)`` or ``None``.

    ``None`` means there is no identifier there: the row or column is out of
    range, or the character under the cursor is not ``[A-Za-z0-9_$]``.

    Examples:
        >>> symbol_at(["const x = getUser(id);"], 1, 11)
        'getUser'
        >>> symbol_at(["const x = getUser(id);"], 1, 6) is None
        True
    """
    line_index = row - 1
    col_index = col - 1

    if line_index < 0 or line_index >= len(lines):
        return None
    line = lines[line_index]
    if col_index < 0 or col_index >= len(line):
        return None
    if not is_identifier_char(line[col_index]):
        return None

    start = col_index
    while start > 0 and is_identifier_char(line[start - 1]):
        start -= 1

    end = col_index + 1
    while end < len(line) and is_identifier_char(line[end]):
        end += 1

    return line[start:end]


def read_symbol_at(path: Path | str, row: int, col: int) -> str | None:
    """Read ``path`` and return the identifier at ``(row, col)``.

    Raises:
        SourceFileError: the file cannot be read.
    """
    return symbol_at(read_lines(Path(path)).lines, row, col)
