"""Import placement: where a chosen import line goes and the file rewrite.

New imports go on top of the existing import block, so the most recently
added import is first. The leading file header (shebang, comments, blank
lines, directive prologue such as ``'use client'``) is never split.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
import re

from fzf_import.domain.model import PlacementResult
from fzf_import.utils.source_file import read_lines, write_lines


logger = logging.getLogger(__name__)

_DIRECTIVE_RE = re.compile(r"""^(['"])use [\w ]+\1;?$""")


def import_exists(lines: Sequence[str], new_line: str) -> bool:
    """True when a line equal to ``new_line`` (both trimmed) is already present."""
    target = new_line.strip()
    return any(line.strip() == target for line in lines)


def find_insertion_index(lines: Sequence[str]) -> int:
    """Return the index the new import line should be inserted at.

    Single top-to-bottom scan: skip the header, then stop at the first other
    line. That line is either the first import (insert before it) or the first
    line of code (insert before it). A header-only file gets the import right
    after its last non-blank header line.
    """
    in_block_comment = False
    after_header = 0

    for index, raw in enumerate(lines):
        line = raw.strip()

        if in_block_comment:
            if "*/" in line:
                in_block_comment = False
            after_header = index + 1
            continue
        if not line:
            continue
        if index == 0 and line.startswith("#!"):
            after_header = 1
            continue
        if line.startswith("//") or line.startswith("*"):
            after_header = index + 1
            continue
        if line.startswith("/*"):
            in_block_comment = "*/" not in line[2:]
            after_header = index + 1
            continue
        if _DIRECTIVE_RE.match(line):
            after_header = index + 1
            continue
        return index

    return after_header


def insert_import(lines: Sequence[str], new_line: str) -> list[str]:
    """Return a copy of ``lines`` with ``new_line`` spliced in at the insertion point."""
    updated = list(lines)
    updated.insert(find_insertion_index(updated), new_line)
    return updated


def add_import_to_file(path: Path | str, import_line: str) -> PlacementResult:
    """Add ``import_line`` to ``path`` unless an equal line is already there.

    Raises:
        SourceFileError: the file cannot be read or written.
    """
    target = Path(path)
    line = import_line.strip()
    source = read_lines(target)

    if import_exists(source.lines, line):
        logger.info("Import already present in %s: %s", target, line)
        return PlacementResult(path=target, line=line, inserted=False)

    index = find_insertion_index(source.lines)
    source.lines.insert(index, source.terminate(line))
    write_lines(target, source)
    logger.info("Inserted import at line %d of %s", index + 1, target)
    return PlacementResult(path=target, line=line, inserted=True, index=index)
