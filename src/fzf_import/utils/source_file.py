"""Whole-file UTF-8 read/write that keeps the file's newline style."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import tempfile

from fzf_import.domain.errors import SourceFileError


@dataclass(slots=True)
class SourceText:
    """Lines of a source file split on ``\\n``.

    Each line keeps its own trailing ``\\r``, so untouched lines are written back
    byte for byte even when a file mixes CRLF and LF endings. ``newline`` is the
    ending of the first line and is used for lines added to the file.
    """

    lines: list[str] = field(default_factory=list)
    newline: str = "\n"

    def terminate(self, line: str) -> str:
        """Return ``line`` as it should be stored: with ``\\r`` for a CRLF file."""
        return line + "\r" if self.newline == "\r\n" else line

    def render(self) -> str:
        return "\n".join(self.lines)


def read_lines(path: Path) -> SourceText:
    """Load ``path`` fresh from disk."""
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            content = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceFileError(f"Cannot read {path}: {exc}") from exc

    first_break = content.find("\n")
    newline = "\r\n" if first_break > 0 and content[first_break - 1] == "\r" else "\n"
    return SourceText(lines=content.split("\n"), newline=newline)


def write_lines(path: Path, source: SourceText) -> None:
    """Replace ``path`` atomically with ``source``."""
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise SourceFileError(f"Cannot write {path}: {exc}") from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(source.render())
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o7777)
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise SourceFileError(f"Cannot write {path}: {exc}") from exc
