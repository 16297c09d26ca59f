"""Project-level helpers: file types, search patterns, root discovery, tool checks."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from pathlib import Path
import re
import shutil

from fzf_import.config import SEARCH_EXTENSIONS, Settings
from fzf_import.domain.errors import DependencyError, InvalidTargetError, UnsupportedFileTypeError
from fzf_import.domain.model import TargetSpec


logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: tuple[str, ...] = ("js", "jsx", "ts", "tsx")

_EXTENSION_FILE_TYPES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescriptreact",
    "js": "javascript",
    "jsx": "javascriptreact",
}


@dataclass(slots=True, frozen=True)
class FileTypeConfig:
    """Search configuration for one editor file type."""

    globs: tuple[str, ...]
    # First character of the module specifier; excludes ./ and ../ paths up front.
    module_start: str = r"[@\w]"

    def glob(self) -> str:
        return "*.{" + ",".join(self.globs) + "}"

    def keyword_pattern(self, keyword: str) -> str:
        return rf"""^import.*{escape_regex(keyword)}.*from\s*['"]{self.module_start}[^'"]*['"]"""

    def browse_pattern(self) -> str:
        return rf"""^import\s*(type\s+)?.*from\s*['"]{self.module_start}"""


_SCRIPT_GLOBS = SEARCH_EXTENSIONS

FILE_TYPES: dict[str, FileTypeConfig] = {
    "typescript": FileTypeConfig(globs=_SCRIPT_GLOBS),
    "typescriptreact": FileTypeConfig(globs=_SCRIPT_GLOBS),
    "javascript": FileTypeConfig(globs=_SCRIPT_GLOBS),
    "javascriptreact": FileTypeConfig(globs=_SCRIPT_GLOBS),
}


def get_file_type(path: Path | str) -> str:
    """Map a file extension to its editor file type (``ts`` -> ``typescript``)."""
    ext = Path(path).suffix.removeprefix(".")
    return _EXTENSION_FILE_TYPES.get(ext, ext)


def get_file_type_config(path: Path | str) -> FileTypeConfig:
    file_type = get_file_type(path)
    config = FILE_TYPES.get(file_type)
    if config is None:
        raise UnsupportedFileTypeError(f"Unsupported file type: {file_type or '(none)'}")
    return config


def escape_regex(text: str) -> str:
    """Escape regex metacharacters for ripgrep (``$`` is legal in JS identifiers)."""
    return re.sub(r"[.*+?^${}()|\[\]\\]", r"\\\g<0>", text)


def find_project_root(path: Path | str, markers: Sequence[str] = ("package.json",)) -> Path:
    """Walk up from the file's directory to the first directory holding a marker.

    Falls back to the file's own directory when no marker is found.
    """
    start = Path(path).resolve().parent
    for directory in (start, *start.parents):
        if any((directory / marker).exists() for marker in markers):
            logger.debug("Project root for %s: %s", path, directory)
            return directory
    logger.debug("No project marker above %s; using %s", path, start)
    return start


def check_dependencies(settings: Settings) -> None:
    """Raise ``DependencyError`` naming every required executable that is missing."""
    missing = [tool for tool in (settings.rg_path, settings.fzf_path) if shutil.which(tool) is None]
    if not missing:
        return
    hints = {
        settings.rg_path: "ripgrep (https://github.com/BurntSushi/ripgrep)",
        settings.fzf_path: "fzf (https://github.com/junegunn/fzf)",
    }
    details = ", ".join(f"{tool} [{hints[tool]}]" for tool in missing)
    raise DependencyError(f"Missing required dependencies: {details}")


def parse_target(arg: str) -> TargetSpec:
    """Parse ``file`` or ``file:row:col`` (1-indexed)."""
    parts = arg.split(":")
    if len(parts) == 1:
        return TargetSpec(path=Path(parts[0]))
    if len(parts) != 3 or not parts[0]:
        raise InvalidTargetError('Invalid file format. Use either "file" or "file:row:col"')

    try:
        row = int(parts[1])
        col = int(parts[2])
    except ValueError as exc:
        raise InvalidTargetError("Invalid row or column number. Format: file:row:col (1-indexed)") from exc
    if row < 1 or col < 1:
        raise InvalidTargetError("Invalid row or column number. Format: file:row:col (1-indexed)")
    return TargetSpec(path=Path(parts[0]), row=row, col=col)


def validate_target(spec: TargetSpec) -> Path:
    """Resolve the target path and check it exists with a supported extension."""
    resolved = spec.path.expanduser().resolve()
    if not resolved.is_file():
        raise InvalidTargetError(f"File does not exist: {resolved}")
    ext = resolved.suffix.removeprefix(".")
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(f"Unsupported file type. Supported: {', '.join(SUPPORTED_EXTENSIONS)}")
    return resolved
