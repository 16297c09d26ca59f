"""Exception hierarchy for fzf-import."""

from __future__ import annotations


class FzfImportError(Exception):
    """Base error for fzf-import."""


class DependencyError(FzfImportError):
    """Raised when a required executable is not installed."""


class UnsupportedFileTypeError(FzfImportError):
    """Raised when the target file extension has no search configuration."""


class InvalidTargetError(FzfImportError):
    """Raised for a malformed ``file[:row:col]`` argument or a missing file."""


class SourceFileError(FzfImportError):
    """Raised when the target source file cannot be read or written."""


class InvalidSessionTransitionError(FzfImportError):
    """Raised when a search session moves between incompatible states."""


class SubprocessError(FzfImportError):
    """Base error for search/selector subprocess failures."""


class SubprocessLaunchError(SubprocessError):
    """Raised when a subprocess executable is missing or fails to start."""

    def __init__(self, program: str, reason: str) -> None:
        super().__init__(f"Failed to start {program}: {reason}")
        self.program = program
        self.reason = reason


class SubprocessExitError(SubprocessError):
    """Raised when a subprocess exits with an unexpected status."""

    def __init__(self, program: str, returncode: int, stderr: str = "") -> None:
        detail = stderr.strip()
        message = f"{program} failed with code {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.program = program
        self.returncode = returncode
        self.stderr = detail
