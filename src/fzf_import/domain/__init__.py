"""Domain layer: value objects and errors with no subprocess or filesystem dependencies."""

from fzf_import.domain.errors import (
    DependencyError,
    FzfImportError,
    InvalidSessionTransitionError,
    InvalidTargetError,
    SourceFileError,
    SubprocessError,
    SubprocessExitError,
    SubprocessLaunchError,
    UnsupportedFileTypeError,
)
from fzf_import.domain.model import (
    Candidate,
    ImportOutcome,
    PlacementResult,
    ScoredCandidate,
    SessionState,
    TargetSpec,
)


__all__ = [
    "Candidate",
    "DependencyError",
    "FzfImportError",
    "ImportOutcome",
    "InvalidSessionTransitionError",
    "InvalidTargetError",
    "PlacementResult",
    "ScoredCandidate",
    "SessionState",
    "SourceFileError",
    "SubprocessError",
    "SubprocessExitError",
    "SubprocessLaunchError",
    "TargetSpec",
    "UnsupportedFileTypeError",
]
