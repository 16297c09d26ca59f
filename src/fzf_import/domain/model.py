"""Value objects passed between the search pipeline and the placement engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(slots=True, frozen=True)
class Candidate:
    """One import line emitted by the search subprocess."""

    raw: str

    @property
    def text(self) -> str:
        """Trimmed text, used as the deduplication key."""
        return self.raw.strip()


@dataclass(slots=True, frozen=True)
class ScoredCandidate:
    """Candidate paired with its relevance score inside a ranking batch."""

    candidate: Candidate
    score: int

    def sort_key(self) -> tuple[int, int]:
        # Higher score first, then shorter lines.
        return (-self.score, len(self.candidate.raw))


class SessionState(str, Enum):
    """Lifecycle phases of one search/select session."""

    IDLE = "idle"
    BOTH_LAUNCHED = "both_launched"
    SEARCH_FINISHED = "search_finished"
    SELECTOR_FINISHED = "selector_finished"
    TERMINATED = "terminated"

    @property
    def is_terminal(self) -> bool:
        return self is SessionState.TERMINATED


class ImportOutcome(str, Enum):
    """Result of one import workflow as reported to the user."""

    ADDED = "added"
    DUPLICATE = "duplicate"
    CANCELLED = "cancelled"
    NO_MATCHES = "no_matches"
    NO_SYMBOL = "no_symbol"


@dataclass(slots=True, frozen=True)
class TargetSpec:
    """Parsed ``file[:row:col]`` command line argument."""

    path: Path
    row: int | None = None
    col: int | None = None

    @property
    def has_position(self) -> bool:
        return self.row is not None and self.col is not None


@dataclass(slots=True, frozen=True)
class PlacementResult:
    """Outcome of inserting an import line into a file."""

    path: Path
    line: str
    inserted: bool
    index: int | None = None
