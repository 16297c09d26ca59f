"""Streaming dedup/rank transform between ripgrep output and fzf input.

The stage is fed text chunks as they arrive and returns text chunks that can
be written to fzf straight away. Ranking is local to each batch: fzf must see
results while ripgrep is still running, so the stream is never buffered whole.
"""

from __future__ import annotations

import logging

from fzf_import.domain.model import Candidate, ScoredCandidate
from fzf_import.services.scoring import is_relative_import, score_candidate


logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


class RankStage:
    """Deduplicating, optionally relevance-sorting line transform.

    Without a keyword, surviving lines are emitted immediately in arrival
    order. With a keyword, lines are scored and emitted in batches of
    ``batch_size`` sorted by score (ties: shorter line first, then arrival).

    State (seen-set, score cache, batch, carry-over) belongs to this instance
    and lives for one session only.
    """

    def __init__(self, keyword: str | None = None, *, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.keyword = keyword or None
        self.batch_size = batch_size
        self._buffer = ""
        self._seen: set[str] = set()
        self._scores: dict[str, int] = {}
        self._batch: list[ScoredCandidate] = []
        self._closed = False
        # Non-empty candidates handed downstream; blank pass-through lines are not counted.
        self.emitted = 0
        self.discarded = 0

    @property
    def ranking(self) -> bool:
        return self.keyword is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, chunk: str) -> list[str]:
        """Consume one chunk and return zero or more newline-terminated output chunks."""
        self._ensure_open()
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return self._process(lines)

    def finish(self) -> list[str]:
        """Flush the carry-over and the partial batch, then release all state."""
        self._ensure_open()
        lines = [self._buffer] if self._buffer else []
        self._buffer = ""
        output = self._process(lines)
        if self._batch:
            output.append(self._flush())
        logger.debug("Rank stage finished: emitted=%d discarded=%d", self.emitted, self.discarded)
        self.close()
        return output

    def close(self) -> None:
        """Drop the seen-set, score cache and any pending data."""
        self._seen.clear()
        self._scores.clear()
        self._batch.clear()
        self._buffer = ""
        self._closed = True

    # --- internal helpers -------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("rank stage is closed")

    def _process(self, lines: list[str]) -> list[str]:
        immediate: list[str] = []
        output: list[str] = []

        for raw in lines:
            candidate = self._accept(raw.removesuffix("\r"))
            if candidate is None:
                continue
            if not self.ranking:
                immediate.append(candidate.raw)
                if candidate.text:
                    self.emitted += 1
                continue
            self._batch.append(ScoredCandidate(candidate=candidate, score=self._score(candidate.text)))
            if len(self._batch) >= self.batch_size:
                output.append(self._flush())

        if immediate:
            output.append("".join(f"{line}\n" for line in immediate))
        return output

    def _accept(self, raw: str) -> Candidate | None:
        candidate = Candidate(raw=raw)
        text = candidate.text
        if not text:
            if self.ranking:
                return None
            return candidate
        if is_relative_import(text) or text in self._seen:
            self.discarded += 1
            return None
        self._seen.add(text)
        return candidate

    def _score(self, text: str) -> int:
        cached = self._scores.get(text)
        if cached is None:
            cached = score_candidate(text, self.keyword or "")
            self._scores[text] = cached
        return cached

    def _flush(self) -> str:
        ranked = sorted(self._batch, key=ScoredCandidate.sort_key)
        self._batch.clear()
        self.emitted += len(ranked)
        return "".join(f"{item.candidate.raw}\n" for item in ranked)
