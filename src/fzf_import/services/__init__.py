"""Pipeline services: relevance scoring and the streaming rank stage."""

from .rank_stage import RankStage
from .scoring import score_candidate


__all__ = [
    "RankStage",
    "score_candidate",
]
