"""Candidate-job match scoring module."""

from .match_scorer import (
    MatchScorer,
    compute_match,
    degree_rank,
    get_match_scorer,
    round_half_up,
    skills_overlap,
)

__all__ = [
    "MatchScorer",
    "compute_match",
    "degree_rank",
    "get_match_scorer",
    "round_half_up",
    "skills_overlap",
]
