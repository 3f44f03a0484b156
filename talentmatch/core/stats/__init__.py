"""
Statistics aggregation for TalentMatch.
"""

from .stats_aggregator import (
    StatsAggregator,
    compute_application_stats,
    get_stats_aggregator,
    incremental_mean,
)

__all__ = [
    "StatsAggregator",
    "compute_application_stats",
    "get_stats_aggregator",
    "incremental_mean",
]
