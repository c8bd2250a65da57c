"""
Data Models Module

This module contains Pydantic models for representing scouting data.

Models:
    - Observation: One team's scouted performance in one match
    - Match: Scheduled or played match between two alliances
    - MatchPrediction: Closed-form match outcome prediction
    - TeamStats: Derived team performance profile
"""

from scouting.models.base import ScoutingModel, round_half_up, round_half_up_to, timestamp_ms
from scouting.models.observation import (
    Alliance,
    HangLevel,
    Observation,
    SyncStatus,
    sort_chronologically,
)
from scouting.models.match import (
    Match,
    MatchPrediction,
    MatchStatus,
    MatchType,
    PredictionFactors,
)
from scouting.models.team import (
    INITIAL_ELO,
    RATING_FLOOR,
    TeamStats,
    default_team_stats,
    resolve_team_stats,
)

__all__ = [
    "ScoutingModel",
    "round_half_up",
    "round_half_up_to",
    "timestamp_ms",
    "Alliance",
    "HangLevel",
    "Observation",
    "SyncStatus",
    "sort_chronologically",
    "Match",
    "MatchPrediction",
    "MatchStatus",
    "MatchType",
    "PredictionFactors",
    "INITIAL_ELO",
    "RATING_FLOOR",
    "TeamStats",
    "default_team_stats",
    "resolve_team_stats",
]
