"""
Analytics Module

This module contains the scouting analytics functionality.

Components:
    - scoring: Point table and per-observation scoring
    - aggregator: TeamStats aggregation and performance timelines
    - elo: Elo expectation, rating updates and the match rating ledger
    - predictor: Closed-form match prediction
    - insights: Archetypes, anomalies, trends, partners, mechanical issues
    - picklist: Alliance selection pick list and team comparison
"""

from scouting.analytics.scoring import (
    PerformanceBreakdown,
    calculate_performance,
)
from scouting.analytics.aggregator import (
    TimelinePoint,
    build_performance_timeline,
    calculate_all_team_stats,
    calculate_team_stats,
    phase_averages,
)
from scouting.analytics.elo import (
    RatingLedger,
    RatingUpdate,
    expected_score,
    update_ratings,
)
from scouting.analytics.predictor import (
    predict_match,
    predict_matches,
)
from scouting.analytics.insights import (
    Anomaly,
    MechanicalAssessment,
    PerformanceTrend,
    TeamArchetype,
    TeamClassification,
    TeamRecommendation,
    analyze_performance_trend,
    classify_team,
    detect_anomalies,
    predict_mechanical_issues,
    recommend_alliance_partners,
)
from scouting.analytics.picklist import (
    MetricComparison,
    PickList,
    compare_teams,
    compatibility_badge,
    compatibility_score,
    rank_available_teams,
)

__all__ = [
    # Scoring
    "PerformanceBreakdown",
    "calculate_performance",
    # Aggregation
    "TimelinePoint",
    "build_performance_timeline",
    "calculate_all_team_stats",
    "calculate_team_stats",
    "phase_averages",
    # Ratings
    "RatingLedger",
    "RatingUpdate",
    "expected_score",
    "update_ratings",
    # Prediction
    "predict_match",
    "predict_matches",
    # Insights
    "Anomaly",
    "MechanicalAssessment",
    "PerformanceTrend",
    "TeamArchetype",
    "TeamClassification",
    "TeamRecommendation",
    "analyze_performance_trend",
    "classify_team",
    "detect_anomalies",
    "predict_mechanical_issues",
    "recommend_alliance_partners",
    # Alliance selection
    "MetricComparison",
    "PickList",
    "compare_teams",
    "compatibility_badge",
    "compatibility_score",
    "rank_available_teams",
]
