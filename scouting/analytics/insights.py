"""
Team Insights Module

Heuristic analysis layered on top of TeamStats and raw observations:
- Archetype classification (ordered rule list)
- Anomaly detection for individual matches
- Linear performance trend and next-match projection
- Alliance partner recommendation
- Mechanical degradation warnings
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from loguru import logger

from scouting.analytics.scoring import calculate_performance
from scouting.models.base import round_half_up, round_half_up_to
from scouting.models.observation import HangLevel, Observation, sort_chronologically
from scouting.models.team import TeamStats


class TeamArchetype(str, Enum):
    """Play style archetype."""

    SCORER = "scorer"
    DEFENDER = "defender"
    SPECIALIST = "specialist"
    BALANCED = "balanced"
    INCONSISTENT = "inconsistent"


class AnomalyType(str, Enum):
    """Kind of anomalous match."""

    EXCEPTIONAL = "exceptional"
    UNDERPERFORMANCE = "underperformance"
    UNUSUAL_PATTERN = "unusual_pattern"


class Severity(str, Enum):
    """Anomaly severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TrendDirection(str, Enum):
    """Direction of a team's performance trend."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    VOLATILE = "volatile"


@dataclass
class TeamClassification:
    """Archetype and qualitative notes for a team."""

    team_number: int
    archetype: TeamArchetype
    confidence: float
    characteristics: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)


@dataclass
class Anomaly:
    """A match where a team performed unlike its profile."""

    team_number: int
    match_id: str
    type: AnomalyType
    severity: Severity
    description: str
    expected_value: int
    actual_value: int
    deviation: float


@dataclass
class PerformanceTrend:
    """Fitted performance trend for a team."""

    team_number: int
    trend: TrendDirection
    trend_strength: float  # Slope relative to average points
    recent_performance: list[int] = field(default_factory=list)
    next_match_score: int = 0
    confidence: float = 0.5


@dataclass
class TeamRecommendation:
    """Alliance partner candidate with its compatibility score."""

    team_number: int
    score: float
    reasons: list[str] = field(default_factory=list)
    synergies: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)


@dataclass
class MechanicalAssessment:
    """Signs of a robot degrading over recent matches."""

    team_number: int
    has_concern: bool = False
    concerns: list[str] = field(default_factory=list)
    confidence: float = 0.0


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArchetypeRule:
    """One entry in the archetype decision list."""

    archetype: TeamArchetype
    confidence: float
    applies: Callable[[TeamStats], bool]
    annotate: Callable[[TeamStats, TeamClassification], None]


def _annotate_scorer(stats: TeamStats, result: TeamClassification) -> None:
    result.characteristics.append("High-volume scorer")
    result.strengths.append("Consistent teleop performance")


def _annotate_defender(stats: TeamStats, result: TeamClassification) -> None:
    result.characteristics.append("Defensive specialist")
    result.strengths.append("Strong defensive capabilities")


def _annotate_specialist(stats: TeamStats, result: TeamClassification) -> None:
    if stats.avg_auto_pieces > 4:
        result.characteristics.append("Autonomous specialist")
        result.strengths.append("Reliable auto routine")
    if stats.hang_success_rate > 0.8:
        result.characteristics.append("Endgame specialist")
        result.strengths.append("Consistent hanging")


def _annotate_inconsistent(stats: TeamStats, result: TeamClassification) -> None:
    result.characteristics.append("Unpredictable performance")
    result.weaknesses.append("High variance in scores")


def _annotate_balanced(stats: TeamStats, result: TeamClassification) -> None:
    result.characteristics.append("Well-rounded robot")


# Evaluated in order, first match wins. The last rule always applies.
ARCHETYPE_RULES: list[ArchetypeRule] = [
    ArchetypeRule(
        TeamArchetype.SCORER, 0.85,
        lambda s: s.avg_teleop_pieces > 6 and s.consistency > 0.7,
        _annotate_scorer,
    ),
    ArchetypeRule(
        TeamArchetype.DEFENDER, 0.75,
        lambda s: s.avg_defense_rating > 3.5 and s.avg_total_points < 45,
        _annotate_defender,
    ),
    ArchetypeRule(
        TeamArchetype.SPECIALIST, 0.7,
        lambda s: s.avg_auto_pieces > 4 or s.hang_success_rate > 0.8,
        _annotate_specialist,
    ),
    ArchetypeRule(
        TeamArchetype.INCONSISTENT, 0.8,
        lambda s: s.consistency < 0.4,
        _annotate_inconsistent,
    ),
    ArchetypeRule(
        TeamArchetype.BALANCED, 0.65,
        lambda s: True,
        _annotate_balanced,
    ),
]

# Independent of the archetype
STRENGTH_CHECKS: list[tuple[Callable[[TeamStats], bool], str]] = [
    (lambda s: s.avg_driver_skill > 4, "Excellent driver control"),
    (lambda s: s.avg_robot_speed > 4, "Fast cycle times"),
    (lambda s: s.auto_success_rate > 0.8, "Reliable autonomous"),
]

WEAKNESS_CHECKS: list[tuple[Callable[[TeamStats], bool], str]] = [
    (lambda s: s.avg_driver_skill < 2.5, "Driver control issues"),
    (lambda s: s.avg_total_points < 35, "Low scoring output"),
    (lambda s: s.hang_success_rate < 0.3, "Unreliable endgame"),
]


def classify_team(
    team_number: int,
    stats: TeamStats,
    observations: Iterable[Observation] | None = None,
) -> TeamClassification:
    """
    Classify a team into a play style archetype.

    Args:
        team_number: Team being classified
        stats: The team's aggregated stats
        observations: Raw observations (currently unused by the rules)

    Returns:
        TeamClassification from the first matching rule
    """
    rule = next(r for r in ARCHETYPE_RULES if r.applies(stats))
    result = TeamClassification(
        team_number=team_number,
        archetype=rule.archetype,
        confidence=rule.confidence,
    )
    rule.annotate(stats, result)

    result.strengths.extend(label for check, label in STRENGTH_CHECKS if check(stats))
    result.weaknesses.extend(label for check, label in WEAKNESS_CHECKS if check(stats))
    return result


# ---------------------------------------------------------------------------
# Anomalies
# ---------------------------------------------------------------------------

ANOMALY_DEVIATION_THRESHOLD = 0.5
HIGH_SEVERITY_DEVIATION = 1.0
ANOMALY_MIN_MATCHES = 3  # Need more than this many matches before flagging
RELIABLE_AUTO_SAMPLES = 2


def _score_anomaly(
    team_number: int,
    obs: Observation,
    stats: TeamStats,
) -> Anomaly | None:
    """Compare one observation's points against the team average."""
    actual = calculate_performance(obs).total_points
    deviation = (actual - stats.avg_total_points) / (stats.avg_total_points or 1)

    if abs(deviation) <= ANOMALY_DEVIATION_THRESHOLD:
        return None

    above = deviation > 0
    pct = round_half_up(abs(deviation) * 100)
    return Anomaly(
        team_number=team_number,
        match_id=obs.match_id,
        type=AnomalyType.EXCEPTIONAL if above else AnomalyType.UNDERPERFORMANCE,
        severity=Severity.HIGH if abs(deviation) > HIGH_SEVERITY_DEVIATION else Severity.MEDIUM,
        description=f"Scored {pct}% {'above' if above else 'below'} average",
        expected_value=round_half_up(stats.avg_total_points),
        actual_value=actual,
        deviation=round_half_up_to(deviation, 2),
    )


def detect_anomalies(
    team_number: int,
    observations: Iterable[Observation],
    stats: TeamStats,
) -> list[Anomaly]:
    """
    Flag matches where a team performed far from its average.

    Score anomalies need more than three scouted matches. A missed
    autonomous from a team that usually scores more than two auto
    samples is flagged regardless.
    """
    anomalies: list[Anomaly] = []
    team_obs = [o for o in observations if o.team_number == team_number]

    for obs in team_obs:
        if stats.matches_played > ANOMALY_MIN_MATCHES:
            anomaly = _score_anomaly(team_number, obs, stats)
            if anomaly:
                anomalies.append(anomaly)

        if obs.auto_sample_scored == 0 and stats.avg_auto_samples > RELIABLE_AUTO_SAMPLES:
            anomalies.append(
                Anomaly(
                    team_number=team_number,
                    match_id=obs.match_id,
                    type=AnomalyType.UNUSUAL_PATTERN,
                    severity=Severity.MEDIUM,
                    description="Failed autonomous routine (usually reliable)",
                    expected_value=round_half_up(stats.avg_auto_samples),
                    actual_value=0,
                    deviation=-1.0,
                )
            )

    if anomalies:
        logger.debug(f"Team {team_number}: {len(anomalies)} anomalies")
    return anomalies


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------

TREND_MIN_MATCHES = 3
STABLE_STRENGTH = 0.05
DIRECTIONAL_STRENGTH = 0.15
VOLATILE_CONSISTENCY = 0.4
MAX_TREND_CONFIDENCE = 0.95
RECENT_WINDOW = 5


def fit_linear_trend(scores: list[float]) -> tuple[float, float]:
    """
    Ordinary least squares fit of score against match index.

    Returns:
        Tuple of (slope, intercept); slope is 0 for fewer than 2 points
    """
    n = len(scores)
    if n == 0:
        return 0.0, 0.0
    if n == 1:
        return 0.0, float(scores[0])

    x = np.arange(n, dtype=float)
    y = np.asarray(scores, dtype=float)
    sum_x, sum_y = x.sum(), y.sum()
    denominator = n * (x * x).sum() - sum_x * sum_x
    slope = (n * (x * y).sum() - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return float(slope), float(intercept)


def _classify_trend(strength: float, consistency: float) -> TrendDirection:
    if abs(strength) < STABLE_STRENGTH:
        return TrendDirection.STABLE
    if strength > DIRECTIONAL_STRENGTH:
        return TrendDirection.IMPROVING
    if strength < -DIRECTIONAL_STRENGTH:
        return TrendDirection.DECLINING
    if consistency < VOLATILE_CONSISTENCY:
        return TrendDirection.VOLATILE
    return TrendDirection.STABLE


def analyze_performance_trend(
    team_number: int,
    observations: Iterable[Observation],
    stats: TeamStats,
) -> PerformanceTrend:
    """
    Fit a linear trend to a team's match scores.

    Observations are sorted by creation time first. With fewer than three
    matches the trend is reported as stable at the team's average.
    """
    team_obs = sort_chronologically([o for o in observations if o.team_number == team_number])

    if len(team_obs) < TREND_MIN_MATCHES:
        return PerformanceTrend(
            team_number=team_number,
            trend=TrendDirection.STABLE,
            trend_strength=0.0,
            next_match_score=round_half_up(stats.avg_total_points),
            confidence=0.5,
        )

    scores = [calculate_performance(o).total_points for o in team_obs]
    slope, intercept = fit_linear_trend(scores)
    strength = slope / (stats.avg_total_points or 1)

    return PerformanceTrend(
        team_number=team_number,
        trend=_classify_trend(strength, stats.consistency),
        trend_strength=round_half_up_to(strength, 2),
        recent_performance=scores[-RECENT_WINDOW:],
        next_match_score=max(0, round_half_up(slope * len(scores) + intercept)),
        confidence=min(MAX_TREND_CONFIDENCE, stats.consistency),
    )


# ---------------------------------------------------------------------------
# Partner recommendations
# ---------------------------------------------------------------------------

# (my weakness, their strength, synergy text, bonus)
COMPLEMENT_BONUSES: list[tuple[Callable[[TeamStats], bool], Callable[[TeamStats], bool], str, int]] = [
    (lambda me: me.avg_auto_samples < 2, lambda them: them.avg_auto_samples > 3,
     "Compensates for weak autonomous", 100),
    (lambda me: me.hang_success_rate < 0.5, lambda them: them.hang_success_rate > 0.8,
     "Reliable endgame partner", 150),
    (lambda me: me.avg_teleop_samples < 3, lambda them: them.avg_teleop_samples > 5,
     "Strong teleop scorer", 120),
]

ARCHETYPE_SYNERGIES: dict[tuple[TeamArchetype, TeamArchetype], tuple[str, int]] = {
    (TeamArchetype.DEFENDER, TeamArchetype.SCORER): ("Defense + Offense combo", 200),
    (TeamArchetype.SPECIALIST, TeamArchetype.BALANCED): ("Specialist + Generalist balance", 100),
}

CONCERN_PENALTIES: list[tuple[Callable[[TeamStats], bool], str, int]] = [
    (lambda them: them.consistency < 0.4, "Inconsistent performance", 100),
    (lambda them: them.avg_total_points < 30, "Low scoring output", 150),
]


def recommend_alliance_partners(
    my_team_number: int,
    available_teams: Iterable[int],
    team_stats_map: Mapping[int, TeamStats],
    observations: Iterable[Observation] | None = None,
) -> list[TeamRecommendation]:
    """
    Rank potential alliance partners by how well they complement a team.

    Candidates start at their rating and gain or lose fixed amounts for
    complementary strengths, archetype pairings and concerns. Candidates
    without stats are skipped.

    Args:
        my_team_number: The picking team
        available_teams: Candidate team numbers
        team_stats_map: Team number to TeamStats
        observations: Raw observations passed through to classification

    Returns:
        Recommendations sorted by score, best first
    """
    my_stats = team_stats_map.get(my_team_number)
    if my_stats is None:
        logger.warning(f"No stats for team {my_team_number}; cannot recommend partners")
        return []

    observations = list(observations or [])
    my_archetype = classify_team(my_team_number, my_stats, observations).archetype
    recommendations = []

    for team_number in available_teams:
        if team_number == my_team_number:
            continue
        their_stats = team_stats_map.get(team_number)
        if their_stats is None:
            continue

        their_class = classify_team(team_number, their_stats, observations)
        rec = TeamRecommendation(team_number=team_number, score=their_stats.elo_rating)

        for my_need, their_strength, text, bonus in COMPLEMENT_BONUSES:
            if my_need(my_stats) and their_strength(their_stats):
                rec.synergies.append(text)
                rec.score += bonus

        pairing = ARCHETYPE_SYNERGIES.get((my_archetype, their_class.archetype))
        if pairing:
            rec.synergies.append(pairing[0])
            rec.score += pairing[1]

        for check, text, penalty in CONCERN_PENALTIES:
            if check(their_stats):
                rec.concerns.append(text)
                rec.score -= penalty

        if their_stats.elo_rating > 1600:
            rec.reasons.append("High ELO rating")
        if their_stats.consistency > 0.7:
            rec.reasons.append("Very consistent")
        if len(their_class.strengths) > 2:
            rec.reasons.append("Multiple strengths")

        recommendations.append(rec)

    recommendations.sort(key=lambda r: r.score, reverse=True)
    return recommendations


# ---------------------------------------------------------------------------
# Mechanical issues
# ---------------------------------------------------------------------------

MECHANICAL_MIN_MATCHES = 4
RECENT_MATCHES = 3
SPEED_DROP_THRESHOLD = 1.5
TELEOP_DROP_THRESHOLD = 3
EARLIER_HANG_THRESHOLD = 2
CONCERN_CONFIDENCE_STEP = 0.3
MAX_CONCERN_CONFIDENCE = 0.9


def predict_mechanical_issues(
    team_number: int,
    observations: Iterable[Observation],
) -> MechanicalAssessment:
    """
    Look for degradation in a team's last three matches.

    Compares recent matches against all earlier ones: robot speed rating,
    teleop pieces scored, and whether a previously reliable hang stopped
    working. Needs at least four observations.
    """
    team_obs = sort_chronologically([o for o in observations if o.team_number == team_number])
    assessment = MechanicalAssessment(team_number=team_number)

    if len(team_obs) < MECHANICAL_MIN_MATCHES:
        return assessment

    recent = team_obs[-RECENT_MATCHES:]
    earlier = team_obs[:-RECENT_MATCHES]

    recent_speed = float(np.mean([o.robot_speed for o in recent]))
    earlier_speed = float(np.mean([o.robot_speed for o in earlier]))
    if earlier_speed - recent_speed > SPEED_DROP_THRESHOLD:
        assessment.concerns.append("Significant speed degradation detected")

    recent_teleop = float(np.mean([o.teleop_pieces for o in recent]))
    earlier_teleop = float(np.mean([o.teleop_pieces for o in earlier]))
    if earlier_teleop - recent_teleop > TELEOP_DROP_THRESHOLD:
        assessment.concerns.append("Declining scoring capability")

    recent_hang_failures = sum(1 for o in recent if o.endgame_hanging == HangLevel.NONE)
    earlier_hangs = sum(1 for o in earlier if o.did_hang)
    if earlier_hangs > EARLIER_HANG_THRESHOLD and recent_hang_failures == RECENT_MATCHES:
        assessment.concerns.append("Endgame mechanism may be failing")

    if assessment.concerns:
        assessment.has_concern = True
        assessment.confidence = min(
            MAX_CONCERN_CONFIDENCE, len(assessment.concerns) * CONCERN_CONFIDENCE_STEP
        )
        logger.debug(f"Team {team_number}: mechanical concerns {assessment.concerns}")

    return assessment
