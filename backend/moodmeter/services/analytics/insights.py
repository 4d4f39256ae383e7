"""Rule-based insight generation.

Each rule is an independent predicate plus a factory. Rules read a shared
``AnalyticsSnapshot`` built once per call, so they can be tested in isolation
and the rule list can grow without touching the others. Output is sorted by
priority (1 is most important) and capped at ``MAX_INSIGHTS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Callable, Sequence

from moodmeter.core.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from moodmeter.schemas.api import (
    BasicStats,
    CorrelationResult,
    Insight,
    RecentActivity,
    Streaks,
    TimePatterns,
    TrendResult,
)
from moodmeter.schemas.common import InsightType, MetricField, StreakType, TimeOfDay, TrendDirection
from moodmeter.schemas.mood import MoodEntry
from moodmeter.services.analytics.aggregation import (
    average_mood,
    metric_value,
    mood_scores,
    population_variance,
    with_metric,
)
from moodmeter.services.analytics.patterns import compute_time_patterns
from moodmeter.services.analytics.scoring import compute_all_correlations
from moodmeter.services.analytics.statistics import (
    compute_basic_stats,
    compute_recent_activity,
    compute_streaks,
    compute_weekly_trend,
)

LOGGER = logging.getLogger(__name__)

MAX_INSIGHTS = 4
MIN_ENTRIES_FOR_INSIGHTS = 3
MIN_METRIC_ENTRIES = 5
STREAK_INSIGHT_LENGTH = 3

GOOD_SLEEP_HOURS = 7.0
POOR_SLEEP_HOURS = 6.0
HIGH_STRESS = 7
LOW_STRESS = 4
GROUP_MOOD_GAP = 1.0
ENERGY_CORRELATION_THRESHOLD = 0.6
BEST_TIME_MARGIN = 0.5
STABLE_VARIANCE = 2.0
VOLATILE_VARIANCE = 6.0
RECENT_IMPROVEMENT_GAP = 1.0


@dataclass(frozen=True, slots=True)
class AnalyticsSnapshot:
    entries: tuple[MoodEntry, ...]
    config: AnalyticsConfig
    basic_stats: BasicStats
    weekly_trend: TrendResult | None
    streaks: Streaks
    time_patterns: TimePatterns
    correlations: CorrelationResult
    recent_activity: RecentActivity
    mood_variance: float


@dataclass(frozen=True, slots=True)
class InsightRule:
    name: str
    applies: Callable[[AnalyticsSnapshot], bool]
    build: Callable[[AnalyticsSnapshot], Insight]


def build_snapshot(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
    now: datetime | None = None,
) -> AnalyticsSnapshot:
    return AnalyticsSnapshot(
        entries=tuple(entries),
        config=config,
        basic_stats=compute_basic_stats(entries),
        weekly_trend=compute_weekly_trend(entries, config, now),
        streaks=compute_streaks(entries, config),
        time_patterns=compute_time_patterns(entries, config),
        correlations=compute_all_correlations(entries),
        recent_activity=compute_recent_activity(entries, now),
        mood_variance=population_variance([float(score) for score in mood_scores(entries)]),
    )


def generate_insights(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
    now: datetime | None = None,
) -> list[Insight]:
    if len(entries) < MIN_ENTRIES_FOR_INSIGHTS:
        return [keep_tracking_insight()]
    return generate_insights_from_snapshot(build_snapshot(entries, config, now))


def generate_insights_from_snapshot(snapshot: AnalyticsSnapshot) -> list[Insight]:
    if len(snapshot.entries) < MIN_ENTRIES_FOR_INSIGHTS:
        return [keep_tracking_insight()]

    fired: list[tuple[str, Insight]] = [
        (rule.name, rule.build(snapshot)) for rule in INSIGHT_RULES if rule.applies(snapshot)
    ]
    LOGGER.debug('insight rules fired for %d entries: %s', len(snapshot.entries), [name for name, _ in fired])

    insights = sorted((insight for _, insight in fired), key=lambda insight: insight.priority)
    return insights[:MAX_INSIGHTS]


def keep_tracking_insight() -> Insight:
    return Insight(
        type=InsightType.info,
        title='Keep tracking to unlock insights',
        description='Track your mood for a few more days to get personalized insights and recommendations.',
        action='Send more mood emails to get started',
        priority=1,
    )


def _weekly_direction(snapshot: AnalyticsSnapshot) -> TrendDirection | None:
    return snapshot.weekly_trend.direction if snapshot.weekly_trend else None


def _trend_up(snapshot: AnalyticsSnapshot) -> Insight:
    magnitude = snapshot.weekly_trend.magnitude if snapshot.weekly_trend else 0.0
    return Insight(
        type=InsightType.positive,
        title='Your mood is trending upward!',
        description=f'Your mood has improved by {magnitude:.1f} points over the past week.',
        action="Keep doing what you're doing - it's working!",
        priority=2,
    )


def _trend_down(snapshot: AnalyticsSnapshot) -> Insight:
    magnitude = snapshot.weekly_trend.magnitude if snapshot.weekly_trend else 0.0
    return Insight(
        type=InsightType.warning,
        title='Mood decline detected',
        description=f'Your mood has decreased by {magnitude:.1f} points this week.',
        action='Consider what might be affecting your mood and try some self-care activities',
        priority=1,
    )


def _group_gap(
    snapshot: AnalyticsSnapshot,
    field: MetricField,
    better: Callable[[float], bool],
    worse: Callable[[float], bool],
) -> float | None:
    """Mood gap between the better and worse groups of a metric, or None."""
    reported = with_metric(snapshot.entries, field)
    if len(reported) < MIN_METRIC_ENTRIES:
        return None
    better_group = [entry for entry in reported if better(float(metric_value(entry, field)))]  # type: ignore[arg-type]
    worse_group = [entry for entry in reported if worse(float(metric_value(entry, field)))]  # type: ignore[arg-type]
    if not better_group or not worse_group:
        return None
    return average_mood(better_group) - average_mood(worse_group)


def _sleep_gap(snapshot: AnalyticsSnapshot) -> float | None:
    return _group_gap(
        snapshot,
        MetricField.sleep_hours,
        better=lambda hours: hours >= GOOD_SLEEP_HOURS,
        worse=lambda hours: hours < POOR_SLEEP_HOURS,
    )


def _stress_gap(snapshot: AnalyticsSnapshot) -> float | None:
    return _group_gap(
        snapshot,
        MetricField.stress_level,
        better=lambda level: level <= LOW_STRESS,
        worse=lambda level: level >= HIGH_STRESS,
    )


def _sleep_applies(snapshot: AnalyticsSnapshot) -> bool:
    gap = _sleep_gap(snapshot)
    return gap is not None and gap > GROUP_MOOD_GAP


def _sleep_insight(snapshot: AnalyticsSnapshot) -> Insight:
    gap = _sleep_gap(snapshot) or 0.0
    return Insight(
        type=InsightType.positive,
        title='Sleep positively impacts your mood',
        description=f'Your mood is {gap:.1f} points higher when you get 7+ hours of sleep.',
        action='Prioritize getting 7-8 hours of sleep for better mood',
        priority=2,
    )


def _stress_applies(snapshot: AnalyticsSnapshot) -> bool:
    gap = _stress_gap(snapshot)
    return gap is not None and gap > GROUP_MOOD_GAP


def _stress_insight(snapshot: AnalyticsSnapshot) -> Insight:
    gap = _stress_gap(snapshot) or 0.0
    return Insight(
        type=InsightType.warning,
        title='High stress affects your mood',
        description=f'Your mood drops by {gap:.1f} points during high-stress periods.',
        action='Try stress-reduction techniques like meditation or deep breathing',
        priority=1,
    )


def _energy_applies(snapshot: AnalyticsSnapshot) -> bool:
    if len(with_metric(snapshot.entries, MetricField.energy_level)) < MIN_METRIC_ENTRIES:
        return False
    correlation = snapshot.correlations.energy_mood
    return correlation is not None and correlation > ENERGY_CORRELATION_THRESHOLD


def _energy_insight(snapshot: AnalyticsSnapshot) -> Insight:
    correlation = snapshot.correlations.energy_mood or 0.0
    return Insight(
        type=InsightType.positive,
        title='Energy and mood are well connected',
        description=f'Your energy levels strongly correlate with your mood ({correlation * 100:.0f}% correlation).',
        action='Focus on activities that boost your energy to improve your mood',
        priority=3,
    )


def _best_time_applies(snapshot: AnalyticsSnapshot) -> bool:
    patterns = snapshot.time_patterns
    if patterns.best_time is None:
        return False
    best_average = patterns.bucket(patterns.best_time).average
    others = [
        patterns.bucket(bucket).average
        for bucket in TimeOfDay
        if bucket != patterns.best_time and patterns.bucket(bucket).count > 0
    ]
    return best_average > max(others, default=0.0) + BEST_TIME_MARGIN


def _best_time_insight(snapshot: AnalyticsSnapshot) -> Insight:
    best = snapshot.time_patterns.best_time or TimeOfDay.morning
    average = snapshot.time_patterns.bucket(best).average
    return Insight(
        type=InsightType.info,
        title=f"You're happiest in the {best.value}",
        description=f'Your {best.value} mood average ({average:.1f}) is significantly higher than other times.',
        action=f'Try scheduling important activities during your {best.value} hours',
        priority=4,
    )


def _streak_of(snapshot: AnalyticsSnapshot, streak_type: StreakType) -> bool:
    current = snapshot.streaks.current
    return current.length >= STREAK_INSIGHT_LENGTH and current.type == streak_type


def _positive_streak_insight(snapshot: AnalyticsSnapshot) -> Insight:
    return Insight(
        type=InsightType.positive,
        title=f'{snapshot.streaks.current.length}-day positive streak!',
        description="You're on a roll with consistently good moods.",
        action='Keep up the great work and maintain your positive habits',
        priority=2,
    )


def _negative_streak_insight(snapshot: AnalyticsSnapshot) -> Insight:
    return Insight(
        type=InsightType.warning,
        title='Challenging period detected',
        description=f"You've had {snapshot.streaks.current.length} consecutive days of lower mood.",
        action='Consider reaching out for support or trying mood-boosting activities',
        priority=1,
    )


def _stable_insight(snapshot: AnalyticsSnapshot) -> Insight:
    return Insight(
        type=InsightType.positive,
        title='Stable mood patterns',
        description='Your mood has been consistently stable, which indicates good emotional regulation.',
        action="Continue your current routine - it's working well for you",
        priority=4,
    )


def _fluctuation_insight(snapshot: AnalyticsSnapshot) -> Insight:
    return Insight(
        type=InsightType.warning,
        title='Mood fluctuations detected',
        description='Your mood varies significantly. This could indicate external stressors or lifestyle factors.',
        action='Consider tracking additional factors like diet, exercise, or social interactions',
        priority=3,
    )


def _recent_improvement_applies(snapshot: AnalyticsSnapshot) -> bool:
    return snapshot.recent_activity.recent_average > snapshot.basic_stats.average + RECENT_IMPROVEMENT_GAP


def _recent_improvement_insight(snapshot: AnalyticsSnapshot) -> Insight:
    recent = snapshot.recent_activity.recent_average
    overall = snapshot.basic_stats.average
    return Insight(
        type=InsightType.positive,
        title='Recent mood improvement',
        description=f'Your recent mood average ({recent:.1f}) is higher than your overall average ({overall:.1f}).',
        action="Reflect on what you've been doing differently lately",
        priority=2,
    )


# Order matters only for ties in priority.
INSIGHT_RULES: list[InsightRule] = [
    InsightRule('weekly_trend_up', lambda s: _weekly_direction(s) == TrendDirection.up, _trend_up),
    InsightRule('weekly_trend_down', lambda s: _weekly_direction(s) == TrendDirection.down, _trend_down),
    InsightRule('sleep_effect', _sleep_applies, _sleep_insight),
    InsightRule('stress_effect', _stress_applies, _stress_insight),
    InsightRule('energy_correlation', _energy_applies, _energy_insight),
    InsightRule('best_time_of_day', _best_time_applies, _best_time_insight),
    InsightRule('positive_streak', lambda s: _streak_of(s, StreakType.positive), _positive_streak_insight),
    InsightRule('negative_streak', lambda s: _streak_of(s, StreakType.negative), _negative_streak_insight),
    InsightRule('stable_mood', lambda s: s.mood_variance < STABLE_VARIANCE, _stable_insight),
    InsightRule('mood_fluctuation', lambda s: s.mood_variance > VOLATILE_VARIANCE, _fluctuation_insight),
    InsightRule('recent_improvement', _recent_improvement_applies, _recent_improvement_insight),
]
