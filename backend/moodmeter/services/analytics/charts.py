from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from moodmeter.core.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from moodmeter.schemas.api import ChartPoint, DashboardSummary, DistributionChartRow
from moodmeter.schemas.common import MetricField, MoodBand, TrendDirection, WellnessLevel
from moodmeter.schemas.mood import MoodEntry
from moodmeter.services.analytics.aggregation import (
    average_mood,
    entries_between,
    entries_since,
    local_time,
    mean,
    metric_value,
    round_int,
    sorted_by_time,
    weekday_name,
    with_metric,
)
from moodmeter.services.analytics.patterns import compute_distribution, compute_time_patterns
from moodmeter.services.analytics.scoring import compute_wellness_score
from moodmeter.services.analytics.statistics import (
    compute_basic_stats,
    compute_recent_activity,
    compute_streaks,
    compute_weekly_trend,
)
from moodmeter.utils.timezone import ensure_aware, to_local, utc_now

TIME_FILTER_DAYS: dict[str, int | None] = {'all': None, '7d': 7, '30d': 30, '90d': 90}

BAND_COLORS: dict[MoodBand, str] = {
    MoodBand.low: '#ef4444',
    MoodBand.below_average: '#f59e0b',
    MoodBand.good: '#3b82f6',
    MoodBand.great: '#10b981',
}

GOAL_AVERAGE = 8.0
ENERGY_SYNC_GAP = 1.0
HIGH_STRESS_AVERAGE = 7.0
MEDIUM_STRESS_AVERAGE = 4.0


def build_chart_data(
    entries: Sequence[MoodEntry],
    time_filter: str = 'all',
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
    now: datetime | None = None,
) -> list[ChartPoint]:
    normalized = (time_filter or 'all').strip().lower()
    if normalized not in TIME_FILTER_DAYS:
        raise ValueError(f"time_filter must be one of {', '.join(TIME_FILTER_DAYS)}")

    days = TIME_FILTER_DAYS[normalized]
    selected: Sequence[MoodEntry] = entries
    if days is not None:
        reference = ensure_aware(now) if now is not None else utc_now()
        selected = entries_since(entries, now=reference, days=days)

    return [
        ChartPoint(
            date=local_time(entry, config).strftime('%b %d'),
            mood=entry.mood_score,
            energy=entry.energy_level or None,
            stress=entry.stress_level or None,
            sleep=entry.sleep_hours or None,
            full_date=entry.created_at,
        )
        for entry in sorted_by_time(selected)
    ]


def build_distribution_chart_data(entries: Sequence[MoodEntry]) -> list[DistributionChartRow]:
    distribution = compute_distribution(entries)
    return [
        DistributionChartRow(
            range=row.band,
            value=row.count,
            percentage=row.percentage,
            color=BAND_COLORS[row.band],
        )
        for row in distribution.bands
    ]


def build_dashboard_summary(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
    now: datetime | None = None,
) -> DashboardSummary:
    """Compact summary behind the dashboard stat cards."""
    if not entries:
        return DashboardSummary(
            current_streak=0,
            goal_progress=0,
            goal_trend='neutral',
            avg_energy=0.0,
            energy_trend=TrendDirection.stable,
            wellness_score=0.0,
            wellness_level=WellnessLevel.poor,
            weekly_trend=TrendDirection.stable,
        )

    reference = ensure_aware(now) if now is not None else utc_now()
    basic_stats = compute_basic_stats(entries)
    streaks = compute_streaks(entries, config)
    weekly_trend = compute_weekly_trend(entries, config, reference)
    time_patterns = compute_time_patterns(entries, config)
    wellness = compute_wellness_score(entries)
    recent_activity = compute_recent_activity(entries, reference)

    local_now = to_local(reference, config.time_zone)
    today = local_now.date()
    today_entries = [entry for entry in entries if local_time(entry, config).date() == today]
    today_entry = sorted_by_time(today_entries, newest_first=True)[0] if today_entries else None

    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    best_day_score: int | None = None
    best_day: str | None = None
    for entry in sorted_by_time(entries):
        local = local_time(entry, config)
        if not (week_start <= local.date() and ensure_aware(entry.created_at) <= reference):
            continue
        if best_day_score is None or entry.mood_score > best_day_score:
            best_day_score = entry.mood_score
            best_day = weekday_name(local)

    sleep_impact = _sleep_impact(entries)
    stress_correlation = _stress_bucket(entries)
    energy_sync = (
        'aligned' if abs(basic_stats.average - wellness.components.energy) < ENERGY_SYNC_GAP else 'misaligned'
    )

    top_recommendation: str | None = None
    if sleep_impact == 'positive':
        top_recommendation = "Maintain your good sleep habits - they're boosting your mood!"
    elif stress_correlation == 'high':
        top_recommendation = 'Consider stress management techniques to improve your mood'
    elif energy_sync == 'misaligned':
        top_recommendation = 'Focus on activities that align your energy and mood levels'
    elif basic_stats.average < config.positive_threshold:
        top_recommendation = 'Try incorporating more positive activities into your routine'

    weekly_direction = weekly_trend.direction if weekly_trend else TrendDirection.stable
    return DashboardSummary(
        current_streak=streaks.current.length,
        goal_progress=min(round_int(basic_stats.average / GOAL_AVERAGE * 100), 100),
        goal_trend=('neutral' if weekly_direction == TrendDirection.stable else weekly_direction.value),
        avg_energy=wellness.components.energy,
        energy_trend=_energy_trend(entries, config, reference),
        wellness_score=wellness.score,
        wellness_level=wellness.level,
        weekly_trend=weekly_direction,
        today_mood=(today_entry.mood_score if today_entry else None),
        best_day_score=best_day_score,
        best_day=best_day,
        weekly_average=(recent_activity.recent_average if recent_activity.recent_average > 0 else None),
        morning_avg=(time_patterns.morning.average if time_patterns.morning.count > 0 else None),
        afternoon_avg=(time_patterns.afternoon.average if time_patterns.afternoon.count > 0 else None),
        evening_avg=(time_patterns.evening.average if time_patterns.evening.count > 0 else None),
        best_time_of_day=time_patterns.best_time,
        sleep_impact=sleep_impact,
        stress_correlation=stress_correlation,
        energy_sync=energy_sync,
        top_recommendation=top_recommendation,
    )


def _energy_trend(entries: Sequence[MoodEntry], config: AnalyticsConfig, now: datetime) -> TrendDirection:
    reported = with_metric(entries, MetricField.energy_level)
    recent = entries_since(reported, now=now, days=7)
    previous = entries_between(reported, now=now, start_days_ago=14, end_days_ago=7)
    if not recent or not previous:
        return TrendDirection.stable
    difference = _energy_average(recent) - _energy_average(previous)
    if abs(difference) < config.trend_sensitivity:
        return TrendDirection.stable
    return TrendDirection.up if difference > 0 else TrendDirection.down


def _energy_average(entries: Sequence[MoodEntry]) -> float:
    return mean([float(entry.energy_level or 0) for entry in entries])


def _sleep_impact(entries: Sequence[MoodEntry]) -> str:
    reported = with_metric(entries, MetricField.sleep_hours)
    good = [entry for entry in reported if float(metric_value(entry, MetricField.sleep_hours) or 0) >= 7]
    poor = [entry for entry in reported if float(metric_value(entry, MetricField.sleep_hours) or 0) < 6]
    if not good or not poor:
        return 'neutral'
    good_mood = average_mood(good)
    poor_mood = average_mood(poor)
    if good_mood > poor_mood + 1:
        return 'positive'
    if poor_mood > good_mood + 1:
        return 'negative'
    return 'neutral'


def _stress_bucket(entries: Sequence[MoodEntry]) -> str:
    levels = [float(entry.stress_level or 0) for entry in with_metric(entries, MetricField.stress_level)]
    avg_stress = mean(levels, default=5.0)
    if avg_stress > HIGH_STRESS_AVERAGE:
        return 'high'
    if avg_stress > MEDIUM_STRESS_AVERAGE:
        return 'medium'
    return 'low'
