from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Sequence

from moodmeter.core.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from moodmeter.schemas.api import (
    BasicStats,
    BestWeek,
    PersonalBests,
    RecentActivity,
    StreakResult,
    Streaks,
    TrendResult,
)
from moodmeter.schemas.common import StreakType, TrendDirection
from moodmeter.schemas.mood import MoodEntry
from moodmeter.services.analytics.aggregation import (
    average_mood,
    classify,
    entries_between,
    entries_since,
    local_time,
    mood_scores,
    round_1,
    round_int,
    sorted_by_time,
)
from moodmeter.utils.timezone import ensure_aware, utc_now

RECENT_TREND_WINDOW = 3
BEST_WEEK_MIN_ENTRIES = 3


def compute_basic_stats(entries: Sequence[MoodEntry]) -> BasicStats:
    if not entries:
        return BasicStats(average=0.0, min=0.0, max=0.0, range=0.0, total=0.0, count=0)

    scores = mood_scores(entries)
    total = float(sum(scores))
    low = min(scores)
    high = max(scores)
    return BasicStats(
        average=round_1(total / len(scores)),
        min=round_1(low),
        max=round_1(high),
        range=round_1(high - low),
        total=round_1(total),
        count=len(scores),
    )


def compute_trend(
    recent: Sequence[MoodEntry],
    previous: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> TrendResult | None:
    if not recent or not previous:
        return None

    recent_avg = average_mood(recent)
    previous_avg = average_mood(previous)
    difference = recent_avg - previous_avg
    magnitude = abs(difference)
    percentage = round_int(difference / previous_avg * 100) if previous_avg > 0 else 0

    if magnitude < config.trend_sensitivity:
        direction = TrendDirection.stable
    elif difference > 0:
        direction = TrendDirection.up
    else:
        direction = TrendDirection.down

    return TrendResult(direction=direction, magnitude=round_1(magnitude), percentage=percentage)


def compute_weekly_trend(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
    now: datetime | None = None,
) -> TrendResult | None:
    """Compare the last 7 days against the 7 days before them."""
    reference = ensure_aware(now) if now is not None else utc_now()
    last_week = entries_since(entries, now=reference, days=7)
    week_before = entries_between(entries, now=reference, start_days_ago=14, end_days_ago=7)
    return compute_trend(last_week, week_before, config)


def compute_recent_trend(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> TrendResult | None:
    """Compare the newest three entries against the three before them."""
    if len(entries) < RECENT_TREND_WINDOW * 2:
        return None
    ordered = sorted_by_time(entries, newest_first=True)
    recent = ordered[:RECENT_TREND_WINDOW]
    previous = ordered[RECENT_TREND_WINDOW:RECENT_TREND_WINDOW * 2]
    return compute_trend(recent, previous, config)


def compute_streaks(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> Streaks:
    if not entries:
        return Streaks(
            current=StreakResult(length=0, type=StreakType.neutral, is_current=True),
            longest=StreakResult(length=0, type=StreakType.neutral, is_current=False),
        )

    newest_first = sorted_by_time(entries, newest_first=True)
    current_type = classify(newest_first[0], config)
    current_length = 0
    for entry in newest_first:
        if classify(entry, config) != current_type:
            break
        current_length += 1

    longest_length = 0
    longest_type = StreakType.neutral
    run_length = 0
    run_type = StreakType.neutral
    for entry in reversed(newest_first):
        entry_type = classify(entry, config)
        if run_length == 0 or entry_type == run_type:
            run_length += 1
            run_type = entry_type
            continue
        if run_length > longest_length:
            longest_length = run_length
            longest_type = run_type
        run_length = 1
        run_type = entry_type

    if run_length > longest_length:
        longest_length = run_length
        longest_type = run_type

    return Streaks(
        current=StreakResult(length=current_length, type=current_type, is_current=True),
        longest=StreakResult(length=longest_length, type=longest_type, is_current=False),
    )


def compute_recent_activity(
    entries: Sequence[MoodEntry],
    now: datetime | None = None,
) -> RecentActivity:
    reference = ensure_aware(now) if now is not None else utc_now()
    last_week = entries_since(entries, now=reference, days=7)
    last_month = entries_since(entries, now=reference, days=30)
    return RecentActivity(
        last_7_days=len(last_week),
        last_30_days=len(last_month),
        recent_average=round_1(average_mood(last_week)),
    )


def compute_personal_bests(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> PersonalBests:
    if not entries:
        return PersonalBests(
            highest_mood=0.0,
            best_week=None,
            longest_streak=StreakResult(length=0, type=StreakType.neutral, is_current=False),
        )

    weeks: dict[date, list[MoodEntry]] = {}
    for entry in sorted_by_time(entries):
        local = local_time(entry, config).date()
        week_start = local - timedelta(days=(local.weekday() + 1) % 7)
        weeks.setdefault(week_start, []).append(entry)

    best_week: BestWeek | None = None
    best_average = 0.0
    for week_start, week_entries in weeks.items():
        if len(week_entries) < BEST_WEEK_MIN_ENTRIES:
            continue
        week_average = average_mood(week_entries)
        if week_average > best_average:
            best_average = week_average
            best_week = BestWeek(start_date=week_start, average=round_1(week_average))

    return PersonalBests(
        highest_mood=float(max(mood_scores(entries))),
        best_week=best_week,
        longest_streak=compute_streaks(entries, config).longest,
    )


def compute_mood_health_score(entries: Sequence[MoodEntry]) -> int:
    if not entries:
        return 0
    return round_int(average_mood(entries) / 10 * 100)
