from __future__ import annotations

from typing import Any, Sequence

from moodmeter.core.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from moodmeter.schemas.api import (
    BandCount,
    BucketStats,
    DistributionResult,
    TimePatterns,
    WeekdayPatterns,
)
from moodmeter.schemas.common import MoodBand, TimeOfDay
from moodmeter.schemas.mood import MoodEntry
from moodmeter.services.analytics.aggregation import (
    WEEKDAY_NAMES,
    local_time,
    mood_scores,
    round_1,
    round_int,
    weekday_name,
)

# Inclusive score bounds, in declaration order.
BAND_BOUNDS: list[tuple[MoodBand, int, int]] = [
    (MoodBand.low, 1, 3),
    (MoodBand.below_average, 4, 5),
    (MoodBand.good, 6, 7),
    (MoodBand.great, 8, 10),
]
POSITIVE_BANDS = {MoodBand.good, MoodBand.great}


def time_of_day(hour: int) -> TimeOfDay:
    if 6 <= hour < 12:
        return TimeOfDay.morning
    if 12 <= hour < 18:
        return TimeOfDay.afternoon
    return TimeOfDay.evening


def band_for(score: float) -> MoodBand:
    for band, low, high in BAND_BOUNDS:
        if low <= score <= high:
            return band
    raise ValueError(f'mood score {score!r} is outside 1-10')


def compute_time_patterns(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> TimePatterns:
    grouped: dict[TimeOfDay, list[int]] = {bucket: [] for bucket in TimeOfDay}
    for entry in entries:
        grouped[time_of_day(local_time(entry, config).hour)].append(entry.mood_score)

    buckets = {bucket: _bucket_stats(scores) for bucket, scores in grouped.items()}
    best = _best_bucket(buckets)
    return TimePatterns(
        morning=buckets[TimeOfDay.morning],
        afternoon=buckets[TimeOfDay.afternoon],
        evening=buckets[TimeOfDay.evening],
        best_time=best,
    )


def compute_weekday_patterns(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> WeekdayPatterns:
    grouped: dict[str, list[int]] = {day: [] for day in WEEKDAY_NAMES}
    for entry in entries:
        grouped[weekday_name(local_time(entry, config))].append(entry.mood_score)

    days = {day: _bucket_stats(scores) for day, scores in grouped.items()}
    return WeekdayPatterns(days=days, best_day=_best_bucket(days))


def compute_distribution(entries: Sequence[MoodEntry]) -> DistributionResult:
    counts: dict[MoodBand, int] = {band: 0 for band, _, _ in BAND_BOUNDS}
    for score in mood_scores(entries):
        counts[band_for(score)] += 1

    total = len(entries)
    bands = [
        BandCount(
            band=band,
            count=count,
            percentage=(round_int(count / total * 100) if total > 0 else 0),
        )
        for band, count in counts.items()
    ]

    positive = sum(row.count for row in bands if row.band in POSITIVE_BANDS)
    most_common = bands[0]
    for row in bands[1:]:
        if row.count > most_common.count:
            most_common = row

    return DistributionResult(
        bands=bands,
        positive_percentage=(round_int(positive / total * 100) if total > 0 else 0),
        most_common=most_common,
    )


def _bucket_stats(scores: list[int]) -> BucketStats:
    if not scores:
        return BucketStats(average=0.0, count=0)
    return BucketStats(average=round_1(sum(scores) / len(scores)), count=len(scores))


def _best_bucket(buckets: dict[Any, BucketStats]) -> Any:
    best_key = None
    best_average = 0.0
    for key, stats in buckets.items():
        if stats.count > 0 and (best_key is None or stats.average > best_average):
            best_key = key
            best_average = stats.average
    return best_key
