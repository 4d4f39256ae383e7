from __future__ import annotations

from datetime import datetime, timedelta
import math
from typing import Iterable, Sequence

from moodmeter.core.config import AnalyticsConfig
from moodmeter.schemas.common import MetricField, StreakType
from moodmeter.schemas.mood import MoodEntry
from moodmeter.utils.timezone import ensure_aware, to_local

WEEKDAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']


def round_half_up(value: float, digits: int = 0) -> float:
    # Halves round toward +inf so -2.5 -> -2 and 2.5 -> 3.
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_1(value: float) -> float:
    return round_half_up(value, 1)


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def mean(values: Sequence[float], default: float = 0.0) -> float:
    if not values:
        return default
    return sum(values) / len(values)


def population_variance(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    avg = mean(values)
    return sum((value - avg) ** 2 for value in values) / len(values)


def mood_scores(entries: Iterable[MoodEntry]) -> list[int]:
    return [entry.mood_score for entry in entries]


def average_mood(entries: Sequence[MoodEntry]) -> float:
    return mean([float(entry.mood_score) for entry in entries])


def metric_value(entry: MoodEntry, field: MetricField | str) -> float | None:
    name = MetricField(field).value
    return getattr(entry, name)


def has_metric(entry: MoodEntry, field: MetricField | str) -> bool:
    # Zero counts as "not reported" for optional metrics, e.g. sleep_hours=0.
    value = metric_value(entry, field)
    return value is not None and value != 0


def with_metric(entries: Iterable[MoodEntry], field: MetricField | str) -> list[MoodEntry]:
    return [entry for entry in entries if has_metric(entry, field)]


def sorted_by_time(entries: Iterable[MoodEntry], *, newest_first: bool = False) -> list[MoodEntry]:
    return sorted(entries, key=lambda entry: ensure_aware(entry.created_at), reverse=newest_first)


def entries_since(entries: Iterable[MoodEntry], *, now: datetime, days: int) -> list[MoodEntry]:
    cutoff = now - timedelta(days=days)
    return [entry for entry in entries if ensure_aware(entry.created_at) >= cutoff]


def entries_between(
    entries: Iterable[MoodEntry],
    *,
    now: datetime,
    start_days_ago: int,
    end_days_ago: int,
) -> list[MoodEntry]:
    start = now - timedelta(days=start_days_ago)
    end = now - timedelta(days=end_days_ago)
    return [entry for entry in entries if start <= ensure_aware(entry.created_at) < end]


def local_time(entry: MoodEntry, config: AnalyticsConfig) -> datetime:
    return to_local(entry.created_at, config.time_zone)


def weekday_name(dt: datetime) -> str:
    # datetime.weekday() is Monday=0; the names list starts on Sunday.
    return WEEKDAY_NAMES[(dt.weekday() + 1) % 7]


def is_positive(entry: MoodEntry, config: AnalyticsConfig) -> bool:
    return entry.mood_score >= config.positive_threshold


def classify(entry: MoodEntry, config: AnalyticsConfig) -> StreakType:
    return StreakType.positive if is_positive(entry, config) else StreakType.negative
