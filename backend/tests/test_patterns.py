from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from moodmeter.core.config import AnalyticsConfig
from moodmeter.schemas.common import MoodBand, TimeOfDay
from moodmeter.services.analytics.patterns import (
    band_for,
    compute_distribution,
    compute_time_patterns,
    compute_weekday_patterns,
    time_of_day,
)


def _at(hour: int, minute: int = 0, day: int = 11) -> datetime:
    return datetime(2026, 2, day, hour, minute, tzinfo=timezone.utc)


def test_time_of_day_boundaries() -> None:
    assert time_of_day(6) == TimeOfDay.morning
    assert time_of_day(11) == TimeOfDay.morning
    assert time_of_day(12) == TimeOfDay.afternoon
    assert time_of_day(17) == TimeOfDay.afternoon
    assert time_of_day(18) == TimeOfDay.evening
    assert time_of_day(23) == TimeOfDay.evening
    assert time_of_day(0) == TimeOfDay.evening
    assert time_of_day(5) == TimeOfDay.evening


def test_time_patterns_bucket_averages_and_best_time(make_entry) -> None:
    entries = [
        make_entry(8, at=_at(6)),
        make_entry(6, at=_at(11, 59)),
        make_entry(5, at=_at(12)),
        make_entry(4, at=_at(17, 59)),
        make_entry(3, at=_at(18)),
        make_entry(9, at=_at(5, 59)),
    ]

    patterns = compute_time_patterns(entries)

    assert patterns.morning.model_dump() == {'average': 7.0, 'count': 2}
    assert patterns.afternoon.model_dump() == {'average': 4.5, 'count': 2}
    assert patterns.evening.model_dump() == {'average': 6.0, 'count': 2}
    assert patterns.best_time == TimeOfDay.morning


def test_time_patterns_empty_input_has_no_best_time() -> None:
    patterns = compute_time_patterns([])

    assert patterns.best_time is None
    assert patterns.morning.count == 0
    assert patterns.morning.average == 0.0


def test_time_patterns_use_timestamp_offset_or_configured_zone(make_entry) -> None:
    central = timezone(timedelta(hours=-6))
    own_offset = make_entry(7, at=datetime(2026, 2, 11, 9, 0, tzinfo=central))
    utc_afternoon = make_entry(7, at=_at(15))

    assert compute_time_patterns([own_offset]).best_time == TimeOfDay.morning
    assert compute_time_patterns([utc_afternoon]).best_time == TimeOfDay.afternoon

    chicago = AnalyticsConfig(time_zone='America/Chicago')
    assert compute_time_patterns([utc_afternoon], chicago).best_time == TimeOfDay.morning


def test_weekday_patterns_start_on_sunday(make_entry) -> None:
    entries = [
        make_entry(8, at=_at(12, day=8)),
        make_entry(4, at=_at(12, day=9)),
        make_entry(6, at=_at(13, day=9)),
    ]

    patterns = compute_weekday_patterns(entries)

    assert list(patterns.days) == ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']
    assert patterns.days['Sunday'].model_dump() == {'average': 8.0, 'count': 1}
    assert patterns.days['Monday'].model_dump() == {'average': 5.0, 'count': 2}
    assert patterns.days['Tuesday'].model_dump() == {'average': 0.0, 'count': 0}
    assert patterns.best_day == 'Sunday'


def test_time_patterns_tie_prefers_earlier_bucket(make_entry) -> None:
    entries = [
        make_entry(7, at=_at(20)),
        make_entry(7, at=_at(14)),
        make_entry(7, at=_at(8)),
    ]

    assert compute_time_patterns(entries).best_time == TimeOfDay.morning
    assert compute_time_patterns(entries[:2]).best_time == TimeOfDay.afternoon


def test_weekday_patterns_tie_prefers_earlier_day(make_entry) -> None:
    entries = [
        make_entry(6, at=_at(12, day=10)),
        make_entry(6, at=_at(12, day=9)),
    ]

    patterns = compute_weekday_patterns(entries)

    assert patterns.days['Monday'].average == patterns.days['Tuesday'].average
    assert patterns.best_day == 'Monday'


def test_weekday_patterns_empty_input() -> None:
    assert compute_weekday_patterns([]).best_day is None


def test_distribution_of_identical_scores(make_entry) -> None:
    distribution = compute_distribution([make_entry(7) for _ in range(10)])

    assert {row.band.value: row.count for row in distribution.bands} == {'1-3': 0, '4-5': 0, '6-7': 10, '8-10': 0}
    assert distribution.positive_percentage == 100
    assert distribution.most_common.band == MoodBand.good
    assert distribution.most_common.percentage == 100


def test_distribution_counts_sum_to_entry_count(make_entry) -> None:
    scores = [1, 3, 4, 5, 6, 7, 8, 10, 10]
    distribution = compute_distribution([make_entry(score) for score in scores])

    assert sum(row.count for row in distribution.bands) == len(scores)
    assert [row.percentage for row in distribution.bands] == [22, 22, 22, 33]
    assert abs(sum(row.percentage for row in distribution.bands) - 100) <= len(distribution.bands)
    assert distribution.count_for(MoodBand.great) == 3
    assert distribution.positive_percentage == 56
    assert distribution.most_common.band == MoodBand.great


def test_distribution_tie_prefers_declaration_order(make_entry) -> None:
    distribution = compute_distribution([make_entry(2), make_entry(9)])

    assert distribution.most_common.band == MoodBand.low
    assert distribution.most_common.count == 1


def test_distribution_empty_input() -> None:
    distribution = compute_distribution([])

    assert distribution.positive_percentage == 0
    assert distribution.most_common.band == MoodBand.low
    assert distribution.most_common.count == 0
    assert all(row.percentage == 0 for row in distribution.bands)


def test_band_for_rejects_out_of_range_scores() -> None:
    assert band_for(1) == MoodBand.low
    assert band_for(10) == MoodBand.great
    with pytest.raises(ValueError):
        band_for(0)
    with pytest.raises(ValueError):
        band_for(11)
