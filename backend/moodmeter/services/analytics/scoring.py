from __future__ import annotations

import math
from typing import Sequence

from moodmeter.schemas.api import CorrelationResult, WellnessComponents, WellnessScore
from moodmeter.schemas.common import MetricField, WellnessLevel
from moodmeter.schemas.mood import MoodEntry
from moodmeter.services.analytics.aggregation import (
    average_mood,
    has_metric,
    mean,
    metric_value,
    round_1,
    round_half_up,
    with_metric,
)

MIN_CORRELATION_PAIRS = 3
NEUTRAL_METRIC = 5.0

MOOD_WEIGHT = 0.4
ENERGY_WEIGHT = 0.3
STRESS_WEIGHT = 0.3

WELLNESS_LEVELS: list[tuple[float, WellnessLevel]] = [
    (8.0, WellnessLevel.excellent),
    (6.5, WellnessLevel.good),
    (5.0, WellnessLevel.fair),
]


def compute_correlation(
    entries: Sequence[MoodEntry],
    field_a: MetricField | str,
    field_b: MetricField | str,
) -> float | None:
    """Pearson coefficient between two entry metrics.

    Only entries carrying both metrics take part. Returns None below three
    pairs, which is "not enough data" rather than "no correlation".
    """
    try:
        first = MetricField(field_a)
        second = MetricField(field_b)
    except ValueError as exc:
        raise ValueError(f'Unknown metric field: {exc}') from exc

    paired = [entry for entry in entries if has_metric(entry, first) and has_metric(entry, second)]
    if len(paired) < MIN_CORRELATION_PAIRS:
        return None

    x_vals = [float(metric_value(entry, first)) for entry in paired]  # type: ignore[arg-type]
    y_vals = [float(metric_value(entry, second)) for entry in paired]  # type: ignore[arg-type]
    return round_half_up(_pearson_corr(x_vals, y_vals), 2)


def compute_all_correlations(entries: Sequence[MoodEntry]) -> CorrelationResult:
    return CorrelationResult(
        sleep_mood=compute_correlation(entries, MetricField.sleep_hours, MetricField.mood_score),
        energy_mood=compute_correlation(entries, MetricField.energy_level, MetricField.mood_score),
        stress_mood=compute_correlation(entries, MetricField.stress_level, MetricField.mood_score),
    )


def compute_wellness_score(entries: Sequence[MoodEntry]) -> WellnessScore:
    if not entries:
        return WellnessScore(
            score=0.0,
            level=WellnessLevel.poor,
            components=WellnessComponents(mood=0.0, energy=0.0, stress=0.0),
        )

    avg_mood = average_mood(entries)
    avg_energy = _metric_average(entries, MetricField.energy_level)
    avg_stress = _metric_average(entries, MetricField.stress_level)

    score = round_1(
        avg_mood * MOOD_WEIGHT
        + avg_energy * ENERGY_WEIGHT
        + (10 - avg_stress) * STRESS_WEIGHT
    )
    return WellnessScore(
        score=score,
        level=wellness_level(score),
        components=WellnessComponents(
            mood=round_1(avg_mood),
            energy=round_1(avg_energy),
            stress=round_1(avg_stress),
        ),
    )


def wellness_level(score: float) -> WellnessLevel:
    for threshold, level in WELLNESS_LEVELS:
        if score >= threshold:
            return level
    return WellnessLevel.poor


def _metric_average(entries: Sequence[MoodEntry], field: MetricField) -> float:
    # Missing metrics sit at the neutral midpoint instead of dragging the score.
    values = [float(metric_value(entry, field)) for entry in with_metric(entries, field)]  # type: ignore[arg-type]
    return mean(values, default=NEUTRAL_METRIC)


def _pearson_corr(x: list[float], y: list[float]) -> float:
    x_mean = sum(x) / len(x)
    y_mean = sum(y) / len(y)
    x_var = sum((value - x_mean) ** 2 for value in x)
    y_var = sum((value - y_mean) ** 2 for value in y)
    den = math.sqrt(x_var * y_var)
    if den == 0:
        return 0.0
    cov = sum((x_val - x_mean) * (y_val - y_mean) for x_val, y_val in zip(x, y))
    corr = cov / den
    return max(-1.0, min(1.0, corr))
