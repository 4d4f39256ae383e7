from __future__ import annotations

from enum import Enum


class TrendDirection(str, Enum):
    up = 'up'
    down = 'down'
    stable = 'stable'


class StreakType(str, Enum):
    positive = 'positive'
    negative = 'negative'
    neutral = 'neutral'


class TimeOfDay(str, Enum):
    morning = 'morning'
    afternoon = 'afternoon'
    evening = 'evening'


class MoodBand(str, Enum):
    low = '1-3'
    below_average = '4-5'
    good = '6-7'
    great = '8-10'


class WellnessLevel(str, Enum):
    excellent = 'excellent'
    good = 'good'
    fair = 'fair'
    poor = 'poor'


class InsightType(str, Enum):
    positive = 'positive'
    warning = 'warning'
    info = 'info'


class MetricField(str, Enum):
    mood_score = 'mood_score'
    energy_level = 'energy_level'
    stress_level = 'stress_level'
    sleep_hours = 'sleep_hours'
