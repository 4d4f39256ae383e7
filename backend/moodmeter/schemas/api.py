from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from moodmeter.schemas.common import (
    InsightType,
    MoodBand,
    StreakType,
    TimeOfDay,
    TrendDirection,
    WellnessLevel,
)
from moodmeter.schemas.mood import MoodEntry


class BasicStats(BaseModel):
    average: float
    min: float
    max: float
    range: float
    total: float
    count: int


class TrendResult(BaseModel):
    direction: TrendDirection
    magnitude: float
    percentage: int


class TrendSet(BaseModel):
    weekly: TrendResult | None
    recent: TrendResult | None
    overall: TrendResult | None = None


class StreakResult(BaseModel):
    length: int
    type: StreakType
    is_current: bool


class Streaks(BaseModel):
    current: StreakResult
    longest: StreakResult


class BucketStats(BaseModel):
    average: float
    count: int


class TimePatterns(BaseModel):
    morning: BucketStats
    afternoon: BucketStats
    evening: BucketStats
    best_time: TimeOfDay | None

    def bucket(self, time_of_day: TimeOfDay) -> BucketStats:
        return getattr(self, time_of_day.value)


class WeekdayPatterns(BaseModel):
    days: dict[str, BucketStats]
    best_day: str | None


class BandCount(BaseModel):
    band: MoodBand
    count: int
    percentage: int


class DistributionResult(BaseModel):
    bands: list[BandCount]
    positive_percentage: int
    most_common: BandCount

    def count_for(self, band: MoodBand) -> int:
        return next(row.count for row in self.bands if row.band == band)


class CorrelationResult(BaseModel):
    sleep_mood: float | None
    energy_mood: float | None
    stress_mood: float | None


class WellnessComponents(BaseModel):
    mood: float
    energy: float
    stress: float


class WellnessScore(BaseModel):
    score: float
    level: WellnessLevel
    components: WellnessComponents


class Insight(BaseModel):
    type: InsightType
    title: str
    description: str
    action: str | None = None
    priority: int


class RecentActivity(BaseModel):
    last_7_days: int
    last_30_days: int
    recent_average: float


class BestWeek(BaseModel):
    start_date: date
    average: float


class PersonalBests(BaseModel):
    highest_mood: float
    best_week: BestWeek | None
    longest_streak: StreakResult


class MoodAnalytics(BaseModel):
    basic_stats: BasicStats
    trends: TrendSet
    streaks: Streaks
    time_patterns: TimePatterns
    weekday_patterns: WeekdayPatterns
    distribution: DistributionResult
    correlations: CorrelationResult
    wellness: WellnessScore
    insights: list[Insight]
    recent_activity: RecentActivity
    personal_bests: PersonalBests


class ChartPoint(BaseModel):
    date: str
    mood: int
    energy: int | None = None
    stress: int | None = None
    sleep: float | None = None
    full_date: datetime


class DistributionChartRow(BaseModel):
    range: MoodBand
    value: int
    percentage: int
    color: str


class ChartsResponse(BaseModel):
    time_filter: str
    points: list[ChartPoint]
    distribution: list[DistributionChartRow]


class DashboardSummary(BaseModel):
    current_streak: int
    goal_progress: int
    goal_trend: str
    avg_energy: float
    energy_trend: TrendDirection
    wellness_score: float
    wellness_level: WellnessLevel
    weekly_trend: TrendDirection
    today_mood: int | None = None
    best_day_score: int | None = None
    best_day: str | None = None
    weekly_average: float | None = None
    morning_avg: float | None = None
    afternoon_avg: float | None = None
    evening_avg: float | None = None
    best_time_of_day: TimeOfDay | None = None
    sleep_impact: str | None = None
    stress_correlation: str | None = None
    energy_sync: str | None = None
    top_recommendation: str | None = None


class AnalyticsConfigIn(BaseModel):
    positive_threshold: float | None = Field(default=None, ge=1, le=10)
    trend_sensitivity: float | None = Field(default=None, ge=0)
    streak_minimum: int | None = Field(default=None, ge=1)
    time_zone: str | None = Field(
        default=None,
        description="IANA zone name. Send '' to clear a configured zone and use each timestamp's own offset.",
    )


class AnalyticsConfigOut(BaseModel):
    positive_threshold: float
    trend_sensitivity: float
    streak_minimum: int
    time_zone: str | None


class AnalyticsRequest(BaseModel):
    entries: list[MoodEntry]
    config: AnalyticsConfigIn | None = None


class InsightsResponse(BaseModel):
    entry_count: int
    insights: list[Insight]
