from __future__ import annotations

from datetime import datetime
import logging
from typing import Sequence

from moodmeter.core.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from moodmeter.schemas.api import MoodAnalytics, TrendSet
from moodmeter.schemas.mood import MoodEntry
from moodmeter.services.analytics.aggregation import mood_scores, population_variance
from moodmeter.services.analytics.insights import AnalyticsSnapshot, generate_insights_from_snapshot
from moodmeter.services.analytics.patterns import (
    compute_distribution,
    compute_time_patterns,
    compute_weekday_patterns,
)
from moodmeter.services.analytics.scoring import compute_all_correlations, compute_wellness_score
from moodmeter.services.analytics.statistics import (
    compute_basic_stats,
    compute_personal_bests,
    compute_recent_activity,
    compute_recent_trend,
    compute_streaks,
    compute_weekly_trend,
)
from moodmeter.utils.timezone import ensure_aware, utc_now

LOGGER = logging.getLogger(__name__)


def compute_comprehensive_analytics(
    entries: Sequence[MoodEntry],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
    now: datetime | None = None,
) -> MoodAnalytics:
    reference = ensure_aware(now) if now is not None else utc_now()
    LOGGER.debug('computing analytics for %d entries', len(entries))

    basic_stats = compute_basic_stats(entries)
    weekly_trend = compute_weekly_trend(entries, config, reference)
    recent_trend = compute_recent_trend(entries, config)
    streaks = compute_streaks(entries, config)
    time_patterns = compute_time_patterns(entries, config)
    weekday_patterns = compute_weekday_patterns(entries, config)
    distribution = compute_distribution(entries)
    correlations = compute_all_correlations(entries)
    wellness = compute_wellness_score(entries)
    recent_activity = compute_recent_activity(entries, reference)
    personal_bests = compute_personal_bests(entries, config)

    snapshot = AnalyticsSnapshot(
        entries=tuple(entries),
        config=config,
        basic_stats=basic_stats,
        weekly_trend=weekly_trend,
        streaks=streaks,
        time_patterns=time_patterns,
        correlations=correlations,
        recent_activity=recent_activity,
        mood_variance=population_variance([float(score) for score in mood_scores(entries)]),
    )
    insights = generate_insights_from_snapshot(snapshot)

    return MoodAnalytics(
        basic_stats=basic_stats,
        trends=TrendSet(weekly=weekly_trend, recent=recent_trend, overall=None),
        streaks=streaks,
        time_patterns=time_patterns,
        weekday_patterns=weekday_patterns,
        distribution=distribution,
        correlations=correlations,
        wellness=wellness,
        insights=insights,
        recent_activity=recent_activity,
        personal_bests=personal_bests,
    )
