from moodmeter.services.analytics.charts import (
    build_chart_data,
    build_dashboard_summary,
    build_distribution_chart_data,
)
from moodmeter.services.analytics.insights import generate_insights
from moodmeter.services.analytics.patterns import (
    compute_distribution,
    compute_time_patterns,
    compute_weekday_patterns,
)
from moodmeter.services.analytics.scoring import (
    compute_all_correlations,
    compute_correlation,
    compute_wellness_score,
)
from moodmeter.services.analytics.service import compute_comprehensive_analytics
from moodmeter.services.analytics.statistics import (
    compute_basic_stats,
    compute_mood_health_score,
    compute_personal_bests,
    compute_recent_activity,
    compute_recent_trend,
    compute_streaks,
    compute_trend,
    compute_weekly_trend,
)

__all__ = [
    'build_chart_data',
    'build_dashboard_summary',
    'build_distribution_chart_data',
    'compute_all_correlations',
    'compute_basic_stats',
    'compute_comprehensive_analytics',
    'compute_correlation',
    'compute_distribution',
    'compute_mood_health_score',
    'compute_personal_bests',
    'compute_recent_activity',
    'compute_recent_trend',
    'compute_streaks',
    'compute_time_patterns',
    'compute_trend',
    'compute_weekday_patterns',
    'compute_weekly_trend',
    'compute_wellness_score',
    'generate_insights',
]
