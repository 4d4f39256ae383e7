from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from moodmeter.api.deps import get_analytics_config, request_entries, resolve_config
from moodmeter.core.config import AnalyticsConfig
from moodmeter.schemas.api import (
    AnalyticsConfigOut,
    AnalyticsRequest,
    ChartsResponse,
    DashboardSummary,
    InsightsResponse,
    MoodAnalytics,
)
from moodmeter.services.analytics.charts import (
    build_chart_data,
    build_dashboard_summary,
    build_distribution_chart_data,
)
from moodmeter.services.analytics.insights import generate_insights
from moodmeter.services.analytics.service import compute_comprehensive_analytics

router = APIRouter(prefix='/analytics', tags=['analytics'])


@router.get('/config', response_model=AnalyticsConfigOut)
def get_config(base_config: AnalyticsConfig = Depends(get_analytics_config)) -> AnalyticsConfigOut:
    return AnalyticsConfigOut(
        positive_threshold=base_config.positive_threshold,
        trend_sensitivity=base_config.trend_sensitivity,
        streak_minimum=base_config.streak_minimum,
        time_zone=base_config.time_zone,
    )


@router.post('', response_model=MoodAnalytics)
def post_analytics(
    payload: AnalyticsRequest,
    base_config: AnalyticsConfig = Depends(get_analytics_config),
) -> MoodAnalytics:
    entries = request_entries(payload)
    config = resolve_config(payload.config, base_config)
    return compute_comprehensive_analytics(entries, config)


@router.post('/insights', response_model=InsightsResponse)
def post_insights(
    payload: AnalyticsRequest,
    base_config: AnalyticsConfig = Depends(get_analytics_config),
) -> InsightsResponse:
    entries = request_entries(payload)
    config = resolve_config(payload.config, base_config)
    return InsightsResponse(entry_count=len(entries), insights=generate_insights(entries, config))


@router.post('/dashboard', response_model=DashboardSummary)
def post_dashboard(
    payload: AnalyticsRequest,
    base_config: AnalyticsConfig = Depends(get_analytics_config),
) -> DashboardSummary:
    entries = request_entries(payload)
    config = resolve_config(payload.config, base_config)
    return build_dashboard_summary(entries, config)


@router.post('/charts', response_model=ChartsResponse)
def post_charts(
    payload: AnalyticsRequest,
    time_filter: str = Query(default='all'),
    base_config: AnalyticsConfig = Depends(get_analytics_config),
) -> ChartsResponse:
    entries = request_entries(payload)
    config = resolve_config(payload.config, base_config)
    try:
        points = build_chart_data(entries, time_filter, config)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ChartsResponse(
        time_filter=time_filter.strip().lower(),
        points=points,
        distribution=build_distribution_chart_data(entries),
    )
