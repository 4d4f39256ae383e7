from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import HTTPException

from moodmeter.core.config import AnalyticsConfig, get_settings
from moodmeter.schemas.api import AnalyticsConfigIn, AnalyticsRequest
from moodmeter.schemas.mood import MoodEntry


def get_analytics_config() -> AnalyticsConfig:
    return get_settings().analytics_config


def resolve_config(overrides: AnalyticsConfigIn | None, base: AnalyticsConfig) -> AnalyticsConfig:
    config = base
    if overrides is not None:
        config = base.with_overrides(**overrides.model_dump(exclude_none=True))
    # The base zone comes from settings and is checked here too.
    if config.time_zone:
        try:
            ZoneInfo(config.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=f'Unknown time zone {config.time_zone}') from exc
    return config


def request_entries(payload: AnalyticsRequest) -> list[MoodEntry]:
    limit = get_settings().max_entries_per_request
    if len(payload.entries) > limit:
        raise HTTPException(status_code=413, detail=f'At most {limit} entries per request')
    return payload.entries
