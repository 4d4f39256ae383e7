from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[3]


@dataclass(frozen=True, slots=True)
class AnalyticsConfig:
    """Thresholds shared by every analytics entry point.

    Instances are immutable, so two analyses with different thresholds can run
    side by side without interfering.
    """

    positive_threshold: float = 6
    trend_sensitivity: float = 0.5
    # Part of the config contract; no computation reads it yet.
    streak_minimum: int = 3
    # IANA zone name used for time-of-day and weekday bucketing. None keeps
    # each timestamp's own offset.
    time_zone: str | None = None

    def with_overrides(self, **overrides: object) -> AnalyticsConfig:
        """Return a copy with the given values replaced.

        None leaves a value unchanged. A blank time_zone ('') resets it to
        None, so bucketing falls back to each timestamp's own offset.
        """
        values = {
            'positive_threshold': self.positive_threshold,
            'trend_sensitivity': self.trend_sensitivity,
            'streak_minimum': self.streak_minimum,
            'time_zone': self.time_zone,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        if isinstance(values['time_zone'], str):
            values['time_zone'] = values['time_zone'].strip() or None
        return AnalyticsConfig(**values)  # type: ignore[arg-type]


DEFAULT_ANALYTICS_CONFIG = AnalyticsConfig()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(REPO_ROOT / '.env'), env_file_encoding='utf-8', extra='ignore')

    app_name: str = 'MoodMeter'
    log_level: str = Field(default='INFO', validation_alias='LOG_LEVEL')

    analytics_positive_threshold: float = 6
    analytics_trend_sensitivity: float = 0.5
    analytics_streak_minimum: int = 3
    analytics_time_zone: str = ''

    max_entries_per_request: int = 10000

    frontend_origin: str = 'http://localhost:3000'
    frontend_origins_csv: str = 'http://localhost:3000,http://127.0.0.1:3000'

    @property
    def analytics_config(self) -> AnalyticsConfig:
        return AnalyticsConfig(
            positive_threshold=self.analytics_positive_threshold,
            trend_sensitivity=self.analytics_trend_sensitivity,
            streak_minimum=self.analytics_streak_minimum,
            time_zone=self.analytics_time_zone.strip() or None,
        )

    @property
    def frontend_origins(self) -> list[str]:
        raw = [s.strip() for s in self.frontend_origins_csv.split(',') if s.strip()]
        if self.frontend_origin and self.frontend_origin not in raw:
            raw.append(self.frontend_origin)
        seen: set[str] = set()
        out: list[str] = []
        for origin in raw:
            if origin in seen:
                continue
            seen.add(origin)
            out.append(origin)
        return out


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
