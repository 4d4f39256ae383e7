"""Mood entry schema: the shape entries take when they reach the analytics core."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from moodmeter.utils.timezone import ensure_aware


class MoodEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    mood_score: int = Field(ge=1, le=10, description='Mood 1-10')
    energy_level: int | None = Field(default=None, ge=1, le=10)
    stress_level: int | None = Field(default=None, ge=1, le=10)
    sleep_hours: float | None = Field(default=None, ge=0, le=24)
    created_at: datetime

    sender: str | None = Field(default=None, alias='from')
    from_name: str | None = None
    email_entry_id: str | None = None
    note: str | None = None
    activity: str | None = None
    weather: str | None = None
    original_text: str | None = None
    subject: str | None = None

    @field_validator('id', mode='before')
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator('created_at')
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return ensure_aware(value)
