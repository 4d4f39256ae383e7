from __future__ import annotations

from datetime import datetime, timezone
import itertools
from pathlib import Path
import sys
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[2]
BACKEND = ROOT / 'backend'
sys.path.insert(0, str(BACKEND))

from moodmeter.core.config import get_settings

get_settings.cache_clear()

from moodmeter.schemas.mood import MoodEntry

# Wednesday, so Sunday-based weeks start on 2026-02-08.
NOW = datetime(2026, 2, 11, 12, 0, tzinfo=timezone.utc)

_ids = itertools.count(1)


@pytest.fixture
def make_entry() -> Callable[..., MoodEntry]:
    def _make(
        mood: int,
        *,
        at: datetime = NOW,
        energy: int | None = None,
        stress: int | None = None,
        sleep: float | None = None,
    ) -> MoodEntry:
        return MoodEntry(
            id=f'entry-{next(_ids)}',
            mood_score=mood,
            energy_level=energy,
            stress_level=stress,
            sleep_hours=sleep,
            created_at=at,
        )

    return _make
