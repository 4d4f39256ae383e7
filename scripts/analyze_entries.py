from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
BACKEND_ROOT = ROOT / 'backend'
sys.path.insert(0, str(BACKEND_ROOT))

from moodmeter.core.config import get_settings
from moodmeter.core.logging import configure_logging
from moodmeter.schemas.mood import MoodEntry
from moodmeter.services.analytics.service import compute_comprehensive_analytics


def load_entries(path: Path) -> list[MoodEntry]:
    raw = json.loads(path.read_text(encoding='utf-8'))
    if isinstance(raw, dict):
        raw = raw.get('entries', [])
    return [MoodEntry.model_validate(item) for item in raw]


def main(entries_path: str, section: str | None = None) -> None:
    configure_logging()
    entries = load_entries(Path(entries_path))
    analytics = compute_comprehensive_analytics(entries, get_settings().analytics_config)
    report = analytics.model_dump(mode='json')
    if section:
        if section not in report:
            raise SystemExit(f'Section must be one of: {sorted(report)}')
        report = report[section]
    print(json.dumps(report, indent=2))


if __name__ == '__main__':
    if len(sys.argv) < 2:
        raise SystemExit('Usage: analyze_entries.py <entries.json> [section]')
    section_arg = sys.argv[2] if len(sys.argv) > 2 else None
    main(sys.argv[1], section_arg)
