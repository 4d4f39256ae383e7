from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from moodmeter.schemas.common import InsightType
from moodmeter.services.analytics.insights import (
    INSIGHT_RULES,
    MAX_INSIGHTS,
    InsightRule,
    build_snapshot,
    generate_insights,
)

NOW = datetime(2026, 2, 11, 12, 0, tzinfo=timezone.utc)


def _rule(name: str) -> InsightRule:
    return next(rule for rule in INSIGHT_RULES if rule.name == name)


def _days_ago(days: float, hour: int = 12) -> datetime:
    return (NOW - timedelta(days=days)).replace(hour=hour)


@pytest.mark.parametrize('count', [0, 1, 2])
def test_few_entries_return_single_keep_tracking_insight(make_entry, count: int) -> None:
    insights = generate_insights([make_entry(9) for _ in range(count)], now=NOW)

    assert len(insights) == 1
    assert insights[0].title == 'Keep tracking to unlock insights'
    assert insights[0].type == InsightType.info
    assert insights[0].priority == 1


def test_declining_week_is_sorted_by_priority_and_capped(make_entry) -> None:
    entries = [
        make_entry(3, at=_days_ago(1)),
        make_entry(3, at=_days_ago(2)),
        make_entry(3, at=_days_ago(3)),
        make_entry(8, at=_days_ago(8)),
        make_entry(8, at=_days_ago(9)),
        make_entry(8, at=_days_ago(10)),
    ]

    insights = generate_insights(entries, now=NOW)

    assert len(insights) == MAX_INSIGHTS
    assert [insight.priority for insight in insights] == [1, 1, 3, 4]
    assert [insight.title for insight in insights] == [
        'Mood decline detected',
        'Challenging period detected',
        'Mood fluctuations detected',
        "You're happiest in the afternoon",
    ]
    assert insights[0].description == 'Your mood has decreased by 5.0 points this week.'
    assert insights[1].description == "You've had 3 consecutive days of lower mood."


def test_insights_are_deterministic(make_entry) -> None:
    entries = [make_entry(score, at=_days_ago(idx, hour=8 + idx)) for idx, score in enumerate([7, 6, 9, 4, 8, 5])]

    first = generate_insights(entries, now=NOW)
    second = generate_insights(entries, now=NOW)

    assert first == second
    assert len(first) <= MAX_INSIGHTS
    assert [insight.priority for insight in first] == sorted(insight.priority for insight in first)


def test_weekly_trend_up_rule(make_entry) -> None:
    entries = [
        make_entry(9, at=_days_ago(1)),
        make_entry(8, at=_days_ago(2)),
        make_entry(5, at=_days_ago(9)),
        make_entry(6, at=_days_ago(10)),
    ]
    snapshot = build_snapshot(entries, now=NOW)

    assert _rule('weekly_trend_up').applies(snapshot)
    assert not _rule('weekly_trend_down').applies(snapshot)
    insight = _rule('weekly_trend_up').build(snapshot)
    assert insight.type == InsightType.positive
    assert insight.description == 'Your mood has improved by 3.0 points over the past week.'


def test_sleep_rule_needs_five_reports_and_a_gap(make_entry) -> None:
    rows = [(8, 8), (7, 7.5), (8, 9), (4, 5), (3, 5.5), (6, 6.5)]
    entries = [make_entry(mood, sleep=sleep, at=_days_ago(idx + 30)) for idx, (mood, sleep) in enumerate(rows)]

    snapshot = build_snapshot(entries, now=NOW)
    assert _rule('sleep_effect').applies(snapshot)
    insight = _rule('sleep_effect').build(snapshot)
    assert insight.type == InsightType.positive
    assert insight.priority == 2
    assert insight.description == 'Your mood is 4.2 points higher when you get 7+ hours of sleep.'

    assert not _rule('sleep_effect').applies(build_snapshot(entries[:4], now=NOW))


def test_sleep_rule_skips_when_a_group_is_empty(make_entry) -> None:
    entries = [make_entry(mood, sleep=8, at=_days_ago(idx + 30)) for idx, mood in enumerate([8, 7, 6, 9, 5])]

    assert not _rule('sleep_effect').applies(build_snapshot(entries, now=NOW))


def test_stress_rule(make_entry) -> None:
    rows = [(8, 2), (7, 3), (3, 8), (4, 7), (6, 5)]
    entries = [make_entry(mood, stress=stress, at=_days_ago(idx + 30)) for idx, (mood, stress) in enumerate(rows)]

    snapshot = build_snapshot(entries, now=NOW)

    assert _rule('stress_effect').applies(snapshot)
    insight = _rule('stress_effect').build(snapshot)
    assert insight.type == InsightType.warning
    assert insight.priority == 1
    assert insight.description == 'Your mood drops by 4.0 points during high-stress periods.'


def test_stress_rule_needs_five_reports_and_both_groups(make_entry) -> None:
    rows = [(8, 2), (7, 3), (3, 8), (4, 7)]
    four = [make_entry(mood, stress=stress, at=_days_ago(idx + 30)) for idx, (mood, stress) in enumerate(rows)]
    assert not _rule('stress_effect').applies(build_snapshot(four, now=NOW))

    calm = [make_entry(mood, stress=2, at=_days_ago(idx + 30)) for idx, mood in enumerate([8, 7, 3, 4, 6])]
    assert not _rule('stress_effect').applies(build_snapshot(calm, now=NOW))


def test_energy_rule_uses_correlation(make_entry) -> None:
    rows = [(2, 1), (4, 3), (6, 5), (8, 7), (10, 9)]
    entries = [make_entry(mood, energy=energy, at=_days_ago(idx + 30)) for idx, (mood, energy) in enumerate(rows)]

    snapshot = build_snapshot(entries, now=NOW)

    assert _rule('energy_correlation').applies(snapshot)
    insight = _rule('energy_correlation').build(snapshot)
    assert insight.priority == 3
    assert '(100% correlation)' in insight.description

    assert not _rule('energy_correlation').applies(build_snapshot(entries[:4], now=NOW))


def test_best_time_rule_needs_clear_margin(make_entry) -> None:
    clear = [
        make_entry(9, at=_days_ago(30, hour=8)),
        make_entry(9, at=_days_ago(31, hour=9)),
        make_entry(8, at=_days_ago(32, hour=14)),
    ]
    snapshot = build_snapshot(clear, now=NOW)
    assert _rule('best_time_of_day').applies(snapshot)
    insight = _rule('best_time_of_day').build(snapshot)
    assert insight.title == "You're happiest in the morning"
    assert insight.description == 'Your morning mood average (9.0) is significantly higher than other times.'

    close = clear + [make_entry(9, at=_days_ago(33, hour=15))]
    assert not _rule('best_time_of_day').applies(build_snapshot(close, now=NOW))


def test_streak_rules(make_entry) -> None:
    positive = [make_entry(mood, at=NOW - timedelta(hours=idx)) for idx, mood in enumerate([7, 8, 6, 2])]
    snapshot = build_snapshot(positive, now=NOW)

    assert _rule('positive_streak').applies(snapshot)
    assert not _rule('negative_streak').applies(snapshot)
    assert _rule('positive_streak').build(snapshot).title == '3-day positive streak!'

    short = [make_entry(mood, at=NOW - timedelta(hours=idx)) for idx, mood in enumerate([2, 3, 8, 8])]
    assert not _rule('negative_streak').applies(build_snapshot(short, now=NOW))


def test_variance_rules(make_entry) -> None:
    stable = build_snapshot([make_entry(score) for score in [6, 7, 6, 7]], now=NOW)
    volatile = build_snapshot([make_entry(score) for score in [1, 10, 2, 9]], now=NOW)
    middling = build_snapshot([make_entry(score) for score in [4, 6, 8, 5]], now=NOW)

    assert _rule('stable_mood').applies(stable)
    assert not _rule('mood_fluctuation').applies(stable)
    assert _rule('mood_fluctuation').applies(volatile)
    assert not _rule('stable_mood').applies(volatile)
    assert not _rule('stable_mood').applies(middling)
    assert not _rule('mood_fluctuation').applies(middling)


def test_recent_improvement_rule(make_entry) -> None:
    entries = [
        make_entry(9, at=_days_ago(1)),
        make_entry(9, at=_days_ago(2)),
        make_entry(3, at=_days_ago(30)),
        make_entry(3, at=_days_ago(31)),
        make_entry(3, at=_days_ago(32)),
    ]
    snapshot = build_snapshot(entries, now=NOW)

    assert _rule('recent_improvement').applies(snapshot)
    insight = _rule('recent_improvement').build(snapshot)
    assert insight.description == 'Your recent mood average (9.0) is higher than your overall average (5.4).'


def test_recent_improvement_needs_more_than_one_point(make_entry) -> None:
    at_gap = [
        make_entry(9, at=_days_ago(1)),
        make_entry(9, at=_days_ago(2)),
        make_entry(7, at=_days_ago(30)),
        make_entry(7, at=_days_ago(31)),
    ]
    snapshot = build_snapshot(at_gap, now=NOW)
    assert snapshot.recent_activity.recent_average == 9.0
    assert snapshot.basic_stats.average == 8.0
    assert not _rule('recent_improvement').applies(snapshot)

    nothing_recent = [make_entry(mood, at=_days_ago(idx + 30)) for idx, mood in enumerate([3, 3, 3])]
    assert not _rule('recent_improvement').applies(build_snapshot(nothing_recent, now=NOW))
