from datetime import timedelta
from types import SimpleNamespace

import pytest

from app.services.errors import UserNotFound
from app.services.report import (
    compute_resilience,
    compute_vow_evolution,
    count_comebacks,
    generate_day21_report,
    is_persistence_mention,
)

from activity_helpers import NOW, TODAY, add_checkins, add_evidences, add_user, add_vow, days_back


def test_comebacks_count_gaps_of_two_days_or_more():
    # 10 -> 8 is a 2-day gap, 8 -> 3 a 5-day gap, the rest are daily
    assert count_comebacks(days_back(10, 8, 3, 2, 1)) == 2


def test_no_comebacks_for_daily_checkins():
    assert count_comebacks(days_back(3, 2, 1, 0)) == 0
    assert count_comebacks([]) == 0


def test_duplicate_days_are_not_gaps():
    assert count_comebacks(days_back(0, 0, 1)) == 0


@pytest.mark.parametrize(
    "text,expected",
    [
        ("今日は辛いけど頑張る", True),
        ("きつい一日だった", False),
        ("頑張った", False),
        ("", False),
        (None, False),
    ],
)
def test_persistence_needs_struggle_and_effort(text, expected):
    assert is_persistence_mention(text) is expected


def test_resilience_breakdown():
    rows = [
        SimpleNamespace(date=TODAY - timedelta(days=5), if_then_triggered=True, transcript=None),
        SimpleNamespace(date=TODAY - timedelta(days=2), if_then_triggered=False, transcript="大変だけど続ける"),
        SimpleNamespace(date=TODAY, if_then_triggered=True, transcript="順調"),
    ]
    breakdown = compute_resilience(rows)
    assert breakdown.if_then_executions == 2
    assert breakdown.comebacks == 2
    assert breakdown.persistence_in_checkins == 1


def _vow(content, version):
    return SimpleNamespace(content=content, version=version, created_at=None)


def test_vow_evolution_without_vows():
    evolution = compute_vow_evolution([])
    assert evolution.v1 is None
    assert evolution.v2 is None
    assert not evolution.has_evolved


def test_single_vow_has_not_evolved():
    evolution = compute_vow_evolution([_vow("Read daily", 1)])
    assert evolution.v1.content == "Read daily"
    assert evolution.v2 is None
    assert not evolution.has_evolved


def test_vow_evolution_compares_first_and_latest():
    evolution = compute_vow_evolution([_vow("Read daily", 1), _vow("x", 2), _vow("Read 20 pages daily", 3)])
    assert evolution.v1.version == 1
    assert evolution.v2.version == 3
    assert evolution.has_evolved


async def test_day21_report(db):
    await add_user(db, "u1", trial_days_ago=20)
    days = days_back(*range(10)) + days_back(14, 15, 16)
    await add_checkins(
        db,
        "u1",
        days,
        if_then_days=tuple(days_back(1, 15)),
        transcripts={TODAY: "きついけど負けない"},
    )
    await add_evidences(db, "u1", days_back(0, 4, 9, 15))
    await add_vow(db, "u1", "Exercise", version=1, is_current=False)
    await add_vow(db, "u1", "Walk 30 minutes after lunch", version=2)

    report = await generate_day21_report(db, "u1", NOW)

    assert report.summary.metrics.checkin_count == 13
    assert report.resilience_breakdown.if_then_executions == 2
    assert report.resilience_breakdown.comebacks == 1
    assert report.resilience_breakdown.persistence_in_checkins == 1
    assert report.resilience_count == 4
    assert report.vow_evolution.has_evolved
    assert report.vow_evolution.v2.content == "Walk 30 minutes after lunch"
    assert [e.date for e in report.evidence_highlights] == days_back(0, 4, 9)


async def test_day21_report_unknown_user(db):
    with pytest.raises(UserNotFound):
        await generate_day21_report(db, "nobody", NOW)
