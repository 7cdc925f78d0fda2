"""
Tests for the window selectors.

Covers strength trends, weekly volume, movement balance, lift history and
the key universe rule: curated label maps are allow-lists, otherwise the
observed keys are shown.
"""

import json
from datetime import date
from pathlib import Path

import pytest

from fitarc_analytics.aggregator import SessionAggregator
from fitarc_analytics.schemas import (
    LiftId,
    RawExercise,
    RawSession,
    RawSet,
    StrengthSnapshot,
    TrackingPreferences,
)
from fitarc_analytics.selectors import (
    StrengthTrendView,
    build_lift_history,
    build_movement_balance_summary,
    build_sparkline,
    build_strength_trends,
    build_weekly_volume_summary,
    get_overall_strength_delta,
)


FIXTURES = Path(__file__).parent / "fixtures"
AS_OF = date(2026, 10, 18)


# Fixtures
@pytest.fixture
def analytics():
    """Aggregate the four-session fixture block."""
    with open(FIXTURES / "sessions.json") as f:
        sessions = [RawSession(**row) for row in json.load(f)]
    return SessionAggregator().aggregate(sessions)


@pytest.fixture
def preferences():
    """Curated muscles and lifts, no movement preferences."""
    return TrackingPreferences(
        muscles={"chest": "Chest", "back": "Back", "legs": "Legs", "shoulders": "Shoulders"},
        lifts={"squat": "Back Squat", "bench_press": "Bench Press", "deadlift": "Deadlift"},
    )


def make_snapshot(weight, day, lift=LiftId.SQUAT, index=0):
    return StrengthSnapshot(
        id=f"snap-{index}",
        plan_id="plan",
        lift=lift,
        date=day,
        weight=weight,
        reps=5,
        total_sets=3,
        total_reps=15,
        estimated_1rm=0,
    )


# Sparkline

def test_sparkline_rising_series():
    """Test bucketing of a steadily rising series."""
    assert build_sparkline([185, 195, 205, 215]) == "▁▃▆█"


def test_sparkline_flat_and_short_series():
    """Test that flat or single-value series render at the lowest level."""
    assert build_sparkline([100, 100, 100]) == "▁▁▁"
    assert build_sparkline([100]) == "▁"
    assert build_sparkline([]) == ""


def test_sparkline_length_matches_input():
    """Test one glyph per value."""
    values = [3, 1, 4, 1, 5, 9, 2, 6]
    line = build_sparkline(values)

    assert len(line) == len(values)
    assert line[values.index(9)] == "█"
    assert line[values.index(1)] == "▁"


# Strength trends

def test_strength_trend_deltas(analytics):
    """Test squat delta in pounds and rounded percent."""
    trends = build_strength_trends(analytics.strength_snapshots)
    squat = next(t for t in trends if t.key == "squat")

    assert squat.weights == [185, 195, 205, 215]
    assert squat.delta_lbs == 30
    assert squat.delta_percent == 16
    assert squat.sparkline == "▁▃▆█"
    assert squat.lift == "squat"


def test_single_snapshot_has_zero_delta(analytics):
    """Test that one data point yields no change."""
    trends = build_strength_trends(analytics.strength_snapshots)
    deadlift = next(t for t in trends if t.key == "deadlift")

    assert deadlift.weights == [155]
    assert deadlift.delta_lbs == 0
    assert deadlift.delta_percent == 0


def test_observed_lifts_without_preferences(analytics):
    """Test that every observed lift is shown when nothing is curated."""
    trends = build_strength_trends(analytics.strength_snapshots)

    assert [t.key for t in trends] == ["squat", "deadlift", "bench_press"]


def test_trend_uses_last_points_only():
    """Test that only the most recent snapshots feed the trend."""
    snapshots = [
        make_snapshot(100 + 10 * i, date(2026, 9, 1 + i), index=i) for i in range(7)
    ]

    trend = build_strength_trends(snapshots, points=5)[0]

    assert trend.weights == [120, 130, 140, 150, 160]
    assert trend.delta_lbs == 40
    assert trend.delta_percent == 33


def test_zero_points_is_respected(analytics):
    """Test that an explicit zero is not replaced by the configured default."""
    trends = build_strength_trends(analytics.strength_snapshots, points=0)

    assert [t.key for t in trends] == ["squat", "deadlift", "bench_press"]
    assert all(t.weights == [] and t.delta_percent == 0 for t in trends)

    view = build_lift_history(analytics.strength_snapshots, LiftId.SQUAT, points=0)
    assert view.title == "squat - 0 Week History"
    assert view.rep_history == []
    assert view.start_weight == view.end_weight == 0


def test_zero_window_counts_nothing(analytics):
    """Test that a zero-day window is empty rather than the default window."""
    volume = build_weekly_volume_summary(analytics.workout_logs, as_of=date(2026, 10, 16), window_days=0)
    balance = build_movement_balance_summary(
        analytics.workout_logs, as_of=date(2026, 10, 16), window_days=0
    )

    assert all(v.sets == 0 for v in volume)
    assert all(m.sessions == 0 for m in balance)


def test_trend_orders_snapshots_by_date():
    """Test that snapshots given out of order are charted oldest first."""
    snapshots = [
        make_snapshot(150, date(2026, 10, 3), index=0),
        make_snapshot(100, date(2026, 10, 1), index=1),
        make_snapshot(125, date(2026, 10, 2), index=2),
    ]

    trend = build_strength_trends(snapshots)[0]

    assert trend.weights == [100, 125, 150]


def test_curated_lifts_are_labeled_and_zero_filled(analytics):
    """Test that curated lifts restrict, label and zero-fill the trends."""
    prefs = TrackingPreferences(lifts={"squat": "Back Squat", "overhead_press": "OHP"})

    trends = build_strength_trends(analytics.strength_snapshots, prefs)

    assert [t.key for t in trends] == ["squat", "overhead_press"]
    assert trends[0].lift == "Back Squat"
    assert trends[1].lift == "OHP"
    assert trends[1].weights == []
    assert trends[1].delta_percent == 0
    assert trends[1].sparkline == ""


def test_empty_lift_map_falls_back_to_observed(analytics):
    """Test that an empty map behaves like no map."""
    trends = build_strength_trends(analytics.strength_snapshots, TrackingPreferences(lifts={}))

    assert len(trends) == 3


# Weekly volume

def test_weekly_volume_observed_groups(analytics):
    """Test sets per group over the default window, highest first."""
    volume = build_weekly_volume_summary(analytics.workout_logs, as_of=AS_OF, window_days=28)

    assert [(v.key, v.sets) for v in volume] == [
        ("legs", 13),
        ("arms", 9),
        ("back", 6),
        ("chest", 3),
        ("shoulders", 3),
        ("core", 3),
    ]


def test_weekly_volume_window_excludes_old_sessions(analytics):
    """Test that sessions outside the window are not counted."""
    volume = build_weekly_volume_summary(analytics.workout_logs, as_of=AS_OF, window_days=14)
    totals = {v.key: v.sets for v in volume}

    assert totals["legs"] == 8
    assert totals["arms"] == 9
    assert volume[0].key == "arms"


def test_weekly_volume_window_bounds(analytics):
    """Test that the window includes as_of and excludes later sessions."""
    same_day = build_weekly_volume_summary(
        analytics.workout_logs, as_of=date(2026, 10, 16), window_days=1
    )
    assert {v.key: v.sets for v in same_day}["core"] == 3

    before_last = build_weekly_volume_summary(
        analytics.workout_logs, as_of=date(2026, 10, 15), window_days=28
    )
    totals = {v.key: v.sets for v in before_last}
    assert totals["legs"] == 10
    assert totals["core"] == 0


def test_weekly_volume_curated_groups(analytics, preferences):
    """Test that curated groups restrict and label the summary."""
    volume = build_weekly_volume_summary(
        analytics.workout_logs, preferences, as_of=AS_OF, window_days=28
    )

    assert [(v.group, v.sets) for v in volume] == [
        ("Legs", 13),
        ("Back", 6),
        ("Chest", 3),
        ("Shoulders", 3),
    ]


def test_weekly_volume_zero_fills_curated_groups(analytics):
    """Test that curated groups with no recent sets still appear."""
    prefs = TrackingPreferences(muscles={"chest": "Chest", "core": "Core"})

    volume = build_weekly_volume_summary(
        analytics.workout_logs, prefs, as_of=date(2026, 12, 31), window_days=28
    )

    assert [(v.key, v.sets) for v in volume] == [("chest", 0), ("core", 0)]


def test_key_universe_is_the_observed_groups():
    """Test that only groups trained in some session appear."""
    sessions = [
        RawSession(
            id="a",
            date=date(2026, 10, 10),
            plan_id="p",
            exercises=[
                RawExercise(name="Bench Press", body_parts=["chest"], sets=[RawSet(weight=100, reps=5)]),
                RawExercise(name="Goblet Squat", body_parts=["quads"], sets=[RawSet(weight=50, reps=10)]),
            ],
        )
    ]
    logs = SessionAggregator().aggregate(sessions).workout_logs

    volume = build_weekly_volume_summary(logs, as_of=AS_OF, window_days=28)

    assert {v.key for v in volume} == {"chest", "legs"}


# Movement balance

def test_movement_balance_observed_patterns(analytics):
    """Test sets per movement pattern over the default window."""
    balance = build_movement_balance_summary(analytics.workout_logs, as_of=AS_OF, window_days=30)

    assert [(m.key, m.sessions) for m in balance] == [
        ("squat", 11),
        ("horizontal_push", 3),
        ("horizontal_pull", 3),
        ("vertical_push", 3),
        ("vertical_pull", 3),
        ("hinge", 2),
    ]
    assert balance[0].name == "squat"


def test_movement_balance_curated_patterns(analytics):
    """Test that curated movement labels restrict and zero-fill."""
    prefs = TrackingPreferences(movements={"hinge": "Hinge", "carry": "Loaded Carry"})

    balance = build_movement_balance_summary(
        analytics.workout_logs, prefs, as_of=AS_OF, window_days=30
    )

    assert [(m.name, m.sessions) for m in balance] == [("Hinge", 2), ("Loaded Carry", 0)]


def test_selectors_handle_empty_input():
    """Test that empty input produces empty summaries without raising."""
    assert build_weekly_volume_summary([], as_of=AS_OF) == []
    assert build_movement_balance_summary([], as_of=AS_OF) == []
    assert build_strength_trends([]) == []


# Lift history

def test_lift_history_for_squat(analytics, preferences):
    """Test the long-form squat history card."""
    view = build_lift_history(analytics.strength_snapshots, LiftId.SQUAT, preferences, points=12)

    assert view.key == "squat"
    assert view.title == "Back Squat - 12 Week History"
    assert view.start_weight == 185
    assert view.end_weight == 215
    assert view.sparkline == "▁▃▆█"
    assert view.insight == "You've added 30 lbs recently. Consider adding 5 lbs next week."
    assert [entry.index for entry in view.rep_history] == [1, 2, 3, 4]
    assert [entry.total_reps for entry in view.rep_history] == [15, 15, 9, 13]
    assert view.rep_history[0].performed_on == date(2026, 9, 28)


def test_lift_history_limits_rep_rows(analytics):
    """Test that rep history shows the most recent rows with their positions."""
    view = build_lift_history(analytics.strength_snapshots, LiftId.SQUAT, points=12, rep_points=2)

    assert [entry.index for entry in view.rep_history] == [3, 4]
    assert [entry.total_sets for entry in view.rep_history] == [2, 3]
    assert view.title == "squat - 12 Week History"


def test_lift_history_without_progress(analytics):
    """Test the consistency message when the lift has not progressed."""
    view = build_lift_history(analytics.strength_snapshots, LiftId.DEADLIFT, points=12)

    assert view.start_weight == view.end_weight == 155
    assert view.insight == "Keep building consistency to unlock more progress."


def test_lift_history_without_data():
    """Test an empty card for a lift never performed."""
    view = build_lift_history([], LiftId.BENCH_PRESS, points=8, rep_points=4)

    assert view.sparkline == ""
    assert view.start_weight == 0
    assert view.end_weight == 0
    assert view.rep_history == []
    assert view.title == "bench_press - 8 Week History"


# Overall delta

def _trend(percent):
    return StrengthTrendView(key="k", lift="k", delta_percent=percent)


def test_overall_delta_is_rounded_mean():
    """Test averaging of trend percents."""
    assert get_overall_strength_delta([_trend(16), _trend(0), _trend(-5)]) == 4
    assert get_overall_strength_delta([_trend(1), _trend(2)]) == 2
    assert get_overall_strength_delta([_trend(-1), _trend(-2)]) == -1


def test_overall_delta_for_fixture_block(analytics):
    """Test the overall delta over squat, deadlift and bench."""
    trends = build_strength_trends(analytics.strength_snapshots)

    assert get_overall_strength_delta(trends) == 5


def test_overall_delta_without_trends():
    """Test that no trends means no change."""
    assert get_overall_strength_delta([]) == 0
