"""
Window selectors: display-ready summaries over accumulated records.

Each selector restricts workout logs or strength snapshots to a recent
window, aggregates them per key and labels the result using the user's
tracking preferences.

Key universe rule shared by every selector:
- A non-empty label map for the category is an explicit allow-list. Output
  keys are exactly that map's keys, zero-filled when no data matches.
- Otherwise the keys actually observed in the data are used.

No selector raises on empty or sparse input.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from loguru import logger
from pydantic import BaseModel, Field

from fitarc_analytics.aggregator import round_half_up
from fitarc_analytics.schemas import (
    LiftId,
    StrengthSnapshot,
    TrackingCategory,
    TrackingPreferences,
    WorkoutLog,
)
from fitarc_analytics.settings import settings


SPARKLINE_GLYPHS = "▁▃▄▆█"


# ============================================================================
# View models
# ============================================================================


class StrengthTrendView(BaseModel):
    """Recent weight trend for one lift."""

    key: str = Field(..., description="Lift key")
    lift: str = Field(..., description="Display label")
    weights: List[float] = Field(default_factory=list, description="Oldest first")
    delta_lbs: float = 0.0
    delta_percent: int = 0
    sparkline: str = ""


class VolumeEntryView(BaseModel):
    """Sets per muscle group over the volume window."""

    key: str
    group: str
    sets: int


class MovementPatternView(BaseModel):
    """Sets per movement pattern over the movement window."""

    key: str
    name: str
    sessions: int


class RepHistoryEntry(BaseModel):
    """One row of a lift's recent rep history."""

    index: int = Field(..., description="1-based position within the lift history")
    performed_on: date
    reps: int
    total_sets: int
    total_reps: int


class LiftHistoryView(BaseModel):
    """Longer single-lift history card."""

    key: str
    title: str
    sparkline: str
    start_weight: float
    end_weight: float
    rep_history: List[RepHistoryEntry] = Field(default_factory=list)
    insight: str


# ============================================================================
# Helpers
# ============================================================================


def today_in_zone() -> date:
    return datetime.now(ZoneInfo(settings.time_zone)).date()


def _labels(
    preferences: Optional[TrackingPreferences], category: TrackingCategory
) -> Dict[str, str]:
    if preferences is None:
        return {}
    return preferences.labels_for(category) or {}


def _allowed_keys(labels: Dict[str, str], observed: Iterable[str]) -> List[str]:
    base = list(labels) if labels else list(observed)
    return list(dict.fromkeys(base))


def _in_window(log: WorkoutLog, as_of: date, window_days: int) -> bool:
    return as_of - timedelta(days=window_days) < log.date <= as_of


def build_sparkline(values: Sequence[float]) -> str:
    """
    Render a series as a five-level glyph string.

    Each value is bucketed between the series min and max; a flat or
    single-value series uses a range of 1 and renders at the lowest level.
    """
    if not values:
        return ""
    low = min(values)
    span = (max(values) - low) or 1
    levels = len(SPARKLINE_GLYPHS)
    glyphs = []
    for value in values:
        bucket = int((value - low) / span * levels)
        glyphs.append(SPARKLINE_GLYPHS[max(0, min(levels - 1, bucket))])
    return "".join(glyphs)


def _most_recent(history: List[StrengthSnapshot], count: int) -> List[StrengthSnapshot]:
    return history[-count:] if count > 0 else []


def _group_by_lift(snapshots: Iterable[StrengthSnapshot]) -> Dict[str, List[StrengthSnapshot]]:
    grouped: Dict[str, List[StrengthSnapshot]] = defaultdict(list)
    for snapshot in snapshots:
        grouped[snapshot.lift.value].append(snapshot)
    # Stable sort keeps same-day snapshots in logged order.
    return {lift: sorted(history, key=lambda s: s.date) for lift, history in grouped.items()}


# ============================================================================
# Selectors
# ============================================================================


def build_strength_trends(
    snapshots: Sequence[StrengthSnapshot],
    preferences: Optional[TrackingPreferences] = None,
    points: Optional[int] = None,
) -> List[StrengthTrendView]:
    """
    Build per-lift strength trends from the most recent snapshots.

    Args:
        snapshots: Accumulated strength snapshots
        preferences: Tracking preferences; the ``lifts`` map selects and labels lifts
        points: Snapshots per lift (defaults to settings.trend_points)

    Returns:
        One StrengthTrendView per lift in the key universe. Lifts with no
        snapshots have empty weights and zero deltas.
    """
    points = settings.trend_points if points is None else points
    labels = _labels(preferences, TrackingCategory.LIFTS)
    grouped = _group_by_lift(snapshots)

    trends = []
    for key in _allowed_keys(labels, grouped):
        weights = [s.weight for s in _most_recent(grouped.get(key, []), points)]
        delta = weights[-1] - weights[0] if len(weights) > 1 else 0.0
        percent = round_half_up(delta / max(weights[0], 1) * 100) if len(weights) > 1 else 0
        trends.append(
            StrengthTrendView(
                key=key,
                lift=labels.get(key, key),
                weights=weights,
                delta_lbs=delta,
                delta_percent=percent,
                sparkline=build_sparkline(weights),
            )
        )

    logger.debug(f"Built {len(trends)} strength trends from {len(snapshots)} snapshots")
    return trends


def build_weekly_volume_summary(
    workout_logs: Sequence[WorkoutLog],
    preferences: Optional[TrackingPreferences] = None,
    as_of: Optional[date] = None,
    window_days: Optional[int] = None,
) -> List[VolumeEntryView]:
    """
    Sum sets per muscle group over the recent window, highest first.

    Args:
        workout_logs: Accumulated workout logs
        preferences: Tracking preferences; the ``muscles`` map selects and labels groups
        as_of: Last day of the window (defaults to today)
        window_days: Window length (defaults to settings.volume_window_days)

    Returns:
        One VolumeEntryView per key in the key universe, sorted by sets descending
    """
    as_of = as_of or today_in_zone()
    window_days = settings.volume_window_days if window_days is None else window_days
    labels = _labels(preferences, TrackingCategory.MUSCLES)
    observed = (group.value for log in workout_logs for group in log.muscles_hit)
    totals = {key: 0 for key in _allowed_keys(labels, observed)}

    for log in workout_logs:
        if not _in_window(log, as_of, window_days):
            continue
        for group, sets in log.muscle_volume.items():
            if group.value in totals:
                totals[group.value] += sets

    entries = [
        VolumeEntryView(key=key, group=labels.get(key, key), sets=sets)
        for key, sets in totals.items()
    ]
    return sorted(entries, key=lambda entry: entry.sets, reverse=True)


def build_movement_balance_summary(
    workout_logs: Sequence[WorkoutLog],
    preferences: Optional[TrackingPreferences] = None,
    as_of: Optional[date] = None,
    window_days: Optional[int] = None,
) -> List[MovementPatternView]:
    """
    Sum sets per movement pattern over the recent window, highest first.

    Same rules as build_weekly_volume_summary with the ``movements`` map and
    settings.movement_window_days.
    """
    as_of = as_of or today_in_zone()
    window_days = settings.movement_window_days if window_days is None else window_days
    labels = _labels(preferences, TrackingCategory.MOVEMENTS)
    observed = (pattern.value for log in workout_logs for pattern in log.movement_patterns_hit)
    totals = {key: 0 for key in _allowed_keys(labels, observed)}

    for log in workout_logs:
        if not _in_window(log, as_of, window_days):
            continue
        for pattern, sets in log.movement_volume.items():
            if pattern.value in totals:
                totals[pattern.value] += sets

    entries = [
        MovementPatternView(key=key, name=labels.get(key, key), sessions=sessions)
        for key, sessions in totals.items()
    ]
    return sorted(entries, key=lambda entry: entry.sessions, reverse=True)


def build_lift_history(
    snapshots: Sequence[StrengthSnapshot],
    lift: LiftId,
    preferences: Optional[TrackingPreferences] = None,
    points: Optional[int] = None,
    rep_points: Optional[int] = None,
) -> LiftHistoryView:
    """
    Build the long-form history card for a single lift.

    Args:
        snapshots: Accumulated strength snapshots
        lift: Lift to chart
        preferences: Tracking preferences used for the lift label
        points: Snapshots to include (defaults to settings.lift_history_points)
        rep_points: Rep-history rows (defaults to settings.rep_history_points)
    """
    lift = LiftId(lift)
    points = settings.lift_history_points if points is None else points
    rep_points = settings.rep_history_points if rep_points is None else rep_points
    history = _most_recent(_group_by_lift(snapshots).get(lift.value, []), points)

    weights = [s.weight for s in history]
    start_weight = weights[0] if weights else 0.0
    end_weight = weights[-1] if weights else 0.0
    delta = end_weight - start_weight

    offset = max(len(history) - rep_points, 0)
    rep_history = [
        RepHistoryEntry(
            index=offset + position + 1,
            performed_on=snapshot.date,
            reps=snapshot.reps,
            total_sets=snapshot.total_sets,
            total_reps=snapshot.total_reps,
        )
        for position, snapshot in enumerate(history[offset:])
    ]

    if delta > 0:
        insight = f"You've added {delta:g} lbs recently. Consider adding 5 lbs next week."
    else:
        insight = "Keep building consistency to unlock more progress."

    label = _labels(preferences, TrackingCategory.LIFTS).get(lift.value, lift.value)
    return LiftHistoryView(
        key=lift.value,
        title=f"{label} - {points} Week History",
        sparkline=build_sparkline(weights),
        start_weight=start_weight,
        end_weight=end_weight,
        rep_history=rep_history,
        insight=insight,
    )


def get_overall_strength_delta(trends: Sequence[StrengthTrendView]) -> int:
    """Average delta_percent across trends (0 when there are none)."""
    if not trends:
        return 0
    return round_half_up(sum(t.delta_percent for t in trends) / len(trends))
