"""
Session aggregation.

Turns raw workout sessions into per-session workout logs and per-exercise
strength snapshots. Aggregation is a pure transform: the same sessions in the
same order always produce the same logs and snapshots, ids included.
"""

import math
from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from fitarc_analytics.classifier import classify_exercise
from fitarc_analytics.schemas import (
    LiftId,
    LiftSummary,
    MovementPattern,
    MuscleGroup,
    RawExercise,
    RawSession,
    RawSet,
    StrengthSnapshot,
    WorkoutAnalytics,
    WorkoutLog,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def estimate_one_rep_max(weight: float, reps: float) -> int:
    """
    Estimate a one-rep max with the Epley formula.

    Returns 0 when weight or reps is not positive.
    """
    if weight <= 0 or reps <= 0:
        return 0
    return round_half_up(weight * (1 + reps / 30))


def create_empty_muscle_volume() -> Dict[MuscleGroup, int]:
    return {group: 0 for group in MuscleGroup}


def create_empty_movement_volume() -> Dict[MovementPattern, int]:
    return {pattern: 0 for pattern in MovementPattern}


class SessionAggregator:
    """
    Builds workout logs and strength snapshots from raw sessions.

    Snapshot ids are derived from session id, exercise, lift and the running
    snapshot count, so reordering the input changes the generated ids.
    """

    def __init__(self, default_weights: Optional[Mapping[str, float]] = None):
        """
        Initialize aggregator.

        Args:
            default_weights: Catalog exercise id -> substitute weight for sets
                logged without a weight
        """
        self.default_weights = dict(default_weights or {})

    def aggregate(self, sessions: Sequence[RawSession]) -> WorkoutAnalytics:
        """
        Aggregate sessions into workout logs and strength snapshots.

        Args:
            sessions: Raw sessions, in the order ids should be derived

        Returns:
            WorkoutAnalytics with one log per session and one snapshot per
            classified lift occurrence
        """
        workout_logs: List[WorkoutLog] = []
        strength_snapshots: List[StrengthSnapshot] = []

        for session in sessions:
            workout_logs.append(self._aggregate_session(session, strength_snapshots))

        logger.info(
            f"Aggregated {len(workout_logs)} sessions into "
            f"{len(strength_snapshots)} strength snapshots"
        )
        return WorkoutAnalytics(
            workout_logs=workout_logs,
            strength_snapshots=strength_snapshots,
        )

    def _aggregate_session(
        self, session: RawSession, strength_snapshots: List[StrengthSnapshot]
    ) -> WorkoutLog:
        muscle_volume = create_empty_muscle_volume()
        movement_volume = create_empty_movement_volume()
        muscles_hit: List[MuscleGroup] = []
        movements_hit: List[MovementPattern] = []
        best_lift_sets: Dict[LiftId, LiftSummary] = {}
        total_sets = 0
        total_volume = 0.0

        for exercise in session.exercises:
            classification = classify_exercise(
                exercise.name, exercise.movement_pattern, exercise.body_parts
            )
            fallback_weight = self._fallback_weight(exercise)
            set_count = len(exercise.sets) or exercise.set_count or 0
            total_sets += set_count

            if set_count > 0:
                for group in classification.muscle_groups:
                    muscle_volume[group] += set_count
                    if group not in muscles_hit:
                        muscles_hit.append(group)

                movement = classification.movement_pattern
                if movement is not None:
                    movement_volume[movement] += set_count
                    if movement not in movements_hit:
                        movements_hit.append(movement)

            for raw_set in exercise.sets:
                weight = self._effective_weight(raw_set, fallback_weight)
                reps = raw_set.reps or 0
                if weight > 0 and reps > 0:
                    total_volume += weight * reps

            lift = classification.lift
            if lift is None or not exercise.sets:
                continue

            best_set = self._select_best_set(exercise.sets, fallback_weight)
            best_weight = self._effective_weight(best_set, fallback_weight)
            best_reps = best_set.reps or 0

            current_best = best_lift_sets.get(lift)
            if current_best is None or best_weight > current_best.weight:
                best_lift_sets[lift] = LiftSummary(lift=lift, weight=best_weight, reps=best_reps)

            exercise_ref = exercise.exercise_id or exercise.name
            strength_snapshots.append(
                StrengthSnapshot(
                    id=f"{session.id}-{exercise_ref}-{lift.value}-{len(strength_snapshots)}",
                    plan_id=session.plan_id,
                    exercise_id=exercise.exercise_id,
                    exercise_name=exercise.name,
                    lift=lift,
                    date=session.date,
                    weight=best_weight,
                    reps=best_reps,
                    total_sets=set_count,
                    total_reps=sum(s.reps for s in exercise.sets if s.reps and s.reps > 0),
                    estimated_1rm=estimate_one_rep_max(best_weight, best_reps),
                )
            )

        logger.debug(
            f"Session {session.id} ({session.date}): {total_sets} sets, "
            f"volume={total_volume:.0f}, lifts={[lift.value for lift in best_lift_sets]}"
        )

        return WorkoutLog(
            id=session.id,
            session_id=session.id,
            date=session.date,
            plan_id=session.plan_id,
            is_completed=total_sets > 0,
            total_sets=total_sets,
            total_volume=total_volume,
            muscles_hit=muscles_hit,
            movement_patterns_hit=movements_hit,
            muscle_volume=muscle_volume,
            movement_volume=movement_volume,
            lifts=[summary for summary in best_lift_sets.values() if summary.weight > 0],
        )

    def _fallback_weight(self, exercise: RawExercise) -> Optional[float]:
        if exercise.exercise_id is None:
            return None
        return self.default_weights.get(exercise.exercise_id)

    @staticmethod
    def _effective_weight(raw_set: RawSet, fallback_weight: Optional[float]) -> float:
        if raw_set.weight is not None:
            return raw_set.weight
        if fallback_weight is not None:
            return fallback_weight
        return 0.0

    def _select_best_set(self, sets: Sequence[RawSet], fallback_weight: Optional[float]) -> RawSet:
        """Highest effective weight; ties keep the first set seen."""
        best = sets[0]
        best_weight = self._effective_weight(best, fallback_weight)
        for candidate in sets[1:]:
            candidate_weight = self._effective_weight(candidate, fallback_weight)
            if candidate_weight > best_weight:
                best, best_weight = candidate, candidate_weight
        return best


def build_workout_analytics(
    sessions: Sequence[RawSession],
    default_weights: Optional[Mapping[str, float]] = None,
) -> WorkoutAnalytics:
    """Convenience wrapper around SessionAggregator.aggregate."""
    return SessionAggregator(default_weights).aggregate(sessions)
