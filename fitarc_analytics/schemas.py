"""
Pydantic models for workout performance analytics.

This module defines the core data structures for:
- Raw sessions: loosely-structured workout logs handed in by the session source
- Workout logs: per-session volume, muscle and movement aggregates
- Strength snapshots: best-set records for classified major lifts
- Tracking preferences: the user's curated muscle/movement/lift allow-lists
"""

import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enumerations
# ============================================================================

class MuscleGroup(str, Enum):
    """Broad training targets used for volume tracking."""
    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    CORE = "core"


class MovementPattern(str, Enum):
    """Biomechanical categories used for movement balance."""
    SQUAT = "squat"
    HINGE = "hinge"
    HORIZONTAL_PUSH = "horizontal_push"
    VERTICAL_PUSH = "vertical_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PULL = "vertical_pull"


class LiftId(str, Enum):
    """Canonical barbell lifts tracked for strength trending."""
    BENCH_PRESS = "bench_press"
    SQUAT = "squat"
    DEADLIFT = "deadlift"


class TrackingCategory(str, Enum):
    """Preference categories a user can curate."""
    MUSCLES = "muscles"
    MOVEMENTS = "movements"
    LIFTS = "lifts"


# ============================================================================
# Raw input (read-only, supplied by the session source)
# ============================================================================


class RawSet(BaseModel):
    """A single logged set. Every field is optional; unknown is not zero."""

    set_number: Optional[int] = Field(None, description="Position of the set within the exercise")
    weight: Optional[float] = Field(None, description="Load used for the set (lbs)")
    reps: Optional[int] = Field(None, description="Repetitions completed")
    rpe: Optional[float] = Field(None, description="Rate of perceived exertion")
    rest_seconds: Optional[int] = Field(None, description="Rest taken after the set")


class RawExercise(BaseModel):
    """An exercise entry within a raw session."""

    name: str = Field(..., description="Display name as logged")
    exercise_id: Optional[str] = Field(None, description="Catalog exercise identifier")
    movement_pattern: Optional[str] = Field(
        None, description="Explicit movement-pattern tag from the catalog"
    )
    body_parts: List[str] = Field(
        default_factory=list, description="Free-text body-part / muscle tags"
    )
    sets: List[RawSet] = Field(default_factory=list, description="Per-set detail, in order")
    set_count: Optional[int] = Field(
        None,
        ge=0,
        description="Flat set count used when no per-set detail was logged",
    )


class RawSession(BaseModel):
    """A completed (or planned) workout occurrence."""

    id: str = Field(..., description="Session identifier")
    date: datetime.date = Field(..., description="Calendar date of the session")
    plan_id: str = Field(..., description="Owning plan identifier")
    exercises: List[RawExercise] = Field(default_factory=list)


# ============================================================================
# Derived records
# ============================================================================


class LiftSummary(BaseModel):
    """Session-wide best set for one lift."""

    model_config = ConfigDict(frozen=True)

    lift: LiftId
    weight: float
    reps: int


class WorkoutLog(BaseModel):
    """Per-session aggregate of volume and classification data."""

    model_config = ConfigDict(frozen=True)

    id: str
    session_id: str
    date: datetime.date
    plan_id: str
    is_completed: bool = Field(..., description="True iff total_sets > 0")
    total_sets: int = Field(..., ge=0)
    total_volume: float = Field(..., ge=0.0, description="Sum of weight x reps over complete sets")
    muscles_hit: List[MuscleGroup] = Field(default_factory=list)
    movement_patterns_hit: List[MovementPattern] = Field(default_factory=list)
    muscle_volume: Dict[MuscleGroup, int] = Field(
        ..., description="Sets per muscle group, all six present"
    )
    movement_volume: Dict[MovementPattern, int] = Field(
        ..., description="Sets per movement pattern, all six present"
    )
    lifts: List[LiftSummary] = Field(default_factory=list)


class StrengthSnapshot(BaseModel):
    """Best-set record for one classified lift occurrence within a session."""

    model_config = ConfigDict(frozen=True)

    id: str
    plan_id: str
    exercise_id: Optional[str] = None
    exercise_name: Optional[str] = None
    lift: LiftId
    date: datetime.date
    weight: float = Field(..., description="Weight of the highest-weight set")
    reps: int = Field(..., description="Reps of the highest-weight set")
    total_sets: int = Field(..., ge=0)
    total_reps: int = Field(..., ge=0)
    estimated_1rm: int = Field(..., ge=0, description="Epley estimate, rounded")


class WorkoutAnalytics(BaseModel):
    """Output of one aggregation pass."""

    workout_logs: List[WorkoutLog] = Field(default_factory=list)
    strength_snapshots: List[StrengthSnapshot] = Field(default_factory=list)


# ============================================================================
# Tracking preferences and catalog
# ============================================================================


class TrackingPreferences(BaseModel):
    """
    Curated allow-lists, one label map per category.

    Each map goes from a normalized key to a user-facing label. ``None`` (or an
    empty map) means "show whatever was observed in the data".
    """

    muscles: Optional[Dict[str, str]] = None
    movements: Optional[Dict[str, str]] = None
    lifts: Optional[Dict[str, str]] = None

    def labels_for(self, category: TrackingCategory) -> Optional[Dict[str, str]]:
        """Return the label map for a category (may be None)."""
        return getattr(self, TrackingCategory(category).value)


class CatalogExercise(BaseModel):
    """Known exercise from the exercise catalog."""

    id: str
    name: str
    movement_pattern: Optional[str] = None
