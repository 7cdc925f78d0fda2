"""
Exercise classification.

Maps a free-text exercise name and its catalog tags to muscle groups, a
movement pattern and a canonical lift. Explicit tags win; keyword matching
over the exercise name is the fallback. Nothing here raises for
unrecognized input: an unclassifiable exercise simply has no pattern/lift.
"""

import re
from types import MappingProxyType
from typing import Iterable, List, Optional, Pattern, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from fitarc_analytics.schemas import LiftId, MovementPattern, MuscleGroup


MUSCLE_SYNONYMS = MappingProxyType({
    "chest": MuscleGroup.CHEST,
    "back": MuscleGroup.BACK,
    "lats": MuscleGroup.BACK,
    "legs": MuscleGroup.LEGS,
    "quads": MuscleGroup.LEGS,
    "hamstrings": MuscleGroup.LEGS,
    "glutes": MuscleGroup.LEGS,
    "calves": MuscleGroup.LEGS,
    "shoulders": MuscleGroup.SHOULDERS,
    "delts": MuscleGroup.SHOULDERS,
    "rear delts": MuscleGroup.SHOULDERS,
    "arms": MuscleGroup.ARMS,
    "triceps": MuscleGroup.ARMS,
    "biceps": MuscleGroup.ARMS,
    "forearms": MuscleGroup.ARMS,
    "core": MuscleGroup.CORE,
    "abs": MuscleGroup.CORE,
    "obliques": MuscleGroup.CORE,
    "hip flexors": MuscleGroup.CORE,
})

# Evaluated top to bottom, first match wins. Vertical push sits above
# horizontal push so "Overhead Press" is not swallowed by the generic "press".
MOVEMENT_PATTERN_MATCHERS: Tuple[Tuple[Pattern[str], MovementPattern], ...] = (
    (re.compile(r"squat|lunge|leg press", re.IGNORECASE), MovementPattern.SQUAT),
    (re.compile(r"deadlift|hip thrust|\brdl\b|good morning", re.IGNORECASE), MovementPattern.HINGE),
    (re.compile(r"overhead|military|shoulder press", re.IGNORECASE), MovementPattern.VERTICAL_PUSH),
    (re.compile(r"bench|push[- ]?up|\bdips?\b|press", re.IGNORECASE), MovementPattern.HORIZONTAL_PUSH),
    (re.compile(r"\brow(s|ing)?\b|pullover", re.IGNORECASE), MovementPattern.HORIZONTAL_PULL),
    (re.compile(r"pull[- ]?up|pull[- ]?down|chin[- ]?up", re.IGNORECASE), MovementPattern.VERTICAL_PULL),
)

LIFT_MATCHERS: Tuple[Tuple[Pattern[str], LiftId], ...] = (
    (re.compile(r"bench", re.IGNORECASE), LiftId.BENCH_PRESS),
    (re.compile(r"squat", re.IGNORECASE), LiftId.SQUAT),
    (re.compile(r"deadlift|hip thrust|\brdl\b", re.IGNORECASE), LiftId.DEADLIFT),
)

_TAG_SEPARATORS = re.compile(r"[\s_\-]+")


class ExerciseClassification(BaseModel):
    """Classification result for a single exercise."""

    muscle_groups: List[MuscleGroup] = Field(default_factory=list)
    movement_pattern: Optional[MovementPattern] = None
    lift: Optional[LiftId] = None


def _normalize_tag(tag: str) -> str:
    return _TAG_SEPARATORS.sub(" ", tag.strip().lower())


def map_muscle_name_to_group(name: Optional[str]) -> Optional[MuscleGroup]:
    """Map a body-part tag to its muscle group, or None if unrecognized."""
    if not name:
        return None
    return MUSCLE_SYNONYMS.get(_normalize_tag(name))


def map_body_parts(body_parts: Iterable[str]) -> List[MuscleGroup]:
    """
    Map body-part tags to muscle groups.

    Unrecognized tags are dropped. Each group appears once, in the order it
    was first seen.
    """
    groups: List[MuscleGroup] = []
    for part in body_parts:
        group = map_muscle_name_to_group(part)
        if group is None:
            logger.debug(f"Dropping unrecognized body-part tag: {part!r}")
            continue
        if group not in groups:
            groups.append(group)
    return groups


def parse_movement_pattern(tag: Optional[str]) -> Optional[MovementPattern]:
    """Parse an explicit movement-pattern tag ("Horizontal Push", "vertical_pull")."""
    if not tag:
        return None
    key = _TAG_SEPARATORS.sub("_", tag.strip().lower())
    try:
        return MovementPattern(key)
    except ValueError:
        logger.debug(f"Ignoring unrecognized movement-pattern tag: {tag!r}")
        return None


def infer_movement_pattern(name: Optional[str]) -> Optional[MovementPattern]:
    """Infer a movement pattern from an exercise name."""
    if not name:
        return None
    for keywords, pattern in MOVEMENT_PATTERN_MATCHERS:
        if keywords.search(name):
            return pattern
    return None


def infer_lift_id(name: Optional[str]) -> Optional[LiftId]:
    """Infer the canonical lift from an exercise name."""
    if not name:
        return None
    for keywords, lift in LIFT_MATCHERS:
        if keywords.search(name):
            return lift
    return None


def classify_exercise(
    name: Optional[str],
    movement_pattern: Optional[str] = None,
    body_parts: Iterable[str] = (),
) -> ExerciseClassification:
    """
    Classify an exercise.

    Args:
        name: Exercise display name
        movement_pattern: Explicit catalog tag; used when it names a known pattern
        body_parts: Free-text body-part tags

    Returns:
        ExerciseClassification with muscle groups, movement pattern and lift
    """
    return ExerciseClassification(
        muscle_groups=map_body_parts(body_parts),
        movement_pattern=parse_movement_pattern(movement_pattern) or infer_movement_pattern(name),
        lift=infer_lift_id(name),
    )
