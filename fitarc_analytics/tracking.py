"""
Tracking preference resolution.

Reconciles a user's curated label maps with the catalog of known labels and
produces new preference values for add/remove edits. Preference objects are
treated as immutable values: every edit returns a fresh TrackingPreferences.
"""

import re
from typing import Dict, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from fitarc_analytics.schemas import CatalogExercise, LiftId, TrackingCategory, TrackingPreferences


_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


class TrackingKeyError(ValueError):
    """Raised when a label normalizes to an empty tracking key."""


class TrackingItem(BaseModel):
    """A key/label pair shown in a tracking picker."""

    key: str
    label: str


class TrackingPartition(BaseModel):
    """Selected vs. available items for one category."""

    category: TrackingCategory
    selected: List[TrackingItem] = Field(default_factory=list)
    available: List[TrackingItem] = Field(default_factory=list)


def to_tracking_key(label: Optional[str]) -> str:
    """
    Derive a stable key from a user-facing label.

    Lower-cases, trims, collapses every non-alphanumeric run to a single
    underscore and strips leading/trailing underscores. Idempotent:
    ``to_tracking_key(to_tracking_key(x)) == to_tracking_key(x)``.
    """
    if not label:
        return ""
    return _NON_ALPHANUMERIC.sub("_", label.strip().lower()).strip("_")


def format_tracking_label(key: str) -> str:
    """Render a key as a title-cased label ("bench_press" -> "Bench Press")."""
    return key.replace("_", " ").title()


def is_trackable_label(label: Optional[str]) -> bool:
    """Whether a label yields a non-empty tracking key."""
    return bool(to_tracking_key(label))


def derive_movement_patterns(exercises: Iterable[CatalogExercise]) -> List[str]:
    """Sorted unique movement-pattern tags present in the exercise catalog."""
    patterns = set()
    for exercise in exercises:
        pattern = (exercise.movement_pattern or "").strip()
        if pattern:
            patterns.add(pattern)
    return sorted(patterns, key=str.casefold)


class TrackingPreferenceResolver:
    """
    Partitions catalog labels against the user's tracking preferences.

    The same key normalization is used on the add path and the available-list
    path so a label listed as available is never already selected.
    """

    def partition(
        self,
        preferences: TrackingPreferences,
        category: TrackingCategory,
        catalog_labels: Iterable[str],
    ) -> TrackingPartition:
        """
        Split catalog labels into selected and available items.

        Args:
            preferences: Current tracking preferences
            category: Category to partition
            catalog_labels: Every label the catalog knows for this category

        Returns:
            TrackingPartition with the preference map's entries as ``selected``
            and the remaining catalog labels (first label per key) as ``available``
        """
        category = TrackingCategory(category)
        labels = preferences.labels_for(category) or {}
        selected = [TrackingItem(key=key, label=label) for key, label in labels.items()]

        seen = set(labels)
        available: List[TrackingItem] = []
        for label in catalog_labels:
            key = to_tracking_key(label)
            if not key or key in seen:
                continue
            seen.add(key)
            available.append(TrackingItem(key=key, label=label.strip()))

        return TrackingPartition(category=category, selected=selected, available=available)

    def add_item(
        self,
        preferences: TrackingPreferences,
        category: TrackingCategory,
        label: str,
    ) -> TrackingPreferences:
        """
        Return preferences with ``label`` selected.

        A no-op (an equal copy) when the derived key is already selected.

        Raises:
            TrackingKeyError: If the label normalizes to an empty key
        """
        category = TrackingCategory(category)
        key = to_tracking_key(label)
        if not key:
            logger.warning(f"{category.value}: rejected label {label!r} with empty key")
            raise TrackingKeyError(f"Cannot track {label!r}: label has no alphanumeric characters")

        labels: Dict[str, str] = dict(preferences.labels_for(category) or {})
        if key in labels:
            logger.debug(f"{category.value}: '{key}' already tracked")
        else:
            labels[key] = label.strip()
            logger.info(f"{category.value}: tracking '{key}'")
        return self._replace(preferences, category, labels)

    def remove_item(
        self,
        preferences: TrackingPreferences,
        category: TrackingCategory,
        key: str,
    ) -> TrackingPreferences:
        """Return preferences without ``key``; a no-op when it is absent."""
        category = TrackingCategory(category)
        current = preferences.labels_for(category)
        labels = {k: v for k, v in (current or {}).items() if k != key}
        if current is None or len(labels) == len(current):
            logger.debug(f"{category.value}: '{key}' not tracked, nothing to remove")
            return self._replace(preferences, category, current)
        logger.info(f"{category.value}: stopped tracking '{key}'")
        return self._replace(preferences, category, labels)

    @staticmethod
    def _replace(
        preferences: TrackingPreferences,
        category: TrackingCategory,
        labels: Optional[Dict[str, str]],
    ) -> TrackingPreferences:
        copied = preferences.model_copy(deep=True)
        return copied.model_copy(
            update={category.value: dict(labels) if labels is not None else None}
        )


class ExerciseCatalog(BaseModel):
    """Read-only snapshot of the exercise/muscle catalog."""

    muscle_groups: List[str] = Field(default_factory=list, description="Known muscle-group names")
    exercises: List[CatalogExercise] = Field(default_factory=list)

    def labels_for(self, category: TrackingCategory) -> List[str]:
        """Catalog labels a user can pick from in a category."""
        category = TrackingCategory(category)
        if category == TrackingCategory.MUSCLES:
            return list(self.muscle_groups)
        if category == TrackingCategory.MOVEMENTS:
            return derive_movement_patterns(self.exercises)
        return [format_tracking_label(lift.value) for lift in LiftId]
