"""
API Request Models

Pydantic models for API request validation.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from fitarc_analytics.schemas import LiftId, RawSession, TrackingCategory, TrackingPreferences


class AnalyticsRequest(BaseModel):
    """Request model for session aggregation."""

    sessions: List[RawSession] = Field(..., description="Raw workout sessions")
    default_weights: Dict[str, float] = Field(
        default_factory=dict,
        description="Catalog exercise id -> weight used for sets logged without one",
    )


class SummaryRequest(AnalyticsRequest):
    """Request model for the progress summaries."""

    preferences: TrackingPreferences = Field(
        default_factory=TrackingPreferences, description="User tracking preferences"
    )
    as_of: Optional[date] = Field(None, description="Last day of the summary windows (default: today)")


class LiftHistoryRequest(AnalyticsRequest):
    """Request model for a single-lift history."""

    lift: LiftId = Field(..., description="Lift to chart")
    preferences: TrackingPreferences = Field(default_factory=TrackingPreferences)


class TrackingPartitionRequest(BaseModel):
    """Request model for selected/available partitioning."""

    preferences: TrackingPreferences = Field(default_factory=TrackingPreferences)
    category: TrackingCategory = Field(..., description="muscles, movements or lifts")
    catalog_labels: List[str] = Field(
        default_factory=list, description="Every label known to the catalog for this category"
    )


class TrackingAddRequest(BaseModel):
    """Request model for tracking a new item."""

    preferences: TrackingPreferences = Field(default_factory=TrackingPreferences)
    category: TrackingCategory
    label: str = Field(..., description="User-facing label; its key is derived")


class TrackingRemoveRequest(BaseModel):
    """Request model for untracking an item."""

    preferences: TrackingPreferences = Field(default_factory=TrackingPreferences)
    category: TrackingCategory
    key: str = Field(..., description="Normalized key to remove")
