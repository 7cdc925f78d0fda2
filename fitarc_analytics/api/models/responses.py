"""
API Response Models

Pydantic models for API responses.
"""

from datetime import date
from typing import List

from pydantic import BaseModel, Field

from fitarc_analytics.schemas import StrengthSnapshot, TrackingPreferences, WorkoutLog
from fitarc_analytics.selectors import MovementPatternView, StrengthTrendView, VolumeEntryView


class AnalyticsResponse(BaseModel):
    """Response for POST /api/analytics."""

    workout_logs: List[WorkoutLog] = Field(..., description="One log per session")
    strength_snapshots: List[StrengthSnapshot] = Field(
        ..., description="One snapshot per classified lift occurrence"
    )
    session_count: int = Field(..., description="Number of sessions aggregated")


class SummaryResponse(BaseModel):
    """Response for POST /api/summaries."""

    as_of: date = Field(..., description="Last day of the summary windows")
    weekly_volume: List[VolumeEntryView] = Field(..., description="Sets per muscle group")
    movement_balance: List[MovementPatternView] = Field(..., description="Sets per movement pattern")
    strength_trends: List[StrengthTrendView] = Field(..., description="Recent trend per lift")
    overall_strength_delta: int = Field(..., description="Mean delta percent across trends")


class TrackingUpdateResponse(BaseModel):
    """Response for tracking add/remove."""

    preferences: TrackingPreferences = Field(..., description="New preference value to persist")
    changed: bool = Field(..., description="Whether the edit changed anything")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
