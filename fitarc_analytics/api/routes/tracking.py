"""
Tracking API Routes

Endpoints for reconciling and editing tracking preferences. The service never
stores preferences; callers persist the returned value.
"""

from fastapi import APIRouter, HTTPException

from fitarc_analytics.api.models.requests import (
    TrackingAddRequest,
    TrackingPartitionRequest,
    TrackingRemoveRequest,
)
from fitarc_analytics.api.models.responses import ErrorResponse, TrackingUpdateResponse
from fitarc_analytics.tracking import TrackingKeyError, TrackingPartition, TrackingPreferenceResolver

router = APIRouter()
resolver = TrackingPreferenceResolver()


@router.post("/tracking/partition", response_model=TrackingPartition)
async def partition(request: TrackingPartitionRequest) -> TrackingPartition:
    """Split catalog labels into selected and available items."""
    return resolver.partition(request.preferences, request.category, request.catalog_labels)


@router.post(
    "/tracking/add",
    response_model=TrackingUpdateResponse,
    responses={422: {"model": ErrorResponse}},
)
async def add_item(request: TrackingAddRequest) -> TrackingUpdateResponse:
    """
    Track a new item.

    Raises:
        HTTPException: 422 if the label has no usable characters
    """
    try:
        updated = resolver.add_item(request.preferences, request.category, request.label)
    except TrackingKeyError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return TrackingUpdateResponse(preferences=updated, changed=updated != request.preferences)


@router.post("/tracking/remove", response_model=TrackingUpdateResponse)
async def remove_item(request: TrackingRemoveRequest) -> TrackingUpdateResponse:
    """Stop tracking an item. Removing an untracked key is a no-op."""
    updated = resolver.remove_item(request.preferences, request.category, request.key)
    return TrackingUpdateResponse(preferences=updated, changed=updated != request.preferences)
