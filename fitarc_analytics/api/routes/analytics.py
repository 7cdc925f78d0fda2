"""
Analytics API Routes

Endpoints for session aggregation and the progress summaries.
"""

from fastapi import APIRouter, HTTPException, status
from loguru import logger

from fitarc_analytics.aggregator import SessionAggregator
from fitarc_analytics.api.models.requests import (
    AnalyticsRequest,
    LiftHistoryRequest,
    SummaryRequest,
)
from fitarc_analytics.api.models.responses import AnalyticsResponse, SummaryResponse
from fitarc_analytics.selectors import (
    LiftHistoryView,
    build_lift_history,
    build_movement_balance_summary,
    build_strength_trends,
    build_weekly_volume_summary,
    get_overall_strength_delta,
    today_in_zone,
)

router = APIRouter()


@router.post("/analytics", response_model=AnalyticsResponse)
async def aggregate_sessions(request: AnalyticsRequest) -> AnalyticsResponse:
    """
    Aggregate raw sessions into workout logs and strength snapshots.

    Args:
        request: AnalyticsRequest with sessions and optional default weights

    Returns:
        AnalyticsResponse with one log per session and the strength snapshots

    Raises:
        HTTPException: If aggregation fails
    """
    try:
        analytics = SessionAggregator(request.default_weights).aggregate(request.sessions)
        return AnalyticsResponse(
            workout_logs=analytics.workout_logs,
            strength_snapshots=analytics.strength_snapshots,
            session_count=len(request.sessions),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Session aggregation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Session aggregation failed: {str(e)}",
        )


@router.post("/summaries", response_model=SummaryResponse)
async def build_summaries(request: SummaryRequest) -> SummaryResponse:
    """
    Build volume, movement balance and strength trend summaries.

    The tracking preferences restrict and label each summary; categories
    without preferences show everything observed in the sessions.
    """
    try:
        as_of = request.as_of or today_in_zone()
        analytics = SessionAggregator(request.default_weights).aggregate(request.sessions)
        trends = build_strength_trends(analytics.strength_snapshots, request.preferences)
        return SummaryResponse(
            as_of=as_of,
            weekly_volume=build_weekly_volume_summary(
                analytics.workout_logs, request.preferences, as_of=as_of
            ),
            movement_balance=build_movement_balance_summary(
                analytics.workout_logs, request.preferences, as_of=as_of
            ),
            strength_trends=trends,
            overall_strength_delta=get_overall_strength_delta(trends),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Summary generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Summary generation failed: {str(e)}",
        )


@router.post("/lift-history", response_model=LiftHistoryView)
async def lift_history(request: LiftHistoryRequest) -> LiftHistoryView:
    """Build the long-form history card for one lift."""
    try:
        analytics = SessionAggregator(request.default_weights).aggregate(request.sessions)
        return build_lift_history(analytics.strength_snapshots, request.lift, request.preferences)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Lift history failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Lift history failed: {str(e)}",
        )
