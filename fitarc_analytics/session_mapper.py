"""
Backend row mapping.

Converts nested workout-session rows, as returned by the hosted backend's
session query, into RawSession models for the aggregator.
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from loguru import logger

from fitarc_analytics.schemas import RawExercise, RawSession, RawSet


_FRACTIONAL_SECONDS = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def _normalize_fraction(timestamp: str) -> str:
    # Python 3.10 only parses 3 or 6 fractional digits.
    return _FRACTIONAL_SECONDS.sub(
        lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", timestamp
    )


def resolve_session_date(performed_at: Any, time_zone: str = "UTC") -> date:
    """
    Resolve the calendar date a session belongs to.

    - ``YYYY-MM-DD`` strings are taken as-is
    - timestamps at exactly midnight UTC keep their date part
    - any other timestamp is converted to ``time_zone``
    - a missing value means today in ``time_zone``
    """
    zone = ZoneInfo(time_zone)
    if not performed_at:
        return datetime.now(zone).date()

    if isinstance(performed_at, datetime):
        moment = performed_at
    elif isinstance(performed_at, date):
        return performed_at
    else:
        raw = str(performed_at).strip()
        if "T" not in raw:
            return date.fromisoformat(raw[:10])
        date_part, time_part = raw.split("T", 1)
        if time_part.startswith("00:00:00") and ("Z" in time_part or "+00:00" in time_part):
            return date.fromisoformat(date_part)
        moment = datetime.fromisoformat(_normalize_fraction(raw.replace("Z", "+00:00")))

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(zone).date()


def _extract_body_parts(exercise: Dict[str, Any]) -> List[str]:
    names: List[str] = []
    for link in exercise.get("muscle_links") or []:
        name = ((link or {}).get("muscle") or {}).get("name")
        if name and name not in names:
            names.append(name)
    return names


def _map_exercise_row(row: Dict[str, Any]) -> RawExercise:
    exercise = row.get("exercise") or {}
    sets = [
        RawSet(
            set_number=s.get("set_number"),
            weight=s.get("weight"),
            reps=s.get("reps"),
            rpe=s.get("rpe"),
            rest_seconds=s.get("rest_seconds"),
        )
        for s in row.get("sets") or []
    ]
    return RawExercise(
        name=exercise.get("name") or "Unknown",
        exercise_id=exercise.get("id"),
        movement_pattern=exercise.get("movement_pattern"),
        body_parts=_extract_body_parts(exercise),
        sets=sets,
    )


def map_session_row(
    row: Dict[str, Any],
    plan_id: Optional[str] = None,
    time_zone: str = "UTC",
) -> RawSession:
    """
    Map one backend session row to a RawSession.

    Args:
        row: Session row with nested ``session_exercises``
        plan_id: Overrides the row's own ``plan_id`` when given
        time_zone: IANA zone used to resolve the session date

    Returns:
        RawSession with exercises ordered by ``display_order``
    """
    exercise_rows = sorted(
        row.get("session_exercises") or [],
        key=lambda se: (se.get("display_order") is None, se.get("display_order") or 0),
    )
    return RawSession(
        id=str(row["id"]),
        date=resolve_session_date(row.get("performed_at"), time_zone),
        plan_id=plan_id or row.get("plan_id") or "",
        exercises=[_map_exercise_row(se) for se in exercise_rows],
    )


def map_session_rows(
    rows: Iterable[Dict[str, Any]],
    plan_id: Optional[str] = None,
    time_zone: str = "UTC",
) -> List[RawSession]:
    """Map a batch of backend rows, preserving their order."""
    sessions = [map_session_row(row, plan_id, time_zone) for row in rows]
    logger.debug(f"Mapped {len(sessions)} session rows (time_zone={time_zone})")
    return sessions
