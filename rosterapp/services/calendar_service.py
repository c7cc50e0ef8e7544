"""Calendar service: player availability per day and scheduled matches/events."""

import calendar
import logging
import re
from datetime import date, timedelta
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.config import settings
from rosterapp.models.calendar import Availability, AvailabilityStatus, CalendarEvent, EventType
from rosterapp.models.user import User
from rosterapp.services.auth_service import list_players, list_users
from rosterapp.services.map_service import load_all_map_snapshots
from rosterapp.services.rotation_service import build_match_game_plan

logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def month_bounds(month: str) -> tuple[date, date]:
    """First and last day of a "YYYY-MM" month string."""
    if not MONTH_PATTERN.match(month):
        raise ValueError("month must use the YYYY-MM format")
    year, month_num = (int(part) for part in month.split("-"))
    if not 1 <= month_num <= 12:
        raise ValueError("month must use the YYYY-MM format")
    last_day = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1), date(year, month_num, last_day)


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


async def list_availabilities(db: AsyncSession, start: date, end: date) -> list[Availability]:
    result = await db.execute(
        select(Availability).where(Availability.date >= start, Availability.date <= end)
    )
    return list(result.scalars().all())


async def set_availability(
    db: AsyncSession, user: User, day: date, status: AvailabilityStatus | None
) -> Availability | None:
    """Upsert the user's status for a day; None clears it."""
    if status is None:
        await db.execute(
            delete(Availability).where(Availability.user_id == user.id, Availability.date == day)
        )
        await db.commit()
        return None

    result = await db.execute(
        select(Availability).where(Availability.user_id == user.id, Availability.date == day)
    )
    availability = result.scalar_one_or_none()
    if availability is None:
        availability = Availability(user_id=user.id, date=day, status=status)
        db.add(availability)
    else:
        availability.status = status
    await db.commit()
    await db.refresh(availability)
    return availability


async def get_month_data(db: AsyncSession, month: str, current_user: User) -> dict[str, Any]:
    """Every day of the month with each player's status and the day's events.

    Players without a record for a day get status None.
    """
    start, end = month_bounds(month)
    users = await list_users(db)
    availabilities = await list_availabilities(db, start, end)
    events = await list_events(db, start, end)

    days: dict[str, dict[str, Any]] = {}
    day = start
    while day <= end:
        key = day.isoformat()
        days[key] = {
            "date": key,
            "current_user_status": None,
            "player_availabilities": [
                {"user_id": u.id, "user_name": u.name, "status": None} for u in users
            ],
            "events": [],
        }
        day += timedelta(days=1)

    for availability in availabilities:
        day_data = days.get(availability.date.isoformat())
        if day_data is None:
            continue
        for entry in day_data["player_availabilities"]:
            if entry["user_id"] == availability.user_id:
                entry["status"] = availability.status
        if availability.user_id == current_user.id:
            day_data["current_user_status"] = availability.status

    for event in events:
        day_data = days.get(event.date.isoformat())
        if day_data is not None:
            day_data["events"].append(event)

    return {"month": month, "days": days}


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


async def list_events(db: AsyncSession, start: date, end: date) -> list[CalendarEvent]:
    result = await db.execute(
        select(CalendarEvent)
        .where(CalendarEvent.date >= start, CalendarEvent.date <= end)
        .order_by(CalendarEvent.date, CalendarEvent.start_time)
    )
    return list(result.scalars().all())


async def get_event(db: AsyncSession, event_id: int) -> CalendarEvent | None:
    result = await db.execute(select(CalendarEvent).where(CalendarEvent.id == event_id))
    return result.scalar_one_or_none()


async def create_event(
    db: AsyncSession,
    creator: User,
    day: date,
    start_time: str,
    end_time: str,
    event_type: EventType,
    title: str,
    description: str | None = None,
) -> CalendarEvent:
    event = CalendarEvent(
        date=day,
        start_time=start_time,
        end_time=end_time,
        type=event_type,
        title=title.strip(),
        description=(description or "").strip() or None,
        created_by_id=creator.id,
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)
    logger.info("Event %s created by user %s", event.id, creator.id)
    return event


async def update_event(db: AsyncSession, event: CalendarEvent, changes: dict[str, Any]) -> CalendarEvent:
    """Apply a partial update; only keys present in `changes` are touched."""
    if changes.get("date") is not None:
        event.date = changes["date"]
    if changes.get("start_time"):
        event.start_time = changes["start_time"]
    if changes.get("end_time"):
        event.end_time = changes["end_time"]
    if changes.get("type") is not None:
        if changes["type"] != EventType.MATCH:
            event.game_plan = None
        event.type = changes["type"]
    if changes.get("title"):
        event.title = changes["title"].strip()
    if "description" in changes:
        event.description = (changes["description"] or "").strip() or None
    await db.commit()
    await db.refresh(event)
    return event


async def delete_event(db: AsyncSession, event: CalendarEvent) -> None:
    await db.delete(event)
    await db.commit()
    logger.info("Event %s deleted", event.id)


async def set_event_game_plan(
    db: AsyncSession, event: CalendarEvent, game_plan: dict[str, Any] | None
) -> CalendarEvent:
    if event.type != EventType.MATCH:
        raise ValueError("Only MATCH events can have a game plan")
    event.game_plan = game_plan or None
    await db.commit()
    await db.refresh(event)
    return event


async def generate_event_game_plan(
    db: AsyncSession, event: CalendarEvent, absent_player_id: str
) -> CalendarEvent:
    """Build and store a rotation for every map with one player absent."""
    if event.type != EventType.MATCH:
        raise ValueError("Only MATCH events can have a game plan")
    players = await list_players(db)
    if not any(p.id == absent_player_id for p in players):
        raise ValueError(f"Unknown player {absent_player_id}")
    snapshots = await load_all_map_snapshots(db)
    match_plan = build_match_game_plan(
        snapshots,
        absent_player_id,
        players,
        max_assignments=settings.max_rotation_assignments,
    )
    logger.info("Generated game plan for event %s without player %s", event.id, absent_player_id)
    return await set_event_game_plan(db, event, match_plan.to_dict())
