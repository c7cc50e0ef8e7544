from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.database import get_db
from rosterapp.dependencies import get_current_admin, get_current_user
from rosterapp.models.calendar import CalendarEvent
from rosterapp.models.user import User
from rosterapp.schemas.calendar import (
    AvailabilityDeleted,
    AvailabilityResponse,
    EventCreate,
    EventGamePlanUpdate,
    EventResponse,
    EventUpdate,
    GenerateGamePlan,
    MonthData,
    SetAvailability,
)
from rosterapp.services.calendar_service import (
    create_event,
    delete_event,
    generate_event_game_plan,
    get_event,
    get_month_data,
    list_events,
    month_bounds,
    set_availability,
    set_event_game_plan,
    update_event,
)

router = APIRouter(prefix="/calendar", tags=["calendar"])

MONTH_QUERY = Query(..., pattern=r"^\d{4}-\d{2}$", description="Month as YYYY-MM")


async def _get_event_or_404(db: AsyncSession, event_id: int) -> CalendarEvent:
    event = await get_event(db, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


@router.get("/availability", response_model=MonthData)
async def get_availability(
    month: str = MONTH_QUERY,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return await get_month_data(db, month, current_user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/availability", response_model=AvailabilityResponse | AvailabilityDeleted)
async def post_availability(
    body: SetAvailability,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    availability = await set_availability(db, current_user, body.date, body.status)
    if availability is None:
        return AvailabilityDeleted()
    return AvailabilityResponse.model_validate(availability)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@router.get("/events", response_model=list[EventResponse])
async def get_events(
    month: str = MONTH_QUERY,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        start, end = month_bounds(month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return await list_events(db, start, end)


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def post_event(
    body: EventCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return await create_event(
        db,
        creator=current_admin,
        day=body.date,
        start_time=body.start_time,
        end_time=body.end_time,
        event_type=body.type,
        title=body.title,
        description=body.description,
    )


@router.put("/events/{event_id}", response_model=EventResponse)
async def put_event(
    event_id: int,
    body: EventUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    event = await _get_event_or_404(db, event_id)
    return await update_event(db, event, body.model_dump(exclude_unset=True))


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    event = await _get_event_or_404(db, event_id)
    await delete_event(db, event)
    return None


@router.put("/events/{event_id}/gameplan", response_model=EventResponse)
async def put_event_game_plan(
    event_id: int,
    body: EventGamePlanUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    event = await _get_event_or_404(db, event_id)
    try:
        return await set_event_game_plan(db, event, body.game_plan)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/events/{event_id}/gameplan/generate", response_model=EventResponse)
async def generate_game_plan(
    event_id: int,
    body: GenerateGamePlan,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Build a rotation for every map without the given player and store it."""
    event = await _get_event_or_404(db, event_id)
    try:
        return await generate_event_game_plan(db, event, str(body.absent_player_id))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
