import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from rosterapp.models.calendar import AvailabilityStatus, EventType

TIME_PATTERN = r"^\d{2}:\d{2}$"


class SetAvailability(BaseModel):
    date: dt.date
    status: Optional[AvailabilityStatus]


class AvailabilityResponse(BaseModel):
    id: int
    user_id: int
    date: dt.date
    status: AvailabilityStatus

    model_config = {"from_attributes": True}


class AvailabilityDeleted(BaseModel):
    success: bool = True
    deleted: bool = True


class EventCreate(BaseModel):
    date: dt.date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    type: EventType
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title is required")
        return v


class EventUpdate(BaseModel):
    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    type: Optional[EventType] = None
    title: Optional[str] = None
    description: Optional[str] = None


class EventGamePlanUpdate(BaseModel):
    game_plan: Optional[dict[str, Any]] = None


class GenerateGamePlan(BaseModel):
    absent_player_id: int


class EventResponse(BaseModel):
    id: int
    date: dt.date
    start_time: str
    end_time: str
    type: EventType
    title: str
    description: Optional[str]
    game_plan: Optional[dict[str, Any]]
    created_by_id: int
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class PlayerAvailability(BaseModel):
    user_id: int
    user_name: str
    status: Optional[AvailabilityStatus]


class DayData(BaseModel):
    date: str
    current_user_status: Optional[AvailabilityStatus]
    player_availabilities: list[PlayerAvailability]
    events: list[EventResponse]


class MonthData(BaseModel):
    month: str
    days: dict[str, DayData]
