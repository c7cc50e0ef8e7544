from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from rosterapp.services.roster import parse_zone


class AssignmentSchema(BaseModel):
    id: int
    name: str
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)
    zone: dict[str, Any]
    floor: Optional[int] = None

    @field_validator("zone")
    @classmethod
    def validate_zone(cls, v: dict[str, Any]) -> dict[str, Any]:
        parse_zone(v)
        return v


class MapTemplate(BaseModel):
    assignments: list[AssignmentSchema] = []

    @field_validator("assignments")
    @classmethod
    def validate_unique_ids(cls, v: list[AssignmentSchema]) -> list[AssignmentSchema]:
        ids = [a.id for a in v]
        if len(ids) != len(set(ids)):
            raise ValueError("assignment ids must be unique within a map")
        return v


class MapSave(BaseModel):
    name: Optional[str] = None
    images: Optional[list[str]] = None
    template: Optional[MapTemplate] = None


class PlayerAssignmentSchema(BaseModel):
    user_id: int
    assignment_ids: list[int]
    main_assignment_id: Optional[int] = None


class PlayerAssignmentResponse(BaseModel):
    user_id: int
    assignment_ids: list[int]
    main_assignment_id: Optional[int] = None

    model_config = {"from_attributes": True}


class GamePlanSummary(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class MapResponse(BaseModel):
    """A map as shown by default: its first plan's assignments and players."""

    id: str
    name: str
    images: list[str]
    assignments: list[dict[str, Any]] = []
    players: list[PlayerAssignmentResponse] = []
    game_plans: list[GamePlanSummary] = []


class MapSaveResponse(BaseModel):
    success: bool
    message: str


class GamePlanCreate(BaseModel):
    name: Optional[str] = None


class GamePlanUpdate(BaseModel):
    name: Optional[str] = None
    assignments: Optional[list[AssignmentSchema]] = None
    players: Optional[list[PlayerAssignmentSchema]] = None


class GamePlanResponse(BaseModel):
    id: int
    name: str
    map_id: str
    assignments: list[dict[str, Any]]
    players: list[PlayerAssignmentResponse] = []


class BalanceResponse(BaseModel):
    map_id: str
    is_balanced: bool
    errors: list[str]


class RotationResponse(BaseModel):
    map_id: str
    absent_player_id: str
    configurations: list[dict[str, int]]
    errors: list[str]
    enumerated: bool
