from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.config import settings
from rosterapp.database import get_db
from rosterapp.dependencies import get_current_admin
from rosterapp.models.map import Map
from rosterapp.models.user import User
from rosterapp.schemas.map import (
    BalanceResponse,
    GamePlanCreate,
    GamePlanResponse,
    GamePlanSummary,
    MapResponse,
    MapSave,
    MapSaveResponse,
    PlayerAssignmentResponse,
    RotationResponse,
)
from rosterapp.services.auth_service import list_players
from rosterapp.services.balance_service import check_balance
from rosterapp.services.map_service import (
    create_plan,
    get_map,
    get_plan_players,
    list_maps,
    list_plans_for_map,
    load_map_snapshot,
    upsert_map,
)
from rosterapp.services.rotation_service import calculate_valid_configurations

router = APIRouter(prefix="/maps", tags=["maps"])


async def _get_map_or_404(db: AsyncSession, map_id: str) -> Map:
    game_map = await get_map(db, map_id)
    if game_map is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Map not found")
    return game_map


async def _map_response(db: AsyncSession, game_map: Map) -> MapResponse:
    plans = await list_plans_for_map(db, game_map.id)
    first_plan = plans[0] if plans else None
    players = await get_plan_players(db, first_plan.id) if first_plan is not None else []
    return MapResponse(
        id=game_map.id,
        name=game_map.name,
        images=list(game_map.images or []),
        assignments=list(first_plan.assignments) if first_plan is not None else [],
        players=[PlayerAssignmentResponse.model_validate(p) for p in players],
        game_plans=[GamePlanSummary.model_validate(p) for p in plans],
    )


@router.get("", response_model=list[MapResponse])
async def get_maps(db: AsyncSession = Depends(get_db)):
    return [await _map_response(db, game_map) for game_map in await list_maps(db)]


@router.get("/{map_id}", response_model=MapResponse)
async def get_map_info(map_id: str, db: AsyncSession = Depends(get_db)):
    game_map = await _get_map_or_404(db, map_id)
    return await _map_response(db, game_map)


@router.post("/{map_id}", response_model=MapSaveResponse)
async def save_map(
    map_id: str,
    body: MapSave,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    await upsert_map(
        db,
        map_id,
        name=body.name,
        images=body.images,
        template=body.template.model_dump(exclude_none=True) if body.template is not None else None,
    )
    return MapSaveResponse(success=True, message=f"Map {map_id} saved")


@router.get("/{map_id}/plans", response_model=list[GamePlanResponse])
async def get_map_plans(map_id: str, db: AsyncSession = Depends(get_db)):
    await _get_map_or_404(db, map_id)
    responses: list[GamePlanResponse] = []
    for plan in await list_plans_for_map(db, map_id):
        players = await get_plan_players(db, plan.id)
        responses.append(
            GamePlanResponse(
                id=plan.id,
                name=plan.name,
                map_id=plan.map_id,
                assignments=list(plan.assignments),
                players=[PlayerAssignmentResponse.model_validate(p) for p in players],
            )
        )
    return responses


@router.post("/{map_id}/plans", response_model=GamePlanResponse, status_code=status.HTTP_201_CREATED)
async def create_map_plan(
    map_id: str,
    body: GamePlanCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    game_map = await _get_map_or_404(db, map_id)
    plan = await create_plan(db, game_map, name=body.name)
    return GamePlanResponse(
        id=plan.id,
        name=plan.name,
        map_id=plan.map_id,
        assignments=list(plan.assignments),
        players=[],
    )


@router.get("/{map_id}/balance", response_model=BalanceResponse)
async def get_map_balance(map_id: str, db: AsyncSession = Depends(get_db)):
    """Balance report for the map's default plan."""
    game_map = await _get_map_or_404(db, map_id)
    snapshot = await load_map_snapshot(db, game_map)
    result = check_balance(snapshot, await list_players(db))
    return BalanceResponse(map_id=map_id, is_balanced=result.is_balanced, errors=result.errors)


@router.get("/{map_id}/rotations", response_model=RotationResponse)
async def get_map_rotations(
    map_id: str,
    absent_player_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    game_map = await _get_map_or_404(db, map_id)
    snapshot = await load_map_snapshot(db, game_map)
    result = calculate_valid_configurations(
        snapshot,
        absent_player_id,
        await list_players(db),
        max_assignments=settings.max_rotation_assignments,
    )
    return RotationResponse(
        map_id=map_id,
        absent_player_id=absent_player_id,
        configurations=result.configurations,
        errors=result.errors,
        enumerated=result.enumerated,
    )
