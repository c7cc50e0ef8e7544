from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.config import settings
from rosterapp.database import get_db
from rosterapp.dependencies import get_current_admin
from rosterapp.models.game_plan import GamePlan
from rosterapp.models.user import User
from rosterapp.schemas.map import (
    BalanceResponse,
    GamePlanResponse,
    GamePlanUpdate,
    PlayerAssignmentResponse,
    RotationResponse,
)
from rosterapp.services.auth_service import list_players
from rosterapp.services.balance_service import check_balance
from rosterapp.services.map_service import (
    PlayerAssignmentInput,
    delete_plan,
    get_plan,
    get_plan_players,
    load_plan_snapshot,
    update_plan,
)
from rosterapp.services.rotation_service import calculate_valid_configurations

router = APIRouter(prefix="/plans", tags=["plans"])


async def _get_plan_or_404(db: AsyncSession, plan_id: int) -> GamePlan:
    plan = await get_plan(db, plan_id)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    return plan


async def _plan_response(db: AsyncSession, plan: GamePlan) -> GamePlanResponse:
    players = await get_plan_players(db, plan.id)
    return GamePlanResponse(
        id=plan.id,
        name=plan.name,
        map_id=plan.map_id,
        assignments=list(plan.assignments),
        players=[PlayerAssignmentResponse.model_validate(p) for p in players],
    )


@router.get("/{plan_id}", response_model=GamePlanResponse)
async def get_plan_info(plan_id: int, db: AsyncSession = Depends(get_db)):
    plan = await _get_plan_or_404(db, plan_id)
    return await _plan_response(db, plan)


@router.put("/{plan_id}", response_model=GamePlanResponse)
async def update_plan_info(
    plan_id: int,
    body: GamePlanUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    plan = await _get_plan_or_404(db, plan_id)
    players = None
    if body.players is not None:
        players = [
            PlayerAssignmentInput(
                user_id=p.user_id,
                assignment_ids=p.assignment_ids,
                main_assignment_id=p.main_assignment_id,
            )
            for p in body.players
        ]
    assignments = None
    if body.assignments is not None:
        assignments = [a.model_dump(exclude_none=True) for a in body.assignments]
    plan = await update_plan(db, plan, name=body.name, assignments=assignments, players=players)
    return await _plan_response(db, plan)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan_endpoint(
    plan_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    plan = await _get_plan_or_404(db, plan_id)
    await delete_plan(db, plan)
    return None


@router.get("/{plan_id}/balance", response_model=BalanceResponse)
async def get_plan_balance(plan_id: int, db: AsyncSession = Depends(get_db)):
    plan = await _get_plan_or_404(db, plan_id)
    snapshot = await load_plan_snapshot(db, plan)
    result = check_balance(snapshot, await list_players(db))
    return BalanceResponse(map_id=plan.map_id, is_balanced=result.is_balanced, errors=result.errors)


@router.get("/{plan_id}/rotations", response_model=RotationResponse)
async def get_plan_rotations(
    plan_id: int,
    absent_player_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    plan = await _get_plan_or_404(db, plan_id)
    snapshot = await load_plan_snapshot(db, plan)
    result = calculate_valid_configurations(
        snapshot,
        absent_player_id,
        await list_players(db),
        max_assignments=settings.max_rotation_assignments,
    )
    return RotationResponse(
        map_id=plan.map_id,
        absent_player_id=absent_player_id,
        configurations=result.configurations,
        errors=result.errors,
        enumerated=result.enumerated,
    )
