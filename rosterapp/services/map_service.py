"""Map and game plan persistence, plus snapshot loading for the balance engine."""

import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.models.game_plan import GamePlan, GamePlanPlayer
from rosterapp.models.map import Map
from rosterapp.services.roster import MapSnapshot, PlayerAssignment, assignment_from_dict, assignment_to_dict

logger = logging.getLogger(__name__)

DEFAULT_PLAN_NAME = "Nouveau plan"


@dataclass
class PlayerAssignmentInput:
    user_id: int
    assignment_ids: list[int]
    main_assignment_id: int | None = None


def normalize_assignments(raw_assignments: list[dict]) -> list[dict]:
    """Round-trip stored assignment dicts through the roster model.

    Raises ValueError on a malformed zone.
    """
    return [assignment_to_dict(assignment_from_dict(raw)) for raw in raw_assignments]


# ---------------------------------------------------------------------------
# Maps
# ---------------------------------------------------------------------------


def _normalize_template(template: dict | None) -> dict:
    return {"assignments": normalize_assignments((template or {}).get("assignments", []))}


async def get_map(db: AsyncSession, map_id: str) -> Map | None:
    result = await db.execute(select(Map).where(Map.id == map_id))
    return result.scalar_one_or_none()


async def list_maps(db: AsyncSession) -> list[Map]:
    result = await db.execute(select(Map).order_by(Map.name))
    return list(result.scalars().all())


async def upsert_map(
    db: AsyncSession,
    map_id: str,
    name: str | None = None,
    images: list[str] | None = None,
    template: dict | None = None,
) -> Map:
    """Create the map if missing, otherwise overwrite only the given fields."""
    game_map = await get_map(db, map_id)
    if game_map is None:
        game_map = Map(
            id=map_id,
            name=name or map_id,
            images=images or [],
            template=_normalize_template(template),
        )
        db.add(game_map)
    else:
        if name:
            game_map.name = name
        if images is not None:
            game_map.images = images
        if template is not None:
            game_map.template = _normalize_template(template)
    await db.commit()
    await db.refresh(game_map)
    logger.info("Map %s saved", map_id)
    return game_map


# ---------------------------------------------------------------------------
# Game plans
# ---------------------------------------------------------------------------


async def get_plan(db: AsyncSession, plan_id: int) -> GamePlan | None:
    result = await db.execute(select(GamePlan).where(GamePlan.id == plan_id))
    return result.scalar_one_or_none()


async def list_plans_for_map(db: AsyncSession, map_id: str) -> list[GamePlan]:
    result = await db.execute(
        select(GamePlan).where(GamePlan.map_id == map_id).order_by(GamePlan.name, GamePlan.id)
    )
    return list(result.scalars().all())


async def get_first_plan(db: AsyncSession, map_id: str) -> GamePlan | None:
    """The plan a map displays by default: first by name."""
    plans = await list_plans_for_map(db, map_id)
    return plans[0] if plans else None


async def get_plan_players(db: AsyncSession, plan_id: int) -> list[GamePlanPlayer]:
    result = await db.execute(
        select(GamePlanPlayer)
        .where(GamePlanPlayer.game_plan_id == plan_id)
        .order_by(GamePlanPlayer.id)
    )
    return list(result.scalars().all())


async def create_plan(db: AsyncSession, game_map: Map, name: str | None = None) -> GamePlan:
    """New plan seeded with the map template's assignments and no players."""
    template = game_map.template or {}
    plan = GamePlan(
        map_id=game_map.id,
        name=name or DEFAULT_PLAN_NAME,
        assignments=list(template.get("assignments", [])),
    )
    db.add(plan)
    await db.commit()
    await db.refresh(plan)
    logger.info("Game plan %s created for map %s", plan.id, game_map.id)
    return plan


async def update_plan(
    db: AsyncSession,
    plan: GamePlan,
    name: str | None = None,
    assignments: list[dict] | None = None,
    players: list[PlayerAssignmentInput] | None = None,
) -> GamePlan:
    """Update a plan; a given player list replaces the stored one wholesale.

    Players with no assignment are dropped rather than stored empty.
    """
    if name is not None:
        plan.name = name
    if assignments is not None:
        plan.assignments = normalize_assignments(assignments)

    if players is not None:
        await db.execute(delete(GamePlanPlayer).where(GamePlanPlayer.game_plan_id == plan.id))
        seen: set[int] = set()
        for row in players:
            if not row.assignment_ids or row.user_id in seen:
                continue
            seen.add(row.user_id)
            db.add(
                GamePlanPlayer(
                    game_plan_id=plan.id,
                    user_id=row.user_id,
                    assignment_ids=list(dict.fromkeys(row.assignment_ids)),
                    main_assignment_id=row.main_assignment_id,
                )
            )

    await db.commit()
    await db.refresh(plan)
    logger.info("Game plan %s updated", plan.id)
    return plan


async def delete_plan(db: AsyncSession, plan: GamePlan) -> None:
    await db.execute(delete(GamePlanPlayer).where(GamePlanPlayer.game_plan_id == plan.id))
    await db.delete(plan)
    await db.commit()
    logger.info("Game plan %s deleted", plan.id)


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


def build_snapshot(
    game_map: Map, plan: GamePlan | None, plan_players: list[GamePlanPlayer]
) -> MapSnapshot:
    assignments = plan.assignments if plan is not None else []
    return MapSnapshot(
        id=game_map.id,
        name=game_map.name,
        images=tuple(game_map.images or []),
        assignments=tuple(assignment_from_dict(raw) for raw in assignments),
        players=tuple(
            PlayerAssignment(
                user_id=str(row.user_id),
                assignment_ids=tuple(row.assignment_ids or []),
                main_assignment_id=row.main_assignment_id,
            )
            for row in plan_players
        ),
    )


async def load_map_snapshot(db: AsyncSession, game_map: Map) -> MapSnapshot:
    """Snapshot of a map's default (first) plan; empty when it has none."""
    plan = await get_first_plan(db, game_map.id)
    plan_players = await get_plan_players(db, plan.id) if plan is not None else []
    return build_snapshot(game_map, plan, plan_players)


async def load_plan_snapshot(db: AsyncSession, plan: GamePlan) -> MapSnapshot:
    game_map = await get_map(db, plan.map_id)
    if game_map is None:
        raise ValueError(f"Map {plan.map_id} not found for plan {plan.id}")
    return build_snapshot(game_map, plan, await get_plan_players(db, plan.id))


async def load_all_map_snapshots(db: AsyncSession) -> list[MapSnapshot]:
    return [await load_map_snapshot(db, game_map) for game_map in await list_maps(db)]
