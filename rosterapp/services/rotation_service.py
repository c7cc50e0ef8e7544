"""Rotation service: how the team reshuffles when one player is absent.

calculate_valid_configurations first checks that every assignment is still
covered by someone present, then enumerates every way to give each assignment
to a distinct eligible present player. The enumeration is exponential in the
number of assignments, so maps above a configured size only get the coverage
verdict.

build_match_game_plan turns the first configuration of every map into the
plan stored on a MATCH calendar event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from rosterapp.services.roster import MapSnapshot, Player, PlayerAssignment, player_name

logger = logging.getLogger(__name__)

# Assignment colours are fixed across maps, keyed by assignment id
ASSIGNMENT_COLORS: dict[int, str] = {
    1: "#ff6b6b",
    2: "#4ecdc4",
    3: "#ffe66d",
    4: "#a66cff",
}
DEFAULT_COLOR = "#888888"


def get_assignment_color(assignment_id: int) -> str:
    return ASSIGNMENT_COLORS.get(assignment_id, DEFAULT_COLOR)


@dataclass
class RotationResult:
    map_id: str
    configurations: list[dict[str, int]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    # False when the map was too large to enumerate; only the gate ran
    enumerated: bool = True


@dataclass
class MapAssignment:
    player_id: str
    player_name: str
    assignment_id: int
    assignment_name: str
    assignment_color: str


@dataclass
class MapGamePlan:
    map_id: str
    map_name: str
    assignments: list[MapAssignment] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class MatchGamePlan:
    absent_player_id: str
    absent_player_name: str
    maps: list[MapGamePlan] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "absent_player_id": self.absent_player_id,
            "absent_player_name": self.absent_player_name,
            "maps": [
                {
                    "map_id": m.map_id,
                    "map_name": m.map_name,
                    "assignments": [vars(a).copy() for a in m.assignments],
                    "errors": list(m.errors),
                }
                for m in self.maps
            ],
        }


# ---------------------------------------------------------------------------
# Feasibility search
# ---------------------------------------------------------------------------


def _uncoverable_errors(
    map_snapshot: MapSnapshot,
    present: list[PlayerAssignment],
    absent_player_id: str,
    players: list[Player],
) -> list[str]:
    absent_name = player_name(players, absent_player_id)
    return [
        f"No player can cover {assignment.name} when {absent_name} is absent"
        for assignment in map_snapshot.assignments
        if not any(assignment.id in row.assignment_ids for row in present)
    ]


def _enumerate(
    remaining: list[int],
    present: list[PlayerAssignment],
    current: dict[str, int],
    used: set[str],
    found: list[dict[str, int]],
) -> None:
    if not remaining:
        found.append(dict(current))
        return

    assignment_id, rest = remaining[0], remaining[1:]
    for row in present:
        if row.user_id in used or assignment_id not in row.assignment_ids:
            continue
        current[row.user_id] = assignment_id
        used.add(row.user_id)
        _enumerate(rest, present, current, used, found)
        used.discard(row.user_id)
        del current[row.user_id]


def calculate_valid_configurations(
    map_snapshot: MapSnapshot,
    absent_player_id: str,
    players: Iterable[Player] = (),
    max_assignments: int | None = None,
) -> RotationResult:
    """Every player -> assignment mapping that covers the map without the absent player.

    Assignments are tried in ascending id order and players in roster order,
    which fixes the order configurations are returned in.
    """
    roster = list(players)
    present = [row for row in map_snapshot.players if row.user_id != absent_player_id]

    errors = _uncoverable_errors(map_snapshot, present, absent_player_id, roster)
    if errors:
        logger.info(
            "Map %s cannot be covered without %s: %d uncovered assignment(s)",
            map_snapshot.id, absent_player_id, len(errors),
        )
        return RotationResult(map_id=map_snapshot.id, errors=errors)

    assignment_ids = sorted({a.id for a in map_snapshot.assignments})
    if max_assignments is not None and len(assignment_ids) > max_assignments:
        logger.warning(
            "Map %s has %d assignments (limit %d); skipping rotation enumeration",
            map_snapshot.id, len(assignment_ids), max_assignments,
        )
        return RotationResult(map_id=map_snapshot.id, enumerated=False)

    configurations: list[dict[str, int]] = []
    _enumerate(assignment_ids, present, {}, set(), configurations)
    logger.debug(
        "Map %s without %s: %d configuration(s)",
        map_snapshot.id, absent_player_id, len(configurations),
    )
    return RotationResult(map_id=map_snapshot.id, configurations=configurations)


# ---------------------------------------------------------------------------
# Match game plan
# ---------------------------------------------------------------------------


def build_map_game_plan(
    map_snapshot: MapSnapshot,
    absent_player_id: str,
    players: Iterable[Player] = (),
    max_assignments: int | None = None,
) -> MapGamePlan:
    roster = list(players)
    result = calculate_valid_configurations(
        map_snapshot, absent_player_id, roster, max_assignments=max_assignments
    )
    plan = MapGamePlan(map_id=map_snapshot.id, map_name=map_snapshot.name, errors=list(result.errors))
    if result.errors:
        return plan
    if not result.enumerated:
        plan.errors.append(f"{map_snapshot.name} has too many assignments to plan a rotation")
        return plan
    if not result.configurations:
        plan.errors.append(f"No complete rotation for {map_snapshot.name} without {player_name(roster, absent_player_id)}")
        return plan

    by_assignment = sorted(result.configurations[0].items(), key=lambda item: item[1])
    plan.assignments = [
        MapAssignment(
            player_id=user_id,
            player_name=player_name(roster, user_id),
            assignment_id=assignment_id,
            assignment_name=map_snapshot.assignment_name(assignment_id),
            assignment_color=get_assignment_color(assignment_id),
        )
        for user_id, assignment_id in by_assignment
    ]
    return plan


def build_match_game_plan(
    snapshots: Iterable[MapSnapshot],
    absent_player_id: str,
    players: Iterable[Player] = (),
    max_assignments: int | None = None,
) -> MatchGamePlan:
    roster = list(players)
    return MatchGamePlan(
        absent_player_id=absent_player_id,
        absent_player_name=player_name(roster, absent_player_id),
        maps=[
            build_map_game_plan(snapshot, absent_player_id, roster, max_assignments=max_assignments)
            for snapshot in snapshots
        ],
    )
