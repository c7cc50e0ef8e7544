"""Balance service: checks whether one map's roster is a fair rotation.

Rules (all violations are collected, in this order):
  1. Each assignment is covered by at least 2 players.
  2. Each player covers at least 2 assignments.
  3. Each player covers at most 2 assignments.
  4. Two assignments covered by exactly 2 players may not share the same pair.

Messages are the French strings shown in the roster UI. Unknown player or
assignment ids are displayed raw rather than rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from rosterapp.services.roster import MapSnapshot, Player, player_name

logger = logging.getLogger(__name__)

MIN_PLAYERS_PER_ASSIGNMENT = 2
MIN_ASSIGNMENTS_PER_PLAYER = 2
MAX_ASSIGNMENTS_PER_PLAYER = 2


@dataclass
class BalanceResult:
    is_balanced: bool
    errors: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_player_assignments(map_snapshot: MapSnapshot, user_id: str) -> list[int]:
    """Assignment ids covered by a player, or [] if the player has no row."""
    for row in map_snapshot.players:
        if row.user_id == user_id:
            return list(row.assignment_ids)
    return []


def get_assignment_players(map_snapshot: MapSnapshot, assignment_id: int) -> list[str]:
    """Player ids covering an assignment, in roster order."""
    return [row.user_id for row in map_snapshot.players if assignment_id in row.assignment_ids]


def build_coverage_index(map_snapshot: MapSnapshot) -> dict[int, list[str]]:
    """Invert player -> assignments into assignment -> distinct players.

    Keys are in ascending assignment id order; each player list keeps roster
    order so that "first offender" messages are deterministic.
    """
    coverage: dict[int, list[str]] = {}
    for assignment_id in sorted({a.id for a in map_snapshot.assignments}):
        coverage[assignment_id] = list(
            dict.fromkeys(get_assignment_players(map_snapshot, assignment_id))
        )
    return coverage


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _check_assignment_coverage(
    map_snapshot: MapSnapshot, coverage: dict[int, list[str]], players: list[Player]
) -> list[str]:
    errors: list[str] = []
    for assignment_id, user_ids in coverage.items():
        if len(user_ids) >= MIN_PLAYERS_PER_ASSIGNMENT:
            continue
        assignment_name = map_snapshot.assignment_name(assignment_id)
        if not user_ids:
            errors.append(f"{assignment_name} n'a aucun joueur")
        else:
            errors.append(f"{assignment_name} n'a que {player_name(players, user_ids[0])}")
    return errors


def _check_player_minimum(map_snapshot: MapSnapshot, players: list[Player]) -> list[str]:
    errors: list[str] = []
    for row in map_snapshot.players:
        if len(row.assignment_ids) >= MIN_ASSIGNMENTS_PER_PLAYER:
            continue
        name = player_name(players, row.user_id)
        if not row.assignment_ids:
            errors.append(f"{name} n'a aucun poste")
        else:
            errors.append(f"{name} n'a que {map_snapshot.assignment_name(row.assignment_ids[0])}")
    return errors


def _check_player_maximum(map_snapshot: MapSnapshot, players: list[Player]) -> list[str]:
    return [
        f"{player_name(players, row.user_id)} a {len(row.assignment_ids)} postes "
        f"(max {MAX_ASSIGNMENTS_PER_PLAYER})"
        for row in map_snapshot.players
        if len(row.assignment_ids) > MAX_ASSIGNMENTS_PER_PLAYER
    ]


def _check_duplicate_pairs(
    map_snapshot: MapSnapshot, coverage: dict[int, list[str]], players: list[Player]
) -> list[str]:
    # Only assignments covered by exactly two players take part.
    pair_to_assignments: dict[tuple[str, ...], list[int]] = {}
    for assignment_id, user_ids in coverage.items():
        if len(user_ids) != 2:
            continue
        pair_to_assignments.setdefault(tuple(sorted(user_ids)), []).append(assignment_id)

    errors: list[str] = []
    for pair, assignment_ids in pair_to_assignments.items():
        if len(assignment_ids) < 2:
            continue
        assignment_names = " et ".join(map_snapshot.assignment_name(aid) for aid in assignment_ids)
        player_names = " et ".join(player_name(players, uid) for uid in pair)
        errors.append(f"{assignment_names} sont couverts uniquement par {player_names}")
    return errors


def check_balance(map_snapshot: MapSnapshot, players: Iterable[Player] = ()) -> BalanceResult:
    """Apply the four fairness rules to one map.

    `players` supplies display names; ids missing from it are shown raw.
    """
    roster = list(players)
    coverage = build_coverage_index(map_snapshot)

    errors = (
        _check_assignment_coverage(map_snapshot, coverage, roster)
        + _check_player_minimum(map_snapshot, roster)
        + _check_player_maximum(map_snapshot, roster)
        + _check_duplicate_pairs(map_snapshot, coverage, roster)
    )

    logger.debug("Balance check for map %s: %d error(s)", map_snapshot.id, len(errors))
    return BalanceResult(is_balanced=not errors, errors=errors)
