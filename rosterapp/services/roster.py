"""Plain roster snapshots handed to the balance and rotation engines.

A snapshot is assembled from one GamePlan (its assignment list plus the
per-player coverage rows) and is never mutated by the engines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Union


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class RectZone:
    """Legacy axis-aligned rectangle, in percentage coordinates."""
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str = field(default="rect", init=False)


@dataclass(frozen=True)
class PolygonZone:
    points: tuple[Point, ...]
    kind: str = field(default="polygon", init=False)


@dataclass(frozen=True)
class MultiPolygonZone:
    polygons: tuple[tuple[Point, ...], ...]
    kind: str = field(default="multi", init=False)


Zone = Union[RectZone, PolygonZone, MultiPolygonZone]


def _parse_points(raw: Iterable[Any]) -> tuple[Point, ...]:
    return tuple(Point(x=float(p["x"]), y=float(p["y"])) for p in raw)


def parse_zone(raw: dict[str, Any]) -> Zone:
    """Turn a stored zone dict into its explicit variant.

    Raises ValueError when the dict matches none of the three shapes.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Zone must be an object, got {type(raw).__name__}")
    try:
        if "polygons" in raw:
            return MultiPolygonZone(polygons=tuple(_parse_points(poly) for poly in raw["polygons"]))
        if "points" in raw:
            return PolygonZone(points=_parse_points(raw["points"]))
        if all(k in raw for k in ("x1", "y1", "x2", "y2")):
            return RectZone(
                x1=float(raw["x1"]), y1=float(raw["y1"]),
                x2=float(raw["x2"]), y2=float(raw["y2"]),
            )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed zone: {exc}") from exc
    raise ValueError("Zone must define x1/y1/x2/y2, points or polygons")


def zone_to_dict(zone: Zone) -> dict[str, Any]:
    if isinstance(zone, MultiPolygonZone):
        return {"polygons": [[{"x": p.x, "y": p.y} for p in poly] for poly in zone.polygons]}
    if isinstance(zone, PolygonZone):
        return {"points": [{"x": p.x, "y": p.y} for p in zone.points]}
    return {"x1": zone.x1, "y1": zone.y1, "x2": zone.x2, "y2": zone.y2}


def zone_polygons(zone: Zone) -> list[list[Point]]:
    """Every zone variant as a list of polygons (rectangles become 4 corners)."""
    if isinstance(zone, MultiPolygonZone):
        return [list(poly) for poly in zone.polygons]
    if isinstance(zone, PolygonZone):
        return [list(zone.points)]
    return [[
        Point(zone.x1, zone.y1),
        Point(zone.x2, zone.y1),
        Point(zone.x2, zone.y2),
        Point(zone.x1, zone.y2),
    ]]


def polygon_centroid(points: list[Point]) -> Point:
    if not points:
        return Point(0.0, 0.0)
    return Point(
        x=sum(p.x for p in points) / len(points),
        y=sum(p.y for p in points) / len(points),
    )


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Player:
    id: str
    name: str


@dataclass(frozen=True)
class Assignment:
    id: int
    name: str
    x: float = 0.0
    y: float = 0.0
    zone: Zone | None = None
    floor: int | None = None


@dataclass(frozen=True)
class PlayerAssignment:
    user_id: str
    assignment_ids: tuple[int, ...] = ()
    main_assignment_id: int | None = None

    def __post_init__(self) -> None:
        # Ordered set: keep first occurrence of each id
        object.__setattr__(self, "assignment_ids", tuple(dict.fromkeys(self.assignment_ids)))


@dataclass(frozen=True)
class MapSnapshot:
    id: str
    name: str
    assignments: tuple[Assignment, ...] = ()
    players: tuple[PlayerAssignment, ...] = ()
    images: tuple[str, ...] = ()

    def assignment_name(self, assignment_id: int) -> str:
        for assignment in self.assignments:
            if assignment.id == assignment_id:
                return assignment.name
        return str(assignment_id)


def player_name(players: Iterable[Player], player_id: str) -> str:
    """Display name for a player id, falling back to the raw id."""
    for player in players:
        if player.id == player_id:
            return player.name
    return player_id


def assignment_from_dict(raw: dict[str, Any]) -> Assignment:
    """Build an Assignment from its stored JSON form (zone is optional)."""
    zone_raw = raw.get("zone")
    return Assignment(
        id=int(raw["id"]),
        name=str(raw.get("name", raw["id"])),
        x=float(raw.get("x", 0.0)),
        y=float(raw.get("y", 0.0)),
        zone=parse_zone(zone_raw) if zone_raw is not None else None,
        floor=raw.get("floor"),
    )


def assignment_to_dict(assignment: Assignment) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": assignment.id,
        "name": assignment.name,
        "x": assignment.x,
        "y": assignment.y,
    }
    if assignment.zone is not None:
        data["zone"] = zone_to_dict(assignment.zone)
    if assignment.floor is not None:
        data["floor"] = assignment.floor
    return data
