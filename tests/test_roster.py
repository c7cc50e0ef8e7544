"""Tests for roster snapshot parsing and zone helpers."""

import pytest

from rosterapp.services.roster import (
    MultiPolygonZone,
    Point,
    PolygonZone,
    RectZone,
    assignment_from_dict,
    assignment_to_dict,
    parse_zone,
    polygon_centroid,
    zone_polygons,
    zone_to_dict,
)


class TestParseZone:
    def test_rect(self):
        zone = parse_zone({"x1": 20, "y1": 20, "x2": 30, "y2": 30})
        assert zone == RectZone(20, 20, 30, 30)
        assert zone.kind == "rect"

    def test_polygon(self):
        zone = parse_zone({"points": [{"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 10, "y": 10}]})
        assert isinstance(zone, PolygonZone)
        assert zone.points[1] == Point(10, 0)

    def test_multi_polygon(self):
        zone = parse_zone({"polygons": [[{"x": 0, "y": 0}], [{"x": 5, "y": 5}]]})
        assert isinstance(zone, MultiPolygonZone)
        assert len(zone.polygons) == 2

    def test_unknown_shape(self):
        with pytest.raises(ValueError):
            parse_zone({"radius": 4})

    def test_malformed_points(self):
        with pytest.raises(ValueError):
            parse_zone({"points": [{"x": 1}]})

    def test_not_a_dict(self):
        with pytest.raises(ValueError):
            parse_zone([1, 2, 3])

    def test_round_trip_polygon(self):
        raw = {"points": [{"x": 1.0, "y": 2.0}, {"x": 3.0, "y": 4.0}]}
        assert zone_to_dict(parse_zone(raw)) == raw


class TestZoneGeometry:
    def test_rect_becomes_four_corners(self):
        [polygon] = zone_polygons(RectZone(0, 0, 10, 20))
        assert polygon == [Point(0, 0), Point(10, 0), Point(10, 20), Point(0, 20)]

    def test_multi_polygon_keeps_all(self):
        zone = MultiPolygonZone(polygons=((Point(0, 0),), (Point(1, 1), Point(2, 2))))
        assert len(zone_polygons(zone)) == 2

    def test_centroid(self):
        [polygon] = zone_polygons(RectZone(0, 0, 10, 20))
        assert polygon_centroid(polygon) == Point(5, 10)

    def test_centroid_of_nothing(self):
        assert polygon_centroid([]) == Point(0, 0)


class TestAssignmentDict:
    def test_from_dict(self):
        assignment = assignment_from_dict(
            {"id": 3, "name": "Left", "x": 25, "y": 75, "zone": {"x1": 20, "y1": 70, "x2": 30, "y2": 80}, "floor": 1}
        )
        assert assignment.id == 3
        assert assignment.name == "Left"
        assert assignment.floor == 1
        assert isinstance(assignment.zone, RectZone)

    def test_from_dict_without_zone(self):
        assignment = assignment_from_dict({"id": "7", "name": "Roof"})
        assert assignment.id == 7
        assert assignment.zone is None

    def test_to_dict_skips_missing_floor(self):
        data = assignment_to_dict(assignment_from_dict({"id": 1, "name": "Front", "x": 5, "y": 5}))
        assert data == {"id": 1, "name": "Front", "x": 5.0, "y": 5.0}
