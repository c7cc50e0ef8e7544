"""Tests for the rotation search and match game plan building."""

from rosterapp.services.roster import Assignment, MapSnapshot, PlayerAssignment
from rosterapp.services.rotation_service import (
    DEFAULT_COLOR,
    build_match_game_plan,
    calculate_valid_configurations,
    get_assignment_color,
)


def _map(assignments: dict[int, str], players: list[tuple[str, tuple[int, ...]]], map_id="test-map") -> MapSnapshot:
    return MapSnapshot(
        id=map_id,
        name=map_id.replace("-", " ").title(),
        assignments=tuple(Assignment(id=aid, name=name) for aid, name in assignments.items()),
        players=tuple(PlayerAssignment(uid, ids) for uid, ids in players),
    )


# ---------------------------------------------------------------------------
# Valid configurations
# ---------------------------------------------------------------------------


class TestValidConfigurations:
    def test_every_absent_player_leaves_a_rotation(self, balanced_map):
        for row in balanced_map.players:
            result = calculate_valid_configurations(balanced_map, row.user_id)
            assert result.errors == []
            assert len(result.configurations) > 0

    def test_configurations_are_sound(self, balanced_map):
        rows = {row.user_id: row for row in balanced_map.players}
        for absent in rows:
            result = calculate_valid_configurations(balanced_map, absent)
            for config in result.configurations:
                assert absent not in config
                assert len(config) == len(balanced_map.assignments)
                assert len(set(config.values())) == len(balanced_map.assignments)
                for player_id, assignment_id in config.items():
                    assert assignment_id in rows[player_id].assignment_ids

    def test_exact_configurations_in_search_order(self, balanced_map):
        result = calculate_valid_configurations(balanced_map, "player-1")
        assert result.configurations == [
            {"player-4": 1, "player-2": 2, "player-5": 3, "player-3": 4},
            {"player-5": 1, "player-2": 2, "player-3": 3, "player-4": 4},
        ]

    def test_flexible_players_give_both_orderings(self):
        snapshot = _map(
            {1: "Position 1", 2: "Position 2"},
            [("player-1", (1, 2)), ("player-2", (1, 2)), ("player-3", (1, 2))],
        )
        result = calculate_valid_configurations(snapshot, "player-3")
        assert result.configurations == [
            {"player-1": 1, "player-2": 2},
            {"player-2": 1, "player-1": 2},
        ]

    def test_rigid_roster_has_one_configuration(self):
        snapshot = _map(
            {1: "Position 1", 2: "Position 2"},
            [("player-1", (1,)), ("player-2", (2,)), ("player-3", (1, 2))],
        )
        result = calculate_valid_configurations(snapshot, "player-3")
        assert result.configurations == [{"player-1": 1, "player-2": 2}]

    def test_unknown_absent_player_keeps_everyone(self):
        snapshot = _map({1: "Position 1"}, [("player-1", (1,)), ("player-2", (1,))])
        result = calculate_valid_configurations(snapshot, "nobody")
        assert result.configurations == [{"player-1": 1}, {"player-2": 1}]

    def test_result_carries_map_id(self, balanced_map):
        assert calculate_valid_configurations(balanced_map, "player-1").map_id == "balanced-map"

    def test_coverable_but_too_few_players(self):
        snapshot = _map(
            {1: "A", 2: "B", 3: "C"},
            [("player-1", (1, 2, 3)), ("player-2", (1, 2, 3)), ("player-3", (1, 2, 3))],
        )
        result = calculate_valid_configurations(snapshot, "player-3")
        assert result.errors == []
        assert result.enumerated is True
        assert result.configurations == []


# ---------------------------------------------------------------------------
# Coverage gate
# ---------------------------------------------------------------------------


class TestCoverageGate:
    def test_absent_sole_coverer(self, mock_players):
        snapshot = _map(
            {1: "Front", 2: "Back", 3: "Left", 4: "Right"},
            [
                ("player-1", (1,)),
                ("player-2", (2, 3)),
                ("player-3", (3, 4)),
                ("player-4", (4, 2)),
                ("player-5", (2, 3)),
            ],
        )
        result = calculate_valid_configurations(snapshot, "player-1", mock_players)
        assert result.configurations == []
        assert result.errors == ["No player can cover Front when Sib is absent"]

    def test_absent_name_falls_back_to_id(self):
        snapshot = _map({1: "Front"}, [("player-1", (1,))])
        result = calculate_valid_configurations(snapshot, "player-1")
        assert result.errors == ["No player can cover Front when player-1 is absent"]

    def test_one_error_per_uncovered_assignment(self):
        snapshot = _map({1: "A", 2: "B", 3: "C"}, [("player-1", (1, 2)), ("player-2", (3,))])
        result = calculate_valid_configurations(snapshot, "player-1")
        assert result.errors == [
            "No player can cover A when player-1 is absent",
            "No player can cover B when player-1 is absent",
        ]
        assert result.configurations == []


# ---------------------------------------------------------------------------
# Enumeration limit
# ---------------------------------------------------------------------------


class TestEnumerationLimit:
    def test_large_map_skips_enumeration(self):
        snapshot = _map({1: "A", 2: "B", 3: "C"}, [("p1", (1, 2)), ("p2", (2, 3)), ("p3", (3, 1))])
        result = calculate_valid_configurations(snapshot, "nobody", max_assignments=2)
        assert result.enumerated is False
        assert result.configurations == []
        assert result.errors == []

    def test_gate_errors_still_reported_above_limit(self):
        snapshot = _map({1: "A", 2: "B", 3: "C"}, [("p1", (1, 2))])
        result = calculate_valid_configurations(snapshot, "nobody", max_assignments=2)
        assert result.errors == ["No player can cover C when nobody is absent"]

    def test_map_at_limit_is_enumerated(self, balanced_map):
        result = calculate_valid_configurations(balanced_map, "player-1", max_assignments=4)
        assert result.enumerated is True
        assert len(result.configurations) == 2


# ---------------------------------------------------------------------------
# Match game plan
# ---------------------------------------------------------------------------


class TestMatchGamePlan:
    def test_assignment_colors(self):
        assert get_assignment_color(1) == "#ff6b6b"
        assert get_assignment_color(4) == "#a66cff"
        assert get_assignment_color(9) == DEFAULT_COLOR

    def test_plan_uses_first_configuration(self, balanced_map, mock_players):
        plan = build_match_game_plan([balanced_map], "player-1", mock_players)
        assert plan.absent_player_name == "Sib"
        [map_plan] = plan.maps
        assert map_plan.errors == []
        assert [(a.player_name, a.assignment_name) for a in map_plan.assignments] == [
            ("Shadow", "Front"),
            ("Nyork", "Back"),
            ("Phoenix", "Left"),
            ("Kazuya", "Right"),
        ]
        assert map_plan.assignments[0].assignment_color == "#ff6b6b"

    def test_uncoverable_map_reports_errors(self, mock_players):
        snapshot = _map({1: "Front"}, [("player-1", (1,))], map_id="solo-map")
        plan = build_match_game_plan([snapshot], "player-1", mock_players)
        [map_plan] = plan.maps
        assert map_plan.assignments == []
        assert map_plan.errors == ["No player can cover Front when Sib is absent"]

    def test_no_complete_rotation_reports_error(self):
        snapshot = _map({1: "A", 2: "B"}, [("p1", (1, 2)), ("p2", (1, 2))], map_id="tight-map")
        [map_plan] = build_match_game_plan([snapshot], "p2").maps
        assert map_plan.assignments == []
        assert len(map_plan.errors) == 1

    def test_to_dict(self, balanced_map, mock_players):
        data = build_match_game_plan([balanced_map], "player-1", mock_players).to_dict()
        assert data["absent_player_id"] == "player-1"
        assert data["maps"][0]["map_id"] == "balanced-map"
        assert data["maps"][0]["assignments"][0] == {
            "player_id": "player-4",
            "player_name": "Shadow",
            "assignment_id": 1,
            "assignment_name": "Front",
            "assignment_color": "#ff6b6b",
        }
