"""
Tests for the force-directed placement algorithm.

Tests cover:
- Degenerate inputs (no components, zero-area board, single component)
- Determinism, board bounds and IO pinning
- Repulsion of coincident components
- Attraction along nets
- Displacement clamp modes
- Configuration validation
"""

import math
import pytest

from circuitmind.board.abstraction import Board, BoardSize, Net, Zone
from circuitmind.placement.force_directed import (
    ForceDirectedPlacer,
    PlacementConfig,
    PlacementState,
    place,
    total_wirelength,
)
from circuitmind.placement.zones import classify


class TestDegenerateInputs:
    """Test guards against empty and zero-area inputs."""

    def test_empty_component_list(self):
        assert place([], [], BoardSize(600.0, 400.0)) == []

    @pytest.mark.parametrize("width,height", [(0.0, 400.0), (600.0, 0.0), (0.0, 0.0), (-10.0, -10.0)])
    def test_zero_area_board_leaves_positions(self, make_component, width, height):
        comps = [make_component("a", 10.0, 20.0), make_component("b", 10.0, 20.0)]
        result = place(comps, [], BoardSize(width, height))
        assert [(c.x, c.y) for c in result] == [(10.0, 20.0), (10.0, 20.0)]

    def test_single_component_stays(self, make_component):
        comps = [make_component("a", 100.0, 100.0)]
        result = place(comps, [], BoardSize(600.0, 400.0))
        assert (result[0].x, result[0].y) == (100.0, 100.0)

    def test_off_board_component_is_clamped(self, make_component):
        comps = [make_component("a", -50.0, 500.0)]
        result = place(comps, [], BoardSize(600.0, 400.0))
        assert (result[0].x, result[0].y) == (0.0, 400.0)

    def test_zero_iterations_is_identity(self, make_component, board_size):
        comps = [make_component("a", 10.0, 10.0), make_component("b", 20.0, 20.0)]
        result = place(comps, [], board_size, iterations=0)
        assert [(c.x, c.y) for c in result] == [(10.0, 10.0), (20.0, 20.0)]


class TestPlacementProperties:
    """Test invariants over a realistic board."""

    def test_deterministic(self, raw_components, nets, board_size):
        comps = classify(raw_components)
        first = place(comps, nets, board_size)
        second = place(comps, nets, board_size)
        assert [(c.x, c.y) for c in first] == [(c.x, c.y) for c in second]

    def test_within_bounds(self, raw_components, nets, board_size):
        for comp in place(classify(raw_components), nets, board_size):
            assert 0.0 <= comp.x <= board_size.width
            assert 0.0 <= comp.y <= board_size.height

    def test_io_components_pinned(self, raw_components, nets, board_size):
        comps = classify(raw_components)
        before = {c.id: (c.x, c.y) for c in comps if c.zone == Zone.IO}
        after = {c.id: (c.x, c.y) for c in place(comps, nets, board_size)
                 if c.zone == Zone.IO}
        assert before and before == after

    def test_identity_and_order_preserved(self, raw_components, nets, board_size):
        comps = classify(raw_components)
        result = place(comps, nets, board_size)
        assert [(c.id, c.zone, c.reference, c.width, c.height) for c in result] == \
            [(c.id, c.zone, c.reference, c.width, c.height) for c in comps]

    def test_input_not_mutated(self, raw_components, nets, board_size):
        comps = classify(raw_components)
        before = [(c.x, c.y) for c in comps]
        place(comps, nets, board_size)
        assert [(c.x, c.y) for c in comps] == before

    def test_dangling_net_members_skipped(self, make_component, board_size):
        comps = [make_component("a", 100.0, 100.0), make_component("b", 300.0, 200.0)]
        nets = [Net("N1", ["a", "missing", "b"]), Net("N2", ["ghost"]), Net("N3", [])]
        result = place(comps, nets, board_size)
        assert len(result) == 2

    def test_repeated_member_in_net(self, make_component, board_size):
        comps = [make_component("a", 100.0, 100.0), make_component("b", 300.0, 200.0)]
        result = place(comps, [Net("N1", ["a", "a", "b"])], board_size)
        assert all(board_size.contains(c.x, c.y) for c in result)


class TestForces:
    """Test repulsion and attraction behaviour."""

    def test_coincident_components_pushed_apart(self, make_component, board_size):
        comps = [make_component("a", 300.0, 200.0), make_component("b", 300.0, 200.0)]
        result = place(comps, [], board_size, iterations=1)
        assert (result[0].x, result[0].y) != (result[1].x, result[1].y)
        for comp in result:
            assert board_size.contains(comp.x, comp.y)

    def test_coincident_at_corner_separates(self, make_component, board_size):
        comps = [make_component("a", 0.0, 0.0), make_component("b", 0.0, 0.0)]
        result = place(comps, [], board_size, iterations=1)
        assert (result[0].x, result[0].y) != (result[1].x, result[1].y)

    def test_net_pulls_distant_pair_together(self, make_component, board_size):
        # k = sqrt(600*400/2) ~ 346; at distance 400 attraction (462) beats
        # repulsion (300), and each component moves by the temperature (60)
        comps = [make_component("a", 100.0, 200.0), make_component("b", 500.0, 200.0)]
        result = place(comps, [Net("N1", ["a", "b"])], board_size, iterations=1)
        assert result[0].x == pytest.approx(160.0)
        assert result[1].x == pytest.approx(440.0)
        assert result[0].y == result[1].y == 200.0

    def test_unconnected_pair_repels(self, make_component, board_size):
        comps = [make_component("a", 100.0, 200.0), make_component("b", 500.0, 200.0)]
        result = place(comps, [], board_size, iterations=1)
        assert result[0].x == pytest.approx(40.0)
        assert result[1].x == pytest.approx(560.0)

    def test_connected_components_end_closer(self, make_component, board_size):
        comps = [
            make_component("a", 50.0, 50.0),
            make_component("b", 550.0, 350.0),
            make_component("c", 300.0, 200.0),
        ]
        nets = [Net("N1", ["a", "b"])]
        result = place(comps, nets, board_size)
        assert total_wirelength(result, nets) < total_wirelength(comps, nets)

    def test_pinned_component_attracts_without_moving(self, make_component, board_size):
        comps = [
            make_component("j", 0.0, 200.0, zone=Zone.IO),
            make_component("u", 500.0, 200.0),
        ]
        result = place(comps, [Net("N1", ["j", "u"])], board_size, iterations=1)
        assert (result[0].x, result[0].y) == (0.0, 200.0)
        assert result[1].x < 500.0


class TestClampModes:
    """Test the per-axis and vector displacement limits."""

    def _first_step(self, make_component, clamp_mode):
        comps = [make_component("a", 300.0, 200.0), make_component("b", 300.0, 200.0)]
        board = Board(components=comps, size=BoardSize(600.0, 400.0))
        config = PlacementConfig(iterations=1, clamp_mode=clamp_mode)
        result = ForceDirectedPlacer(board, config).place()
        return [(c.x - 300.0, c.y - 200.0) for c in result]

    def test_axis_mode_limits_each_axis(self, make_component):
        for dx, dy in self._first_step(make_component, "axis"):
            assert abs(dx) <= 60.0 + 1e-9
            assert abs(dy) <= 60.0 + 1e-9

    def test_vector_mode_limits_magnitude(self, make_component):
        for dx, dy in self._first_step(make_component, "vector"):
            assert math.hypot(dx, dy) <= 60.0 + 1e-9
            assert math.hypot(dx, dy) == pytest.approx(60.0)

    def test_coincident_pair_moves_in_opposite_directions(self, make_component):
        (dx1, dy1), (dx2, dy2) = self._first_step(make_component, "vector")
        assert dx1 == pytest.approx(-dx2)
        assert dy1 == pytest.approx(-dy2)


class TestPlacerRun:
    """Test the simulation loop."""

    def test_callback_each_iteration(self, make_component, board_size):
        comps = [make_component("a", 100.0, 100.0), make_component("b", 200.0, 100.0)]
        board = Board(components=comps, size=board_size)
        seen = []

        def callback(state: PlacementState):
            seen.append((state.iteration, state.temperature))

        ForceDirectedPlacer(board, PlacementConfig(iterations=5)).run(callback)

        assert [i for i, _ in seen] == [0, 1, 2, 3, 4]
        assert seen[0][1] == pytest.approx(60.0)
        assert seen[1][1] == pytest.approx(57.0)

    def test_temperature_decays(self, make_component, board_size):
        comps = [make_component("a", 100.0, 100.0), make_component("b", 200.0, 100.0)]
        board = Board(components=comps, size=board_size)
        state = ForceDirectedPlacer(board, PlacementConfig(iterations=3)).run()
        assert state.temperature == pytest.approx(60.0 * 0.95 ** 3)

    def test_ideal_distance(self, make_component, board_size):
        comps = [make_component("a", 0.0, 0.0), make_component("b", 0.0, 0.0)]
        placer = ForceDirectedPlacer(Board(components=comps, size=board_size))
        assert placer.ideal_distance() == pytest.approx(math.sqrt(120000.0))

    def test_ideal_distance_degenerate(self):
        placer = ForceDirectedPlacer(Board(components=[], size=BoardSize(600.0, 400.0)))
        assert placer.ideal_distance() is None


class TestPlacementConfig:
    """Test configuration validation."""

    @pytest.mark.parametrize("kwargs", [
        {"iterations": -1},
        {"iterations": 2.5},
        {"iterations": "10"},
        {"cooling_factor": 0.0},
        {"cooling_factor": 1.5},
        {"initial_temperature_ratio": -0.1},
        {"clamp_mode": "diagonal"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            PlacementConfig(**kwargs)

    def test_custom_pin_zones(self, make_component, board_size):
        comps = [
            make_component("p", 100.0, 100.0, zone=Zone.POWER),
            make_component("d", 100.0, 100.0),
        ]
        board = Board(components=comps, size=board_size)
        config = PlacementConfig(iterations=3, pin_zones={Zone.POWER})
        result = ForceDirectedPlacer(board, config).place()
        assert (result[0].x, result[0].y) == (100.0, 100.0)
        assert (result[1].x, result[1].y) != (100.0, 100.0)


class TestTotalWirelength:
    """Test the wirelength metric."""

    def test_pair_distance(self, make_component):
        comps = [make_component("a", 0.0, 0.0), make_component("b", 30.0, 40.0)]
        assert total_wirelength(comps, [Net("N1", ["a", "b"])]) == pytest.approx(50.0)

    def test_dangling_members_ignored(self, make_component):
        comps = [make_component("a", 0.0, 0.0), make_component("b", 30.0, 40.0)]
        nets = [Net("N1", ["a", "ghost", "b"]), Net("N2", ["phantom"])]
        assert total_wirelength(comps, nets) == pytest.approx(50.0)

    def test_duplicate_id_uses_first(self, make_component):
        comps = [
            make_component("a", 0.0, 0.0),
            make_component("a", 500.0, 300.0),
            make_component("b", 30.0, 40.0),
        ]
        assert total_wirelength(comps, [Net("N1", ["a", "b"])]) == pytest.approx(50.0)
