"""
Force-Directed Placement

Fruchterman-Reingold style layout: every component repels every other
component, components sharing a net attract each other, and a decaying
temperature bounds how far anything may move in one iteration.

The run is a fixed-budget local improvement. There is no convergence
check; it stops after `iterations` steps, so the cost is
O(iterations * (n^2 + sum of squared net sizes)).

IO components stay where they are (connectors belong at the board edge,
which the caller decides). Input components are never mutated; forces are
accumulated in a fresh per-iteration array and written into copies at the
end.
"""

from dataclasses import dataclass, field, replace
import hashlib
import logging
import math
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from ..board.abstraction import Board, BoardSize, Component, Net, Zone

logger = logging.getLogger(__name__)

CLAMP_MODES = ("axis", "vector")


def _coincident_direction(key_a: str, key_b: str) -> Tuple[float, float]:
    """Deterministic unit vector separating two coincident components.

    The direction is derived from an MD5 hash of the sorted key pair, so it
    is reproducible across runs, and it flips sign when the keys are
    swapped so the two components are pushed apart rather than together.

    Args:
        key_a: Key of the component receiving the force
        key_b: Key of the other component

    Returns:
        (ux, uy) unit vector for key_a
    """
    first, second = sorted((key_a, key_b))
    h = hashlib.md5(f"{first}_{second}".encode()).hexdigest()
    # Use first 8 hex chars for x, next 8 for y, mapped to [-1, 1]
    x_val = int(h[:8], 16) / 0xFFFFFFFF * 2 - 1
    y_val = int(h[8:16], 16) / 0xFFFFFFFF * 2 - 1
    norm = math.hypot(x_val, y_val)
    if norm < 1e-9:
        x_val, y_val, norm = 1.0, 0.0, 1.0
    ux, uy = x_val / norm, y_val / norm
    if key_a != first:
        return (-ux, -uy)
    return (ux, uy)


@dataclass
class PlacementConfig:
    """Configuration for force-directed placement."""
    iterations: int = 50
    initial_temperature_ratio: float = 0.1  # temperature = board width * ratio
    cooling_factor: float = 0.95  # temperature multiplier after each iteration

    # "axis" limits each axis to the temperature independently (diagonal
    # moves may reach sqrt(2) * temperature); "vector" limits the magnitude.
    clamp_mode: str = "axis"

    # Zones whose components never move
    pin_zones: FrozenSet[Zone] = field(default_factory=lambda: frozenset({Zone.IO}))

    def __post_init__(self):
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int):
            raise ValueError(f"iterations must be an integer, got {self.iterations!r}")
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if not 0.0 < self.cooling_factor <= 1.0:
            raise ValueError(
                f"cooling_factor must be in (0, 1], got {self.cooling_factor}"
            )
        if self.initial_temperature_ratio < 0:
            raise ValueError(
                "initial_temperature_ratio must be >= 0, "
                f"got {self.initial_temperature_ratio}"
            )
        if self.clamp_mode not in CLAMP_MODES:
            raise ValueError(
                f"clamp_mode must be one of {CLAMP_MODES}, got {self.clamp_mode!r}"
            )
        self.pin_zones = frozenset(self.pin_zones)


@dataclass
class PlacementState:
    """Current state of the layout simulation."""
    positions: List[Tuple[float, float]]  # Parallel to the component list
    temperature: float
    iteration: int = 0
    max_movement: float = 0.0


class ForceDirectedPlacer:
    """
    Place components by simulating net springs against mutual repulsion.

    Forces applied:
    1. Repulsion - k^2 / dist between every ordered pair of components
    2. Attraction - dist^2 / k between every pair of components on a net

    where k = sqrt(board area / component count) is the ideal spacing.
    """

    def __init__(self, board: Board, config: Optional[PlacementConfig] = None):
        self.board = board
        self.config = config or PlacementConfig()

        self._index = board.index_by_id()
        self._pairs = self._collect_net_pairs(board.nets)
        self._keys = self._component_keys(board.components)

    def _component_keys(self, components: Sequence[Component]) -> List[str]:
        """Keys used for coincident tie-breaks; duplicate ids fall back to index."""
        ids = [c.id for c in components]
        if len(set(ids)) == len(ids):
            return ids
        return [f"{c.id}#{i}" for i, c in enumerate(components)]

    def _collect_net_pairs(self, nets: Sequence[Net]) -> List[Tuple[int, int]]:
        """Index pairs joined by a net; dangling ids and self pairs dropped."""
        pairs = []
        skipped = 0
        for net in nets:
            members = self.board.member_indices(net, self._index)
            skipped += len(net.nodes) - len(members)
            for a in range(len(members)):
                for b in range(a + 1, len(members)):
                    if members[a] != members[b]:
                        pairs.append((members[a], members[b]))

        if skipped:
            logger.debug("Skipped %d net references to unknown components", skipped)
        return pairs

    def _is_pinned(self, comp: Component) -> bool:
        return comp.zone in self.config.pin_zones

    def _separation(self, positions: List[Tuple[float, float]],
                    i: int, j: int) -> Tuple[float, float, float]:
        """Return (ux, uy, dist) for the vector from j to i.

        dist is floored at 1 and (ux, uy) = d / dist. Coincident components
        get a deterministic unit direction instead of the zero vector.
        """
        xi, yi = positions[i]
        xj, yj = positions[j]
        dx = xi - xj
        dy = yi - yj
        norm = math.hypot(dx, dy)
        if norm == 0.0:
            ux, uy = _coincident_direction(self._keys[i], self._keys[j])
            return ux, uy, 1.0
        dist = max(norm, 1.0)
        return dx / dist, dy / dist, dist

    def _limit_step(self, fx: float, fy: float,
                    temperature: float) -> Tuple[float, float]:
        """Limit a force vector to the current temperature."""
        if self.config.clamp_mode == "vector":
            magnitude = math.hypot(fx, fy)
            if magnitude <= temperature or magnitude == 0.0:
                return fx, fy
            scale = temperature / magnitude
            return fx * scale, fy * scale

        step_x = math.copysign(min(abs(fx), temperature), fx) if fx else 0.0
        step_y = math.copysign(min(abs(fy), temperature), fy) if fy else 0.0
        return step_x, step_y

    def _calculate_forces(self, positions: List[Tuple[float, float]],
                          k: float) -> List[List[float]]:
        """Accumulate repulsion and attraction into a fresh force array."""
        n = len(positions)
        forces = [[0.0, 0.0] for _ in range(n)]
        k_squared = k * k

        # 1. Repulsion between all ordered pairs
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                ux, uy, dist = self._separation(positions, i, j)
                fr = k_squared / dist
                forces[i][0] += ux * fr
                forces[i][1] += uy * fr

        # 2. Attraction along nets
        for i, j in self._pairs:
            ux, uy, dist = self._separation(positions, i, j)
            fa = (dist * dist) / k
            forces[i][0] -= ux * fa
            forces[i][1] -= uy * fa
            forces[j][0] += ux * fa
            forces[j][1] += uy * fa

        return forces

    def _apply_forces(self, state: PlacementState,
                      forces: List[List[float]]) -> float:
        """Move unpinned components and clamp them onto the board.

        Returns:
            Maximum movement of any component this iteration
        """
        size = self.board.size
        max_movement = 0.0

        for i, comp in enumerate(self.board.components):
            if self._is_pinned(comp):
                continue

            fx, fy = forces[i]
            if not (math.isfinite(fx) and math.isfinite(fy)):
                logger.warning("Non-finite force on %s ignored", comp.reference)
                fx, fy = 0.0, 0.0

            step_x, step_y = self._limit_step(fx, fy, state.temperature)
            x, y = state.positions[i]
            new_x, new_y = size.clamp(x + step_x, y + step_y)

            max_movement = max(max_movement, math.hypot(new_x - x, new_y - y))
            state.positions[i] = (new_x, new_y)

        return max_movement

    def ideal_distance(self) -> Optional[float]:
        """k = sqrt(area / n), or None when the layout is degenerate."""
        n = len(self.board.components)
        size = self.board.size
        if n == 0 or size.width <= 0 or size.height <= 0:
            return None
        k = math.sqrt(size.area / n)
        if not math.isfinite(k) or k <= 0:
            return None
        return k

    def run(self, callback: Optional[Callable[[PlacementState], None]] = None
            ) -> PlacementState:
        """
        Run the simulation.

        Args:
            callback: Optional function called each iteration with current state

        Returns:
            Final PlacementState (positions parallel to board.components)
        """
        components = self.board.components
        state = PlacementState(
            positions=[(c.x, c.y) for c in components],
            temperature=self.board.size.width * self.config.initial_temperature_ratio,
        )

        k = self.ideal_distance()
        if k is None:
            if components:
                logger.warning(
                    "Board %.3fx%.3f has no usable area for %d components; "
                    "positions left unchanged",
                    self.board.size.width, self.board.size.height, len(components),
                )
            return state

        if logger.isEnabledFor(logging.DEBUG):
            pinned = sum(1 for c in components if self._is_pinned(c))
            logger.debug(
                "Force-directed placement start: components=%d pinned=%d "
                "net_pairs=%d k=%.3f temperature=%.3f clamp=%s",
                len(components), pinned, len(self._pairs), k,
                state.temperature, self.config.clamp_mode,
            )

        log_every = 10

        for iteration in range(self.config.iterations):
            state.iteration = iteration

            forces = self._calculate_forces(state.positions, k)
            state.max_movement = self._apply_forces(state, forces)

            if callback:
                callback(state)

            if logger.isEnabledFor(logging.DEBUG) and iteration % log_every == 0:
                logger.debug(
                    "Iteration %d: temperature=%.3f max_move=%.4f",
                    iteration, state.temperature, state.max_movement,
                )

            state.temperature *= self.config.cooling_factor

        return state

    def place(self, callback: Optional[Callable[[PlacementState], None]] = None
              ) -> List[Component]:
        """Run the simulation and return placed copies of the components."""
        state = self.run(callback)
        placed = [
            replace(comp, x=x, y=y)
            for comp, (x, y) in zip(self.board.components, state.positions)
        ]

        if logger.isEnabledFor(logging.DEBUG) and placed:
            logger.debug(
                "Placement done: wirelength %.1f -> %.1f",
                total_wirelength(self.board.components, self.board.nets),
                total_wirelength(placed, self.board.nets),
            )

        return placed


def total_wirelength(components: Sequence[Component], nets: Sequence[Net]) -> float:
    """Sum of centre-to-centre distances over every resolvable net pair."""
    board = Board(components=list(components), nets=list(nets))
    index = board.index_by_id()

    total = 0.0
    for net in board.nets:
        members = board.resolve_net(net, index)
        for a in range(len(members)):
            for b in range(a + 1, len(members)):
                total += members[a].distance_to(members[b])
    return total


def place(components: Sequence[Component], nets: Sequence[Net],
          board_size: BoardSize, iterations: int = 50,
          config: Optional[PlacementConfig] = None) -> List[Component]:
    """
    Convenience function to place components on a board.

    Args:
        components: Classified components (zones decide pinning)
        nets: Nets joining components by id; unknown ids are skipped
        board_size: Board extent
        iterations: Iteration budget, ignored when config is given
        config: Optional full placement configuration

    Returns:
        Placed copies of the components in input order
    """
    config = config or PlacementConfig(iterations=iterations)
    board = Board(components=list(components), nets=list(nets), size=board_size)
    return ForceDirectedPlacer(board, config).place()
