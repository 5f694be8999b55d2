"""Straight-line track generator.

Draws one straight two-point track per net between component anchors. This
is a preview router: no obstacle avoidance, no layer assignment, no vias.

Endpoints sit on the vertical midline of the default 80x40 footprint: the
source connects at (x + 40, y + 20), the destination at (x, y + 20).

By default a net yields a single track between its first two resolvable
members, so nets with three or more members are only partly drawn. The
CHAIN strategy connects every adjacent pair of resolvable members instead;
it is opt-in.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ..board.abstraction import Board, Component, Net, Track

logger = logging.getLogger(__name__)


class RouteStrategy(Enum):
    """How a net's members are joined."""
    PAIR = "pair"    # First two resolvable members only
    CHAIN = "chain"  # Every adjacent resolvable pair


@dataclass
class RouterConfig:
    """Configuration for the straight-line router."""
    source_offset: Tuple[float, float] = (40.0, 20.0)
    target_offset: Tuple[float, float] = (0.0, 20.0)
    layer: int = 1
    track_width: float = 2.0
    strategy: RouteStrategy = RouteStrategy.PAIR

    def __post_init__(self):
        self.strategy = RouteStrategy(self.strategy)


class StraightRouter:
    """Derive drawable tracks from a placed component set."""

    def __init__(self, config: Optional[RouterConfig] = None):
        self.config = config or RouterConfig()

    def _track(self, net_name: str, source: Component, target: Component) -> Track:
        sx, sy = self.config.source_offset
        tx, ty = self.config.target_offset
        return Track(
            net_name=net_name,
            points=[(source.x + sx, source.y + sy), (target.x + tx, target.y + ty)],
            layer=self.config.layer,
            width=self.config.track_width,
        )

    def route_net(self, net: Net, board: Board,
                  index: Optional[Dict[str, int]] = None) -> List[Track]:
        """Tracks for a single net; unresolved members are dropped."""
        members = board.resolve_net(net, index)
        if len(members) < 2:
            return []

        if self.config.strategy == RouteStrategy.PAIR:
            return [self._track(net.name, members[0], members[1])]

        return [self._track(net.name, a, b) for a, b in zip(members, members[1:])]

    def route(self, components: Sequence[Component],
              nets: Sequence[Net]) -> List[Track]:
        """
        Route all nets.

        Args:
            components: Placed components
            nets: Nets joining components by id

        Returns:
            Tracks in net order
        """
        board = Board(components=list(components), nets=list(nets))
        index = board.index_by_id()

        tracks: List[Track] = []
        unrouted = 0
        for net in board.nets:
            net_tracks = self.route_net(net, board, index)
            if not net_tracks and net.nodes:
                unrouted += 1
            tracks.extend(net_tracks)

        logger.debug(
            "Routed %d tracks for %d nets (%d without two resolvable members)",
            len(tracks), len(nets), unrouted,
        )
        return tracks


def route(components: Sequence[Component], nets: Sequence[Net],
          config: Optional[RouterConfig] = None) -> List[Track]:
    """Convenience function to route every net with straight tracks."""
    return StraightRouter(config).route(components, nets)
