"""Track generation for placed boards."""

from .straight_router import RouteStrategy, RouterConfig, StraightRouter, route

__all__ = [
    "RouteStrategy",
    "RouterConfig",
    "StraightRouter",
    "route",
]
