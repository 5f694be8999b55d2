"""
CircuitMind - Physical Design Engine

Classifies components into functional zones, places them with a
force-directed layout, draws straight preview tracks and scores the
result. Used by the CircuitMind web service for auto-placement and
auto-routing previews.
"""

__version__ = "0.1.0"
__author__ = "CircuitMind Team"

from .board.abstraction import BoardSize, Component, Net, RawComponent, Track, Zone
from .engine import DesignEngine, DesignResult, EngineConfig, run_design
from .placement.force_directed import place
from .placement.zones import classify
from .routing.straight_router import route
from .validation.score import DesignScore, DesignScorer, score

__all__ = [
    "BoardSize",
    "Component",
    "Net",
    "RawComponent",
    "Track",
    "Zone",
    "DesignEngine",
    "DesignResult",
    "EngineConfig",
    "run_design",
    "classify",
    "place",
    "route",
    "score",
    "DesignScore",
    "DesignScorer",
]
