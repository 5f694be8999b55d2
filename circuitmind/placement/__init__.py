"""Placement engine: zone classification and force-directed layout."""

from .force_directed import (
    ForceDirectedPlacer,
    PlacementConfig,
    PlacementState,
    place,
    total_wirelength,
)
from .zones import ZoneClassifier, classify

__all__ = [
    "ForceDirectedPlacer",
    "PlacementConfig",
    "PlacementState",
    "place",
    "total_wirelength",
    "ZoneClassifier",
    "classify",
]
