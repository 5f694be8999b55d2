"""
Physical Design Engine

Runs the full pipeline for one request:

    raw components -> zone classification -> force-directed placement
                   -> straight-line routing -> quality score

Each run works on its own copies of the inputs and keeps no state between
calls, so independent requests can run in parallel.

Engine settings may come from a YAML file:

```yaml
placement:
  iterations: 80
  cooling_factor: 0.9
  clamp_mode: vector
routing:
  strategy: chain
  track_width: 1.5
patterns: ./my_zone_patterns.yaml
```
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from .board.abstraction import Board, BoardSize, Component, Net, RawComponent, Track, Zone
from .placement.force_directed import ForceDirectedPlacer, PlacementConfig
from .placement.zones import ZoneClassifier
from .routing.straight_router import RouterConfig, StraightRouter
from .validation.score import DesignScore, DesignScorer

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Settings for a full pipeline run."""
    placement: PlacementConfig = field(default_factory=PlacementConfig)
    routing: RouterConfig = field(default_factory=RouterConfig)
    patterns_path: Optional[str] = None


def _zones_from_names(names: Sequence[str]) -> frozenset:
    zones = set()
    for name in names:
        matched = [z for z in Zone if str(name).lower() in (z.value.lower(), z.name.lower())]
        if not matched:
            raise ValueError(f"placement.pin_zones: unknown zone {name!r}")
        zones.add(matched[0])
    return frozenset(zones)


def _section_mapping(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Copy of a config section; absent or null sections are empty."""
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' section must be a mapping, got {type(section).__name__}")
    return dict(section)


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    """
    Load engine settings from a YAML file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if a section is malformed or holds unknown keys
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Engine config must be a mapping: {path}")

    placement_data = _section_mapping(data, 'placement')
    routing_data = _section_mapping(data, 'routing')

    try:
        if 'pin_zones' in placement_data:
            placement_data['pin_zones'] = _zones_from_names(placement_data['pin_zones'])
        for key in ('source_offset', 'target_offset'):
            if key in routing_data:
                routing_data[key] = tuple(routing_data[key])
        placement = PlacementConfig(**placement_data)
        routing = RouterConfig(**routing_data)
    except TypeError as e:
        raise ValueError(f"Invalid engine config {path}: {e}") from e

    patterns = data.get('patterns')
    if patterns is not None:
        if not isinstance(patterns, str):
            raise ValueError(f"'patterns' must be a file path, got {patterns!r}")
        # Relative pattern paths resolve against the config file
        patterns_path = Path(patterns)
        if not patterns_path.is_absolute():
            patterns_path = path.parent / patterns_path
        patterns = str(patterns_path)

    logger.debug("Loaded engine config from %s", path)
    return EngineConfig(placement=placement, routing=routing, patterns_path=patterns)


@dataclass
class DesignResult:
    """Output of a full pipeline run."""
    components: List[Component]
    tracks: List[Track]
    score: DesignScore
    zones: Dict[Zone, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "components": [c.to_dict() for c in self.components],
            "tracks": [t.to_dict() for t in self.tracks],
            "score": self.score.to_dict(),
            "zones": {zone.value: refs for zone, refs in self.zones.items()},
        }


class DesignEngine:
    """Classify, place, route and score a design."""

    def __init__(self, config: Optional[EngineConfig] = None,
                 scorer: Optional[DesignScorer] = None):
        self.config = config or EngineConfig()
        self.classifier = ZoneClassifier(self.config.patterns_path)
        self.router = StraightRouter(self.config.routing)
        self.scorer = scorer or DesignScorer()

    def classify(self, components: Sequence[RawComponent]) -> List[Component]:
        return self.classifier.classify(components)

    def place(self, components: Sequence[Component], nets: Sequence[Net],
              board_size: BoardSize, callback=None) -> List[Component]:
        board = Board(components=list(components), nets=list(nets), size=board_size)
        return ForceDirectedPlacer(board, self.config.placement).place(callback)

    def route(self, components: Sequence[Component],
              nets: Sequence[Net]) -> List[Track]:
        return self.router.route(components, nets)

    def score(self, components: Sequence[Component], nets: Sequence[Net],
              tracks: Sequence[Track]) -> DesignScore:
        return self.scorer.score(components, nets, tracks)

    def run(self, components: Sequence[RawComponent], nets: Sequence[Net],
            board_size: BoardSize, callback=None) -> DesignResult:
        """
        Run the whole pipeline.

        Args:
            components: Raw components as supplied by the caller
            nets: Nets joining components by id
            board_size: Board extent
            callback: Optional per-iteration placement callback

        Returns:
            DesignResult with placed components, tracks, score and zones
        """
        classified = self.classify(components)
        placed = self.place(classified, nets, board_size, callback)
        tracks = self.route(placed, nets)
        design_score = self.score(placed, nets, tracks)

        logger.info(
            "Design run: components=%d nets=%d tracks=%d score=%.1f",
            len(placed), len(nets), len(tracks), design_score.total,
        )
        return DesignResult(
            components=placed,
            tracks=tracks,
            score=design_score,
            zones=ZoneClassifier.summarize(placed),
        )


def run_design(components: Sequence[RawComponent], nets: Sequence[Net],
               board_size: BoardSize,
               config: Optional[EngineConfig] = None) -> DesignResult:
    """Convenience function to run the pipeline with optional settings."""
    return DesignEngine(config).run(components, nets, board_size)
