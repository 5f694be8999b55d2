"""
Board Abstraction Layer

Plain data records shared by the zone classifier, placement solver, track
generator and quality scorer. Every record is created fresh per request from
caller-supplied component and net data; nothing here owns storage.

Coordinates are board units with the origin at the top-left corner. A
component's (x, y) is the top-left anchor of its footprint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
import math


DEFAULT_FOOTPRINT_WIDTH = 80.0
DEFAULT_FOOTPRINT_HEIGHT = 40.0


class Zone(Enum):
    """Functional zones a component can be classified into."""
    POWER = "Power"
    ANALOG = "Analog"
    DIGITAL = "Digital"
    IO = "IO"


@dataclass
class RawComponent:
    """A component as supplied by the caller, before zone classification."""
    id: str
    reference: str  # Designator, e.g. "U1", "J2"
    component_type: str = ""  # Declared type, e.g. "Resistor", "Regulator"
    value: str = ""
    x: float = 0.0
    y: float = 0.0

    # Optional footprint/orientation; defaults are applied on classification
    width: Optional[float] = None
    height: Optional[float] = None
    rotation: Optional[float] = None


@dataclass
class Component:
    """A classified, placeable component."""
    id: str
    reference: str
    component_type: str
    zone: Zone
    value: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = DEFAULT_FOOTPRINT_WIDTH
    height: float = DEFAULT_FOOTPRINT_HEIGHT
    rotation: float = 0.0  # degrees, never changed by the engine

    @property
    def center(self) -> Tuple[float, float]:
        """Footprint centre in board coordinates."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def distance_to(self, other: 'Component') -> float:
        """Centre-to-centre distance to another component."""
        cx1, cy1 = self.center
        cx2, cy2 = other.center
        return math.hypot(cx2 - cx1, cy2 - cy1)

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.reference,
            "type": self.component_type,
            "value": self.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
            "group": self.zone.value,
        }


@dataclass
class Net:
    """An electrical connection joining components by id."""
    name: str
    nodes: List[str] = field(default_factory=list)  # Component ids, ordered

    def to_dict(self) -> Dict:
        return {"name": self.name, "nodes": list(self.nodes)}


@dataclass
class Track:
    """A drawn interconnect path for one net segment."""
    net_name: str
    points: List[Tuple[float, float]]
    layer: int = 1
    width: float = 2.0

    @property
    def length(self) -> float:
        """Polyline length of the track."""
        return sum(
            math.hypot(x2 - x1, y2 - y1)
            for (x1, y1), (x2, y2) in zip(self.points, self.points[1:])
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "net_name": self.net_name,
            "points": [{"x": x, "y": y} for x, y in self.points],
            "layer": self.layer,
            "width": self.width,
        }


@dataclass
class BoardSize:
    """Rectangular board extent, origin at (0, 0)."""
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, x: float, y: float) -> bool:
        """Check whether a point lies on the board (edges inclusive)."""
        return 0.0 <= x <= self.width and 0.0 <= y <= self.height

    def clamp(self, x: float, y: float) -> Tuple[float, float]:
        """Clamp a point into the board rectangle."""
        return (
            max(0.0, min(self.width, x)),
            max(0.0, min(self.height, y)),
        )


@dataclass
class Board:
    """
    A component set, its nets and the board it is placed on.

    Components keep caller order; ids resolve to the first component that
    carries them, so duplicate ids never raise.
    """

    components: List[Component] = field(default_factory=list)
    nets: List[Net] = field(default_factory=list)
    size: BoardSize = field(default_factory=lambda: BoardSize(600.0, 400.0))
    name: str = ""

    def index_by_id(self) -> Dict[str, int]:
        """Map component id -> position in the component list."""
        index: Dict[str, int] = {}
        for i, comp in enumerate(self.components):
            index.setdefault(comp.id, i)
        return index

    def member_indices(self, net: Net,
                       index: Optional[Dict[str, int]] = None) -> List[int]:
        """Positions of a net's members in net order, dangling ids dropped.

        Pass a precomputed `index_by_id()` when resolving many nets.
        """
        if index is None:
            index = self.index_by_id()
        return [index[node] for node in net.nodes if node in index]

    def resolve_net(self, net: Net,
                    index: Optional[Dict[str, int]] = None) -> List[Component]:
        """Components of a net in net order, dangling ids dropped."""
        return [self.components[i] for i in self.member_indices(net, index)]

    def __repr__(self) -> str:
        return (f"Board(name='{self.name}', components={len(self.components)}, "
                f"nets={len(self.nets)})")
