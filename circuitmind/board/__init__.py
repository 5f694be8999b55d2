"""Board data model and schematic document adapter."""

from .abstraction import (
    Board,
    BoardSize,
    Component,
    DEFAULT_FOOTPRINT_HEIGHT,
    DEFAULT_FOOTPRINT_WIDTH,
    Net,
    RawComponent,
    Track,
    Zone,
)
from .schematic import (
    SchematicDocument,
    dump_design,
    load_schematic,
    nets_from_connections,
)

__all__ = [
    # Core abstractions
    "Board",
    "BoardSize",
    "Component",
    "DEFAULT_FOOTPRINT_HEIGHT",
    "DEFAULT_FOOTPRINT_WIDTH",
    "Net",
    "RawComponent",
    "Track",
    "Zone",
    # Canvas documents
    "SchematicDocument",
    "dump_design",
    "load_schematic",
    "nets_from_connections",
]
