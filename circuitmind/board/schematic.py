"""
Schematic Document Adapter

Reads and writes the canvas document the hosting service stores per
schematic version:

```json
{
  "components": [
    {"id": "a1", "name": "U1", "type": "Regulator", "value": "3V3",
     "x": 100, "y": 100}
  ],
  "connections": [{"from": "a1", "to": "b2"}],
  "nets": [{"name": "VCC", "nodes": ["a1", "b2", "c3"]}],
  "board": {"width": 600, "height": 400}
}
```

`connections` and `nets` are both optional; connections become two-member
nets. Malformed documents raise ValueError here, at the boundary, so the
engine itself never sees invalid types.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .abstraction import BoardSize, Component, Net, RawComponent, Track

logger = logging.getLogger(__name__)

DEFAULT_NET_NAME = "net"


def _require_number(record: Dict[str, Any], key: str, where: str,
                    default: Optional[float] = None) -> Optional[float]:
    value = record.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: '{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{where}: '{key}' must be finite, got {value!r}")
    return float(value)


def _section_list(data: Dict[str, Any], key: str) -> List[Any]:
    """A top-level list section; absent or null sections are empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def parse_component(record: Dict[str, Any], position: int = 0) -> RawComponent:
    """Build a RawComponent from one canvas component record."""
    where = f"component #{position}"
    if not isinstance(record, dict):
        raise ValueError(f"{where}: expected an object, got {type(record).__name__}")
    if "id" not in record:
        raise ValueError(f"{where}: missing 'id'")

    # The canvas calls the designator "name"; accept "reference" as well
    reference = record.get("name", record.get("reference", ""))

    return RawComponent(
        id=str(record["id"]),
        reference=str(reference),
        component_type=str(record.get("type", "")),
        value=str(record.get("value", "")),
        x=_require_number(record, "x", where, 0.0),
        y=_require_number(record, "y", where, 0.0),
        width=_require_number(record, "width", where),
        height=_require_number(record, "height", where),
        rotation=_require_number(record, "rotation", where),
    )


def nets_from_connections(connections: Iterable[Dict[str, Any]]) -> List[Net]:
    """Turn canvas {from, to} connection records into two-member nets."""
    nets = []
    for i, conn in enumerate(connections):
        if not isinstance(conn, dict) or "from" not in conn or "to" not in conn:
            raise ValueError(f"connection #{i}: expected an object with 'from' and 'to'")
        nets.append(Net(
            name=str(conn.get("name", DEFAULT_NET_NAME)),
            nodes=[str(conn["from"]), str(conn["to"])],
        ))
    return nets


def parse_net(record: Dict[str, Any], position: int = 0) -> Net:
    """Build a Net from a {name, nodes} record."""
    where = f"net #{position}"
    if not isinstance(record, dict):
        raise ValueError(f"{where}: expected an object, got {type(record).__name__}")
    nodes = record.get("nodes", [])
    if not isinstance(nodes, list):
        raise ValueError(f"{where}: 'nodes' must be a list")
    return Net(name=str(record.get("name", DEFAULT_NET_NAME)),
               nodes=[str(n) for n in nodes])


def parse_board_size(record: Optional[Dict[str, Any]],
                     default: Optional[BoardSize] = None) -> BoardSize:
    """Read {width, height} (or the canvas' {w, h}) into a BoardSize."""
    default = default or BoardSize(600.0, 400.0)
    if record is None:
        return default
    if not isinstance(record, dict):
        raise ValueError("board: expected an object")
    width = record.get("width", record.get("w", default.width))
    height = record.get("height", record.get("h", default.height))
    return BoardSize(
        width=_require_number({"width": width}, "width", "board"),
        height=_require_number({"height": height}, "height", "board"),
    )


class SchematicDocument:
    """Parsed canvas document: raw components, nets and board size."""

    def __init__(self, components: Sequence[RawComponent], nets: Sequence[Net],
                 board_size: BoardSize, source: Optional[Path] = None):
        self.components = list(components)
        self.nets = list(nets)
        self.board_size = board_size
        self.source = source

    @classmethod
    def from_dict(cls, data: Dict[str, Any],
                  source: Optional[Path] = None) -> 'SchematicDocument':
        if not isinstance(data, dict):
            raise ValueError("schematic document must be a JSON object")

        components = [parse_component(rec, i)
                      for i, rec in enumerate(_section_list(data, "components"))]

        seen = set()
        for comp in components:
            if comp.id in seen:
                raise ValueError(f"duplicate component id: {comp.id}")
            seen.add(comp.id)

        nets = [parse_net(rec, i) for i, rec in enumerate(_section_list(data, "nets"))]
        nets.extend(nets_from_connections(_section_list(data, "connections")))

        board_size = parse_board_size(data.get("board"))

        logger.debug(
            "Parsed schematic: components=%d nets=%d board=%.1fx%.1f",
            len(components), len(nets), board_size.width, board_size.height,
        )
        return cls(components, nets, board_size, source)


def load_schematic(path: Union[str, Path]) -> SchematicDocument:
    """
    Load a canvas document from a JSON file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the document is not valid JSON or is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schematic file not found: {path}")

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    return SchematicDocument.from_dict(data, source=path)


def dump_design(components: Sequence[Component],
                tracks: Optional[Sequence[Track]] = None,
                score: Optional[Any] = None) -> Dict[str, Any]:
    """Serialize engine output back into a canvas-style document."""
    data: Dict[str, Any] = {"components": [c.to_dict() for c in components]}
    if tracks is not None:
        data["tracks"] = [t.to_dict() for t in tracks]
    if score is not None:
        data["score"] = score.to_dict()
    return data
