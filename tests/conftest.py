"""
Shared test fixtures for CircuitMind tests.

Provides reusable raw components, classified components, nets and board
sizes for the classifier, placer, router and scorer tests.
"""

import json
import pytest
from pathlib import Path
from typing import Dict, List

from circuitmind.board.abstraction import (
    BoardSize,
    Component,
    Net,
    RawComponent,
    Zone,
)


@pytest.fixture
def board_size() -> BoardSize:
    """The canvas board used by the web app."""
    return BoardSize(width=600.0, height=400.0)


@pytest.fixture
def raw_components() -> List[RawComponent]:
    """A small sensor board: connector, regulator, MCU, op-amp and passives."""
    return [
        RawComponent(id="j1", reference="J1", component_type="Connector",
                     value="USB_C", x=0.0, y=180.0),
        RawComponent(id="u1", reference="U1", component_type="Regulator",
                     value="AMS1117-3.3", x=120.0, y=60.0),
        RawComponent(id="u2", reference="U2", component_type="MCU",
                     value="ATmega328P", x=300.0, y=200.0),
        RawComponent(id="u3", reference="U3", component_type="OpAmp",
                     value="LM358", x=450.0, y=300.0),
        RawComponent(id="r1", reference="R1", component_type="Resistor",
                     value="10k", x=250.0, y=250.0),
        RawComponent(id="c1", reference="C1", component_type="Capacitor",
                     value="100nF", x=200.0, y=100.0),
    ]


@pytest.fixture
def nets() -> List[Net]:
    """Nets joining the sensor board, including a stale reference."""
    return [
        Net(name="VBUS", nodes=["j1", "u1"]),
        Net(name="3V3", nodes=["u1", "u2", "c1"]),
        Net(name="SIG", nodes=["u2", "r1", "u3"]),
        Net(name="STALE", nodes=["u3", "deleted_part"]),
        Net(name="EMPTY", nodes=[]),
    ]


@pytest.fixture
def make_component():
    """Factory for classified components with the default footprint."""
    def _make(component_id: str, x: float, y: float,
              zone: Zone = Zone.DIGITAL, reference: str = "") -> Component:
        return Component(
            id=component_id,
            reference=reference or component_id.upper(),
            component_type="Generic",
            zone=zone,
            x=x,
            y=y,
        )
    return _make


@pytest.fixture
def canvas_document() -> Dict:
    """A canvas document as stored by the web service."""
    return {
        "components": [
            {"id": "a1", "name": "J1", "type": "connector", "value": "HDR", "x": 20, "y": 180},
            {"id": "b2", "name": "U1", "type": "regulator", "value": "LDO", "x": 150, "y": 90},
            {"id": "c3", "name": "R1", "type": "Resistor", "value": "10k", "x": 320, "y": 210},
            {"id": "d4", "name": "R2", "type": "Resistor", "value": "10k", "x": 360, "y": 260},
        ],
        "connections": [
            {"from": "a1", "to": "b2"},
            {"from": "b2", "to": "c3"},
            {"from": "c3", "to": "gone"},
        ],
        "board": {"w": 600, "h": 400},
    }


@pytest.fixture
def schematic_file(tmp_path: Path, canvas_document: Dict) -> Path:
    """The canvas document written to disk."""
    path = tmp_path / "schematic.json"
    path.write_text(json.dumps(canvas_document))
    return path
