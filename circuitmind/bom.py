"""
Bill of Materials (BOM) generation.

Builds a BOM from a component list. The flat form has one line per
component with quantity 1; the grouped form merges components that share a
declared type and value.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple, Union

from .board.abstraction import Component, RawComponent

BomSource = Union[Component, RawComponent]


def _reference_sort_key(reference: str) -> Tuple[str, int, str]:
    """Sort "R2" before "R10": alphabetic prefix, then number."""
    prefix = "".join(ch for ch in reference if not ch.isdigit())
    digits = "".join(filter(str.isdigit, reference))
    return (prefix, int(digits or "0"), reference)


@dataclass
class BomLine:
    """One line of the bill of materials."""
    part: str
    value: str = ""
    references: List[str] = field(default_factory=list)

    @property
    def quantity(self) -> int:
        return len(self.references)

    def to_dict(self) -> Dict:
        return {
            "ref": ", ".join(self.references),
            "part": self.part,
            "value": self.value,
            "qty": self.quantity,
        }


def generate_bom(components: Sequence[BomSource], grouped: bool = False) -> List[BomLine]:
    """
    Generate a bill of materials.

    Args:
        components: Raw or classified components
        grouped: Merge components sharing declared type and value

    Returns:
        BOM lines; flat lines keep component order, grouped lines are
        sorted by their first reference
    """
    if not grouped:
        return [BomLine(part=c.component_type, value=c.value, references=[c.reference])
                for c in components]

    groups: Dict[Tuple[str, str], BomLine] = {}
    for comp in components:
        key = (comp.component_type, comp.value)
        if key not in groups:
            groups[key] = BomLine(part=comp.component_type, value=comp.value)
        groups[key].references.append(comp.reference)

    for line in groups.values():
        line.references.sort(key=_reference_sort_key)

    return sorted(groups.values(),
                  key=lambda line: _reference_sort_key(line.references[0]))


def bom_to_csv(lines: Sequence[BomLine]) -> str:
    """Render BOM lines as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["Reference", "Part", "Value", "Qty"])
    for line in lines:
        writer.writerow([", ".join(line.references), line.part, line.value, line.quantity])
    return buffer.getvalue()
