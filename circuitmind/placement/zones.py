"""
Zone Classifier

Assigns every component one of the functional zones (Power, Analog, Digital,
IO) from its designator and declared type. The zone decides which components
the placement solver pins in place.

NOTE: Classification rules are loaded from zone_patterns.yaml via the
patterns module. Do NOT hardcode tokens here - update the YAML instead.

Passives are not attached to the zone of the IC they serve; they fall
through to the default zone (Digital) like any unmatched component.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..board.abstraction import (
    Component,
    DEFAULT_FOOTPRINT_HEIGHT,
    DEFAULT_FOOTPRINT_WIDTH,
    RawComponent,
    Zone,
)
from ..patterns import ZonePatterns, get_patterns

logger = logging.getLogger(__name__)


class ZoneClassifier:
    """
    Classifies raw components into functional zones.

    Rules are evaluated in file order and the first match wins; components
    matching no rule get the configured default zone. Classification never
    fails and preserves input order.
    """

    def __init__(self, patterns_config: Optional[str] = None,
                 patterns: Optional[ZonePatterns] = None):
        """
        Args:
            patterns_config: Optional path to custom patterns YAML file.
            patterns: Pre-loaded patterns, takes precedence over the path.
        """
        self._patterns = patterns or get_patterns(patterns_config)

    def zone_for(self, reference: str, component_type: str) -> Zone:
        """Return the zone for a single designator/type pair."""
        for rule in self._patterns.rules:
            if rule.matches(reference or "", component_type or ""):
                return rule.zone
        return self._patterns.default_zone

    def classify_one(self, raw: RawComponent) -> Component:
        """Classify one component and fill in footprint/rotation defaults."""
        return Component(
            id=raw.id,
            reference=raw.reference,
            component_type=raw.component_type,
            zone=self.zone_for(raw.reference, raw.component_type),
            value=raw.value,
            x=raw.x,
            y=raw.y,
            width=raw.width if raw.width is not None else DEFAULT_FOOTPRINT_WIDTH,
            height=raw.height if raw.height is not None else DEFAULT_FOOTPRINT_HEIGHT,
            rotation=raw.rotation if raw.rotation is not None else 0.0,
        )

    def classify(self, components: Sequence[RawComponent]) -> List[Component]:
        """Classify all components, keeping input order."""
        classified = [self.classify_one(raw) for raw in components]

        if logger.isEnabledFor(logging.DEBUG):
            for zone, refs in self.summarize(classified).items():
                if refs:
                    logger.debug("Zone %s: %s", zone.value, ", ".join(refs))

        return classified

    @staticmethod
    def summarize(components: Sequence[Component]) -> Dict[Zone, List[str]]:
        """Group designators by zone (every zone present, possibly empty)."""
        summary: Dict[Zone, List[str]] = {zone: [] for zone in Zone}
        for comp in components:
            summary[comp.zone].append(comp.reference)
        return summary


def classify(components: Sequence[RawComponent],
             patterns_config: Optional[str] = None) -> List[Component]:
    """
    Convenience function to classify components with the default rules.

    Args:
        components: Raw components as supplied by the caller
        patterns_config: Optional path to a custom patterns YAML file

    Returns:
        Classified components in input order
    """
    return ZoneClassifier(patterns_config).classify(components)
