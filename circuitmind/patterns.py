"""
Zone Classification Patterns

Loads and manages zone classification rules from configuration file.
Allows users to customize zone detection without modifying code.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import yaml

from .board.abstraction import Zone

CRITERIA = ("reference_prefixes", "reference_contains", "type_contains")


@dataclass
class ZoneRule:
    """One ordered classification rule."""
    zone: Zone
    match: str = "any"  # "any" or "all"
    reference_prefixes: List[str] = field(default_factory=list)
    reference_contains: List[str] = field(default_factory=list)
    type_contains: List[str] = field(default_factory=list)

    def matches(self, reference: str, component_type: str) -> bool:
        """Check a designator/type pair against this rule (case-insensitive)."""
        ref = reference.lower()
        ctype = component_type.lower()

        results = []
        if self.reference_prefixes:
            results.append(any(ref.startswith(t) for t in self.reference_prefixes))
        if self.reference_contains:
            results.append(any(t in ref for t in self.reference_contains))
        if self.type_contains:
            results.append(any(t in ctype for t in self.type_contains))

        if not results:
            return False
        if self.match == "all":
            return all(results)
        return any(results)


def _parse_zone(value: Any, where: str) -> Zone:
    for zone in Zone:
        if str(value).lower() in (zone.value.lower(), zone.name.lower()):
            return zone
    raise ValueError(f"{where}: unknown zone {value!r}")


class ZonePatterns:
    """
    Manager for zone classification rules.

    Loads rules from zone_patterns.yaml by default, but allows users to
    provide custom configuration files.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize pattern manager.

        Args:
            config_path: Optional path to custom patterns YAML file.
                        If None, uses default zone_patterns.yaml.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "zone_patterns.yaml"

        self.config_path = Path(config_path)
        self.rules: List[ZoneRule] = []
        self.default_zone: Zone = Zone.DIGITAL
        self._load_config()

    def _load_config(self):
        """Load rules from YAML configuration file."""
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Pattern configuration file not found: {self.config_path}"
            )

        # Security: Check for symlinks to prevent reading unintended files
        if self.config_path.is_symlink():
            raise ValueError(
                f"Pattern configuration file cannot be a symlink: {self.config_path}"
            )

        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Pattern configuration must be a mapping: {self.config_path}")

        missing = [s for s in ('zones', 'default_zone') if s not in config]
        if missing:
            raise ValueError(
                f"Configuration file missing required sections: {missing}"
            )

        self.rules = [self._parse_rule(entry, i)
                      for i, entry in enumerate(config['zones'] or [])]
        self.default_zone = _parse_zone(config['default_zone'], "default_zone")

    def _parse_rule(self, entry: Dict[str, Any], position: int) -> ZoneRule:
        where = f"zones[{position}]"
        if not isinstance(entry, dict) or 'zone' not in entry:
            raise ValueError(f"{where}: each rule needs a 'zone' key")

        match = entry.get('match', 'any')
        if match not in ('any', 'all'):
            raise ValueError(f"{where}: match must be 'any' or 'all', got {match!r}")

        tokens = {}
        for criterion in CRITERIA:
            values = entry.get(criterion) or []
            if not isinstance(values, list):
                raise ValueError(f"{where}: '{criterion}' must be a list")
            tokens[criterion] = [str(v).lower() for v in values]

        return ZoneRule(zone=_parse_zone(entry['zone'], where), match=match, **tokens)

    def reload(self):
        """Reload configuration from file (useful during development)."""
        self._load_config()


# Global instance for convenience
_default_patterns: Optional[ZonePatterns] = None


def get_patterns(config_path: Optional[Union[str, Path]] = None) -> ZonePatterns:
    """
    Get zone patterns instance.

    Args:
        config_path: Optional path to custom patterns file.
                    If None, uses cached default instance.

    Returns:
        ZonePatterns instance
    """
    global _default_patterns

    if config_path is not None:
        # Custom config path - create new instance
        return ZonePatterns(config_path)

    if _default_patterns is None:
        _default_patterns = ZonePatterns()

    return _default_patterns
