"""Tests for zone pattern configuration loading."""

import pytest

from circuitmind.board.abstraction import Zone
from circuitmind.patterns import ZonePatterns, ZoneRule, get_patterns


class TestDefaultPatterns:
    def test_shipped_rules(self):
        patterns = get_patterns()
        assert [rule.zone for rule in patterns.rules] == [Zone.IO, Zone.POWER, Zone.ANALOG]
        assert patterns.default_zone == Zone.DIGITAL

    def test_default_instance_cached(self):
        assert get_patterns() is get_patterns()


class TestZoneRule:
    def test_any_match(self):
        rule = ZoneRule(zone=Zone.IO, reference_prefixes=["j"], type_contains=["conn"])
        assert rule.matches("J1", "header")
        assert rule.matches("P1", "Connector")
        assert not rule.matches("P1", "header")

    def test_all_match(self):
        rule = ZoneRule(zone=Zone.POWER, match="all",
                        reference_prefixes=["u"], type_contains=["reg"])
        assert rule.matches("U1", "LDO regulator")
        assert not rule.matches("Q1", "LDO regulator")
        assert not rule.matches("U1", "MCU")

    def test_rule_without_criteria_never_matches(self):
        assert not ZoneRule(zone=Zone.ANALOG).matches("U1", "opamp")


class TestPatternFileErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ZonePatterns(tmp_path / "missing.yaml")

    def test_symlink_rejected(self, tmp_path):
        target = tmp_path / "real.yaml"
        target.write_text("zones: []\ndefault_zone: Digital\n")
        link = tmp_path / "link.yaml"
        link.symlink_to(target)
        with pytest.raises(ValueError):
            ZonePatterns(link)

    @pytest.mark.parametrize("text", [
        "zones: []\n",
        "default_zone: Digital\n",
        "zones:\n  - match: any\ndefault_zone: Digital\n",
        "zones:\n  - zone: RF\ndefault_zone: Digital\n",
        "zones:\n  - zone: IO\n    match: most\ndefault_zone: Digital\n",
        "zones:\n  - zone: IO\n    type_contains: conn\ndefault_zone: Digital\n",
        "zones: []\ndefault_zone: Unknown\n",
    ])
    def test_invalid_config(self, tmp_path, text):
        path = tmp_path / "zones.yaml"
        path.write_text(text)
        with pytest.raises(ValueError):
            ZonePatterns(path)

    def test_reload(self, tmp_path):
        path = tmp_path / "zones.yaml"
        path.write_text("zones: []\ndefault_zone: Digital\n")
        patterns = ZonePatterns(path)
        path.write_text("zones: []\ndefault_zone: Analog\n")
        patterns.reload()
        assert patterns.default_zone == Zone.ANALOG
