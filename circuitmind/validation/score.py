"""
Design Quality Scoring

Combines five heuristic estimators into a weighted composite score. The
estimators are deliberately coarse (most are constants); each is a named
function that can be swapped for a sharper one without changing the
`score` signature.

The weights are part of the scoring contract. Changing them is a breaking
change and must bump SCORE_WEIGHTS_VERSION.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Sequence
import logging
import math

from ..board.abstraction import Component, Net, Track

logger = logging.getLogger(__name__)

Estimator = Callable[[Sequence[Component], Sequence[Net], Sequence[Track]], float]

FACTORS = (
    "drc",
    "signal_integrity",
    "power_integrity",
    "emi",
    "manufacturability",
)

SCORE_WEIGHTS_VERSION = "1"
SCORE_WEIGHTS: Dict[str, float] = {
    "drc": 0.30,
    "signal_integrity": 0.25,
    "power_integrity": 0.20,
    "emi": 0.15,
    "manufacturability": 0.10,
}

MIN_SUBSCORE = 0.0
MAX_SUBSCORE = 100.0


def estimate_drc(components, nets, tracks) -> float:
    """No rule checks are run; assume a clean board."""
    return 100.0


def estimate_signal_integrity(components, nets, tracks) -> float:
    """Lose half a point per track, floored at zero."""
    return max(0.0, 100.0 - 0.5 * len(tracks))


def estimate_power_integrity(components, nets, tracks) -> float:
    return 90.0


def estimate_emi(components, nets, tracks) -> float:
    return 85.0


def estimate_manufacturability(components, nets, tracks) -> float:
    return 95.0


DEFAULT_ESTIMATORS: Dict[str, Estimator] = {
    "drc": estimate_drc,
    "signal_integrity": estimate_signal_integrity,
    "power_integrity": estimate_power_integrity,
    "emi": estimate_emi,
    "manufacturability": estimate_manufacturability,
}


@dataclass
class DesignScore:
    """Quality snapshot for one placed and routed design."""
    drc: float
    signal_integrity: float
    power_integrity: float
    emi: float
    manufacturability: float
    total: float
    weights_version: str = SCORE_WEIGHTS_VERSION

    def subscores(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in FACTORS}

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        data = self.subscores()
        data["total"] = self.total
        data["weights_version"] = self.weights_version
        return data

    def summary(self) -> str:
        """Generate human-readable summary."""
        return "\n".join([
            f"Design Score: {self.total:.1f}",
            f"  DRC: {self.drc:.1f}",
            f"  Signal Integrity: {self.signal_integrity:.1f}",
            f"  Power Integrity: {self.power_integrity:.1f}",
            f"  EMI: {self.emi:.1f}",
            f"  Manufacturability: {self.manufacturability:.1f}",
        ])

    def to_markdown(self) -> str:
        """Generate markdown report."""
        lines = [
            "# Design Score Report",
            "",
            "| Metric | Score | Weight |",
            "|--------|-------|--------|",
        ]
        for name in FACTORS:
            label = name.replace("_", " ").title()
            lines.append(
                f"| {label} | {getattr(self, name):.1f} | {SCORE_WEIGHTS[name]:.2f} |"
            )
        lines.extend([
            f"| **Total** | **{self.total:.1f}** | |",
            "",
            f"Weights version: {self.weights_version}",
            "",
        ])
        return "\n".join(lines)


class DesignScorer:
    """
    Score a design from its components, nets and tracks.

    Each factor comes from a named estimator; pass `estimators` to replace
    any subset of them. Sub-scores are kept within [0, 100] and a
    non-finite estimate scores 0, so `score` never fails on data.
    """

    def __init__(self, estimators: Optional[Mapping[str, Estimator]] = None,
                 weights: Optional[Mapping[str, float]] = None,
                 weights_version: Optional[str] = None):
        """
        Initialize scorer.

        Args:
            estimators: Replacement estimators keyed by factor name
            weights: Full replacement weight table (must sum to 1.0)
            weights_version: Label for a custom weight table
        """
        self.estimators: Dict[str, Estimator] = dict(DEFAULT_ESTIMATORS)
        if estimators:
            unknown = set(estimators) - set(FACTORS)
            if unknown:
                raise ValueError(f"Unknown score factors: {sorted(unknown)}")
            self.estimators.update(estimators)

        if weights is None:
            self.weights = dict(SCORE_WEIGHTS)
            self.weights_version = SCORE_WEIGHTS_VERSION
        else:
            self.weights = self._validate_weights(weights)
            self.weights_version = weights_version or "custom"

    @staticmethod
    def _validate_weights(weights: Mapping[str, float]) -> Dict[str, float]:
        if set(weights) != set(FACTORS):
            raise ValueError(
                f"Weights must cover exactly {list(FACTORS)}, got {sorted(weights)}"
            )
        if any(w < 0 for w in weights.values()):
            raise ValueError("Weights must be non-negative")
        total = sum(weights.values())
        if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=1e-9):
            raise ValueError(f"Weights must sum to 1.0, got {total}")
        return dict(weights)

    def _estimate(self, name: str, components: Sequence[Component],
                  nets: Sequence[Net], tracks: Sequence[Track]) -> float:
        value = self.estimators[name](components, nets, tracks)
        if value is None or not math.isfinite(value):
            logger.warning("Estimator %s returned %r; scoring 0", name, value)
            return MIN_SUBSCORE
        return max(MIN_SUBSCORE, min(MAX_SUBSCORE, float(value)))

    def score(self, components: Sequence[Component], nets: Sequence[Net],
              tracks: Sequence[Track]) -> DesignScore:
        """
        Score a design.

        Args:
            components: Placed components
            nets: Nets of the design
            tracks: Tracks produced by the router

        Returns:
            DesignScore with sub-scores and weighted total
        """
        subscores = {name: self._estimate(name, components, nets, tracks)
                     for name in FACTORS}
        total = sum(self.weights[name] * subscores[name] for name in FACTORS)

        logger.debug(
            "Design score %.2f (components=%d nets=%d tracks=%d)",
            total, len(components), len(nets), len(tracks),
        )
        return DesignScore(total=total, weights_version=self.weights_version,
                           **subscores)


def score(components: Sequence[Component], nets: Sequence[Net],
          tracks: Sequence[Track]) -> DesignScore:
    """Convenience function to score a design with the default estimators."""
    return DesignScorer().score(components, nets, tracks)
