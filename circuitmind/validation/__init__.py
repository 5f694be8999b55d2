"""Design quality scoring."""

from .score import (
    DEFAULT_ESTIMATORS,
    DesignScore,
    DesignScorer,
    Estimator,
    FACTORS,
    SCORE_WEIGHTS,
    SCORE_WEIGHTS_VERSION,
    score,
)

__all__ = [
    "DEFAULT_ESTIMATORS",
    "DesignScore",
    "DesignScorer",
    "Estimator",
    "FACTORS",
    "SCORE_WEIGHTS",
    "SCORE_WEIGHTS_VERSION",
    "score",
]
