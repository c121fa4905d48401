"""Migration translator and compatibility scoring."""

from dialect_engine.migration.scoring import DEFAULT_WEIGHTS, MAX_SCORE, ScoreWeights, compute_score
from dialect_engine.migration.translator import translate

__all__ = [
    "DEFAULT_WEIGHTS",
    "MAX_SCORE",
    "ScoreWeights",
    "compute_score",
    "translate",
]
