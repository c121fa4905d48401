"""Compatibility scoring for translated queries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from dialect_engine.models.migration import MigrationIssue, Severity

MAX_SCORE = 100


@dataclass(frozen=True, slots=True)
class ScoreWeights:
    """Points subtracted per distinct issue of each severity."""

    error: int = 15
    warning: int = 5
    info: int = 1

    def __post_init__(self) -> None:
        if min(self.error, self.warning, self.info) < 0:
            raise ValueError("score weights must be non-negative")

    def penalty(self, severity: Severity) -> int:
        if severity is Severity.ERROR:
            return self.error
        if severity is Severity.WARNING:
            return self.warning
        return self.info


DEFAULT_WEIGHTS = ScoreWeights()


def compute_score(issues: Iterable[MigrationIssue], weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """Score a translation from 0 to 100.

    Issues raised by the same rule on the same line with the same
    severity count once.  The result never drops below zero.
    """
    distinct = {(issue.severity, issue.line, issue.rule_id or issue.message) for issue in issues}
    penalty = sum(weights.penalty(severity) for severity, _, _ in distinct)
    return max(0, MAX_SCORE - penalty)
