"""Migration issue and result models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from dialect_engine.sql_toolkit import Platform


class Severity(str, Enum):
    """How much attention a migration issue needs."""

    INFO = "info"  # Syntax-only rewrite, semantics preserved
    WARNING = "warning"  # Rewrite may differ in edge cases
    ERROR = "error"  # No safe equivalent; text left unchanged


class MigrationIssue(BaseModel):
    """One rewrite (or refusal to rewrite) reported by the translator."""

    model_config = ConfigDict(frozen=True)

    line: int | None = Field(default=None, ge=1, description="1-based line of the construct in the source SQL")
    message: str
    suggestion: str = ""
    severity: Severity
    rule_id: str = Field(default="", description="Identifier of the catalog rule that fired")


class MigrationResult(BaseModel):
    """Outcome of translating a query between two platforms.

    ``converted_query`` has the same number of lines as
    ``original_query`` so issue line numbers apply to both.
    """

    model_config = ConfigDict(frozen=True)

    original_query: str
    converted_query: str
    source_platform: Platform
    target_platform: Platform
    issues: tuple[MigrationIssue, ...] = ()
    compatibility_score: int = Field(default=100, ge=0, le=100)

    @property
    def has_errors(self) -> bool:
        """True when at least one construct could not be translated."""
        return any(issue.severity is Severity.ERROR for issue in self.issues)

    def count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity is severity)
