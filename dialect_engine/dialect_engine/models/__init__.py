"""Domain models for the dialect engine."""

from dialect_engine.models.export import Materialization, ModelExportResult, ModelFormat
from dialect_engine.models.migration import MigrationIssue, MigrationResult, Severity
from dialect_engine.models.schema_graph import (
    CTE_REFERENCE,
    FOREIGN_KEY_NAMING,
    JOIN_EQUALITY,
    SUBQUERY,
    ColumnNode,
    Relationship,
    SchemaGraph,
    TableNode,
)

__all__ = [
    "CTE_REFERENCE",
    "FOREIGN_KEY_NAMING",
    "JOIN_EQUALITY",
    "SUBQUERY",
    "ColumnNode",
    "Materialization",
    "MigrationIssue",
    "MigrationResult",
    "ModelExportResult",
    "ModelFormat",
    "Relationship",
    "SchemaGraph",
    "Severity",
    "TableNode",
]
