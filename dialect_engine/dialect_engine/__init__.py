"""Cross-platform SQL dialect engine.

Translates queries between BigQuery, Snowflake and Databricks, extracts
table/column lineage and exports queries as dbt or Dataform models::

    from dialect_engine import Platform, translate

    result = translate(sql, Platform.BIGQUERY, Platform.SNOWFLAKE)
    print(result.converted_query, result.compatibility_score)
"""

from dialect_engine.config import Settings, load_settings
from dialect_engine.export import export_model
from dialect_engine.graph import extract_schema
from dialect_engine.migration import ScoreWeights, translate
from dialect_engine.models import (
    MigrationIssue,
    MigrationResult,
    ModelExportResult,
    ModelFormat,
    SchemaGraph,
    Severity,
)
from dialect_engine.sql_toolkit import Platform, Token, TokenKind, check_syntax, tokenize

__version__ = "0.1.0"

__all__ = [
    "MigrationIssue",
    "MigrationResult",
    "ModelExportResult",
    "ModelFormat",
    "Platform",
    "SchemaGraph",
    "ScoreWeights",
    "Settings",
    "Severity",
    "Token",
    "TokenKind",
    "check_syntax",
    "export_model",
    "extract_schema",
    "load_settings",
    "tokenize",
    "translate",
]
