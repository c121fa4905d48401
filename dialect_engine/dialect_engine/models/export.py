"""Model export formats and results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from dialect_engine.models.migration import MigrationIssue
from dialect_engine.sql_toolkit import Platform


class ModelFormat(str, Enum):
    """Supported transformation-workflow model formats."""

    DBT = "dbt"
    DATAFORM = "dataform"

    @property
    def model_extension(self) -> str:
        return ".sqlx" if self is ModelFormat.DATAFORM else ".sql"

    @property
    def documentation_extension(self) -> str:
        return ".md" if self is ModelFormat.DATAFORM else ".yml"


class Materialization(str, Enum):
    """How the exported model is persisted."""

    TABLE = "table"
    VIEW = "view"
    INCREMENTAL = "incremental"


class ModelExportResult(BaseModel):
    """Generated model artifacts, or the reason none could be produced."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    success: bool
    model_format: ModelFormat
    model_name: str = ""
    model: str = ""
    documentation: str = ""
    config: str = ""
    error: str | None = None
    base_platform: Platform | None = None
    issues: tuple[MigrationIssue, ...] = ()

    @classmethod
    def failure(cls, model_format: ModelFormat, error: str) -> ModelExportResult:
        return cls(success=False, model_format=model_format, error=error)
