"""dbt and Dataform model export."""

from dialect_engine.export.heuristics import (
    ColumnTest,
    ModelPlan,
    OutputColumn,
    plan_model,
    suggest_materialization,
    suggest_model_name,
    suggest_tests,
)
from dialect_engine.export.model_exporter import export_model

__all__ = [
    "ColumnTest",
    "ModelPlan",
    "OutputColumn",
    "export_model",
    "plan_model",
    "suggest_materialization",
    "suggest_model_name",
    "suggest_tests",
]
