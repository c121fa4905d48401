"""Convert a single query into a dbt or Dataform model.

Dataform projects run on BigQuery, so the query is first translated to
BigQuery and the translator's issues travel with the result.  dbt models
keep the dialect they were written in.
"""

from __future__ import annotations

import logging

from dialect_engine.graph import extract_schema, find_cte_names, find_select_items, find_table_references
from dialect_engine.migration import translate
from dialect_engine.models.export import ModelExportResult, ModelFormat
from dialect_engine.models.migration import MigrationIssue
from dialect_engine.sql_toolkit import Platform, tokenize
from dialect_engine.telemetry.profiling import profile_operation

from . import dataform, dbt
from .heuristics import plan_model

logger = logging.getLogger(__name__)


@profile_operation("export.export_model")
def export_model(sql: str, platform: Platform, model_format: ModelFormat) -> ModelExportResult:
    """Generate model, documentation and config text for *sql*.

    Parameters
    ----------
    sql:
        The query to export.
    platform:
        Dialect *sql* is written in.
    model_format:
        Target workflow tool.

    Returns
    -------
    ModelExportResult
        ``success=False`` with ``error`` set when the query is empty or
        references no table.  Never raises for bad SQL.
    """
    if not sql.strip():
        return ModelExportResult.failure(model_format, "SQL query is empty")

    issues: tuple[MigrationIssue, ...] = ()
    if model_format is ModelFormat.DATAFORM:
        base_platform = Platform.BIGQUERY
        if platform is not Platform.BIGQUERY:
            translated = translate(sql, platform, base_platform)
            sql = translated.converted_query
            issues = translated.issues
    else:
        base_platform = platform

    tokens = tokenize(sql, base_platform)
    ctes = find_cte_names(tokens)
    refs = [ref for ref in find_table_references(tokens) if ref.normalized not in ctes]
    if not refs:
        return ModelExportResult.failure(model_format, "No table reference found in SQL")

    graph = extract_schema(sql, base_platform)
    plan = plan_model(tokens, sql, refs, find_select_items(tokens), graph)
    logger.debug(
        "Exporting %s model %s (%s, %d sources)",
        model_format.value,
        plan.name,
        plan.materialization.value,
        len(plan.sources),
    )

    if model_format is ModelFormat.DATAFORM:
        model = dataform.render_model(plan, tokens, refs, platform)
        documentation = dataform.render_documentation(plan, graph, platform, issues)
        config = dataform.render_config(plan, platform)
    else:
        model = dbt.render_model(plan, tokens, refs, platform)
        documentation = dbt.render_documentation(plan, graph, platform)
        config = dbt.render_config(plan)

    return ModelExportResult(
        success=True,
        model_format=model_format,
        model_name=plan.name,
        model=model,
        documentation=documentation,
        config=config,
        base_platform=base_platform,
        issues=issues,
    )
