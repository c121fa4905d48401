"""Dataform SQLX, Markdown documentation and config rendering."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any

from dialect_engine.graph.table_refs import TableReference
from dialect_engine.models.export import Materialization
from dialect_engine.models.migration import MigrationIssue
from dialect_engine.models.schema_graph import SchemaGraph
from dialect_engine.sql_toolkit import Platform, Token

from .heuristics import ModelPlan
from .sql_body import render_model_sql


def _assertions(plan: ModelPlan) -> dict[str, list[str]]:
    unique = [col for col, tests in plan.tests.items() if any(t.name == "unique" for t in tests)]
    non_null = [col for col, tests in plan.tests.items() if any(t.name == "not_null" for t in tests)]
    assertions: dict[str, list[str]] = {}
    if unique:
        assertions["uniqueKey"] = unique
    if non_null:
        assertions["nonNull"] = non_null
    return assertions


def _config_values(plan: ModelPlan, description: str) -> dict[str, Any]:
    config: dict[str, Any] = {
        "type": plan.materialization.value,
        "schema": plan.schema,
        "description": description,
        "tags": list(plan.tags),
    }
    if plan.materialization is Materialization.INCREMENTAL and plan.unique_key:
        config["uniqueKey"] = [plan.unique_key]
    assertions = _assertions(plan)
    if assertions:
        config["assertions"] = assertions
    return config


def _sqlx_value(value: Any, indent: str) -> str:
    # SQLX config blocks are JavaScript object literals with bare keys.
    if isinstance(value, dict):
        inner = indent + "  "
        body = ",\n".join(f"{inner}{key}: {_sqlx_value(v, inner)}" for key, v in value.items())
        return "{\n" + body + "\n" + indent + "}"
    return json.dumps(value)


def _incremental_filter(field: str) -> Callable[[bool], str]:
    def build(has_where: bool) -> str:
        keyword = "AND" if has_where else "WHERE"
        return f'\n${{when(incremental(), `{keyword} {field} > (SELECT MAX({field}) FROM ${{self()}})`)}}'

    return build


def render_model(
    plan: ModelPlan,
    tokens: Sequence[Token],
    refs: Sequence[TableReference],
    platform: Platform,
) -> str:
    description = f"Generated from {platform.label} SQL"
    config = _config_values(plan, description)
    lines = ["config {"]
    lines.extend(f"  {key}: {_sqlx_value(value, '  ')}," for key, value in config.items())
    lines[-1] = lines[-1].rstrip(",")
    lines.append("}")

    incremental = _incremental_filter(plan.incremental_field) if plan.incremental_field else None
    body = render_model_sql(
        tokens,
        refs,
        lambda ref: '${ref("' + ref.path.name + '")}',
        incremental,
    )
    return "\n".join(lines) + "\n\n" + body


def render_documentation(
    plan: ModelPlan,
    graph: SchemaGraph,
    platform: Platform,
    issues: Sequence[MigrationIssue] = (),
) -> str:
    out = [
        f"# {plan.name}",
        "",
        f"Generated from {platform.label} SQL. "
        f"Materialized as `{plan.materialization.value}` in schema `{plan.schema}`.",
        "",
    ]

    if plan.sources:
        out.append("## Sources")
        out.append("")
        out.extend(f"- `{source}`" for source in plan.sources)
        out.append("")

    if plan.columns:
        out.append("## Columns")
        out.append("")
        out.append("| Column | Type | Description | Tests |")
        out.append("|--------|------|-------------|-------|")
        for col in plan.columns:
            tests = ", ".join(t.name for t in plan.tests.get(col.name, ()))
            description = col.description.replace("|", "\\|")
            out.append(f"| {col.name} | {col.data_type or ''} | {description} | {tests} |")
        out.append("")

    if graph.relationships:
        out.append("## Relationships")
        out.append("")
        for rel in graph.relationships:
            if rel.source_column and rel.target_column:
                out.append(f"- `{rel.source}.{rel.source_column}` -> `{rel.target}.{rel.target_column}` ({rel.type})")
            else:
                out.append(f"- `{rel.source}` -> `{rel.target}` ({rel.type})")
        out.append("")

    if issues:
        out.append("## Migration notes")
        out.append("")
        for issue in issues:
            where = f"line {issue.line}" if issue.line is not None else "query"
            out.append(f"- **{issue.severity.value}** ({where}): {issue.message}")
        out.append("")

    return "\n".join(out)


def render_config(plan: ModelPlan, platform: Platform) -> str:
    return json.dumps(_config_values(plan, f"Generated from {platform.label} SQL"), indent=2)
