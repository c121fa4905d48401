"""dbt model, schema.yml and config rendering."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any

import yaml

from dialect_engine.graph.table_refs import TableReference
from dialect_engine.models.export import Materialization
from dialect_engine.models.schema_graph import SchemaGraph
from dialect_engine.sql_toolkit import Platform, Token

from .heuristics import ModelPlan
from .sql_body import render_model_sql


def _config_values(plan: ModelPlan) -> dict[str, Any]:
    config: dict[str, Any] = {
        "materialized": plan.materialization.value,
        "schema": plan.schema,
        "tags": list(plan.tags),
    }
    if plan.materialization is Materialization.INCREMENTAL:
        config["unique_key"] = plan.unique_key or "id"
        config["incremental_strategy"] = "merge"
        config["on_schema_change"] = "sync_all_columns"
    return config


def _jinja_literal(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(_jinja_literal(v) for v in value) + "]"
    return "'" + str(value).replace("'", "\\'") + "'"


def _incremental_filter(field: str) -> Callable[[bool], str]:
    def build(has_where: bool) -> str:
        keyword = "AND" if has_where else "WHERE"
        return (
            "\n{% if is_incremental() %}\n"
            f"  {keyword} {field} > (SELECT MAX({field}) FROM {{{{ this }}}})\n"
            "{% endif %}"
        )

    return build


def render_model(
    plan: ModelPlan,
    tokens: Sequence[Token],
    refs: Sequence[TableReference],
    platform: Platform,
) -> str:
    config_lines = ",\n".join(f"    {key}={_jinja_literal(value)}" for key, value in _config_values(plan).items())
    header = [
        "{{ config(",
        config_lines,
        ") }}",
        "",
        f"-- {plan.name}: generated from {platform.label} SQL",
    ]
    if plan.sources:
        header.append("-- depends on: " + ", ".join(plan.sources))

    incremental = _incremental_filter(plan.incremental_field) if plan.incremental_field else None
    body = render_model_sql(
        tokens,
        refs,
        lambda ref: "{{ ref('" + ref.path.name + "') }}",
        incremental,
    )
    return "\n".join(header) + "\n\n" + body


def render_documentation(plan: ModelPlan, graph: SchemaGraph, platform: Platform) -> str:
    columns: list[dict[str, Any]] = []
    for col in plan.columns:
        entry: dict[str, Any] = {"name": col.name, "description": col.description or f"Column {col.name}"}
        if col.data_type:
            entry["data_type"] = col.data_type
        col_tests = plan.tests.get(col.name, ())
        if col_tests:
            entry["tests"] = [{t.name: dict(t.params)} if t.params else t.name for t in col_tests]
        columns.append(entry)

    model: dict[str, Any] = {
        "name": plan.name,
        "description": f"Model generated from {platform.label} SQL",
        "config": _config_values(plan),
    }
    if columns:
        model["columns"] = columns
    model["meta"] = {
        "upstream_tables": list(plan.sources),
        "relationships": [
            f"{rel.source}.{rel.source_column} -> {rel.target}.{rel.target_column} ({rel.type})"
            if rel.source_column and rel.target_column
            else f"{rel.source} -> {rel.target} ({rel.type})"
            for rel in graph.relationships
        ],
    }

    document = {"version": 2, "models": [model]}
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)


def render_config(plan: ModelPlan) -> str:
    return json.dumps(_config_values(plan), indent=2)
