"""Naming, materialization and test heuristics for exported models.

All decisions are made from the token stream and the lineage graph of
the (already translated) query; nothing here looks at a live schema.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from dialect_engine.graph.table_refs import SelectItem, TableReference, item_output_name
from dialect_engine.models.export import Materialization
from dialect_engine.models.schema_graph import SchemaGraph
from dialect_engine.sql_toolkit import Token, TokenKind

_AGGREGATES = frozenset({"COUNT", "SUM", "AVG", "MIN", "MAX", "ARRAY_AGG", "STRING_AGG", "LISTAGG", "COLLECT_LIST"})
_TEMPORAL_HINTS = ("date", "time", "_at")
_LARGE_JOIN_QUERY_CHARS = 500

_LAYERS: dict[str, tuple[str, str]] = {
    # prefix: (schema, tag)
    "stg_": ("staging", "staging"),
    "int_": ("intermediate", "intermediate"),
    "mart_": ("mart", "mart"),
    "agg_": ("aggregations", "aggregation"),
}


@dataclass(frozen=True, slots=True)
class OutputColumn:
    """A column produced by the model's outer SELECT."""

    name: str
    data_type: str | None = None
    description: str = ""


@dataclass(frozen=True, slots=True)
class ColumnTest:
    """A suggested data test such as ``not_null`` or ``relationships``."""

    name: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ModelPlan:
    """Everything the dbt and Dataform renderers need to know."""

    name: str
    materialization: Materialization
    schema: str
    tags: tuple[str, ...]
    sources: tuple[str, ...]
    columns: tuple[OutputColumn, ...]
    tests: dict[str, tuple[ColumnTest, ...]]
    unique_key: str | None
    incremental_field: str | None


# ---------------------------------------------------------------------------
# Query shape
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Shape:
    group_by: bool
    aggregate: bool
    window: bool
    join: bool
    where: bool
    temporal_filter: bool


def _word_pairs(sig: Sequence[Token]) -> set[tuple[str, str]]:
    return {(a.upper, b.upper) for a, b in zip(sig, sig[1:], strict=False)}


def _shape(tokens: Sequence[Token]) -> _Shape:
    sig = [tok for tok in tokens if not tok.is_trivia]
    uppers = {tok.upper for tok in sig}
    pairs = _word_pairs(sig)

    where_seen = False
    temporal = False
    for tok in sig:
        if tok.upper == "WHERE":
            where_seen = True
        elif where_seen and tok.kind is not TokenKind.STRING and any(h in tok.text.lower() for h in _TEMPORAL_HINTS):
            temporal = True

    return _Shape(
        group_by=("GROUP", "BY") in pairs,
        aggregate=any(tok.upper in _AGGREGATES for tok in sig),
        window="OVER" in uppers or ("PARTITION", "BY") in pairs,
        join="JOIN" in uppers,
        where=where_seen,
        temporal_filter=temporal,
    )


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9_]+", "_", text.lower()).strip("_") or "model"


def suggest_model_name(tokens: Sequence[Token], refs: Sequence[TableReference]) -> str:
    """Prefix the main table with the model layer it most likely belongs to."""
    shape = _shape(tokens)
    tables: list[str] = []
    for ref in refs:
        base = _slug(ref.path.name)
        if base not in tables:
            tables.append(base)
    main = tables[0] if tables else "model"

    if shape.group_by and shape.aggregate:
        return f"agg_{main}"
    if len(tables) > 1:
        return "int_" + "_".join(tables)
    if shape.window:
        return f"mart_{main}"
    return f"stg_{main}"


def suggest_materialization(tokens: Sequence[Token], sql: str) -> Materialization:
    shape = _shape(tokens)
    if shape.group_by or shape.window:
        return Materialization.TABLE
    if shape.join and len(sql) > _LARGE_JOIN_QUERY_CHARS:
        return Materialization.TABLE
    if not shape.join:
        return Materialization.VIEW
    if shape.where and shape.temporal_filter:
        return Materialization.INCREMENTAL
    return Materialization.VIEW


def _infer_type(expr: Sequence[Token], name: str) -> str | None:
    uppers = {tok.upper for tok in expr}
    if uppers & {"COUNT", "SUM", "AVG"}:
        return "number"
    if any(tok.kind is TokenKind.NUMERIC for tok in expr) and len(expr) == 1:
        return "number"
    lowered = name.lower()
    if any(hint in lowered for hint in _TEMPORAL_HINTS) or uppers & {"CURRENT_DATE", "CURRENT_TIMESTAMP"}:
        return "timestamp"
    if uppers & {"TRUE", "FALSE"} or lowered.startswith(("is_", "has_")):
        return "boolean"
    return None


def output_columns(tokens: Sequence[Token], items: Sequence[SelectItem]) -> list[OutputColumn]:
    """Columns of the first top-level SELECT (the one that names the output)."""
    outer = [item for item in items if item.depth == 0]
    if not outer:
        return []
    first_select = outer[0].select_index

    columns: list[OutputColumn] = []
    seen: set[str] = set()
    for item in outer:
        if item.select_index != first_select:
            break
        name = item_output_name(tokens, item)
        if name is None or name == "*" or name.lower() in seen:
            continue
        seen.add(name.lower())
        expr = [tok for tok in tokens[item.start : item.expr_end] if not tok.is_trivia]
        expr_text = "".join(tok.text for tok in tokens[item.start : item.expr_end]).strip()
        description = f"Derived from: {expr_text}" if item.alias else f"Column {expr_text}"
        columns.append(OutputColumn(name=name, data_type=_infer_type(expr, name), description=description))
    return columns


def _referenced_table(column: str, graph: SchemaGraph) -> str | None:
    stem = column.lower()[:-3]
    candidates = {stem, f"{stem}s", f"{stem}es"}
    if stem.endswith("y"):
        candidates.add(f"{stem[:-1]}ies")
    for table in graph.tables:
        base = table.name.rsplit(".", 1)[-1]
        if base.lower() in candidates:
            return base
    return None


def suggest_tests(
    columns: Sequence[OutputColumn],
    graph: SchemaGraph,
    main_table: str,
) -> dict[str, tuple[ColumnTest, ...]]:
    """Suggest not_null/unique/relationships tests per output column.

    ``id`` (or ``<main table>_id``) is treated as the primary key; other
    ``*_id`` columns are foreign keys, tested against the table their
    stem names when that table is part of the query.
    """
    primary_names = {"id", f"{main_table.rstrip('s')}_id", f"{main_table}_id"}
    tests: dict[str, tuple[ColumnTest, ...]] = {}
    for col in columns:
        lowered = col.name.lower()
        suggested: list[ColumnTest] = []
        if lowered in primary_names:
            suggested.extend([ColumnTest("not_null"), ColumnTest("unique")])
        elif lowered.endswith("_id"):
            suggested.append(ColumnTest("not_null"))
            target = _referenced_table(lowered, graph)
            if target is not None and target.lower() != main_table:
                suggested.append(ColumnTest("relationships", {"to": f"ref('{target}')", "field": "id"}))
        if suggested:
            tests[col.name] = tuple(suggested)
    return tests


def _incremental_field(columns: Sequence[OutputColumn], unique_key: str | None) -> str:
    names = [col.name for col in columns]
    lowered = [name.lower() for name in names]
    for preferred in ("updated_at", "created_at"):
        if preferred in lowered:
            return names[lowered.index(preferred)]
    for hint in ("date", "timestamp", "time"):
        for name in names:
            if hint in name.lower():
                return name
    return unique_key or "id"


def plan_model(
    tokens: Sequence[Token],
    sql: str,
    refs: Sequence[TableReference],
    items: Sequence[SelectItem],
    graph: SchemaGraph,
) -> ModelPlan:
    """Make every naming and layout decision for an exported model."""
    name = suggest_model_name(tokens, refs)
    materialization = suggest_materialization(tokens, sql)
    prefix = next((p for p in _LAYERS if name.startswith(p)), "stg_")
    schema, layer_tag = _LAYERS[prefix]

    tags = [layer_tag]
    if _shape(tokens).group_by and "aggregation" not in tags:
        tags.append("aggregation")
    if materialization is Materialization.INCREMENTAL:
        tags.append("incremental")

    sources: list[str] = []
    for ref in refs:
        if ref.name not in sources:
            sources.append(ref.name)

    columns = output_columns(tokens, items)
    main_table = _slug(refs[0].path.name) if refs else "model"
    tests = suggest_tests(columns, graph, main_table)
    unique_key = next((col for col, col_tests in tests.items() if any(t.name == "unique" for t in col_tests)), None)
    incremental_field = (
        _incremental_field(columns, unique_key) if materialization is Materialization.INCREMENTAL else None
    )

    return ModelPlan(
        name=name,
        materialization=materialization,
        schema=schema,
        tags=tuple(tags),
        sources=tuple(sources),
        columns=tuple(columns),
        tests=tests,
        unique_key=unique_key,
        incremental_field=incremental_field,
    )
