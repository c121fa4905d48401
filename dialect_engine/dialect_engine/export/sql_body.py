"""Rewrite a query body for a workflow tool: table refs and incremental filters."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from dialect_engine.graph.table_refs import TableReference
from dialect_engine.sql_toolkit import Token

_WHERE_CLAUSE_END = frozenset(
    {"GROUP", "ORDER", "LIMIT", "HAVING", "QUALIFY", "WINDOW", "UNION", "EXCEPT", "INTERSECT"}
)


def _filter_position(tokens: Sequence[Token]) -> tuple[int, bool]:
    """Where to splice an incremental filter into the outer query.

    Returns the token index to insert before and whether the outer query
    already has a WHERE clause.
    """
    depth = 0
    in_where = False
    last_significant = -1
    for i, tok in enumerate(tokens):
        if tok.is_trivia:
            continue
        if tok.is_punct("("):
            depth += 1
        elif tok.is_punct(")"):
            depth -= 1
        elif depth == 0 and tok.upper == "WHERE":
            in_where = True
        elif depth == 0 and (tok.upper in _WHERE_CLAUSE_END or tok.is_punct(";")):
            return last_significant + 1, in_where
        last_significant = i
    return last_significant + 1, in_where


def render_model_sql(
    tokens: Sequence[Token],
    refs: Sequence[TableReference],
    make_ref: Callable[[TableReference], str],
    incremental_filter: Callable[[bool], str] | None = None,
) -> str:
    """Return the query with each table path replaced by ``make_ref(ref)``.

    When *incremental_filter* is given it is called with whether the
    outer query has a WHERE clause and its text is spliced in at the end
    of that clause (or before GROUP BY/ORDER BY/LIMIT when there is none).
    """
    replacements = {ref.path.start: (ref.path.end, make_ref(ref)) for ref in refs}
    insert_at, has_where = _filter_position(tokens) if incremental_filter else (-1, False)
    block = incremental_filter(has_where) if incremental_filter else ""

    out: list[str] = []
    i = 0
    while i < len(tokens):
        if i == insert_at:
            out.append(block)
        if i in replacements:
            end, text = replacements[i]
            out.append(text)
            i = end
            continue
        out.append(tokens[i].text)
        i += 1
    if insert_at >= len(tokens):
        out.append(block)
    return "".join(out).strip() + "\n"
