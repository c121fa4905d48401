"""Schema lineage extraction from a single query.

Builds a :class:`~dialect_engine.models.schema_graph.SchemaGraph` by
static inspection of the query's tokens:

1. Tables come from ``FROM``/``JOIN`` references (and comma lists).
   Each distinct normalized name becomes one node; when the same table
   is joined under several aliases each alias gets its own node.
2. Column references are attributed through the alias map.  Qualified
   references are attributed anywhere in the query; unqualified ones
   only when exactly one table is in scope.
3. ``a.x = b.y`` predicates in ``ON`` and ``WHERE`` clauses become
   ``join-equality`` relationships and link the two columns.
4. A CTE or aliased derived table becomes a node of its own with a
   ``cte-reference`` or ``subquery`` relationship to every table its
   body reads directly.
5. A ``<name>_id`` column whose stem names another table becomes a
   ``foreign-key-naming`` relationship, unless a join already connects
   the two tables.

References that cannot be resolved are logged at DEBUG and skipped;
the graph may be incomplete but never raises.
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Sequence
from dataclasses import dataclass

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
from dialect_engine.sql_toolkit import Platform, Token, TokenKind, scan_path, tokenize
from dialect_engine.telemetry.profiling import profile_operation

from .table_refs import (
    BlockKind,
    QueryBlock,
    TableReference,
    find_query_blocks,
    find_select_items,
    find_table_references,
    is_identifier_token,
)

logger = logging.getLogger(__name__)

# Keywords after which "=" compares columns of joined tables.
_CONDITION_CLAUSES = frozenset({"ON", "WHERE"})
_OTHER_CLAUSES = frozenset(
    {
        "SELECT", "FROM", "JOIN", "GROUP", "ORDER", "HAVING", "QUALIFY",
        "LIMIT", "WINDOW", "UNION", "EXCEPT", "INTERSECT", "SET", "USING",
        "VALUES",
    }
)  # fmt: skip

# Identifier-classified words that are never column names.
_NON_COLUMN_WORDS = frozenset(
    {
        "DAY", "DAYS", "WEEK", "MONTH", "QUARTER", "YEAR", "HOUR", "MINUTE",
        "SECOND", "MILLISECOND", "MICROSECOND", "DAYOFWEEK", "DAYOFYEAR",
        "DATE", "DATETIME", "TIMESTAMP", "TIME", "INT", "INT64", "INTEGER",
        "BIGINT", "SMALLINT", "FLOAT", "FLOAT64", "DOUBLE", "NUMERIC",
        "NUMBER", "DECIMAL", "STRING", "VARCHAR", "CHAR", "TEXT", "BOOLEAN",
        "BOOL", "BYTES", "BINARY", "JSON", "ROWS", "RANGE", "PRECEDING",
        "FOLLOWING", "UNBOUNDED", "CURRENT", "ROW", "NULLS", "FIRST", "LAST",
        "IGNORE", "RESPECT", "INPUT", "IF", "IFNULL", "DATE_ADD", "DATEADD",
    }
)  # fmt: skip

_BLOCK_RELATIONSHIP = {BlockKind.CTE: CTE_REFERENCE, BlockKind.SUBQUERY: SUBQUERY}


@dataclass(frozen=True, slots=True)
class _ColumnRef:
    """A column mention; positions index the significant-token list."""

    first: int
    last: int
    qualifier: str | None
    column: str


def _innermost(blocks: Sequence[QueryBlock], index: int, exclude: QueryBlock | None = None) -> QueryBlock | None:
    """The smallest block whose body contains token *index*."""
    best: QueryBlock | None = None
    for block in blocks:
        if block is exclude or not block.contains(index):
            continue
        if best is None or block.end - block.start < best.end - best.start:
            best = block
    return best


class _SchemaBuilder:
    """Per-call state for one extraction.  Never shared between calls."""

    def __init__(self, tokens: Sequence[Token], platform: Platform) -> None:
        self._tokens = tokens
        self._platform = platform
        self._sig = [i for i, tok in enumerate(tokens) if not tok.is_trivia]
        self._tables: dict[str, TableNode] = {}
        self._aliases: dict[str, str] = {}
        self._names: dict[str, str] = {}
        self._relationships: dict[tuple[str, str, str], Relationship] = {}
        # Token index of each table reference -> the node it was registered as.
        self._ref_tables: dict[int, str] = {}

    # -- tables ------------------------------------------------------------

    def _register_tables(self, refs: Sequence[TableReference]) -> None:
        aliases_by_name: dict[str, set[str | None]] = {}
        for ref in refs:
            aliases_by_name.setdefault(ref.normalized, set()).add(ref.alias.lower() if ref.alias else None)

        for ref in refs:
            alias_key = ref.alias.lower() if ref.alias else None
            if len(aliases_by_name[ref.normalized]) > 1 and alias_key:
                # Same table under several aliases: one node per alias.
                table_id = alias_key
            else:
                table_id = ref.normalized
                self._names.setdefault(ref.normalized, table_id)

            if table_id not in self._tables:
                self._tables[table_id] = TableNode(id=table_id, name=ref.name, alias=ref.alias)
            self._ref_tables[ref.start] = table_id
            if alias_key:
                self._aliases.setdefault(alias_key, table_id)

        # Bare table names resolve qualifiers such as "orders" in
        # "sales.orders" when they are unambiguous.
        short: dict[str, list[str]] = {}
        for name, table_id in self._names.items():
            short.setdefault(name.rsplit(".", 1)[-1], []).append(table_id)
        for name, ids in short.items():
            if len(ids) == 1:
                self._names.setdefault(name, ids[0])

    def _block_node(self, block: QueryBlock) -> str:
        key = block.name.lower()
        if block.kind is BlockKind.CTE:
            table_id = self._names.get(key, key)
        else:
            table_id = self._aliases.get(key, key)
            self._aliases.setdefault(key, table_id)
        if table_id not in self._tables:
            self._tables[table_id] = TableNode(
                id=table_id,
                name=block.name,
                alias=block.name if block.kind is BlockKind.SUBQUERY else None,
            )
        return table_id

    def _register_blocks(self, refs: Sequence[TableReference]) -> list[Relationship]:
        """Add nodes for named nested queries; return their source edges.

        Each table reference and each derived table belongs to the
        innermost block around it, so ``a`` in ``WITH b AS (SELECT *
        FROM (SELECT * FROM a) t)`` feeds ``t`` and ``t`` feeds ``b``.
        """
        blocks = find_query_blocks(self._tokens)
        edges: list[Relationship] = []
        if not blocks:
            return edges

        sources: list[tuple[QueryBlock, str]] = []
        for ref in refs:
            owner = _innermost(blocks, ref.start)
            if owner is not None:
                sources.append((owner, self._ref_tables[ref.start]))
        for block in blocks:
            if block.kind is not BlockKind.SUBQUERY:
                continue
            owner = _innermost(blocks, block.start, exclude=block)
            if owner is not None:
                sources.append((owner, self._block_node(block)))

        nodes = {block: self._block_node(block) for block in blocks if block.kind is BlockKind.SUBQUERY}
        for block in blocks:
            if block.kind is BlockKind.CTE and any(owner is block for owner, _ in sources):
                nodes[block] = self._block_node(block)

        for owner, target in sources:
            source = nodes[owner]
            if source == target:
                continue
            edges.append(Relationship(source=source, target=target, type=_BLOCK_RELATIONSHIP[owner.kind]))
        return edges

    def _resolve_table(self, qualifier: str | None) -> str | None:
        if qualifier is None:
            if len(self._tables) == 1:
                return next(iter(self._tables))
            return None
        return self._aliases.get(qualifier) or self._names.get(qualifier)

    # -- columns -----------------------------------------------------------

    def _column(self, table_id: str, name: str) -> ColumnNode:
        table = self._tables[table_id]
        existing = table.column(name)
        if existing is not None:
            return existing
        col = ColumnNode(id=f"{table_id}.{name.lower()}", name=name, table_id=table_id)
        table.columns.append(col)
        return col

    def _is_identifier_start(self, tok: Token) -> bool:
        if tok.kind is TokenKind.STRING:
            # Double quotes delimit identifiers only on Snowflake;
            # backticks only on BigQuery and Databricks.
            if tok.text[0] == '"':
                return self._platform is Platform.SNOWFLAKE
            return tok.text[0] == "`" and self._platform is not Platform.SNOWFLAKE
        return tok.kind is TokenKind.IDENTIFIER and is_identifier_token(tok)

    def _collect_column_refs(self, refs: Sequence[TableReference], skip_indices: set[int]) -> list[_ColumnRef]:
        tokens = self._tokens
        sig = self._sig
        consumed = {idx for ref in refs for idx in range(ref.start, ref.end)}

        found: list[_ColumnRef] = []
        k = 0
        while k < len(sig):
            idx = sig[k]
            tok = tokens[idx]
            if idx in consumed or idx in skip_indices or not self._is_identifier_start(tok):
                k += 1
                continue
            if k > 0 and (tokens[sig[k - 1]].is_punct(".") or tokens[sig[k - 1]].upper == "AS"):
                k += 1
                continue

            path = scan_path(tokens, idx)
            if path is None:
                k += 1
                continue
            last = bisect.bisect_left(sig, path.end) - 1
            nxt = tokens[sig[last + 1]] if last + 1 < len(sig) else None

            is_call = nxt is not None and nxt.is_punct("(")
            is_star = nxt is not None and nxt.is_punct(".")
            if not is_call and not is_star:
                if len(path.parts) > 1:
                    qualifier = ".".join(part.lower() for part in path.parts[:-1])
                    found.append(_ColumnRef(first=k, last=last, qualifier=qualifier, column=path.parts[-1]))
                elif tok.upper not in _NON_COLUMN_WORDS:
                    found.append(_ColumnRef(first=k, last=last, qualifier=None, column=path.parts[0]))
            k = last + 1
        return found

    def _attribute(self, ref: _ColumnRef) -> ColumnNode | None:
        table_id = self._resolve_table(ref.qualifier)
        if table_id is None:
            if ref.qualifier is None:
                logger.debug("Skipping unqualified column %s: %d tables in scope", ref.column, len(self._tables))
            else:
                logger.debug("Skipping column %s.%s: unknown qualifier", ref.qualifier, ref.column)
            return None
        return self._column(table_id, ref.column)

    # -- relationships -----------------------------------------------------

    def _add_relationship(self, rel: Relationship) -> None:
        self._relationships.setdefault(rel.key, rel)

    @staticmethod
    def _link(source: ColumnNode, target: ColumnNode) -> None:
        if target.id not in source.references:
            source.references.append(target.id)
        if source.id not in target.referenced_by:
            target.referenced_by.append(source.id)

    def _condition_positions(self) -> set[int]:
        """Significant positions that sit inside an ON or WHERE clause."""
        inside = False
        positions: set[int] = set()
        for k, idx in enumerate(self._sig):
            upper = self._tokens[idx].upper
            if upper in _CONDITION_CLAUSES:
                inside = True
            elif upper in _OTHER_CLAUSES:
                inside = False
            elif inside:
                positions.add(k)
        return positions

    def _join_equalities(self, refs: Sequence[_ColumnRef]) -> None:
        by_last = {ref.last: ref for ref in refs}
        by_first = {ref.first: ref for ref in refs}
        conditions = self._condition_positions()

        for k, idx in enumerate(self._sig):
            tok = self._tokens[idx]
            if tok.kind is not TokenKind.OPERATOR or tok.text != "=" or k not in conditions:
                continue
            left = by_last.get(k - 1)
            right = by_first.get(k + 1)
            if left is None or right is None:
                continue
            left_col = self._attribute(left)
            right_col = self._attribute(right)
            if left_col is None or right_col is None or left_col is right_col:
                continue

            self._link(left_col, right_col)
            self._add_relationship(
                Relationship(
                    source=left_col.table_id,
                    target=right_col.table_id,
                    type=JOIN_EQUALITY,
                    source_column=left_col.name,
                    target_column=right_col.name,
                )
            )

    def _foreign_key_names(self) -> None:
        joined = {frozenset((rel.source, rel.target)) for rel in self._relationships.values()}
        for table in list(self._tables.values()):
            for col in list(table.columns):
                lowered = col.name.lower()
                if not lowered.endswith("_id") or len(lowered) <= 3:
                    continue
                stem = lowered[:-3]
                candidates = {stem, f"{stem}s", f"{stem}es"}
                if stem.endswith("y"):
                    candidates.add(f"{stem[:-1]}ies")

                for other in self._tables.values():
                    if other.id == table.id or frozenset((table.id, other.id)) in joined:
                        continue
                    if other.name.rsplit(".", 1)[-1].lower() not in candidates:
                        continue
                    target_col = other.column("id")
                    if target_col is not None:
                        self._link(col, target_col)
                    self._add_relationship(
                        Relationship(
                            source=table.id,
                            target=other.id,
                            type=FOREIGN_KEY_NAMING,
                            source_column=col.name,
                            target_column=target_col.name if target_col is not None else None,
                        )
                    )

    # -- entry point -------------------------------------------------------

    def build(self) -> SchemaGraph:
        refs = find_table_references(self._tokens)
        if not refs:
            logger.debug("No FROM or JOIN table reference found; returning an empty graph")
            return SchemaGraph()
        self._register_tables(refs)
        block_edges = self._register_blocks(refs)

        items = find_select_items(self._tokens)
        alias_indices = {item.alias_index for item in items if item.alias_index is not None}
        output_aliases = {item.alias.lower() for item in items if item.alias}

        select_exprs = {idx for item in items for idx in range(item.start, item.expr_end)}

        # An unqualified name matching an output alias outside the SELECT
        # list (ORDER BY total) refers to the alias, not a column.
        column_refs = [
            ref
            for ref in self._collect_column_refs(refs, alias_indices)
            if ref.qualifier is not None
            or ref.column.lower() not in output_aliases
            or self._sig[ref.first] in select_exprs
        ]
        for ref in column_refs:
            self._attribute(ref)

        self._join_equalities(column_refs)
        for edge in block_edges:
            self._add_relationship(edge)
        self._foreign_key_names()

        return SchemaGraph(
            tables=list(self._tables.values()),
            relationships=list(self._relationships.values()),
        )


@profile_operation("lineage.extract_schema")
def extract_schema(sql: str, platform: Platform) -> SchemaGraph:
    """Build the table/column relationship graph for *sql*.

    Parameters
    ----------
    sql:
        A single query.  Text without a FROM clause yields an empty graph.
    platform:
        Dialect used to tokenize the query (quoting and keyword rules).
    """
    return _SchemaBuilder(tokenize(sql, platform), platform).build()
