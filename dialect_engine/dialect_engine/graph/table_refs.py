"""Token-level helpers for locating table references and SELECT items.

These helpers never build a syntax tree.  They scan the lexer's token
stream for the handful of shapes the lineage extractor and the model
exporter care about: the table named after ``FROM`` or ``JOIN`` (with
its alias), the comma-separated items of each ``SELECT`` list, and the
named nested queries (CTE bodies and aliased derived tables).
"""

from __future__ import annotations

import bisect
import enum
from collections.abc import Sequence
from dataclasses import dataclass

from dialect_engine.sql_toolkit import ObjectPath, Token, TokenKind, is_word, scan_path, unquote

# FROM inside these calls is an argument separator, e.g. EXTRACT(YEAR FROM ts).
_FROM_ARGUMENT_FUNCTIONS = frozenset({"EXTRACT", "TRIM", "SUBSTRING", "POSITION", "OVERLAY"})

# Words that can follow FROM/JOIN without naming a table.
_NOT_A_TABLE = frozenset({"LATERAL", "UNNEST", "TABLE", "SELECT", "VALUES", "FLATTEN", "EXPLODE"})

# Identifier-classified words that start a clause rather than name an alias.
_NOT_AN_ALIAS = frozenset(
    {
        "LATERAL", "QUALIFY", "WINDOW", "PIVOT", "UNPIVOT", "SAMPLE",
        "TABLESAMPLE", "USING", "NATURAL", "CROSS", "FOR", "CLUSTER",
        "PARTITION", "ZORDER", "MATCH_RECOGNIZE", "OPTIONS", "OVER", "AT",
        "BEFORE", "CHANGES", "TIMESTAMP", "VERSION", "SEMI", "ANTI",
    }
)  # fmt: skip

# Kinds that can end an expression directly before an implicit alias.
_ALIAS_PRECEDERS = frozenset(
    {
        TokenKind.IDENTIFIER,
        TokenKind.STRING,
        TokenKind.NUMERIC,
        TokenKind.LITERAL,
        TokenKind.FUNCTION,
        TokenKind.PLATFORM_FUNCTION,
    }
)

_SELECT_LIST_END = frozenset(
    {
        "FROM", "WHERE", "GROUP", "HAVING", "ORDER", "LIMIT", "UNION",
        "EXCEPT", "INTERSECT", "QUALIFY", "WINDOW", "INTO",
    }
)  # fmt: skip


@dataclass(frozen=True, slots=True)
class TableReference:
    """A table named after FROM, JOIN or a comma in a FROM list."""

    path: ObjectPath
    alias: str | None
    keyword: str
    start: int
    end: int

    @property
    def name(self) -> str:
        return ".".join(self.path.parts)

    @property
    def normalized(self) -> str:
        return self.path.normalized


@dataclass(frozen=True, slots=True)
class SelectItem:
    """One top-level item of a SELECT list.

    ``select_index`` is the token index of the owning SELECT and ``depth``
    its parenthesis depth.  ``start``/``end`` cover the whole item;
    ``expr_end`` stops before an ``AS alias`` or implicit alias.  Token
    indices refer to the full token list.
    """

    select_index: int
    depth: int
    start: int
    end: int
    expr_end: int
    alias: str | None
    alias_index: int | None


def _significant_indices(tokens: Sequence[Token]) -> list[int]:
    return [i for i, tok in enumerate(tokens) if not tok.is_trivia]


def is_identifier_token(tok: Token) -> bool:
    """True for a bare identifier word or a ``"quoted"``/```quoted``` name."""
    if tok.kind is TokenKind.IDENTIFIER:
        return is_word(tok.text) and tok.upper not in _NOT_AN_ALIAS
    return tok.kind is TokenKind.STRING and tok.text[:1] in ('"', "`")


def _read_reference(
    tokens: Sequence[Token],
    sig: list[int],
    k: int,
    keyword: str,
) -> tuple[TableReference, int] | None:
    """Read a table reference starting at significant position *k*.

    Returns the reference and the significant position just after it.
    """
    if k >= len(sig):
        return None
    start = sig[k]
    first = tokens[start]
    if first.upper in _NOT_A_TABLE or first.kind is TokenKind.KEYWORD:
        return None
    path = scan_path(tokens, start)
    if path is None:
        return None

    nk = bisect.bisect_left(sig, path.end)
    if nk < len(sig) and tokens[sig[nk]].is_punct("("):
        # Table-valued function such as UNNEST(...) or range(10).
        return None

    alias: str | None = None
    end = path.end
    if nk < len(sig) and tokens[sig[nk]].upper == "AS":
        if nk + 1 < len(sig) and is_identifier_token(tokens[sig[nk + 1]]):
            alias = unquote(tokens[sig[nk + 1]].text)
            end = sig[nk + 1] + 1
            nk += 2
    elif nk < len(sig) and is_identifier_token(tokens[sig[nk]]):
        alias = unquote(tokens[sig[nk]].text)
        end = sig[nk] + 1
        nk += 1

    return TableReference(path=path, alias=alias, keyword=keyword, start=start, end=end), nk


def find_table_references(tokens: Sequence[Token]) -> list[TableReference]:
    """Return every table reference in source order.

    Subqueries (``FROM (SELECT ...)``) and table functions are skipped;
    the tables inside a subquery are still found by the same scan.
    """
    sig = _significant_indices(tokens)
    refs: list[TableReference] = []
    # One entry per open parenthesis: True when it belongs to a call
    # whose arguments may contain FROM.
    paren_stack: list[bool] = []
    prev_upper = ""

    k = 0
    while k < len(sig):
        tok = tokens[sig[k]]
        upper = tok.upper

        if tok.is_punct("("):
            paren_stack.append(prev_upper in _FROM_ARGUMENT_FUNCTIONS)
        elif tok.is_punct(")"):
            if paren_stack:
                paren_stack.pop()
        elif upper in ("FROM", "JOIN") and not (paren_stack and paren_stack[-1]):
            read = _read_reference(tokens, sig, k + 1, upper)
            if read is not None:
                while read is not None:
                    ref, k = read
                    refs.append(ref)
                    # FROM a, b, c
                    if k < len(sig) and tokens[sig[k]].is_punct(","):
                        read = _read_reference(tokens, sig, k + 1, ",")
                    else:
                        read = None
                prev_upper = tokens[sig[k - 1]].upper
                continue

        prev_upper = upper
        k += 1
    return refs


def _item_alias(tokens: Sequence[Token], sig_item: list[int]) -> tuple[str | None, int | None, int]:
    """Return (alias, alias token index, significant count of the expression)."""
    if len(sig_item) >= 3 and tokens[sig_item[-2]].upper == "AS" and is_identifier_token(tokens[sig_item[-1]]):
        return unquote(tokens[sig_item[-1]].text), sig_item[-1], len(sig_item) - 2
    if len(sig_item) >= 2:
        last = tokens[sig_item[-1]]
        before = tokens[sig_item[-2]]
        if (
            last.kind is TokenKind.IDENTIFIER
            and is_identifier_token(last)
            and (before.is_punct(")") or before.kind in _ALIAS_PRECEDERS or before.upper == "END")
        ):
            return last.text, sig_item[-1], len(sig_item) - 1
    return None, None, len(sig_item)


def find_select_items(tokens: Sequence[Token]) -> list[SelectItem]:
    """Return the top-level items of every SELECT list, in source order."""
    sig = _significant_indices(tokens)
    items: list[SelectItem] = []
    paren_depth = 0

    for k, idx in enumerate(sig):
        tok = tokens[idx]
        if tok.is_punct("("):
            paren_depth += 1
        elif tok.is_punct(")"):
            paren_depth = max(0, paren_depth - 1)
        if tok.upper != "SELECT":
            continue

        j = k + 1
        while j < len(sig) and tokens[sig[j]].upper in ("DISTINCT", "ALL"):
            j += 1

        depth = 0
        current: list[int] = []
        groups: list[list[int]] = []
        while j < len(sig):
            inner = tokens[sig[j]]
            if inner.is_punct("("):
                depth += 1
            elif inner.is_punct(")"):
                if depth == 0:
                    break
                depth -= 1
            elif depth == 0 and (inner.upper in _SELECT_LIST_END or inner.is_punct(";")):
                break
            elif depth == 0 and inner.is_punct(","):
                groups.append(current)
                current = []
                j += 1
                continue
            current.append(sig[j])
            j += 1
        groups.append(current)

        for group in groups:
            if not group:
                continue
            alias, alias_index, expr_count = _item_alias(tokens, group)
            items.append(
                SelectItem(
                    select_index=idx,
                    depth=paren_depth,
                    start=group[0],
                    end=group[-1] + 1,
                    expr_end=group[expr_count - 1] + 1,
                    alias=alias,
                    alias_index=alias_index,
                )
            )
    return items


def item_output_name(tokens: Sequence[Token], item: SelectItem) -> str | None:
    """Name of the column a SELECT item produces, when it can be told.

    The alias wins; otherwise a bare column reference yields its last
    segment.  ``*`` yields ``"*"`` and other expressions yield ``None``.
    """
    if item.alias:
        return item.alias
    expr = [tok for tok in tokens[item.start : item.expr_end] if not tok.is_trivia]
    if expr and expr[-1].text == "*":
        return "*"
    path = scan_path(tokens, item.start)
    if path is not None and path.end == item.expr_end and tokens[item.start].kind is not TokenKind.KEYWORD:
        return path.name
    return None


class BlockKind(str, enum.Enum):
    """Where a nested query is named."""

    CTE = "cte"
    SUBQUERY = "subquery"


@dataclass(frozen=True, slots=True)
class QueryBlock:
    """A named nested query: a ``WITH`` body or an aliased derived table.

    ``start``/``end`` index the tokens between the parentheses.
    """

    name: str
    kind: BlockKind
    start: int
    end: int

    def contains(self, index: int) -> bool:
        return self.start <= index < self.end


def _closing_paren(tokens: Sequence[Token], sig: list[int], k: int) -> int | None:
    """Significant position of the ``)`` matching the ``(`` at *k*."""
    depth = 0
    for pos in range(k, len(sig)):
        tok = tokens[sig[pos]]
        if tok.is_punct("("):
            depth += 1
        elif tok.is_punct(")"):
            depth -= 1
            if depth == 0:
                return pos
    return None


def _read_ctes(tokens: Sequence[Token], sig: list[int], k: int) -> list[QueryBlock]:
    """Read ``name AS (...)[, ...]`` starting at significant position *k*."""
    blocks: list[QueryBlock] = []
    if k < len(sig) and tokens[sig[k]].upper == "RECURSIVE":
        k += 1
    while k + 2 < len(sig):
        name_tok, as_tok, open_tok = (tokens[sig[k + n]] for n in range(3))
        if not is_identifier_token(name_tok) or as_tok.upper != "AS" or not open_tok.is_punct("("):
            break
        close = _closing_paren(tokens, sig, k + 2)
        if close is None:
            break
        blocks.append(QueryBlock(unquote(name_tok.text), BlockKind.CTE, sig[k + 2] + 1, sig[close]))
        k = close + 1
        if k < len(sig) and tokens[sig[k]].is_punct(","):
            k += 1
            continue
        break
    return blocks


def _read_derived_table(tokens: Sequence[Token], sig: list[int], k: int) -> QueryBlock | None:
    """Read ``(SELECT ...) [AS] alias`` whose ``(`` is at significant position *k*."""
    if k + 1 >= len(sig) or not tokens[sig[k]].is_punct("(") or tokens[sig[k + 1]].upper not in ("SELECT", "WITH"):
        return None
    close = _closing_paren(tokens, sig, k)
    if close is None:
        return None
    nk = close + 1
    if nk < len(sig) and tokens[sig[nk]].upper == "AS":
        nk += 1
    if nk >= len(sig) or not is_identifier_token(tokens[sig[nk]]):
        return None
    return QueryBlock(unquote(tokens[sig[nk]].text), BlockKind.SUBQUERY, sig[k] + 1, sig[close])


def find_query_blocks(tokens: Sequence[Token]) -> list[QueryBlock]:
    """Return every CTE body and aliased derived table, in source order.

    Blocks nest: a derived table inside a CTE body is reported as well
    as the CTE itself.
    """
    sig = _significant_indices(tokens)
    blocks: list[QueryBlock] = []
    for k, idx in enumerate(sig):
        upper = tokens[idx].upper
        if upper == "WITH":
            blocks.extend(_read_ctes(tokens, sig, k + 1))
        elif upper in ("FROM", "JOIN"):
            derived = _read_derived_table(tokens, sig, k + 1)
            if derived is not None:
                blocks.append(derived)
    blocks.sort(key=lambda block: block.start)
    return blocks


def find_cte_names(tokens: Sequence[Token]) -> set[str]:
    """Lower-cased names defined by ``WITH name AS (...)`` clauses."""
    return {block.name.lower() for block in find_query_blocks(tokens) if block.kind is BlockKind.CTE}
