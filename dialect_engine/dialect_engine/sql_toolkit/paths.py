"""Dotted object-path recognition over a token stream.

A path is a run of name segments joined by ``.`` with no whitespace in
between: ``orders``, ``sales.orders``, ``"DB"."S"."T"``, ```p.d.t```,
``[dbo].[orders]``.  A single backtick-quoted token that itself contains
dots (BigQuery's ```project.dataset.table```) counts as one segment per
dotted part.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from ._types import Token, TokenKind
from .lexer import is_word, unquote


class PathQuoting(str, enum.Enum):
    """How the segments of a path are quoted."""

    BARE = "bare"
    BACKTICK = "backtick"
    DOUBLE = "double"
    BRACKET = "bracket"
    MIXED = "mixed"


@dataclass(frozen=True, slots=True)
class ObjectPath:
    """A dotted path found in a token list.

    ``start`` and ``end`` are token indices (end exclusive).  ``parts``
    holds the unquoted segment names in source casing.
    """

    start: int
    end: int
    parts: tuple[str, ...]
    quoting: PathQuoting

    @property
    def normalized(self) -> str:
        """Lower-cased dotted name used as a lookup key."""
        return ".".join(part.lower() for part in self.parts)

    @property
    def name(self) -> str:
        return self.parts[-1]


def _segment(tokens: Sequence[Token], i: int) -> tuple[int, tuple[str, ...], PathQuoting] | None:
    """Read one segment at *i*; returns (next index, names, quoting)."""
    if i >= len(tokens):
        return None
    tok = tokens[i]
    if tok.kind is TokenKind.STRING and tok.text[0] == "`":
        inner = unquote(tok.text)
        return i + 1, tuple(inner.split(".")), PathQuoting.BACKTICK
    if tok.kind is TokenKind.STRING and tok.text[0] == '"':
        return i + 1, (unquote(tok.text),), PathQuoting.DOUBLE
    if tok.is_punct("["):
        j = i + 1
        while j < len(tokens) and not tokens[j].is_punct("]"):
            j += 1
        if j >= len(tokens) or j == i + 1:
            return None
        name = "".join(t.text for t in tokens[i + 1 : j])
        return j + 1, (name,), PathQuoting.BRACKET
    if is_word(tok.text):
        return i + 1, (tok.text,), PathQuoting.BARE
    return None


def scan_path(tokens: Sequence[Token], start: int) -> ObjectPath | None:
    """Read the dotted path beginning at token index *start*.

    Returns ``None`` when the token at *start* cannot begin a path.
    """
    first = _segment(tokens, start)
    if first is None:
        return None

    end, parts, quoting = first
    names = list(parts)
    styles = {quoting}
    while end + 1 < len(tokens) and tokens[end].is_punct("."):
        nxt = _segment(tokens, end + 1)
        if nxt is None:
            break
        end, parts, quoting = nxt
        names.extend(parts)
        styles.add(quoting)

    resolved = styles.pop() if len(styles) == 1 else PathQuoting.MIXED
    return ObjectPath(start=start, end=end, parts=tuple(names), quoting=resolved)
