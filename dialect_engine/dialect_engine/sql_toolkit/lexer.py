"""Platform-aware SQL lexer.

:func:`tokenize` splits SQL text into a lossless stream of
:class:`~dialect_engine.sql_toolkit._types.Token` values: joining every
token's ``text`` reproduces the input exactly.  Whitespace and comments
are kept as tokens of their own; every other token is classified by
:func:`classify` against the keyword and function tables for the chosen
platform.

The lexer never raises.  Characters it does not recognise become
single-character ``identifier`` tokens and an unterminated quote runs
to the end of the input.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from ._keywords import (
    COMMON_FUNCTIONS,
    COMMON_KEYWORDS,
    LITERALS,
    OPERATORS,
    PLATFORM_FUNCTIONS,
    PLATFORM_KEYWORDS,
)
from ._types import Platform, Token, TokenKind

_NUMERIC_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_WORD_RE = re.compile(r"[^\W\d][\w$]*")

_QUOTES = frozenset({"'", '"', "`"})
_PUNCTUATION = frozenset({"(", ")", ",", ";", ".", "[", "]", "{", "}", ":"})
_MULTI_CHAR_SYMBOLS = ("<>", "!=", ">=", "<=", "=>", "::", "||")
_OPERATOR_CHARS = frozenset("=<>+-*/%")
_WORD_EXTRA_CHARS = frozenset("_$@#")


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_quoted(text: str) -> bool:
    """Return True when *text* starts with a quote character."""
    return bool(text) and text[0] in _QUOTES


def is_word(text: str) -> bool:
    """Return True for an unquoted name such as ``orders``, ``_tmp1`` or ``café``.

    Letters are matched the way the scanner reads words, so any Unicode
    letter may start a name.
    """
    return _WORD_RE.fullmatch(text) is not None


def unquote(text: str) -> str:
    """Strip the surrounding quotes or brackets from an identifier."""
    if len(text) >= 2 and (text[0] in _QUOTES and text[-1] == text[0] or text[0] == "[" and text[-1] == "]"):
        return text[1:-1]
    return text


def classify(text: str, platform: Platform) -> TokenKind:
    """Classify one non-whitespace, non-comment token.

    The checks run in a fixed order and the first match wins: quoted
    string, numeric literal, operator, boolean/null literal, platform
    keyword, common keyword, platform function, common function.
    Anything else is an identifier.
    """
    if is_quoted(text):
        return TokenKind.STRING
    if _NUMERIC_RE.fullmatch(text):
        return TokenKind.NUMERIC
    if text in OPERATORS:
        return TokenKind.OPERATOR

    upper = text.upper()
    if upper in LITERALS:
        return TokenKind.LITERAL
    if upper in PLATFORM_KEYWORDS[platform]:
        return TokenKind.PLATFORM_KEYWORD
    if upper in COMMON_KEYWORDS:
        return TokenKind.KEYWORD
    if upper in PLATFORM_FUNCTIONS[platform]:
        return TokenKind.PLATFORM_FUNCTION
    if upper in COMMON_FUNCTIONS:
        return TokenKind.FUNCTION
    if text in _PUNCTUATION:
        return TokenKind.PUNCTUATION
    return TokenKind.IDENTIFIER


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _quoted_end(sql: str, start: int) -> int:
    """Return the index just past the quoted run opened at *start*."""
    quote = sql[start]
    i = start + 1
    n = len(sql)
    while i < n:
        ch = sql[i]
        if ch == "\\" and quote != "`":
            i += 2
            continue
        if ch == quote:
            # A doubled quote is an escaped quote character.
            if i + 1 < n and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return n


def _minus_starts_number(sql: str, i: int, prev: tuple[TokenKind, str] | None) -> bool:
    nxt = sql[i + 1 : i + 3]
    if not nxt or not (nxt[0].isdigit() or (nxt[0] == "." and nxt[1:2].isdigit())):
        return False
    if prev is None:
        return True
    kind, text = prev
    return kind is TokenKind.OPERATOR or text in ("(", ",")


def _scan(sql: str, platform: Platform) -> Iterator[tuple[str, TokenKind]]:
    i = 0
    n = len(sql)
    prev: tuple[TokenKind, str] | None = None

    while i < n:
        ch = sql[i]

        if ch.isspace():
            j = i + 1
            while j < n and sql[j].isspace():
                j += 1
            yield sql[i:j], TokenKind.WHITESPACE
            i = j
            continue

        if sql.startswith("--", i):
            j = sql.find("\n", i)
            j = n if j == -1 else j
            yield sql[i:j], TokenKind.COMMENT
            i = j
            continue

        if sql.startswith("/*", i):
            j = sql.find("*/", i + 2)
            j = n if j == -1 else j + 2
            yield sql[i:j], TokenKind.COMMENT
            i = j
            continue

        if ch in _QUOTES:
            j = _quoted_end(sql, i)
        elif ch.isdigit() or (ch == "." and sql[i + 1 : i + 2].isdigit()):
            j = _NUMERIC_RE.match(sql, i).end()  # type: ignore[union-attr]
        elif ch == "-" and _minus_starts_number(sql, i, prev):
            j = _NUMERIC_RE.match(sql, i).end()  # type: ignore[union-attr]
        elif ch.isalpha() or ch in _WORD_EXTRA_CHARS:
            j = i + 1
            while j < n and (sql[j].isalnum() or sql[j] in _WORD_EXTRA_CHARS):
                j += 1
        elif sql.startswith(_MULTI_CHAR_SYMBOLS, i):
            j = i + 2
        else:
            j = i + 1

        text = sql[i:j]
        kind = classify(text, platform)
        yield text, kind
        prev = (kind, text)
        i = j


def tokenize(sql: str, platform: Platform) -> list[Token]:
    """Split *sql* into classified tokens covering the whole input.

    Parameters
    ----------
    sql:
        Raw SQL text.  May be empty.
    platform:
        Dialect whose keyword and function tables drive classification.

    Returns
    -------
    list[Token]
        Tokens in input order with 1-based line and column positions.
    """
    tokens: list[Token] = []
    line = 1
    column = 1
    for text, kind in _scan(sql, platform):
        tokens.append(Token(text=text, kind=kind, line=line, column=column))
        newlines = text.count("\n")
        if newlines:
            line += newlines
            column = len(text) - text.rfind("\n")
        else:
            column += len(text)
    return tokens


def significant(tokens: Sequence[Token]) -> list[Token]:
    """Return *tokens* without whitespace and comments."""
    return [tok for tok in tokens if not tok.is_trivia]


def render(tokens: Sequence[Token]) -> str:
    """Join token texts back into SQL."""
    return "".join(tok.text for tok in tokens)
