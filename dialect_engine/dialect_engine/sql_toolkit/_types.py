"""SQL toolkit shared types.

Every type here is a small immutable value.  Tokens are produced fresh
by each call to :func:`~dialect_engine.sql_toolkit.lexer.tokenize` and
are never cached or shared between calls.

ZERO dependency on any SQL parsing library.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Platform
# ---------------------------------------------------------------------------


class Platform(str, enum.Enum):
    """Supported warehouse dialects.

    The values double as sqlglot dialect names.
    """

    BIGQUERY = "bigquery"
    SNOWFLAKE = "snowflake"
    DATABRICKS = "databricks"

    @property
    def label(self) -> str:
        return _PLATFORM_LABELS[self]


_PLATFORM_LABELS: dict[Platform, str] = {
    Platform.BIGQUERY: "BigQuery",
    Platform.SNOWFLAKE: "Snowflake",
    Platform.DATABRICKS: "Databricks",
}


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenKind(str, enum.Enum):
    """Lexical classification of a single token."""

    KEYWORD = "keyword"
    PLATFORM_KEYWORD = "platform_keyword"
    FUNCTION = "function"
    PLATFORM_FUNCTION = "platform_function"
    OPERATOR = "operator"
    LITERAL = "literal"
    STRING = "string"
    NUMERIC = "numeric"
    COMMENT = "comment"
    IDENTIFIER = "identifier"

    # Layout tokens, kept so the stream reconstructs the input losslessly.
    WHITESPACE = "whitespace"
    PUNCTUATION = "punctuation"


_TRIVIA_KINDS = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT})


@dataclass(frozen=True, slots=True)
class Token:
    """A classified slice of SQL text.

    ``line`` and ``column`` are 1-based and refer to the first character
    of ``text`` in the original input.
    """

    text: str
    kind: TokenKind
    line: int
    column: int

    @property
    def position(self) -> tuple[int, int]:
        return (self.line, self.column)

    @property
    def upper(self) -> str:
        return self.text.upper()

    @property
    def is_trivia(self) -> bool:
        """True for whitespace and comments."""
        return self.kind in _TRIVIA_KINDS

    def is_punct(self, char: str) -> bool:
        return self.kind is TokenKind.PUNCTUATION and self.text == char


# ---------------------------------------------------------------------------
# Syntax check
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SyntaxCheckResult:
    """Outcome of parsing SQL in a platform's dialect."""

    platform: Platform
    valid: bool
    errors: tuple[str, ...] = ()
