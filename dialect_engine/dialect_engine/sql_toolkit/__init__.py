"""SQL toolkit: platform-aware lexing, path recognition and syntax checks.

Usage::

    from dialect_engine.sql_toolkit import Platform, tokenize, check_syntax

    tokens = tokenize("SELECT IFF(a, 1, 2) FROM t", Platform.SNOWFLAKE)
    result = check_syntax("SELECT 1", Platform.DATABRICKS)

Lexing and path recognition are pure Python.  Syntax checks delegate to
sqlglot.
"""

from ._types import Platform, SyntaxCheckResult, Token, TokenKind
from .impl.sqlglot_impl import SqlGlotSyntaxChecker, check_syntax
from .lexer import classify, is_quoted, is_word, render, significant, tokenize, unquote
from .paths import ObjectPath, PathQuoting, scan_path

__all__ = [
    # Types
    "ObjectPath",
    "PathQuoting",
    "Platform",
    "SyntaxCheckResult",
    "Token",
    "TokenKind",
    # Lexing
    "classify",
    "is_quoted",
    "is_word",
    "render",
    "significant",
    "tokenize",
    "unquote",
    # Paths
    "scan_path",
    # Syntax
    "SqlGlotSyntaxChecker",
    "check_syntax",
]
