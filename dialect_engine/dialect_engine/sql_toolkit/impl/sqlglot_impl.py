"""SQLGlot-backed syntax checking.

This is the ONLY module in the package that imports sqlglot.  The
migration engine itself works on the lexer's token stream; sqlglot is
used afterwards to confirm that rewritten SQL still parses in the
target dialect.
"""

from __future__ import annotations

import logging

import sqlglot
from sqlglot.errors import ErrorLevel, ParseError, SqlglotError, TokenError

from .._types import Platform, SyntaxCheckResult

logger = logging.getLogger(__name__)


def _format_parse_errors(exc: ParseError) -> tuple[str, ...]:
    messages: list[str] = []
    for error in exc.errors:
        description = error.get("description") or "syntax error"
        line = error.get("line")
        col = error.get("col")
        if line:
            messages.append(f"line {line}, col {col}: {description}")
        else:
            messages.append(str(description))
    return tuple(messages) or (str(exc),)


class SqlGlotSyntaxChecker:
    """Parse SQL with sqlglot and report whether it is valid for a dialect."""

    def check(self, sql: str, platform: Platform) -> SyntaxCheckResult:
        """Parse every statement in *sql* using *platform*'s dialect.

        Never raises; parser failures are returned as error strings.
        Empty input is reported as valid.
        """
        if not sql.strip():
            return SyntaxCheckResult(platform=platform, valid=True)

        try:
            sqlglot.parse(sql, read=platform.value, error_level=ErrorLevel.RAISE)
        except ParseError as exc:
            return SyntaxCheckResult(
                platform=platform,
                valid=False,
                errors=_format_parse_errors(exc),
            )
        except TokenError as exc:
            return SyntaxCheckResult(platform=platform, valid=False, errors=(f"Tokenize error: {exc}",))
        except SqlglotError as exc:
            logger.warning("sqlglot failed to parse %s SQL: %s", platform.value, exc)
            return SyntaxCheckResult(platform=platform, valid=False, errors=(str(exc),))

        return SyntaxCheckResult(platform=platform, valid=True)


_CHECKER = SqlGlotSyntaxChecker()


def check_syntax(sql: str, platform: Platform) -> SyntaxCheckResult:
    """Module-level convenience wrapper around :class:`SqlGlotSyntaxChecker`."""
    return _CHECKER.check(sql, platform)
