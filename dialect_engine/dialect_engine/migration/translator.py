"""Rule-based SQL translation between warehouse dialects.

The translator walks the source platform's token stream once, left to
right.  At each significant token it asks the pair's
:class:`~dialect_engine.catalog.rules.RuleSet` for a match (structural
rules first, then direct ones).  A hit is rendered and recorded as a
:class:`~dialect_engine.models.migration.MigrationIssue`; anything else
is copied through unchanged, so whitespace, comments and unknown syntax
survive byte for byte.

A rendered replacement never changes the number of lines the matched
span occupied.  Issue line numbers therefore point at the same line in
both the original and the converted query.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence

from dialect_engine.catalog import RuleSet, get_rule_set
from dialect_engine.models.migration import MigrationIssue, MigrationResult
from dialect_engine.sql_toolkit import Platform, Token, tokenize
from dialect_engine.telemetry.profiling import profile_operation

from .scoring import DEFAULT_WEIGHTS, ScoreWeights, compute_score

logger = logging.getLogger(__name__)


def _fit_lines(text: str, span: Sequence[Token]) -> str:
    """Make *text* occupy exactly as many lines as *span* did."""
    wanted = sum(tok.text.count("\n") for tok in span)
    have = text.count("\n")
    if have < wanted:
        return text + "\n" * (wanted - have)
    if have > wanted:
        parts = text.split("\n")
        head, tail = parts[: wanted + 1], parts[wanted + 1 :]
        head[-1] = " ".join([head[-1], *(part.strip() for part in tail)])
        return "\n".join(head)
    return text


class _Walker:
    """Single-pass rewriter over one token list."""

    def __init__(self, tokens: Sequence[Token], rules: RuleSet) -> None:
        self._tokens = tokens
        self._rules = rules
        self.issues: list[MigrationIssue] = []

    def rewrite(self, start: int, end: int, *, record: bool = True) -> str:
        tokens = self._tokens
        out: list[str] = []
        prev: Token | None = None
        i = start
        while i < end:
            tok = tokens[i]
            if tok.is_trivia:
                out.append(tok.text)
                i += 1
                continue

            hit = self._rules.match(tokens, i, prev)
            if hit is None or hit.end > end:
                out.append(tok.text)
                prev = tok
                i += 1
                continue

            rule = hit.rule
            if record:
                self.issues.append(
                    MigrationIssue(
                        line=tok.line,
                        message=rule.message,
                        suggestion=rule.suggestion,
                        severity=rule.severity,
                        rule_id=rule.rule_id,
                    )
                )
                rendered = rule.render(hit, tokens, self.rewrite)
            else:
                rendered = rule.render(hit, tokens, functools.partial(self.rewrite, record=False))
            out.append(_fit_lines(rendered, tokens[hit.start : hit.end]))
            prev = tokens[hit.end - 1]
            i = hit.end
        return "".join(out)


@profile_operation("migration.translate")
def translate(
    sql: str,
    source: Platform,
    target: Platform,
    *,
    weights: ScoreWeights | None = None,
) -> MigrationResult:
    """Translate *sql* from the *source* dialect into the *target* dialect.

    Parameters
    ----------
    sql:
        The query text.  Empty input yields an empty, issue-free result.
    source, target:
        Platform pair.  When they are equal the query is returned
        untouched with a score of 100.
    weights:
        Penalty per distinct issue severity; defaults to 15/5/1.

    Returns
    -------
    MigrationResult
        Converted text, issues in source order and the compatibility score.
    """
    if source is target:
        return MigrationResult(
            original_query=sql,
            converted_query=sql,
            source_platform=source,
            target_platform=target,
        )

    rules = get_rule_set(source, target)
    tokens = tokenize(sql, source)
    walker = _Walker(tokens, rules)
    converted = walker.rewrite(0, len(tokens))
    issues = tuple(walker.issues)
    score = compute_score(issues, weights or DEFAULT_WEIGHTS)

    logger.debug(
        "Translated %s -> %s: %d tokens, %d issues, score %d",
        source.value,
        target.value,
        len(tokens),
        len(issues),
        score,
    )
    return MigrationResult(
        original_query=sql,
        converted_query=converted,
        source_platform=source,
        target_platform=target,
        issues=issues,
        compatibility_score=score,
    )
