"""Rewrite rule kinds used by the dialect catalog.

Every rule looks at the token stream produced by the lexer for the
source platform and, when it recognises a construct starting at a given
token, returns a :class:`RuleMatch` describing the token span it covers.
The translator then asks the rule to :meth:`~Rule.render` the span.

Rule kinds
----------
* :class:`TablePathRule` -- structural rewrite of a quoted or dotted
  table path (``\\`p.d.t\\``` -> ``p.d.t``).
* :class:`CallRule` -- rewrite of a call shape, matching each argument
  against a regular expression and re-emitting it through a template.
* :class:`RenameRule` -- substitution of a function, type or keyword
  phrase.
* :class:`UnsupportedRule` -- a source-only construct that is flagged
  and left exactly as written.
* :class:`JsonPathRule` -- semi-structured ``col:attr`` access.
* :class:`ArrayLiteralRule` and :class:`SubscriptRule` -- array
  constructors and element access.
* :class:`DdlClauseRule` -- table options of a ``CREATE`` statement,
  such as ``PARTITION BY`` and ``CLUSTER BY``.
"""

from __future__ import annotations

import enum
import re
import string
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from dialect_engine.models.migration import Severity
from dialect_engine.sql_toolkit import ObjectPath, PathQuoting, Platform, Token, TokenKind, scan_path

# Rewrites token span [start, end) and returns the translated text; pass
# ``record=False`` to skip issue reporting for a span already reported.
SpanRewriter = Callable[..., str]

TABLE_CONTEXT_WORDS = frozenset({"FROM", "JOIN", "INTO", "UPDATE", "TABLE", "USING"})

_NAME_PART_RE = re.compile(r"[^\s.]+|\.")
_FORMATTER = string.Formatter()


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------


def next_significant(tokens: Sequence[Token], i: int) -> int:
    """Index of the first non-trivia token at or after *i* (``len`` if none)."""
    n = len(tokens)
    while i < n and tokens[i].is_trivia:
        i += 1
    return i


def _trim_span(tokens: Sequence[Token], start: int, end: int) -> tuple[int, int]:
    while start < end and tokens[start].is_trivia:
        start += 1
    while end > start and tokens[end - 1].is_trivia:
        end -= 1
    return start, end


def match_words(tokens: Sequence[Token], i: int, words: Sequence[str]) -> int | None:
    """Match *words* case-insensitively against significant tokens from *i*.

    Returns the index just past the last matched token, or ``None``.
    """
    j = i
    for pos, word in enumerate(words):
        if pos:
            j = next_significant(tokens, j)
        if j >= len(tokens) or tokens[j].upper != word:
            return None
        j += 1
    return j


def split_call_args(tokens: Sequence[Token], open_idx: int) -> tuple[list[tuple[int, int]], int] | None:
    """Split the argument list whose ``(`` sits at *open_idx*.

    Returns the trimmed ``(start, end)`` span of each top-level argument
    and the index just past the closing ``)``, or ``None`` when the
    parenthesis is never closed.
    """
    depth = 0
    spans: list[tuple[int, int]] = []
    arg_start = open_idx + 1
    for k in range(open_idx, len(tokens)):
        tok = tokens[k]
        if tok.is_punct("(") or tok.is_punct("["):
            depth += 1
        elif tok.is_punct(")") or tok.is_punct("]"):
            depth -= 1
            if depth == 0:
                start, end = _trim_span(tokens, arg_start, k)
                if start < end or spans:
                    spans.append((start, end))
                return spans, k + 1
        elif depth == 1 and tok.is_punct(","):
            spans.append(_trim_span(tokens, arg_start, k))
            arg_start = k + 1
    return None


def span_text(tokens: Sequence[Token], start: int, end: int) -> str:
    return "".join(tok.text for tok in tokens[start:end])


def _name_words(name: str) -> tuple[str, ...]:
    return tuple(part.upper() for part in _NAME_PART_RE.findall(name))


def _negate(text: str) -> str:
    stripped = text.strip()
    if re.fullmatch(r"-\d+(\.\d+)?", stripped):
        return stripped[1:]
    if re.fullmatch(r"\d+(\.\d+)?", stripped):
        return f"-{stripped}"
    return f"-({stripped})"


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RuleMatch:
    """A rule hit covering tokens ``[start, end)``."""

    rule: Rule
    start: int
    end: int
    path: ObjectPath | None = None
    arg_spans: tuple[tuple[int, int], ...] = ()
    arg_matches: tuple[re.Match[str], ...] = ()


# ---------------------------------------------------------------------------
# Rule kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class Rule:
    """Base class for catalog rules."""

    rule_id: str
    severity: Severity
    message: str
    suggestion: str = ""

    def __post_init__(self) -> None:
        if self.severity is Severity.ERROR:
            raise ValueError(f"{self.rule_id}: only unsupported markers may carry error severity")

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        raise NotImplementedError

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        raise NotImplementedError


class PathStyle(str, enum.Enum):
    """Output form for a rewritten table path."""

    DOTTED = "dotted"  # a.b.c
    BACKTICK_PATH = "backtick_path"  # `a.b.c`
    BACKTICK_SEGMENTS = "backtick_segments"  # `a`.`b`.`c`


@dataclass(frozen=True, slots=True, kw_only=True)
class TablePathRule(Rule):
    """Rewrite a table path of a given quoting style and length.

    ``keep`` drops leading qualifiers so that only the last *keep*
    segments are emitted.  With ``table_context_only`` the path must
    directly follow ``FROM``, ``JOIN``, ``INTO``, ``UPDATE``, ``TABLE``
    or ``USING``.
    """

    quoting: PathQuoting
    parts: int
    style: PathStyle = PathStyle.DOTTED
    keep: int | None = None
    table_context_only: bool = False

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and prev.is_punct("."):
            return None
        if self.table_context_only and (prev is None or prev.upper not in TABLE_CONTEXT_WORDS):
            return None

        path = scan_path(tokens, i)
        if path is None or path.quoting is not self.quoting or len(path.parts) != self.parts:
            return None

        # A path followed by "(" is a function call, not a table.
        nxt = next_significant(tokens, path.end)
        if nxt < len(tokens) and tokens[nxt].is_punct("("):
            return None
        return RuleMatch(rule=self, start=i, end=path.end, path=path)

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        assert match.path is not None
        parts = match.path.parts[-self.keep :] if self.keep else match.path.parts
        if self.style is PathStyle.BACKTICK_PATH:
            return "`" + ".".join(parts) + "`"
        if self.style is PathStyle.BACKTICK_SEGMENTS:
            return ".".join(f"`{part}`" for part in parts)
        return ".".join(parts)


@dataclass(frozen=True, slots=True, kw_only=True)
class CallRule(Rule):
    """Rewrite ``NAME(arg, ...)`` through a template.

    Each entry of ``args`` is a regular expression that must fully match
    the corresponding argument text (case-insensitive).  Named groups
    and the positional arguments (``{0}``, ``{1}``, ...) are available
    to ``template``.  A group that lines up with whole tokens is itself
    translated before substitution, so nested calls are rewritten too.
    Group ``unit`` is emitted upper-case without quotes and every group
    ``n`` also provides its negation as ``neg_n``.
    """

    name: str
    args: tuple[str, ...]
    template: str
    _words: tuple[str, ...] = field(init=False, repr=False)
    _patterns: tuple[re.Pattern[str], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        Rule.__post_init__(self)
        object.__setattr__(self, "_words", _name_words(self.name))
        object.__setattr__(
            self,
            "_patterns",
            tuple(re.compile(arg, re.IGNORECASE | re.DOTALL) for arg in self.args),
        )

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and prev.is_punct("."):
            return None
        after_name = match_words(tokens, i, self._words)
        if after_name is None:
            return None
        open_idx = next_significant(tokens, after_name)
        if open_idx >= len(tokens) or not tokens[open_idx].is_punct("("):
            return None

        split = split_call_args(tokens, open_idx)
        if split is None:
            return None
        spans, end = split
        if len(spans) != len(self._patterns):
            return None

        matches: list[re.Match[str]] = []
        for (start, stop), pattern in zip(spans, self._patterns, strict=True):
            m = pattern.fullmatch(span_text(tokens, start, stop))
            if m is None:
                return None
            matches.append(m)

        return RuleMatch(
            rule=self,
            start=i,
            end=end,
            arg_spans=tuple(spans),
            arg_matches=tuple(matches),
        )

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        positional: list[str] = []
        named: dict[str, str] = {}
        owner: dict[str, int] = {}
        for index, ((start, stop), m) in enumerate(zip(match.arg_spans, match.arg_matches, strict=True)):
            whole = rewrite(start, stop)
            positional.append(whole)
            for group, value in m.groupdict().items():
                if value is None:
                    continue
                if m.span(group) == (0, len(m.string)):
                    text = whole
                else:
                    text = _group_text(tokens, start, stop, m, group, rewrite)
                if group == "unit":
                    text = text.strip("'\"").upper()
                named[group] = text
                owner[group] = index
                if group == "n":
                    named["neg_n"] = _negate(text)
                    owner["neg_n"] = index
        return _layout(self.template, positional, named, owner, match, tokens)


def _indent_before(tokens: Sequence[Token], i: int) -> str:
    """Whitespace that starts the source line of token *i*, if it starts one."""
    if i > 0 and tokens[i - 1].kind is TokenKind.WHITESPACE and "\n" in tokens[i - 1].text:
        return tokens[i - 1].text.rsplit("\n", 1)[1]
    return ""


def _layout(
    template: str,
    positional: Sequence[str],
    named: dict[str, str],
    owner: dict[str, int],
    match: RuleMatch,
    tokens: Sequence[Token],
) -> str:
    """Fill *template*, keeping arguments on their source lines where possible.

    An argument that began on a later line than the call is moved onto
    that line, provided no argument emitted after it sits on an earlier
    one.  Issues reported inside the argument then keep pointing at the
    line that holds its translation.
    """
    first_line = tokens[match.start].line
    lines = [tokens[start].line - first_line for start, _ in match.arg_spans]
    pieces = list(_FORMATTER.parse(template))
    arg_of = [
        None if name is None else int(name) if name.isdigit() else owner[name]
        for _, name, _, _ in pieces
    ]

    out = ""
    for pos, (literal, name, _, _) in enumerate(pieces):
        out += literal
        arg = arg_of[pos]
        if name is None or arg is None:
            continue
        have = out.count("\n")
        want = lines[arg]
        if have < want <= min(lines[a] for a in arg_of[pos:] if a is not None):
            start = match.arg_spans[arg][0]
            out = out.rstrip(" ") + "\n" * (want - have) + _indent_before(tokens, start)
        out += positional[arg] if name.isdigit() else named[name]
    return out


def _group_text(
    tokens: Sequence[Token],
    start: int,
    stop: int,
    m: re.Match[str],
    group: str,
    rewrite: SpanRewriter,
) -> str:
    """Translated text of *group* when it aligns with token boundaries."""
    g_start, g_end = m.span(group)
    first: int | None = None
    last: int | None = None
    offset = 0
    for k in range(start, stop):
        if offset == g_start and first is None:
            first = k
        offset += len(tokens[k].text)
        if offset == g_end:
            last = k + 1
    if first is not None and last is not None and first < last:
        # Issues inside the argument were already recorded by the
        # whole-argument rewrite.
        return rewrite(first, last, record=False)
    return m.group(group)


@dataclass(frozen=True, slots=True, kw_only=True)
class RenameRule(Rule):
    """Replace a function name, type name or keyword phrase.

    With ``call_only`` the name must be followed by ``(``.
    """

    name: str
    replacement: str
    call_only: bool = True
    _words: tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        Rule.__post_init__(self)
        object.__setattr__(self, "_words", _name_words(self.name))

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and prev.is_punct("."):
            return None
        end = match_words(tokens, i, self._words)
        if end is None:
            return None
        if self.call_only:
            nxt = next_significant(tokens, end)
            if nxt >= len(tokens) or not tokens[nxt].is_punct("("):
                return None
        return RuleMatch(rule=self, start=i, end=end)

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        return self.replacement


@dataclass(frozen=True, slots=True, kw_only=True)
class UnsupportedRule(Rule):
    """Flag a construct with no safe equivalent; the text is kept as-is."""

    name: str
    severity: Severity = Severity.ERROR
    call_only: bool = False
    _words: tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.severity is not Severity.ERROR:
            raise ValueError(f"{self.rule_id}: unsupported markers must carry error severity")
        object.__setattr__(self, "_words", _name_words(self.name))

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and prev.is_punct("."):
            return None
        end = match_words(tokens, i, self._words)
        if end is None:
            return None
        if self.call_only:
            nxt = next_significant(tokens, end)
            if nxt >= len(tokens) or not tokens[nxt].is_punct("("):
                return None
        return RuleMatch(rule=self, start=i, end=end)

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        return span_text(tokens, match.start, match.end)


@dataclass(frozen=True, slots=True, kw_only=True)
class JsonPathRule(Rule):
    """Rewrite semi-structured access written as ``col:attr.sub``.

    ``template`` receives the column as ``{0}`` and the dotted attribute
    path as ``{1}``.  The ``:`` must sit directly between the column and
    an unquoted attribute; ``::`` casts lex as a separate operator.
    """

    template: str

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and (prev.is_punct(".") or prev.is_punct(":")):
            return None
        column = scan_path(tokens, i)
        if column is None or column.end + 1 >= len(tokens) or not tokens[column.end].is_punct(":"):
            return None
        attrs = scan_path(tokens, column.end + 1)
        if attrs is None or attrs.quoting is not PathQuoting.BARE:
            return None
        # Element access after the path (col:items[0]) is left alone.
        if attrs.end < len(tokens) and tokens[attrs.end].is_punct("["):
            return None
        return RuleMatch(rule=self, start=i, end=attrs.end, path=attrs, arg_spans=((i, column.end),))

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        assert match.path is not None
        start, stop = match.arg_spans[0]
        return self.template.format(rewrite(start, stop), ".".join(match.path.parts))


@dataclass(frozen=True, slots=True, kw_only=True)
class ArrayLiteralRule(Rule):
    """Rewrite ``ARRAY[a, b, ...]``; the translated elements are ``{items}``."""

    template: str

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and prev.is_punct("."):
            return None
        if tokens[i].upper != "ARRAY":
            return None
        open_idx = next_significant(tokens, i + 1)
        if open_idx >= len(tokens) or not tokens[open_idx].is_punct("["):
            return None
        split = split_call_args(tokens, open_idx)
        if split is None:
            return None
        _, end = split
        return RuleMatch(rule=self, start=i, end=end, arg_spans=((open_idx + 1, end - 1),))

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        start, stop = match.arg_spans[0]
        return self.template.format(items=rewrite(start, stop))


@dataclass(frozen=True, slots=True, kw_only=True)
class SubscriptRule(Rule):
    """Rewrite ``path[index]`` when the index fully matches ``index``.

    The subscripted path is ``{0}`` and the named groups of ``index``
    are available by name.  Group ``n`` also provides ``offset_n``, the
    zero-based position of a one-based ordinal.
    """

    index: str
    template: str
    _pattern: re.Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        Rule.__post_init__(self)
        object.__setattr__(self, "_pattern", re.compile(self.index, re.IGNORECASE | re.DOTALL))

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and prev.is_punct("."):
            return None
        path = scan_path(tokens, i)
        if path is None or path.quoting is not PathQuoting.BARE:
            return None
        if len(path.parts) == 1 and tokens[i].upper == "ARRAY":
            return None
        if path.end >= len(tokens) or not tokens[path.end].is_punct("["):
            return None
        split = split_call_args(tokens, path.end)
        if split is None or len(split[0]) != 1:
            return None
        (start, stop), end = split[0][0], split[1]
        m = self._pattern.fullmatch(span_text(tokens, start, stop))
        if m is None:
            return None
        return RuleMatch(
            rule=self,
            start=i,
            end=end,
            path=path,
            arg_spans=((i, path.end), (start, stop)),
            arg_matches=(m,),
        )

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        (start, stop), (idx_start, idx_stop) = match.arg_spans
        m = match.arg_matches[0]
        operand = rewrite(start, stop)
        rewrite(idx_start, idx_stop)
        named = {
            group: _group_text(tokens, idx_start, idx_stop, m, group, rewrite)
            for group, value in m.groupdict().items()
            if value is not None
        }
        if "n" in named:
            named["offset_n"] = _decrement(named["n"])
        return self.template.format(operand, **named)


def _decrement(text: str) -> str:
    stripped = text.strip()
    if stripped.isdigit():
        return str(int(stripped) - 1)
    return f"{stripped} - 1"


# Table options that end the expression of a preceding option.
_DDL_OPTION_WORDS = (("PARTITION", "BY"), ("CLUSTER", "BY"), ("OPTIONS",), ("AS",))


def _option_end(tokens: Sequence[Token], start: int) -> int:
    depth = 0
    k = start
    while k < len(tokens):
        tok = tokens[k]
        if tok.is_punct("(") or tok.is_punct("["):
            depth += 1
        elif tok.is_punct(")") or tok.is_punct("]"):
            if depth == 0:
                break
            depth -= 1
        elif depth == 0 and (
            tok.is_punct(";") or any(match_words(tokens, k, words) is not None for words in _DDL_OPTION_WORDS)
        ):
            break
        k += 1
    return k


def _in_create_statement(tokens: Sequence[Token], i: int) -> bool:
    """True when token *i* is outside all parentheses of a CREATE statement."""
    depth = 0
    first: Token | None = None
    for k in range(i - 1, -1, -1):
        tok = tokens[k]
        if tok.is_trivia:
            continue
        if tok.is_punct(";"):
            break
        if tok.is_punct(")"):
            depth += 1
        elif tok.is_punct("("):
            if depth == 0:
                return False
            depth -= 1
        first = tok
    return first is not None and first.upper == "CREATE"


@dataclass(frozen=True, slots=True, kw_only=True)
class DdlClauseRule(Rule):
    """Rewrite table options such as ``PARTITION BY expr`` in a CREATE statement.

    ``clauses`` lists keyword phrases that must follow one another, each
    followed by an expression running to the next table option, ``;`` or
    the end of the statement.  The expressions are ``{0}``, ``{1}``, ...
    in ``template``; ``args`` may constrain them with regular
    expressions.  Phrases inside parentheses, such as a window's
    ``PARTITION BY``, never match.
    """

    clauses: tuple[str, ...]
    template: str
    args: tuple[str, ...] = ()
    _words: tuple[tuple[str, ...], ...] = field(init=False, repr=False)
    _patterns: tuple[re.Pattern[str], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        Rule.__post_init__(self)
        object.__setattr__(self, "_words", tuple(_name_words(clause) for clause in self.clauses))
        object.__setattr__(
            self,
            "_patterns",
            tuple(re.compile(arg, re.IGNORECASE | re.DOTALL) for arg in self.args),
        )

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        if prev is not None and prev.is_punct("."):
            return None
        spans: list[tuple[int, int]] = []
        k = i
        for words in self._words:
            after = match_words(tokens, k, words)
            if after is None:
                return None
            start, stop = _trim_span(tokens, after, _option_end(tokens, after))
            if start == stop:
                return None
            spans.append((start, stop))
            k = next_significant(tokens, stop)

        for (start, stop), pattern in zip(spans, self._patterns, strict=False):
            if pattern.fullmatch(span_text(tokens, start, stop)) is None:
                return None
        if not _in_create_statement(tokens, i):
            return None
        return RuleMatch(rule=self, start=i, end=spans[-1][1], arg_spans=tuple(spans))

    def render(self, match: RuleMatch, tokens: Sequence[Token], rewrite: SpanRewriter) -> str:
        return self.template.format(*(rewrite(start, stop) for start, stop in match.arg_spans))


# ---------------------------------------------------------------------------
# Rule sets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RuleSet:
    """All rules for one ordered platform pair.

    Structural rules are tried before direct rules.  Within a group the
    longest match wins and ties go to the rule declared first.
    """

    source: Platform
    target: Platform
    structural: tuple[Rule, ...] = ()
    direct: tuple[Rule, ...] = ()

    def __len__(self) -> int:
        return len(self.structural) + len(self.direct)

    def __iter__(self) -> Iterator[Rule]:
        yield from self.structural
        yield from self.direct

    def match(self, tokens: Sequence[Token], i: int, prev: Token | None) -> RuleMatch | None:
        for group in (self.structural, self.direct):
            best: RuleMatch | None = None
            for rule in group:
                hit = rule.match(tokens, i, prev)
                if hit is not None and (best is None or hit.end > best.end):
                    best = hit
            if best is not None:
                return best
        return None
