"""Unit tests for the dialect rule catalog and rule kinds."""

from __future__ import annotations

import itertools

import pytest
from dialect_engine.catalog import (
    RULE_CATALOG,
    ArrayLiteralRule,
    CallRule,
    DdlClauseRule,
    JsonPathRule,
    RenameRule,
    SubscriptRule,
    TablePathRule,
    UnsupportedRule,
    get_rule_set,
)
from dialect_engine.models.migration import Severity
from dialect_engine.sql_toolkit import PathQuoting, Platform, tokenize

_PAIRS = [(s, t) for s, t in itertools.product(Platform, Platform) if s is not t]


# ---------------------------------------------------------------------------
# Catalog shape
# ---------------------------------------------------------------------------


class TestCatalogShape:
    def test_every_ordered_pair_has_rules(self):
        assert set(RULE_CATALOG) == set(_PAIRS)
        for pair in _PAIRS:
            assert len(RULE_CATALOG[pair]) > 0

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            RULE_CATALOG[(Platform.BIGQUERY, Platform.BIGQUERY)] = RULE_CATALOG[_PAIRS[0]]  # type: ignore[index]

    @pytest.mark.parametrize("platform", list(Platform))
    def test_identical_pair_is_empty(self, platform: Platform):
        rules = get_rule_set(platform, platform)
        assert len(rules) == 0
        assert list(rules) == []

    def test_get_rule_set_returns_catalog_entry(self):
        assert get_rule_set(Platform.SNOWFLAKE, Platform.BIGQUERY) is RULE_CATALOG[(Platform.SNOWFLAKE, Platform.BIGQUERY)]

    @pytest.mark.parametrize(("source", "target"), _PAIRS)
    def test_rule_ids_unique_within_pair(self, source: Platform, target: Platform):
        ids = [rule.rule_id for rule in get_rule_set(source, target)]
        assert len(ids) == len(set(ids))

    @pytest.mark.parametrize(("source", "target"), _PAIRS)
    def test_only_unsupported_markers_carry_error(self, source: Platform, target: Platform):
        for rule in get_rule_set(source, target):
            assert (rule.severity is Severity.ERROR) == isinstance(rule, UnsupportedRule), rule.rule_id

    @pytest.mark.parametrize(("source", "target"), _PAIRS)
    def test_rule_set_records_its_pair(self, source: Platform, target: Platform):
        rules = get_rule_set(source, target)
        assert rules.source is source
        assert rules.target is target


# ---------------------------------------------------------------------------
# Rule construction
# ---------------------------------------------------------------------------


class TestRuleConstruction:
    def test_rewrite_rule_rejects_error_severity(self):
        with pytest.raises(ValueError, match="error severity"):
            RenameRule(rule_id="x.y", name="A", replacement="B", severity=Severity.ERROR, message="m")

    def test_unsupported_rule_requires_error_severity(self):
        with pytest.raises(ValueError, match="error severity"):
            UnsupportedRule(rule_id="x.y", name="A", severity=Severity.WARNING, message="m")

    def test_unsupported_rule_defaults_to_error(self):
        rule = UnsupportedRule(rule_id="x.y", name="A", message="m")
        assert rule.severity is Severity.ERROR


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def _first_match(sql: str, source: Platform, target: Platform):
    tokens = tokenize(sql, source)
    rules = get_rule_set(source, target)
    prev = None
    for i, tok in enumerate(tokens):
        if tok.is_trivia:
            continue
        hit = rules.match(tokens, i, prev)
        if hit is not None:
            return tokens, hit
        prev = tok
    return tokens, None


class TestMatching:
    def test_call_rule_matches_argument_shape(self):
        _, hit = _first_match("DATE_ADD(d, INTERVAL 3 DAY)", Platform.BIGQUERY, Platform.SNOWFLAKE)
        assert hit is not None
        assert isinstance(hit.rule, CallRule)
        assert hit.rule.rule_id == "bq_sf.date_add"

    def test_call_rule_rejects_wrong_argument_count(self):
        _, hit = _first_match("DATE_ADD(d)", Platform.BIGQUERY, Platform.SNOWFLAKE)
        assert hit is None

    def test_day_shortcut_and_generic_unit_are_distinguished(self):
        _, days = _first_match("DATE_ADD(d, INTERVAL 3 DAY)", Platform.BIGQUERY, Platform.DATABRICKS)
        _, months = _first_match("DATE_ADD(d, INTERVAL 3 MONTH)", Platform.BIGQUERY, Platform.DATABRICKS)
        assert days is not None and days.rule.rule_id == "bq_dbx.date_add_days"
        assert months is not None and months.rule.rule_id == "bq_dbx.date_add"

    def test_rename_rule_requires_call(self):
        _, hit = _first_match("SELECT nvl FROM t", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert hit is None
        _, hit = _first_match("SELECT NVL(a, 0) FROM t", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert hit is not None
        assert hit.rule.rule_id == "sf_bq.nvl"

    def test_member_access_is_not_a_call_match(self):
        _, hit = _first_match("SELECT t.NVL(a) FROM t", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert hit is None

    def test_multi_word_unsupported_marker(self):
        _, hit = _first_match("COPY INTO t FROM @stage", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert hit is not None
        assert hit.rule.rule_id == "sf_bq.copy_into"
        assert hit.rule.severity is Severity.ERROR

    def test_dotted_unsupported_marker(self):
        _, hit = _first_match("SELECT * FROM ML.PREDICT(MODEL m, TABLE t)", Platform.BIGQUERY, Platform.SNOWFLAKE)
        assert hit is not None
        assert hit.rule.rule_id == "bq_sf.ml_predict"

    def test_structural_path_rule(self):
        tokens, hit = _first_match("SELECT * FROM `p.d.t`", Platform.BIGQUERY, Platform.SNOWFLAKE)
        assert hit is not None
        assert isinstance(hit.rule, TablePathRule)
        assert hit.rule.quoting is PathQuoting.BACKTICK
        assert hit.path is not None and hit.path.parts == ("p", "d", "t")
        assert hit.end == len(tokens)

    def test_table_context_only_path_rule(self):
        _, in_from = _first_match("SELECT * FROM db.sch.tbl", Platform.SNOWFLAKE, Platform.BIGQUERY)
        _, in_select = _first_match("SELECT db.sch.col", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert in_from is not None and in_from.rule.rule_id == "sf_bq.database_path"
        assert in_select is None

    def test_json_path_rule_needs_adjacent_colon(self):
        _, hit = _first_match("SELECT payload:user_id FROM t", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert hit is not None
        assert isinstance(hit.rule, JsonPathRule)
        assert hit.path is not None and hit.path.parts == ("user_id",)
        _, cast = _first_match("SELECT payload::variant FROM t", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert cast is None or cast.rule.rule_id != "sf_bq.variant_path"

    def test_json_path_followed_by_element_access_is_skipped(self):
        _, hit = _first_match("SELECT payload:items[0] FROM t", Platform.SNOWFLAKE, Platform.BIGQUERY)
        assert hit is None

    def test_subscript_rule_requires_single_index(self):
        _, hit = _first_match("SELECT xs[OFFSET(1)] FROM t", Platform.BIGQUERY, Platform.SNOWFLAKE)
        assert hit is not None
        assert isinstance(hit.rule, SubscriptRule)
        assert hit.rule.rule_id == "bq_sf.subscript_offset"
        _, literal = _first_match("SELECT ARRAY[1] FROM t", Platform.BIGQUERY, Platform.SNOWFLAKE)
        assert literal is not None
        assert isinstance(literal.rule, ArrayLiteralRule)

    def test_ddl_clause_rule_covers_expression_only(self):
        tokens, hit = _first_match(
            "CREATE TABLE t PARTITION BY DATE(ts) OPTIONS (x = 1)", Platform.BIGQUERY, Platform.SNOWFLAKE
        )
        assert hit is not None
        assert isinstance(hit.rule, DdlClauseRule)
        assert "".join(tok.text for tok in tokens[hit.start : hit.end]) == "PARTITION BY DATE(ts)"

    def test_ddl_clause_rule_ignores_parenthesised_phrases(self):
        _, hit = _first_match(
            "CREATE VIEW v AS SELECT SUM(a) OVER (PARTITION BY b) FROM t", Platform.BIGQUERY, Platform.SNOWFLAKE
        )
        assert hit is None

    def test_ddl_clause_argument_pattern_picks_the_rule(self):
        _, column = _first_match("CREATE TABLE t PARTITION BY d", Platform.BIGQUERY, Platform.DATABRICKS)
        _, expression = _first_match("CREATE TABLE t PARTITION BY DATE(d)", Platform.BIGQUERY, Platform.DATABRICKS)
        assert column is not None and column.rule.rule_id == "bq_dbx.partition_by_column"
        assert expression is not None and expression.rule.rule_id == "bq_dbx.partition_by"
