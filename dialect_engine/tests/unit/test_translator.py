"""Unit tests for dialect_engine.migration.translator."""

from __future__ import annotations

import itertools

import pytest
from dialect_engine.migration import ScoreWeights, translate
from dialect_engine.models.migration import Severity
from dialect_engine.sql_toolkit import Platform

BQ = Platform.BIGQUERY
SF = Platform.SNOWFLAKE
DBX = Platform.DATABRICKS


# ---------------------------------------------------------------------------
# Identity and empty input
# ---------------------------------------------------------------------------


class TestIdentity:
    @pytest.mark.parametrize("platform", list(Platform))
    def test_same_platform_returns_input(self, platform: Platform):
        sql = "SELECT DATE_ADD(x, INTERVAL 1 DAY), IFF(a, 1, 2) FROM `p.d.t`"
        result = translate(sql, platform, platform)
        assert result.converted_query == sql
        assert result.issues == ()
        assert result.compatibility_score == 100

    @pytest.mark.parametrize(("source", "target"), list(itertools.permutations(Platform, 2)))
    def test_empty_input(self, source: Platform, target: Platform):
        result = translate("", source, target)
        assert result.converted_query == ""
        assert result.issues == ()
        assert result.compatibility_score == 100

    def test_portable_query_is_untouched(self):
        sql = "SELECT id, COUNT(*) AS n\nFROM orders\nGROUP BY id"
        result = translate(sql, SF, DBX)
        assert result.converted_query == sql
        assert result.issues == ()
        assert result.compatibility_score == 100

    def test_result_records_platforms(self):
        result = translate("SELECT 1", BQ, SF)
        assert result.source_platform is BQ
        assert result.target_platform is SF
        assert result.original_query == "SELECT 1"


# ---------------------------------------------------------------------------
# BigQuery -> Snowflake
# ---------------------------------------------------------------------------


class TestBigQueryToSnowflake:
    def test_date_add_scenario(self):
        result = translate("SELECT DATE_ADD(CURRENT_DATE(), INTERVAL 1 DAY) FROM a.b.c", BQ, SF)
        assert result.converted_query == "SELECT DATEADD(DAY, 1, CURRENT_DATE()) FROM a.b.c"
        assert len(result.issues) == 1
        assert result.issues[0].severity is Severity.INFO
        assert result.issues[0].rule_id == "bq_sf.date_add"
        assert result.issues[0].line == 1
        assert result.compatibility_score < 100

    def test_backtick_path_becomes_dotted(self):
        result = translate("SELECT * FROM `proj.sales.orders`", BQ, SF)
        assert result.converted_query == "SELECT * FROM proj.sales.orders"
        assert [issue.rule_id for issue in result.issues] == ["bq_sf.backtick_project_path"]

    def test_date_sub_negates_amount(self):
        result = translate("SELECT DATE_SUB(d, INTERVAL 7 DAY)", BQ, SF)
        assert result.converted_query == "SELECT DATEADD(DAY, -7, d)"

    def test_nested_calls_are_translated(self):
        result = translate("SELECT DATE_ADD(DATE_ADD(d, INTERVAL 1 DAY), INTERVAL 2 MONTH)", BQ, SF)
        assert result.converted_query == "SELECT DATEADD(MONTH, 2, DATEADD(DAY, 1, d))"
        assert [issue.rule_id for issue in result.issues] == ["bq_sf.date_add", "bq_sf.date_add"]

    def test_unsupported_construct_is_left_in_place(self):
        sql = "SELECT * FROM ML.PREDICT(MODEL m, TABLE t)"
        result = translate(sql, BQ, SF)
        assert "ML.PREDICT" in result.converted_query
        assert result.has_errors
        assert any(issue.rule_id == "bq_sf.ml_predict" for issue in result.issues)
        assert result.compatibility_score <= 85

    def test_rename(self):
        result = translate("SELECT GENERATE_UUID() AS id", BQ, SF)
        assert result.converted_query == "SELECT UUID_STRING() AS id"

    def test_comments_and_strings_are_preserved(self):
        sql = "-- DATE_ADD(x, INTERVAL 1 DAY)\nSELECT 'DATE_ADD(x, INTERVAL 1 DAY)' AS s"
        result = translate(sql, BQ, SF)
        assert result.converted_query == sql
        assert result.issues == ()


# ---------------------------------------------------------------------------
# Other pairs
# ---------------------------------------------------------------------------


class TestOtherPairs:
    def test_snowflake_iff_and_nvl_to_bigquery(self):
        result = translate("SELECT IFF(a > 0, 1, 0), NVL(b, 0) FROM t", SF, BQ)
        assert result.converted_query == "SELECT IF(a > 0, 1, 0), IFNULL(b, 0) FROM t"
        assert {issue.rule_id for issue in result.issues} == {"sf_bq.iff", "sf_bq.nvl"}

    def test_snowflake_dateadd_to_bigquery(self):
        result = translate("SELECT DATEADD(day, 3, order_date) FROM t", SF, BQ)
        assert result.converted_query == "SELECT DATE_ADD(order_date, INTERVAL 3 DAY) FROM t"

    def test_snowflake_database_path_to_bigquery(self):
        result = translate("SELECT * FROM db.sch.tbl", SF, BQ)
        assert result.converted_query == "SELECT * FROM `db.sch.tbl`"

    def test_snowflake_database_path_to_databricks_drops_database(self):
        result = translate("SELECT * FROM db.sch.tbl", SF, DBX)
        assert result.converted_query == "SELECT * FROM sch.tbl"
        assert result.issues[0].severity is Severity.WARNING

    def test_match_recognize_is_an_error(self):
        result = translate("SELECT * FROM t MATCH_RECOGNIZE (PARTITION BY a)", SF, BQ)
        assert result.has_errors

    def test_databricks_date_add_to_snowflake(self):
        result = translate("SELECT DATE_ADD(d, 5), DATE_SUB(d, 2) FROM t", DBX, SF)
        assert result.converted_query == "SELECT DATEADD(DAY, 5, d), DATEADD(DAY, -2, d) FROM t"

    def test_databricks_datediff_to_bigquery(self):
        result = translate("SELECT DATEDIFF(end_d, start_d) FROM t", DBX, BQ)
        assert result.converted_query == "SELECT DATE_DIFF(end_d, start_d, DAY) FROM t"

    def test_databricks_current_catalog_to_snowflake(self):
        result = translate("SELECT CURRENT_CATALOG()", DBX, SF)
        assert result.converted_query == "SELECT CURRENT_DATABASE()"

    @pytest.mark.parametrize("statement", ["OPTIMIZE t", "VACUUM t", "CREATE TABLE t (a INT) USING DELTA"])
    def test_delta_maintenance_is_an_error(self, statement: str):
        result = translate(statement, DBX, SF)
        assert result.has_errors
        assert result.converted_query == statement


# ---------------------------------------------------------------------------
# Semi-structured access and arrays
# ---------------------------------------------------------------------------


class TestJsonAccess:
    def test_colon_path_to_json_extract(self):
        result = translate("SELECT payload:user_id FROM events", SF, BQ)
        assert result.converted_query == "SELECT JSON_EXTRACT(payload, '$.user_id') FROM events"
        assert [issue.rule_id for issue in result.issues] == ["sf_bq.variant_path"]
        assert result.issues[0].severity is Severity.WARNING

    def test_qualified_column_and_nested_attribute(self):
        result = translate("SELECT e.payload:user.id AS uid FROM events e", SF, BQ)
        assert result.converted_query == "SELECT JSON_EXTRACT(e.payload, '$.user.id') AS uid FROM events e"

    def test_cast_is_not_a_path(self):
        result = translate("SELECT payload::string FROM events", SF, BQ)
        assert "JSON_EXTRACT" not in result.converted_query

    def test_get_attribute_and_index(self):
        result = translate("SELECT GET(payload, 'user_id'), GET(tags, 0) FROM events", SF, BQ)
        assert result.converted_query == (
            "SELECT JSON_EXTRACT(payload, '$.user_id'), tags[SAFE_OFFSET(0)] FROM events"
        )
        assert [issue.rule_id for issue in result.issues] == ["sf_bq.get_attr", "sf_bq.get_index"]


class TestArrays:
    def test_array_literal_to_snowflake(self):
        result = translate("SELECT ARRAY[1, 2, 3] AS xs", BQ, SF)
        assert result.converted_query == "SELECT ARRAY_CONSTRUCT(1, 2, 3) AS xs"
        assert [issue.rule_id for issue in result.issues] == ["bq_sf.array_literal"]

    def test_single_element_literal_is_not_a_subscript(self):
        result = translate("SELECT ARRAY[5]", BQ, SF)
        assert result.converted_query == "SELECT ARRAY_CONSTRUCT(5)"

    def test_elements_are_translated(self):
        result = translate("SELECT ARRAY[DATE_ADD(d, INTERVAL 1 DAY)]", BQ, SF)
        assert result.converted_query == "SELECT ARRAY_CONSTRUCT(DATEADD(DAY, 1, d))"
        assert [issue.rule_id for issue in result.issues] == ["bq_sf.array_literal", "bq_sf.date_add"]

    def test_subscripts_to_snowflake(self):
        sql = "SELECT tags[0], tags[OFFSET(1)], t.tags[SAFE_OFFSET(2)], tags[ORDINAL(1)] FROM t"
        result = translate(sql, BQ, SF)
        assert result.converted_query == (
            "SELECT GET(tags, 0), GET(tags, 1), GET(t.tags, 2), GET(tags, 0) FROM t"
        )
        assert [issue.rule_id for issue in result.issues] == [
            "bq_sf.subscript_index",
            "bq_sf.subscript_offset",
            "bq_sf.subscript_safe_offset",
            "bq_sf.subscript_ordinal",
        ]

    def test_ordinal_expression_is_decremented(self):
        result = translate("SELECT tags[ORDINAL(n)] FROM t", BQ, SF)
        assert result.converted_query == "SELECT GET(tags, n - 1) FROM t"

    def test_arrays_to_databricks(self):
        sql = "SELECT ARRAY[1, 2] AS xs, xs[OFFSET(0)], xs[ORDINAL(2)], xs[SAFE_ORDINAL(2)] FROM t"
        result = translate(sql, BQ, DBX)
        assert result.converted_query == (
            "SELECT ARRAY(1, 2) AS xs, xs[0], ELEMENT_AT(xs, 2), TRY_ELEMENT_AT(xs, 2) FROM t"
        )


# ---------------------------------------------------------------------------
# Table options
# ---------------------------------------------------------------------------


class TestTableOptions:
    def test_partition_by_to_snowflake_cluster_by(self):
        result = translate("CREATE TABLE d.t (a INT64) PARTITION BY DATE(ts)", BQ, SF)
        assert result.converted_query == "CREATE TABLE d.t (a INTEGER) CLUSTER BY (DATE(ts))"
        assert [issue.rule_id for issue in result.issues] == ["bq_sf.int64", "bq_sf.partition_by"]
        assert result.issues[1].severity is Severity.WARNING

    def test_partition_and_cluster_fold_into_one_key(self):
        sql = "CREATE TABLE d.t PARTITION BY DATE(ts) CLUSTER BY a, b AS SELECT * FROM s"
        result = translate(sql, BQ, SF)
        assert result.converted_query == "CREATE TABLE d.t CLUSTER BY (DATE(ts), a, b) AS SELECT * FROM s"
        assert [issue.rule_id for issue in result.issues] == ["bq_sf.partition_and_cluster_by"]

    def test_cluster_by_alone_is_info(self):
        result = translate("CREATE TABLE d.t (a INT64) CLUSTER BY a", BQ, SF)
        assert result.converted_query == "CREATE TABLE d.t (a INTEGER) CLUSTER BY (a)"
        assert result.issues[-1].severity is Severity.INFO

    def test_options_keep_their_lines(self):
        sql = "CREATE TABLE d.t\nPARTITION BY DATE(ts)\nCLUSTER BY a\nAS SELECT 1"
        result = translate(sql, BQ, SF)
        assert result.converted_query.split("\n") == ["CREATE TABLE d.t", "CLUSTER BY (DATE(ts), a)", "", "AS SELECT 1"]
        assert result.issues[0].line == 2

    def test_window_partition_by_is_untouched(self):
        sql = "CREATE TABLE d.t AS SELECT ROW_NUMBER() OVER (PARTITION BY a ORDER BY b) AS rn FROM s"
        result = translate(sql, BQ, SF)
        assert result.converted_query == sql
        assert result.issues == ()

    def test_partition_by_outside_create_is_untouched(self):
        sql = "SELECT * FROM t; PARTITION BY a"
        assert translate(sql, BQ, SF).converted_query == sql

    def test_partition_column_to_databricks(self):
        result = translate("CREATE TABLE d.t (d DATE) PARTITION BY d", BQ, DBX)
        assert result.converted_query == "CREATE TABLE d.t (d DATE) PARTITIONED BY (d)"
        assert [issue.rule_id for issue in result.issues] == ["bq_dbx.partition_by_column"]
        assert result.issues[0].severity is Severity.INFO

    def test_partition_expression_to_databricks_warns(self):
        result = translate("CREATE TABLE d.t PARTITION BY DATE(ts)", BQ, DBX)
        assert result.converted_query == "CREATE TABLE d.t PARTITIONED BY (DATE(ts))"
        assert [issue.rule_id for issue in result.issues] == ["bq_dbx.partition_by"]
        assert result.issues[0].severity is Severity.WARNING

    def test_partition_and_cluster_to_databricks(self):
        result = translate("CREATE TABLE d.t PARTITION BY d CLUSTER BY a, b", BQ, DBX)
        assert result.converted_query == "CREATE TABLE d.t PARTITIONED BY (d) /* ZORDER BY (a, b) */"
        assert [issue.rule_id for issue in result.issues] == ["bq_dbx.partition_and_cluster_by"]


# ---------------------------------------------------------------------------
# Line fidelity, scoring and determinism
# ---------------------------------------------------------------------------


class TestLinesAndScore:
    def test_issue_lines_point_at_construct(self):
        sql = "SELECT\n  a,\n  DATE_ADD(d, INTERVAL 1 DAY)\nFROM `p.d.t`"
        result = translate(sql, BQ, SF)
        lines = {issue.rule_id: issue.line for issue in result.issues}
        assert lines == {"bq_sf.date_add": 3, "bq_sf.backtick_project_path": 4}

    def test_line_count_preserved_when_call_spans_lines(self):
        sql = "SELECT DATE_ADD(\n  d,\n  INTERVAL 1 DAY\n) AS x\nFROM t"
        result = translate(sql, BQ, SF)
        assert result.converted_query.count("\n") == sql.count("\n")
        assert result.converted_query.splitlines()[-1] == "FROM t"

    def test_nested_call_issue_line_holds_its_translation(self):
        sql = "SELECT DATE_ADD(\n  DATE_ADD(d, INTERVAL 1 DAY),\n  INTERVAL 2 DAY)"
        result = translate(sql, BQ, SF)
        assert [issue.line for issue in result.issues] == [1, 2]
        assert result.converted_query.split("\n") == [
            "SELECT DATEADD(DAY, 2,",
            "  DATEADD(DAY, 1, d))",
            "",
        ]

    def test_argument_order_change_keeps_earlier_line(self):
        sql = "SELECT DATE_ADD(d,\n  INTERVAL 1 DAY) FROM t"
        result = translate(sql, BQ, SF)
        assert result.converted_query == "SELECT DATEADD(DAY, 1, d)\n FROM t"

    def test_custom_weights(self):
        sql = "SELECT * FROM ML.PREDICT(MODEL m, TABLE t)"
        default = translate(sql, BQ, SF)
        harsh = translate(sql, BQ, SF, weights=ScoreWeights(error=60, warning=5, info=1))
        assert harsh.compatibility_score < default.compatibility_score

    def test_score_never_negative(self):
        sql = "\n".join(f"SELECT * FROM ML.PREDICT(MODEL m{i}, TABLE t)" for i in range(10))
        result = translate(sql, BQ, SF)
        assert result.compatibility_score == 0

    def test_deterministic(self):
        sql = "SELECT DATE_ADD(d, INTERVAL 1 DAY), FORMAT_DATE('%Y', d) FROM `p.d.t`"
        first = translate(sql, BQ, SF)
        second = translate(sql, BQ, SF)
        assert first == second
