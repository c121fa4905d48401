"""Unit tests for dbt and Dataform model export."""

from __future__ import annotations

import json

import pytest
import yaml
from dialect_engine.export import export_model, suggest_materialization, suggest_model_name
from dialect_engine.graph import find_table_references
from dialect_engine.models import Materialization, ModelFormat, Severity
from dialect_engine.sql_toolkit import Platform, tokenize

INCREMENTAL_SQL = (
    "SELECT o.id, o.customer_id, o.updated_at "
    "FROM shop.orders o JOIN shop.customers c ON o.customer_id = c.id "
    "WHERE o.updated_at > '2024-01-01'"
)


def _name_and_materialization(sql: str) -> tuple[str, Materialization]:
    tokens = tokenize(sql, Platform.BIGQUERY)
    refs = find_table_references(tokens)
    return suggest_model_name(tokens, refs), suggest_materialization(tokens, sql)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestExportFailures:
    @pytest.mark.parametrize("model_format", list(ModelFormat))
    @pytest.mark.parametrize("sql", ["", "   \n\t"])
    def test_empty_sql(self, sql: str, model_format: ModelFormat):
        result = export_model(sql, Platform.BIGQUERY, model_format)
        assert result.success is False
        assert result.error == "SQL query is empty"
        assert result.model == ""

    def test_no_table_reference(self):
        result = export_model("SELECT 1 AS one", Platform.SNOWFLAKE, ModelFormat.DBT)
        assert result.success is False
        assert result.error == "No table reference found in SQL"


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------


class TestHeuristics:
    def test_staging_view_for_simple_select(self):
        assert _name_and_materialization("SELECT id, name FROM users") == ("stg_users", Materialization.VIEW)

    def test_aggregate_table(self):
        name, mat = _name_and_materialization("SELECT day, COUNT(*) AS n FROM events GROUP BY day")
        assert name == "agg_events"
        assert mat is Materialization.TABLE

    def test_join_is_intermediate(self):
        name, _ = _name_and_materialization("SELECT a.id FROM orders a JOIN users b ON a.user_id = b.id")
        assert name == "int_orders_users"

    def test_window_is_mart(self):
        name, mat = _name_and_materialization("SELECT id, ROW_NUMBER() OVER (ORDER BY ts) AS rn FROM events")
        assert name == "mart_events"
        assert mat is Materialization.TABLE

    def test_temporal_filter_on_join_is_incremental(self):
        _, mat = _name_and_materialization(INCREMENTAL_SQL)
        assert mat is Materialization.INCREMENTAL


# ---------------------------------------------------------------------------
# dbt
# ---------------------------------------------------------------------------


class TestDbtExport:
    def test_incremental_model(self):
        result = export_model(INCREMENTAL_SQL, Platform.BIGQUERY, ModelFormat.DBT)

        assert result.success is True
        assert result.model_name == "int_orders_customers"
        assert result.base_platform is Platform.BIGQUERY
        assert result.issues == ()
        assert result.model.startswith("{{ config(\n    materialized='incremental',")
        assert "unique_key='id'" in result.model
        assert "incremental_strategy='merge'" in result.model
        assert "FROM {{ ref('orders') }} o JOIN {{ ref('customers') }} c" in result.model
        assert "{% if is_incremental() %}" in result.model
        assert "AND updated_at > (SELECT MAX(updated_at) FROM {{ this }})" in result.model

    def test_schema_yml(self):
        result = export_model(INCREMENTAL_SQL, Platform.BIGQUERY, ModelFormat.DBT)
        doc = yaml.safe_load(result.documentation)

        assert doc["version"] == 2
        model = doc["models"][0]
        assert model["name"] == "int_orders_customers"
        assert model["meta"]["upstream_tables"] == ["shop.orders", "shop.customers"]
        columns = {col["name"]: col for col in model["columns"]}
        assert columns["id"]["tests"] == ["not_null", "unique"]
        assert columns["customer_id"]["tests"] == [
            "not_null",
            {"relationships": {"to": "ref('customers')", "field": "id"}},
        ]
        assert columns["updated_at"]["data_type"] == "timestamp"

    def test_config_json(self):
        result = export_model(INCREMENTAL_SQL, Platform.BIGQUERY, ModelFormat.DBT)
        config = json.loads(result.config)
        assert config["materialized"] == "incremental"
        assert config["schema"] == "intermediate"
        assert config["tags"] == ["intermediate", "incremental"]

    def test_dbt_keeps_input_dialect(self):
        result = export_model("SELECT IFF(active, 1, 0) AS flag FROM users", Platform.SNOWFLAKE, ModelFormat.DBT)
        assert result.base_platform is Platform.SNOWFLAKE
        assert "IFF(active, 1, 0)" in result.model
        assert "{{ ref('users') }}" in result.model
        assert "materialized='view'" in result.model

    def test_cte_names_are_not_refs(self):
        sql = "WITH recent AS (SELECT * FROM orders) SELECT * FROM recent"
        result = export_model(sql, Platform.BIGQUERY, ModelFormat.DBT)
        assert "{{ ref('orders') }}" in result.model
        assert "ref('recent')" not in result.model
        assert "FROM recent" in result.model


# ---------------------------------------------------------------------------
# Dataform
# ---------------------------------------------------------------------------


class TestDataformExport:
    def test_translates_to_bigquery_first(self):
        sql = "SELECT id, IFF(active, 1, 0) AS is_active FROM db.sch.users"
        result = export_model(sql, Platform.SNOWFLAKE, ModelFormat.DATAFORM)

        assert result.success is True
        assert result.base_platform is Platform.BIGQUERY
        assert "IF(active, 1, 0)" in result.model
        assert '${ref("users")}' in result.model
        assert {issue.rule_id for issue in result.issues} == {"sf_bq.iff", "sf_bq.database_path"}
        assert all(issue.severity is Severity.INFO for issue in result.issues)

    def test_config_block(self):
        result = export_model(INCREMENTAL_SQL, Platform.BIGQUERY, ModelFormat.DATAFORM)
        assert result.model.startswith('config {\n  type: "incremental",\n  schema: "intermediate",')
        assert 'uniqueKey: ["id"]' in result.model
        assert "${when(incremental(), `AND updated_at > (SELECT MAX(updated_at) FROM ${self()})`)}" in result.model

    def test_markdown_documentation(self):
        sql = "SELECT id, IFF(active, 1, 0) AS is_active FROM db.sch.users"
        result = export_model(sql, Platform.SNOWFLAKE, ModelFormat.DATAFORM)
        assert result.documentation.startswith("# stg_users\n")
        assert "## Sources" in result.documentation
        assert "| id |" in result.documentation
        assert "## Migration notes" in result.documentation

    def test_config_json(self):
        result = export_model(INCREMENTAL_SQL, Platform.BIGQUERY, ModelFormat.DATAFORM)
        config = json.loads(result.config)
        assert config["type"] == "incremental"
        assert config["assertions"]["uniqueKey"] == ["id"]
        assert config["assertions"]["nonNull"] == ["id", "customer_id"]

    def test_deterministic(self):
        first = export_model(INCREMENTAL_SQL, Platform.DATABRICKS, ModelFormat.DATAFORM)
        second = export_model(INCREMENTAL_SQL, Platform.DATABRICKS, ModelFormat.DATAFORM)
        assert first == second
