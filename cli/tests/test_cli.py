"""Tests for cli/cli/app.py -- the sqlshift CLI application.

Uses typer.testing.CliRunner to invoke each command against SQL files
written to ``tmp_path`` (or passed on stdin).  Human-readable output is
checked on the combined output; ``--json`` output is parsed from stdout.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from cli.app import app

runner = CliRunner()

SCENARIO_SQL = "SELECT DATE_ADD(CURRENT_DATE(), INTERVAL 1 DAY) FROM a.b.c"
JOIN_SQL = "SELECT x.id FROM orders x JOIN users u ON x.user_id = u.id"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _sql_file(tmp_path: Path, sql: str, name: str = "query.sql") -> Path:
    path = tmp_path / name
    path.write_text(sql, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# translate
# ---------------------------------------------------------------------------


class TestTranslateCommand:
    def test_human_output(self, tmp_path: Path):
        path = _sql_file(tmp_path, SCENARIO_SQL)
        result = runner.invoke(app, ["translate", str(path), "--source", "bigquery", "--target", "snowflake"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert "DATEADD(DAY, 1, CURRENT_DATE())" in result.output
        assert "bq_sf.date_add" in result.output

    def test_json_output(self, tmp_path: Path):
        path = _sql_file(tmp_path, SCENARIO_SQL)
        result = runner.invoke(app, ["--json", "translate", str(path), "-s", "bigquery", "-t", "snowflake"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        output = json.loads(result.stdout)
        assert output["converted_query"] == "SELECT DATEADD(DAY, 1, CURRENT_DATE()) FROM a.b.c"
        assert output["source_platform"] == "bigquery"
        assert output["target_platform"] == "snowflake"
        assert output["compatibility_score"] < 100
        assert output["issues"][0]["rule_id"] == "bq_sf.date_add"

    def test_defaults_from_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SQLSHIFT_DEFAULT_SOURCE", "snowflake")
        monkeypatch.setenv("SQLSHIFT_DEFAULT_TARGET", "bigquery")
        path = _sql_file(tmp_path, "SELECT IFF(a, 1, 0) FROM t")
        result = runner.invoke(app, ["--json", "translate", str(path)])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert json.loads(result.stdout)["converted_query"] == "SELECT IF(a, 1, 0) FROM t"

    def test_penalties_from_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SQLSHIFT_INFO_PENALTY", "10")
        path = _sql_file(tmp_path, SCENARIO_SQL)
        result = runner.invoke(app, ["--json", "translate", str(path), "-s", "bigquery", "-t", "snowflake"])
        assert json.loads(result.stdout)["compatibility_score"] == 90

    def test_stdin(self):
        result = runner.invoke(
            app,
            ["--json", "translate", "-", "-s", "snowflake", "-t", "bigquery"],
            input="SELECT NVL(a, 0) FROM t",
        )
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert json.loads(result.stdout)["converted_query"] == "SELECT IFNULL(a, 0) FROM t"

    def test_output_file(self, tmp_path: Path):
        path = _sql_file(tmp_path, SCENARIO_SQL)
        out = tmp_path / "out" / "converted.sql"
        result = runner.invoke(
            app, ["translate", str(path), "-s", "bigquery", "-t", "snowflake", "--output", str(out)]
        )
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert out.read_text(encoding="utf-8") == "SELECT DATEADD(DAY, 1, CURRENT_DATE()) FROM a.b.c"

    def test_fail_on_error(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT * FROM ML.PREDICT(MODEL m, TABLE t)")
        result = runner.invoke(
            app, ["translate", str(path), "-s", "bigquery", "-t", "snowflake", "--fail-on-error"]
        )
        assert result.exit_code == 1

    def test_errors_without_flag_exit_zero(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT * FROM ML.PREDICT(MODEL m, TABLE t)")
        result = runner.invoke(app, ["translate", str(path), "-s", "bigquery", "-t", "snowflake"])
        assert result.exit_code == 0

    def test_validate_valid(self, tmp_path: Path):
        path = _sql_file(tmp_path, SCENARIO_SQL)
        result = runner.invoke(
            app, ["--json", "translate", str(path), "-s", "bigquery", "-t", "snowflake", "--validate"]
        )
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert json.loads(result.stdout)["syntax"] == {"valid": True, "errors": []}

    def test_validate_invalid_exits_one(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT * FROM t WHERE (a = 1")
        result = runner.invoke(app, ["translate", str(path), "-s", "bigquery", "-t", "snowflake", "--validate"])
        assert result.exit_code == 1

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["translate", str(tmp_path / "nope.sql")])
        assert result.exit_code == 3
        assert "Cannot read" in result.output

    def test_invalid_platform(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT 1")
        result = runner.invoke(app, ["translate", str(path), "--source", "oracle"])
        assert result.exit_code == 2

    def test_invalid_configuration(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SQLSHIFT_ERROR_PENALTY", "-5")
        path = _sql_file(tmp_path, "SELECT 1")
        result = runner.invoke(app, ["translate", str(path)])
        assert result.exit_code == 3
        assert "Invalid configuration" in result.output


# ---------------------------------------------------------------------------
# lineage
# ---------------------------------------------------------------------------


class TestLineageCommand:
    def test_json_output(self, tmp_path: Path):
        path = _sql_file(tmp_path, JOIN_SQL)
        result = runner.invoke(app, ["--json", "lineage", str(path), "--platform", "snowflake"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        output = json.loads(result.stdout)
        assert [t["id"] for t in output["tables"]] == ["orders", "users"]
        assert output["relationships"][0]["type"] == "join-equality"

    def test_human_output(self, tmp_path: Path):
        path = _sql_file(tmp_path, JOIN_SQL)
        result = runner.invoke(app, ["lineage", str(path), "-p", "bigquery"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert "orders" in result.output
        assert "join-equality" in result.output

    def test_no_tables(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT 1")
        result = runner.invoke(app, ["lineage", str(path)])
        assert result.exit_code == 0
        assert "No tables found" in result.output


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


class TestExportCommand:
    def test_dbt_files_written(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT id, name FROM users")
        out_dir = tmp_path / "models"
        result = runner.invoke(
            app, ["export", str(path), "-p", "bigquery", "--format", "dbt", "--output-dir", str(out_dir)]
        )
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert sorted(p.name for p in out_dir.iterdir()) == ["stg_users.json", "stg_users.sql", "stg_users.yml"]
        assert "{{ ref('users') }}" in (out_dir / "stg_users.sql").read_text(encoding="utf-8")
        schema = yaml.safe_load((out_dir / "stg_users.yml").read_text(encoding="utf-8"))
        assert schema["models"][0]["name"] == "stg_users"

    def test_dataform_json(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT id FROM db.sch.users")
        result = runner.invoke(app, ["--json", "export", str(path), "-p", "snowflake", "-f", "dataform"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        output = json.loads(result.stdout)
        assert output["success"] is True
        assert output["base_platform"] == "bigquery"
        assert output["model_format"] == "dataform"
        assert output["files"] == []
        assert '${ref("users")}' in output["model"]

    def test_export_failure_exits_three(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT 1")
        result = runner.invoke(app, ["export", str(path), "-p", "bigquery"])
        assert result.exit_code == 3
        assert "No table reference found" in result.output


# ---------------------------------------------------------------------------
# highlight
# ---------------------------------------------------------------------------


class TestHighlightCommand:
    def test_plain_output_round_trips_text(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT a FROM t")
        result = runner.invoke(app, ["highlight", str(path), "-p", "snowflake"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        assert "SELECT a FROM t" in result.output

    def test_json_tokens(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT IFF(a, 1, 2)")
        result = runner.invoke(app, ["--json", "highlight", str(path), "-p", "snowflake"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        tokens = json.loads(result.stdout)["tokens"]
        assert tokens[0] == {"text": "SELECT", "kind": "keyword", "line": 1, "column": 1}
        assert tokens[1]["kind"] == "platform_keyword"

    def test_json_tokens_keep_comments(self, tmp_path: Path):
        path = _sql_file(tmp_path, "SELECT a -- note\nFROM t")
        result = runner.invoke(app, ["--json", "highlight", str(path), "-p", "snowflake"])
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        tokens = json.loads(result.stdout)["tokens"]
        assert [tok["text"] for tok in tokens] == ["SELECT", "a", "-- note", "FROM", "t"]
        assert tokens[2] == {"text": "-- note", "kind": "comment", "line": 1, "column": 10}


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


class TestGlobalOptions:
    def test_metrics_file(self, tmp_path: Path):
        path = _sql_file(tmp_path, SCENARIO_SQL)
        metrics = tmp_path / "metrics.jsonl"
        result = runner.invoke(
            app,
            ["--metrics-file", str(metrics), "translate", str(path), "-s", "bigquery", "-t", "snowflake"],
        )
        assert result.exit_code == 0, f"Output: {result.output}\n{result.exception}"
        lines = metrics.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event"] == "translate"
        assert event["data"]["source"] == "bigquery"
        assert event["data"]["issues"] == 1

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "Usage" in result.output
