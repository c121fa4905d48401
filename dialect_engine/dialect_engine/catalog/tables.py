"""Rewrite tables for every ordered pair of platforms.

The catalog is a closed table keyed by ``(source, target)``.  Adding a
platform means authoring six new rule sets here, not registering a
plugin at runtime.

Severity conventions
--------------------
* ``info`` -- syntax-only change, same result on every input.
* ``warning`` -- equivalent for typical data but differs in edge cases
  (time zones, format strings, NULL ordering, generator semantics).
* ``error`` -- no safe equivalent; the construct is left untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from dialect_engine.models.migration import Severity
from dialect_engine.sql_toolkit import PathQuoting, Platform

from .rules import (
    ArrayLiteralRule,
    CallRule,
    DdlClauseRule,
    JsonPathRule,
    PathStyle,
    RenameRule,
    RuleSet,
    SubscriptRule,
    TablePathRule,
    UnsupportedRule,
)

BQ = Platform.BIGQUERY
SF = Platform.SNOWFLAKE
DBX = Platform.DATABRICKS

INFO = Severity.INFO
WARNING = Severity.WARNING

# ---------------------------------------------------------------------------
# Argument patterns
# ---------------------------------------------------------------------------

_DATE_UNITS = "DAY|WEEK|MONTH|QUARTER|YEAR"
_TIME_UNITS = "HOUR|MINUTE|SECOND|MILLISECOND|MICROSECOND"
_ALL_UNITS = f"{_DATE_UNITS}|{_TIME_UNITS}"


def _expr(name: str) -> str:
    return rf"(?P<{name}>.+)"


def _value(name: str) -> str:
    """An expression that is not an INTERVAL literal."""
    return rf"(?!INTERVAL\b)(?P<{name}>.+)"


def _interval(units: str) -> str:
    return rf"INTERVAL\s+(?P<n>.+?)\s+(?P<unit>{units})"


def _unit(units: str) -> str:
    """A bare or single-quoted date part, as Snowflake and Databricks accept."""
    return rf"'?(?P<unit>{units})'?"


_X = _expr("x")
_Y = _expr("y")
_N = _value("n")
_FMT = _expr("fmt")
_TZ = _expr("tz")
_FLATTEN_INPUT = r"INPUT\s*=>\s*(?P<x>.+)"
_INDEX = r"(?P<n>\d+)"
_COLUMN = r"(?!\d)\w+"


def _position(wrapper: str) -> str:
    """A BigQuery array position such as ``OFFSET(n)``."""
    return rf"{wrapper}\s*\(\s*(?P<n>.+?)\s*\)"


# ---------------------------------------------------------------------------
# BigQuery -> Snowflake
# ---------------------------------------------------------------------------

_BQ_TO_SF = RuleSet(
    source=BQ,
    target=SF,
    structural=(
        TablePathRule(
            rule_id="bq_sf.backtick_project_path",
            quoting=PathQuoting.BACKTICK,
            parts=3,
            severity=INFO,
            message="Converted `project.dataset.table` to Snowflake database.schema.table",
            suggestion="Make sure the BigQuery project exists as a Snowflake database",
        ),
        TablePathRule(
            rule_id="bq_sf.backtick_dataset_path",
            quoting=PathQuoting.BACKTICK,
            parts=2,
            table_context_only=True,
            severity=INFO,
            message="Converted `dataset.table` to Snowflake schema.table",
        ),
    ),
    direct=(
        CallRule(
            rule_id="bq_sf.date_add",
            name="DATE_ADD",
            args=(_X, _interval(_DATE_UNITS)),
            template="DATEADD({unit}, {n}, {x})",
            severity=INFO,
            message="Converted DATE_ADD(date, INTERVAL n unit) to DATEADD(unit, n, date)",
        ),
        CallRule(
            rule_id="bq_sf.date_sub",
            name="DATE_SUB",
            args=(_X, _interval(_DATE_UNITS)),
            template="DATEADD({unit}, {neg_n}, {x})",
            severity=INFO,
            message="Converted DATE_SUB(date, INTERVAL n unit) to DATEADD(unit, -n, date)",
        ),
        CallRule(
            rule_id="bq_sf.timestamp_add",
            name="TIMESTAMP_ADD",
            args=(_X, _interval(_ALL_UNITS)),
            template="DATEADD({unit}, {n}, {x})",
            severity=WARNING,
            message="Converted TIMESTAMP_ADD to DATEADD",
            suggestion="BigQuery TIMESTAMP is always UTC; check the Snowflake TIMESTAMP_* type of the column",
        ),
        CallRule(
            rule_id="bq_sf.timestamp_sub",
            name="TIMESTAMP_SUB",
            args=(_X, _interval(_ALL_UNITS)),
            template="DATEADD({unit}, {neg_n}, {x})",
            severity=WARNING,
            message="Converted TIMESTAMP_SUB to DATEADD with a negated amount",
            suggestion="BigQuery TIMESTAMP is always UTC; check the Snowflake TIMESTAMP_* type of the column",
        ),
        CallRule(
            rule_id="bq_sf.date_diff",
            name="DATE_DIFF",
            args=(_X, _Y, _unit(_DATE_UNITS)),
            template="DATEDIFF({unit}, {y}, {x})",
            severity=INFO,
            message="Converted DATE_DIFF(end, start, unit) to DATEDIFF(unit, start, end)",
        ),
        CallRule(
            rule_id="bq_sf.timestamp_diff",
            name="TIMESTAMP_DIFF",
            args=(_X, _Y, _unit(_ALL_UNITS)),
            template="DATEDIFF({unit}, {y}, {x})",
            severity=WARNING,
            message="Converted TIMESTAMP_DIFF(end, start, unit) to DATEDIFF(unit, start, end)",
            suggestion="Snowflake counts unit boundaries crossed; BigQuery counts whole units elapsed",
        ),
        CallRule(
            rule_id="bq_sf.format_date",
            name="FORMAT_DATE",
            args=(_FMT, _X),
            template="TO_CHAR({x}, {fmt})",
            severity=WARNING,
            message="Converted FORMAT_DATE(format, date) to TO_CHAR(date, format)",
            suggestion="Rewrite strftime elements such as %Y-%m-%d as Snowflake YYYY-MM-DD",
        ),
        CallRule(
            rule_id="bq_sf.format_timestamp",
            name="FORMAT_TIMESTAMP",
            args=(_FMT, _X),
            template="TO_CHAR({x}, {fmt})",
            severity=WARNING,
            message="Converted FORMAT_TIMESTAMP(format, ts) to TO_CHAR(ts, format)",
            suggestion="Rewrite strftime elements such as %H:%M:%S as Snowflake HH24:MI:SS",
        ),
        CallRule(
            rule_id="bq_sf.parse_date",
            name="PARSE_DATE",
            args=(_FMT, _X),
            template="TO_DATE({x}, {fmt})",
            severity=WARNING,
            message="Converted PARSE_DATE(format, text) to TO_DATE(text, format)",
            suggestion="Rewrite strftime elements as Snowflake format elements",
        ),
        CallRule(
            rule_id="bq_sf.parse_timestamp",
            name="PARSE_TIMESTAMP",
            args=(_FMT, _X),
            template="TO_TIMESTAMP({x}, {fmt})",
            severity=WARNING,
            message="Converted PARSE_TIMESTAMP(format, text) to TO_TIMESTAMP(text, format)",
            suggestion="Rewrite strftime elements as Snowflake format elements",
        ),
        CallRule(
            rule_id="bq_sf.unnest",
            name="UNNEST",
            args=(_X,),
            template="TABLE(FLATTEN(input => {x}))",
            severity=WARNING,
            message="Converted UNNEST(array) to TABLE(FLATTEN(input => array))",
            suggestion="Array elements are exposed as the VALUE column of the flattened rows",
        ),
        RenameRule(
            rule_id="bq_sf.array_length",
            name="ARRAY_LENGTH",
            replacement="ARRAY_SIZE",
            severity=INFO,
            message="Converted ARRAY_LENGTH to ARRAY_SIZE",
        ),
        RenameRule(
            rule_id="bq_sf.generate_uuid",
            name="GENERATE_UUID",
            replacement="UUID_STRING",
            severity=INFO,
            message="Converted GENERATE_UUID to UUID_STRING",
        ),
        RenameRule(
            rule_id="bq_sf.safe_cast",
            name="SAFE_CAST",
            replacement="TRY_CAST",
            severity=INFO,
            message="Converted SAFE_CAST to TRY_CAST",
        ),
        RenameRule(
            rule_id="bq_sf.regexp_contains",
            name="REGEXP_CONTAINS",
            replacement="REGEXP_LIKE",
            severity=WARNING,
            message="Converted REGEXP_CONTAINS to REGEXP_LIKE",
            suggestion="REGEXP_LIKE matches the whole string; wrap the pattern in .* for a partial match",
        ),
        RenameRule(
            rule_id="bq_sf.int64",
            name="INT64",
            replacement="INTEGER",
            call_only=False,
            severity=INFO,
            message="Converted INT64 type to INTEGER",
        ),
        RenameRule(
            rule_id="bq_sf.float64",
            name="FLOAT64",
            replacement="FLOAT",
            call_only=False,
            severity=INFO,
            message="Converted FLOAT64 type to FLOAT",
        ),
        RenameRule(
            rule_id="bq_sf.bytes",
            name="BYTES",
            replacement="BINARY",
            call_only=False,
            severity=INFO,
            message="Converted BYTES type to BINARY",
        ),
        UnsupportedRule(
            rule_id="bq_sf.ml_predict",
            name="ML.PREDICT",
            message="BigQuery ML.PREDICT has no Snowflake equivalent",
            suggestion="Deploy the model with Snowpark ML or Snowflake Cortex and call it from a UDF",
        ),
        UnsupportedRule(
            rule_id="bq_sf.generate_date_array",
            name="GENERATE_DATE_ARRAY",
            call_only=True,
            message="GENERATE_DATE_ARRAY has no Snowflake equivalent",
            suggestion="Build the date series with TABLE(GENERATOR(ROWCOUNT => n)) and DATEADD",
        ),
        UnsupportedRule(
            rule_id="bq_sf.struct",
            name="STRUCT",
            call_only=True,
            message="STRUCT constructors cannot be translated automatically",
            suggestion="Rewrite as OBJECT_CONSTRUCT('field', value, ...)",
        ),
        ArrayLiteralRule(
            rule_id="bq_sf.array_literal",
            template="ARRAY_CONSTRUCT({items})",
            severity=INFO,
            message="Converted ARRAY[...] to ARRAY_CONSTRUCT(...)",
        ),
        SubscriptRule(
            rule_id="bq_sf.subscript_index",
            index=_INDEX,
            template="GET({0}, {n})",
            severity=WARNING,
            message="Converted array[n] to GET(array, n)",
            suggestion="GET returns NULL past the end of the array where BigQuery raises an error",
        ),
        SubscriptRule(
            rule_id="bq_sf.subscript_offset",
            index=_position("OFFSET"),
            template="GET({0}, {n})",
            severity=WARNING,
            message="Converted array[OFFSET(n)] to GET(array, n)",
            suggestion="GET returns NULL past the end of the array where BigQuery raises an error",
        ),
        SubscriptRule(
            rule_id="bq_sf.subscript_safe_offset",
            index=_position("SAFE_OFFSET"),
            template="GET({0}, {n})",
            severity=INFO,
            message="Converted array[SAFE_OFFSET(n)] to GET(array, n)",
        ),
        SubscriptRule(
            rule_id="bq_sf.subscript_ordinal",
            index=_position("ORDINAL"),
            template="GET({0}, {offset_n})",
            severity=WARNING,
            message="Converted array[ORDINAL(n)] to zero-based GET(array, n - 1)",
            suggestion="GET returns NULL past the end of the array where BigQuery raises an error",
        ),
        SubscriptRule(
            rule_id="bq_sf.subscript_safe_ordinal",
            index=_position("SAFE_ORDINAL"),
            template="GET({0}, {offset_n})",
            severity=INFO,
            message="Converted array[SAFE_ORDINAL(n)] to zero-based GET(array, n - 1)",
        ),
        DdlClauseRule(
            rule_id="bq_sf.partition_and_cluster_by",
            clauses=("PARTITION BY", "CLUSTER BY"),
            template="CLUSTER BY ({0}, {1})",
            severity=WARNING,
            message="Folded PARTITION BY and CLUSTER BY into a Snowflake clustering key",
            suggestion="Snowflake micro-partitions tables automatically; check the clustering key order",
        ),
        DdlClauseRule(
            rule_id="bq_sf.partition_by",
            clauses=("PARTITION BY",),
            template="CLUSTER BY ({0})",
            severity=WARNING,
            message="Converted PARTITION BY to a Snowflake clustering key",
            suggestion="Snowflake has no user-defined partitions; consider CLUSTER BY on the partition column",
        ),
        DdlClauseRule(
            rule_id="bq_sf.cluster_by",
            clauses=("CLUSTER BY",),
            template="CLUSTER BY ({0})",
            severity=INFO,
            message="Converted CLUSTER BY column list to a Snowflake clustering key",
        ),
    ),
)


# ---------------------------------------------------------------------------
# BigQuery -> Databricks
# ---------------------------------------------------------------------------

_BQ_TO_DBX = RuleSet(
    source=BQ,
    target=DBX,
    structural=(
        TablePathRule(
            rule_id="bq_dbx.backtick_project_path",
            quoting=PathQuoting.BACKTICK,
            parts=3,
            keep=2,
            severity=WARNING,
            message="Converted `project.dataset.table` to Databricks database.table",
            suggestion="The BigQuery project qualifier was dropped; set the Unity Catalog catalog explicitly",
        ),
        TablePathRule(
            rule_id="bq_dbx.backtick_dataset_path",
            quoting=PathQuoting.BACKTICK,
            parts=2,
            table_context_only=True,
            severity=INFO,
            message="Converted `dataset.table` to Databricks database.table",
        ),
    ),
    direct=(
        CallRule(
            rule_id="bq_dbx.date_add_days",
            name="DATE_ADD",
            args=(_X, _interval("DAY")),
            template="DATE_ADD({x}, {n})",
            severity=INFO,
            message="Converted DATE_ADD(date, INTERVAL n DAY) to DATE_ADD(date, n)",
        ),
        CallRule(
            rule_id="bq_dbx.date_add",
            name="DATE_ADD",
            args=(_X, _interval("WEEK|MONTH|QUARTER|YEAR")),
            template="DATEADD({unit}, {n}, {x})",
            severity=INFO,
            message="Converted DATE_ADD(date, INTERVAL n unit) to DATEADD(unit, n, date)",
        ),
        CallRule(
            rule_id="bq_dbx.date_sub_days",
            name="DATE_SUB",
            args=(_X, _interval("DAY")),
            template="DATE_SUB({x}, {n})",
            severity=INFO,
            message="Converted DATE_SUB(date, INTERVAL n DAY) to DATE_SUB(date, n)",
        ),
        CallRule(
            rule_id="bq_dbx.date_sub",
            name="DATE_SUB",
            args=(_X, _interval("WEEK|MONTH|QUARTER|YEAR")),
            template="DATEADD({unit}, {neg_n}, {x})",
            severity=INFO,
            message="Converted DATE_SUB(date, INTERVAL n unit) to DATEADD(unit, -n, date)",
        ),
        CallRule(
            rule_id="bq_dbx.timestamp_add",
            name="TIMESTAMP_ADD",
            args=(_X, _interval(_ALL_UNITS)),
            template="TIMESTAMPADD({unit}, {n}, {x})",
            severity=WARNING,
            message="Converted TIMESTAMP_ADD to TIMESTAMPADD",
            suggestion="Databricks timestamps use the session time zone; BigQuery TIMESTAMP is UTC",
        ),
        CallRule(
            rule_id="bq_dbx.timestamp_sub",
            name="TIMESTAMP_SUB",
            args=(_X, _interval(_ALL_UNITS)),
            template="TIMESTAMPADD({unit}, {neg_n}, {x})",
            severity=WARNING,
            message="Converted TIMESTAMP_SUB to TIMESTAMPADD with a negated amount",
            suggestion="Databricks timestamps use the session time zone; BigQuery TIMESTAMP is UTC",
        ),
        CallRule(
            rule_id="bq_dbx.date_diff_days",
            name="DATE_DIFF",
            args=(_X, _Y, _unit("DAY")),
            template="DATEDIFF({x}, {y})",
            severity=INFO,
            message="Converted DATE_DIFF(end, start, DAY) to DATEDIFF(end, start)",
        ),
        CallRule(
            rule_id="bq_dbx.date_diff",
            name="DATE_DIFF",
            args=(_X, _Y, _unit("WEEK|MONTH|QUARTER|YEAR")),
            template="DATEDIFF({unit}, {y}, {x})",
            severity=INFO,
            message="Converted DATE_DIFF(end, start, unit) to DATEDIFF(unit, start, end)",
        ),
        CallRule(
            rule_id="bq_dbx.timestamp_diff",
            name="TIMESTAMP_DIFF",
            args=(_X, _Y, _unit(_ALL_UNITS)),
            template="TIMESTAMPDIFF({unit}, {y}, {x})",
            severity=WARNING,
            message="Converted TIMESTAMP_DIFF(end, start, unit) to TIMESTAMPDIFF(unit, start, end)",
            suggestion="Databricks timestamps use the session time zone; BigQuery TIMESTAMP is UTC",
        ),
        CallRule(
            rule_id="bq_dbx.format_date",
            name="FORMAT_DATE",
            args=(_FMT, _X),
            template="DATE_FORMAT({x}, {fmt})",
            severity=WARNING,
            message="Converted FORMAT_DATE(format, date) to DATE_FORMAT(date, format)",
            suggestion="Rewrite strftime elements such as %Y-%m-%d as Spark patterns like yyyy-MM-dd",
        ),
        CallRule(
            rule_id="bq_dbx.parse_date",
            name="PARSE_DATE",
            args=(_FMT, _X),
            template="TO_DATE({x}, {fmt})",
            severity=WARNING,
            message="Converted PARSE_DATE(format, text) to TO_DATE(text, format)",
            suggestion="Rewrite strftime elements as Spark datetime patterns",
        ),
        CallRule(
            rule_id="bq_dbx.regexp_contains",
            name="REGEXP_CONTAINS",
            args=(_X, _expr("pattern")),
            template="({x} RLIKE {pattern})",
            severity=INFO,
            message="Converted REGEXP_CONTAINS(value, pattern) to value RLIKE pattern",
        ),
        RenameRule(
            rule_id="bq_dbx.array_agg",
            name="ARRAY_AGG",
            replacement="COLLECT_LIST",
            severity=WARNING,
            message="Converted ARRAY_AGG to COLLECT_LIST",
            suggestion="COLLECT_LIST skips NULLs and does not guarantee order",
        ),
        RenameRule(
            rule_id="bq_dbx.array_length",
            name="ARRAY_LENGTH",
            replacement="SIZE",
            severity=INFO,
            message="Converted ARRAY_LENGTH to SIZE",
        ),
        RenameRule(
            rule_id="bq_dbx.generate_uuid",
            name="GENERATE_UUID",
            replacement="UUID",
            severity=INFO,
            message="Converted GENERATE_UUID to UUID",
        ),
        RenameRule(
            rule_id="bq_dbx.unnest",
            name="UNNEST",
            replacement="EXPLODE",
            severity=WARNING,
            message="Converted UNNEST to EXPLODE",
            suggestion="EXPLODE is a generator; move it into the SELECT list or a LATERAL VIEW",
        ),
        RenameRule(
            rule_id="bq_dbx.safe_cast",
            name="SAFE_CAST",
            replacement="TRY_CAST",
            severity=INFO,
            message="Converted SAFE_CAST to TRY_CAST",
        ),
        RenameRule(
            rule_id="bq_dbx.int64",
            name="INT64",
            replacement="BIGINT",
            call_only=False,
            severity=INFO,
            message="Converted INT64 type to BIGINT",
        ),
        RenameRule(
            rule_id="bq_dbx.float64",
            name="FLOAT64",
            replacement="DOUBLE",
            call_only=False,
            severity=INFO,
            message="Converted FLOAT64 type to DOUBLE",
        ),
        RenameRule(
            rule_id="bq_dbx.bytes",
            name="BYTES",
            replacement="BINARY",
            call_only=False,
            severity=INFO,
            message="Converted BYTES type to BINARY",
        ),
        UnsupportedRule(
            rule_id="bq_dbx.ml_predict",
            name="ML.PREDICT",
            message="BigQuery ML.PREDICT has no Databricks SQL equivalent",
            suggestion="Register the model in MLflow and call it with ai_query() or a UDF",
        ),
        UnsupportedRule(
            rule_id="bq_dbx.geography",
            name="GEOGRAPHY",
            message="The GEOGRAPHY type has no native Databricks equivalent",
            suggestion="Store geometries as WKT strings and use H3 or Mosaic functions",
        ),
        ArrayLiteralRule(
            rule_id="bq_dbx.array_literal",
            template="ARRAY({items})",
            severity=INFO,
            message="Converted ARRAY[...] to ARRAY(...)",
        ),
        SubscriptRule(
            rule_id="bq_dbx.subscript_offset",
            index=_position("OFFSET"),
            template="{0}[{n}]",
            severity=INFO,
            message="Converted array[OFFSET(n)] to zero-based array[n]",
        ),
        SubscriptRule(
            rule_id="bq_dbx.subscript_safe_offset",
            index=_position("SAFE_OFFSET"),
            template="GET({0}, {n})",
            severity=INFO,
            message="Converted array[SAFE_OFFSET(n)] to GET(array, n)",
        ),
        SubscriptRule(
            rule_id="bq_dbx.subscript_ordinal",
            index=_position("ORDINAL"),
            template="ELEMENT_AT({0}, {n})",
            severity=INFO,
            message="Converted array[ORDINAL(n)] to ELEMENT_AT(array, n)",
        ),
        SubscriptRule(
            rule_id="bq_dbx.subscript_safe_ordinal",
            index=_position("SAFE_ORDINAL"),
            template="TRY_ELEMENT_AT({0}, {n})",
            severity=INFO,
            message="Converted array[SAFE_ORDINAL(n)] to TRY_ELEMENT_AT(array, n)",
        ),
        DdlClauseRule(
            rule_id="bq_dbx.partition_by_column",
            clauses=("PARTITION BY",),
            args=(_COLUMN,),
            template="PARTITIONED BY ({0})",
            severity=INFO,
            message="Converted PARTITION BY column to PARTITIONED BY",
        ),
        DdlClauseRule(
            rule_id="bq_dbx.partition_by",
            clauses=("PARTITION BY",),
            template="PARTITIONED BY ({0})",
            severity=WARNING,
            message="Converted PARTITION BY expression to PARTITIONED BY",
            suggestion="Delta partitions on columns only; add a generated column for the expression and partition on it",
        ),
        DdlClauseRule(
            rule_id="bq_dbx.cluster_by",
            clauses=("CLUSTER BY",),
            template="CLUSTER BY ({0})",
            severity=INFO,
            message="Converted CLUSTER BY to Delta liquid clustering",
        ),
        DdlClauseRule(
            rule_id="bq_dbx.partition_and_cluster_by",
            clauses=("PARTITION BY", "CLUSTER BY"),
            template="PARTITIONED BY ({0}) /* ZORDER BY ({1}) */",
            severity=WARNING,
            message="Kept PARTITION BY as PARTITIONED BY; CLUSTER BY became a ZORDER note",
            suggestion="Delta tables cannot combine partitions with liquid clustering; run OPTIMIZE ... ZORDER BY instead",
        ),
    ),
)


# ---------------------------------------------------------------------------
# Snowflake -> BigQuery
# ---------------------------------------------------------------------------

_SF_TO_BQ = RuleSet(
    source=SF,
    target=BQ,
    structural=(
        TablePathRule(
            rule_id="sf_bq.database_path",
            quoting=PathQuoting.BARE,
            parts=3,
            style=PathStyle.BACKTICK_PATH,
            table_context_only=True,
            severity=INFO,
            message="Quoted database.schema.table as BigQuery `project.dataset.table`",
            suggestion="Map the Snowflake database to the BigQuery project that holds the dataset",
        ),
        TablePathRule(
            rule_id="sf_bq.quoted_database_path",
            quoting=PathQuoting.DOUBLE,
            parts=3,
            style=PathStyle.BACKTICK_PATH,
            severity=INFO,
            message='Converted "database"."schema"."table" to BigQuery `project.dataset.table`',
        ),
        TablePathRule(
            rule_id="sf_bq.quoted_schema_path",
            quoting=PathQuoting.DOUBLE,
            parts=2,
            style=PathStyle.BACKTICK_PATH,
            table_context_only=True,
            severity=INFO,
            message='Converted "schema"."table" to BigQuery `dataset.table`',
        ),
    ),
    direct=(
        CallRule(
            rule_id="sf_bq.dateadd",
            name="DATEADD",
            args=(_unit(_DATE_UNITS), _N, _X),
            template="DATE_ADD({x}, INTERVAL {n} {unit})",
            severity=INFO,
            message="Converted DATEADD(unit, n, date) to DATE_ADD(date, INTERVAL n unit)",
        ),
        CallRule(
            rule_id="sf_bq.dateadd_time",
            name="DATEADD",
            args=(_unit(_TIME_UNITS), _N, _X),
            template="TIMESTAMP_ADD({x}, INTERVAL {n} {unit})",
            severity=WARNING,
            message="Converted DATEADD with a time unit to TIMESTAMP_ADD",
            suggestion="BigQuery TIMESTAMP is UTC; convert TIMESTAMP_NTZ/LTZ values first",
        ),
        CallRule(
            rule_id="sf_bq.datediff",
            name="DATEDIFF",
            args=(_unit(_DATE_UNITS), _X, _Y),
            template="DATE_DIFF({y}, {x}, {unit})",
            severity=INFO,
            message="Converted DATEDIFF(unit, start, end) to DATE_DIFF(end, start, unit)",
        ),
        CallRule(
            rule_id="sf_bq.datediff_time",
            name="DATEDIFF",
            args=(_unit(_TIME_UNITS), _X, _Y),
            template="TIMESTAMP_DIFF({y}, {x}, {unit})",
            severity=WARNING,
            message="Converted DATEDIFF with a time unit to TIMESTAMP_DIFF",
            suggestion="Snowflake counts unit boundaries crossed; BigQuery counts whole units elapsed",
        ),
        CallRule(
            rule_id="sf_bq.to_char",
            name="TO_CHAR",
            args=(_X, _FMT),
            template="FORMAT_DATE({fmt}, {x})",
            severity=WARNING,
            message="Converted TO_CHAR(date, format) to FORMAT_DATE(format, date)",
            suggestion="Rewrite Snowflake format elements such as YYYY-MM-DD as %Y-%m-%d",
        ),
        CallRule(
            rule_id="sf_bq.convert_timezone",
            name="CONVERT_TIMEZONE",
            args=(_TZ, _X),
            template="DATETIME({x}, {tz})",
            severity=WARNING,
            message="Converted CONVERT_TIMEZONE(tz, ts) to DATETIME(ts, tz)",
            suggestion="The result is a DATETIME without zone; keep a TIMESTAMP if the offset matters",
        ),
        CallRule(
            rule_id="sf_bq.convert_timezone_3",
            name="CONVERT_TIMEZONE",
            args=(_expr("src"), _TZ, _X),
            template="DATETIME(TIMESTAMP({x}, {src}), {tz})",
            severity=WARNING,
            message="Converted CONVERT_TIMEZONE(source_tz, target_tz, ts) to DATETIME(TIMESTAMP(ts, source_tz), target_tz)",
            suggestion="The result is a DATETIME without zone; keep a TIMESTAMP if the offset matters",
        ),
        CallRule(
            rule_id="sf_bq.lateral_flatten",
            name="LATERAL FLATTEN",
            args=(_FLATTEN_INPUT,),
            template="UNNEST({x})",
            severity=WARNING,
            message="Converted LATERAL FLATTEN(input => array) to UNNEST(array)",
            suggestion="References to the VALUE column must use the UNNEST alias instead",
        ),
        CallRule(
            rule_id="sf_bq.flatten",
            name="FLATTEN",
            args=(_FLATTEN_INPUT,),
            template="UNNEST({x})",
            severity=WARNING,
            message="Converted FLATTEN(input => array) to UNNEST(array)",
            suggestion="References to the VALUE column must use the UNNEST alias instead",
        ),
        RenameRule(
            rule_id="sf_bq.iff",
            name="IFF",
            replacement="IF",
            severity=INFO,
            message="Converted IFF to IF",
        ),
        RenameRule(
            rule_id="sf_bq.nvl",
            name="NVL",
            replacement="IFNULL",
            severity=INFO,
            message="Converted NVL to IFNULL",
        ),
        RenameRule(
            rule_id="sf_bq.array_size",
            name="ARRAY_SIZE",
            replacement="ARRAY_LENGTH",
            severity=INFO,
            message="Converted ARRAY_SIZE to ARRAY_LENGTH",
        ),
        RenameRule(
            rule_id="sf_bq.uuid_string",
            name="UUID_STRING",
            replacement="GENERATE_UUID",
            severity=INFO,
            message="Converted UUID_STRING to GENERATE_UUID",
        ),
        RenameRule(
            rule_id="sf_bq.try_parse_json",
            name="TRY_PARSE_JSON",
            replacement="SAFE.PARSE_JSON",
            severity=INFO,
            message="Converted TRY_PARSE_JSON to SAFE.PARSE_JSON",
        ),
        RenameRule(
            rule_id="sf_bq.try_cast",
            name="TRY_CAST",
            replacement="SAFE_CAST",
            severity=INFO,
            message="Converted TRY_CAST to SAFE_CAST",
        ),
        RenameRule(
            rule_id="sf_bq.listagg",
            name="LISTAGG",
            replacement="STRING_AGG",
            severity=WARNING,
            message="Converted LISTAGG to STRING_AGG",
            suggestion="Move WITHIN GROUP (ORDER BY ...) inside the STRING_AGG call",
        ),
        RenameRule(
            rule_id="sf_bq.variant",
            name="VARIANT",
            replacement="JSON",
            call_only=False,
            severity=INFO,
            message="Converted VARIANT type to JSON",
        ),
        RenameRule(
            rule_id="sf_bq.number",
            name="NUMBER",
            replacement="NUMERIC",
            call_only=False,
            severity=INFO,
            message="Converted NUMBER type to NUMERIC",
        ),
        UnsupportedRule(
            rule_id="sf_bq.match_recognize",
            name="MATCH_RECOGNIZE",
            message="MATCH_RECOGNIZE has no BigQuery equivalent",
            suggestion="Express the pattern with window functions (LAG/LEAD) and conditional logic",
        ),
        UnsupportedRule(
            rule_id="sf_bq.copy_into",
            name="COPY INTO",
            message="COPY INTO is a Snowflake loading command",
            suggestion="Use a BigQuery load job or LOAD DATA statement instead",
        ),
        JsonPathRule(
            rule_id="sf_bq.variant_path",
            template="JSON_EXTRACT({0}, '$.{1}')",
            severity=WARNING,
            message="Converted col:attr to JSON_EXTRACT(col, '$.attr')",
            suggestion="JSON_EXTRACT returns JSON text; use JSON_VALUE where a scalar string is expected",
        ),
        CallRule(
            rule_id="sf_bq.get_attr",
            name="GET",
            args=(_X, r"'(?P<attr>[^'.]+)'"),
            template="JSON_EXTRACT({x}, '$.{attr}')",
            severity=WARNING,
            message="Converted GET(col, 'attr') to JSON_EXTRACT(col, '$.attr')",
            suggestion="JSON_EXTRACT returns JSON text; use JSON_VALUE where a scalar string is expected",
        ),
        CallRule(
            rule_id="sf_bq.get_index",
            name="GET",
            args=(_X, _INDEX),
            template="{x}[SAFE_OFFSET({n})]",
            severity=INFO,
            message="Converted GET(array, n) to array[SAFE_OFFSET(n)]",
        ),
    ),
)


# ---------------------------------------------------------------------------
# Snowflake -> Databricks
# ---------------------------------------------------------------------------

_SF_TO_DBX = RuleSet(
    source=SF,
    target=DBX,
    structural=(
        TablePathRule(
            rule_id="sf_dbx.database_path",
            quoting=PathQuoting.BARE,
            parts=3,
            keep=2,
            table_context_only=True,
            severity=WARNING,
            message="Converted database.schema.table to Databricks schema.table",
            suggestion="The Snowflake database qualifier was dropped; set the Unity Catalog catalog explicitly",
        ),
        TablePathRule(
            rule_id="sf_dbx.quoted_database_path",
            quoting=PathQuoting.DOUBLE,
            parts=3,
            keep=2,
            severity=WARNING,
            message='Converted "database"."schema"."table" to Databricks schema.table',
            suggestion="The Snowflake database qualifier was dropped; set the Unity Catalog catalog explicitly",
        ),
        TablePathRule(
            rule_id="sf_dbx.quoted_schema_path",
            quoting=PathQuoting.DOUBLE,
            parts=2,
            table_context_only=True,
            severity=INFO,
            message='Converted "schema"."table" to Databricks schema.table',
        ),
    ),
    direct=(
        CallRule(
            rule_id="sf_dbx.dateadd_days",
            name="DATEADD",
            args=(_unit("DAY"), _N, _X),
            template="DATE_ADD({x}, {n})",
            severity=INFO,
            message="Converted DATEADD(DAY, n, date) to DATE_ADD(date, n)",
        ),
        CallRule(
            rule_id="sf_dbx.datediff_days",
            name="DATEDIFF",
            args=(_unit("DAY"), _X, _Y),
            template="DATEDIFF({y}, {x})",
            severity=INFO,
            message="Converted DATEDIFF(DAY, start, end) to DATEDIFF(end, start)",
        ),
        CallRule(
            rule_id="sf_dbx.to_char",
            name="TO_CHAR",
            args=(_X, _FMT),
            template="DATE_FORMAT({x}, {fmt})",
            severity=WARNING,
            message="Converted TO_CHAR(date, format) to DATE_FORMAT(date, format)",
            suggestion="Rewrite Snowflake format elements such as YYYY-MM-DD as Spark yyyy-MM-dd",
        ),
        CallRule(
            rule_id="sf_dbx.convert_timezone",
            name="CONVERT_TIMEZONE",
            args=(_TZ, _X),
            template="FROM_UTC_TIMESTAMP({x}, {tz})",
            severity=WARNING,
            message="Converted CONVERT_TIMEZONE(tz, ts) to FROM_UTC_TIMESTAMP(ts, tz)",
            suggestion="FROM_UTC_TIMESTAMP assumes the input is UTC",
        ),
        CallRule(
            rule_id="sf_dbx.convert_timezone_3",
            name="CONVERT_TIMEZONE",
            args=(_expr("src"), _TZ, _X),
            template="FROM_UTC_TIMESTAMP(TO_UTC_TIMESTAMP({x}, {src}), {tz})",
            severity=WARNING,
            message="Converted three-argument CONVERT_TIMEZONE to FROM_UTC_TIMESTAMP(TO_UTC_TIMESTAMP(...))",
            suggestion="Check daylight-saving transitions for the source time zone",
        ),
        CallRule(
            rule_id="sf_dbx.listagg",
            name="LISTAGG",
            args=(_X, _expr("sep")),
            template="ARRAY_JOIN(COLLECT_LIST({x}), {sep})",
            severity=WARNING,
            message="Converted LISTAGG(value, sep) to ARRAY_JOIN(COLLECT_LIST(value), sep)",
            suggestion="COLLECT_LIST does not guarantee order; sort with ARRAY_SORT if needed",
        ),
        CallRule(
            rule_id="sf_dbx.lateral_flatten",
            name="LATERAL FLATTEN",
            args=(_FLATTEN_INPUT,),
            template="LATERAL VIEW EXPLODE({x})",
            severity=WARNING,
            message="Converted LATERAL FLATTEN(input => array) to LATERAL VIEW EXPLODE(array)",
            suggestion="Give the LATERAL VIEW a table and column alias and update VALUE references",
        ),
        RenameRule(
            rule_id="sf_dbx.iff",
            name="IFF",
            replacement="IF",
            severity=INFO,
            message="Converted IFF to IF",
        ),
        RenameRule(
            rule_id="sf_dbx.array_size",
            name="ARRAY_SIZE",
            replacement="SIZE",
            severity=INFO,
            message="Converted ARRAY_SIZE to SIZE",
        ),
        RenameRule(
            rule_id="sf_dbx.array_construct",
            name="ARRAY_CONSTRUCT",
            replacement="ARRAY",
            severity=INFO,
            message="Converted ARRAY_CONSTRUCT to ARRAY",
        ),
        RenameRule(
            rule_id="sf_dbx.object_construct",
            name="OBJECT_CONSTRUCT",
            replacement="NAMED_STRUCT",
            severity=WARNING,
            message="Converted OBJECT_CONSTRUCT to NAMED_STRUCT",
            suggestion="NAMED_STRUCT keeps NULL values that OBJECT_CONSTRUCT would drop",
        ),
        RenameRule(
            rule_id="sf_dbx.uuid_string",
            name="UUID_STRING",
            replacement="UUID",
            severity=INFO,
            message="Converted UUID_STRING to UUID",
        ),
        RenameRule(
            rule_id="sf_dbx.variant",
            name="VARIANT",
            replacement="STRING",
            call_only=False,
            severity=WARNING,
            message="Converted VARIANT type to STRING",
            suggestion="Parse the JSON text with FROM_JSON or the : path operator",
        ),
        UnsupportedRule(
            rule_id="sf_dbx.match_recognize",
            name="MATCH_RECOGNIZE",
            message="MATCH_RECOGNIZE has no Databricks SQL equivalent",
            suggestion="Express the pattern with window functions (LAG/LEAD) and conditional logic",
        ),
    ),
)


# ---------------------------------------------------------------------------
# Databricks -> BigQuery
# ---------------------------------------------------------------------------

_DBX_TO_BQ = RuleSet(
    source=DBX,
    target=BQ,
    structural=(
        TablePathRule(
            rule_id="dbx_bq.backtick_catalog_path",
            quoting=PathQuoting.BACKTICK,
            parts=3,
            style=PathStyle.BACKTICK_PATH,
            severity=INFO,
            message="Converted `catalog`.`schema`.`table` to BigQuery `project.dataset.table`",
        ),
        TablePathRule(
            rule_id="dbx_bq.backtick_schema_path",
            quoting=PathQuoting.BACKTICK,
            parts=2,
            style=PathStyle.BACKTICK_PATH,
            table_context_only=True,
            severity=INFO,
            message="Converted `schema`.`table` to BigQuery `dataset.table`",
        ),
        TablePathRule(
            rule_id="dbx_bq.catalog_path",
            quoting=PathQuoting.BARE,
            parts=3,
            style=PathStyle.BACKTICK_PATH,
            table_context_only=True,
            severity=INFO,
            message="Quoted catalog.schema.table as BigQuery `project.dataset.table`",
        ),
        TablePathRule(
            rule_id="dbx_bq.schema_path",
            quoting=PathQuoting.BARE,
            parts=2,
            style=PathStyle.BACKTICK_PATH,
            table_context_only=True,
            severity=INFO,
            message="Quoted database.table as BigQuery `dataset.table`",
        ),
    ),
    direct=(
        CallRule(
            rule_id="dbx_bq.date_add",
            name="DATE_ADD",
            args=(_X, _N),
            template="DATE_ADD({x}, INTERVAL {n} DAY)",
            severity=INFO,
            message="Converted DATE_ADD(date, n) to DATE_ADD(date, INTERVAL n DAY)",
        ),
        CallRule(
            rule_id="dbx_bq.date_sub",
            name="DATE_SUB",
            args=(_X, _N),
            template="DATE_SUB({x}, INTERVAL {n} DAY)",
            severity=INFO,
            message="Converted DATE_SUB(date, n) to DATE_SUB(date, INTERVAL n DAY)",
        ),
        CallRule(
            rule_id="dbx_bq.dateadd",
            name="DATEADD",
            args=(_unit(_DATE_UNITS), _N, _X),
            template="DATE_ADD({x}, INTERVAL {n} {unit})",
            severity=INFO,
            message="Converted DATEADD(unit, n, date) to DATE_ADD(date, INTERVAL n unit)",
        ),
        CallRule(
            rule_id="dbx_bq.datediff",
            name="DATEDIFF",
            args=(_X, _Y),
            template="DATE_DIFF({x}, {y}, DAY)",
            severity=INFO,
            message="Converted DATEDIFF(end, start) to DATE_DIFF(end, start, DAY)",
        ),
        CallRule(
            rule_id="dbx_bq.datediff_unit",
            name="DATEDIFF",
            args=(_unit(_DATE_UNITS), _X, _Y),
            template="DATE_DIFF({y}, {x}, {unit})",
            severity=INFO,
            message="Converted DATEDIFF(unit, start, end) to DATE_DIFF(end, start, unit)",
        ),
        CallRule(
            rule_id="dbx_bq.date_format",
            name="DATE_FORMAT",
            args=(_X, _FMT),
            template="FORMAT_DATE({fmt}, {x})",
            severity=WARNING,
            message="Converted DATE_FORMAT(date, format) to FORMAT_DATE(format, date)",
            suggestion="Rewrite Spark patterns such as yyyy-MM-dd as %Y-%m-%d",
        ),
        CallRule(
            rule_id="dbx_bq.from_utc_timestamp",
            name="FROM_UTC_TIMESTAMP",
            args=(_X, _TZ),
            template="DATETIME({x}, {tz})",
            severity=WARNING,
            message="Converted FROM_UTC_TIMESTAMP(ts, tz) to DATETIME(ts, tz)",
            suggestion="The result is a DATETIME without zone; keep a TIMESTAMP if the offset matters",
        ),
        RenameRule(
            rule_id="dbx_bq.collect_list",
            name="COLLECT_LIST",
            replacement="ARRAY_AGG",
            severity=WARNING,
            message="Converted COLLECT_LIST to ARRAY_AGG",
            suggestion="ARRAY_AGG fails on NULL elements; add IGNORE NULLS",
        ),
        RenameRule(
            rule_id="dbx_bq.size",
            name="SIZE",
            replacement="ARRAY_LENGTH",
            severity=INFO,
            message="Converted SIZE to ARRAY_LENGTH",
        ),
        RenameRule(
            rule_id="dbx_bq.explode",
            name="EXPLODE",
            replacement="UNNEST",
            severity=WARNING,
            message="Converted EXPLODE to UNNEST",
            suggestion="UNNEST belongs in the FROM clause; move the generator out of the SELECT list",
        ),
        RenameRule(
            rule_id="dbx_bq.uuid",
            name="UUID",
            replacement="GENERATE_UUID",
            severity=INFO,
            message="Converted UUID to GENERATE_UUID",
        ),
        RenameRule(
            rule_id="dbx_bq.try_cast",
            name="TRY_CAST",
            replacement="SAFE_CAST",
            severity=INFO,
            message="Converted TRY_CAST to SAFE_CAST",
        ),
        RenameRule(
            rule_id="dbx_bq.zorder",
            name="ZORDER BY",
            replacement="CLUSTER BY",
            call_only=False,
            severity=WARNING,
            message="Converted ZORDER BY to CLUSTER BY",
            suggestion="BigQuery clustering accepts at most four columns",
        ),
        RenameRule(
            rule_id="dbx_bq.bigint",
            name="BIGINT",
            replacement="INT64",
            call_only=False,
            severity=INFO,
            message="Converted BIGINT type to INT64",
        ),
        RenameRule(
            rule_id="dbx_bq.double",
            name="DOUBLE",
            replacement="FLOAT64",
            call_only=False,
            severity=INFO,
            message="Converted DOUBLE type to FLOAT64",
        ),
        RenameRule(
            rule_id="dbx_bq.binary",
            name="BINARY",
            replacement="BYTES",
            call_only=False,
            severity=INFO,
            message="Converted BINARY type to BYTES",
        ),
        UnsupportedRule(
            rule_id="dbx_bq.current_catalog",
            name="CURRENT_CATALOG",
            call_only=True,
            message="CURRENT_CATALOG() has no BigQuery equivalent",
            suggestion="Replace it with the literal project id",
        ),
        UnsupportedRule(
            rule_id="dbx_bq.current_database",
            name="CURRENT_DATABASE",
            call_only=True,
            message="CURRENT_DATABASE() has no BigQuery equivalent",
            suggestion="Replace it with the literal dataset name",
        ),
        UnsupportedRule(
            rule_id="dbx_bq.optimize",
            name="OPTIMIZE",
            message="OPTIMIZE is a Delta Lake maintenance command",
            suggestion="BigQuery manages storage layout automatically; remove the statement",
        ),
        UnsupportedRule(
            rule_id="dbx_bq.vacuum",
            name="VACUUM",
            message="VACUUM is a Delta Lake maintenance command",
            suggestion="Use table expiration or time-travel window settings instead",
        ),
        UnsupportedRule(
            rule_id="dbx_bq.using_delta",
            name="USING DELTA",
            message="USING DELTA selects a Delta Lake table format",
            suggestion="Remove the clause; BigQuery tables use native storage",
        ),
    ),
)


# ---------------------------------------------------------------------------
# Databricks -> Snowflake
# ---------------------------------------------------------------------------

_DBX_TO_SF = RuleSet(
    source=DBX,
    target=SF,
    structural=(
        TablePathRule(
            rule_id="dbx_sf.backtick_catalog_path",
            quoting=PathQuoting.BACKTICK,
            parts=3,
            severity=INFO,
            message="Converted `catalog`.`schema`.`table` to Snowflake database.schema.table",
        ),
        TablePathRule(
            rule_id="dbx_sf.backtick_schema_path",
            quoting=PathQuoting.BACKTICK,
            parts=2,
            table_context_only=True,
            severity=INFO,
            message="Converted `schema`.`table` to Snowflake schema.table",
        ),
    ),
    direct=(
        CallRule(
            rule_id="dbx_sf.date_add",
            name="DATE_ADD",
            args=(_X, _N),
            template="DATEADD(DAY, {n}, {x})",
            severity=INFO,
            message="Converted DATE_ADD(date, n) to DATEADD(DAY, n, date)",
        ),
        CallRule(
            rule_id="dbx_sf.date_sub",
            name="DATE_SUB",
            args=(_X, _N),
            template="DATEADD(DAY, {neg_n}, {x})",
            severity=INFO,
            message="Converted DATE_SUB(date, n) to DATEADD(DAY, -n, date)",
        ),
        CallRule(
            rule_id="dbx_sf.datediff",
            name="DATEDIFF",
            args=(_X, _Y),
            template="DATEDIFF(DAY, {y}, {x})",
            severity=INFO,
            message="Converted DATEDIFF(end, start) to DATEDIFF(DAY, start, end)",
        ),
        CallRule(
            rule_id="dbx_sf.date_format",
            name="DATE_FORMAT",
            args=(_X, _FMT),
            template="TO_CHAR({x}, {fmt})",
            severity=WARNING,
            message="Converted DATE_FORMAT(date, format) to TO_CHAR(date, format)",
            suggestion="Rewrite Spark patterns such as yyyy-MM-dd as Snowflake YYYY-MM-DD",
        ),
        CallRule(
            rule_id="dbx_sf.explode",
            name="EXPLODE",
            args=(_X,),
            template="TABLE(FLATTEN(input => {x}))",
            severity=WARNING,
            message="Converted EXPLODE(array) to TABLE(FLATTEN(input => array))",
            suggestion="FLATTEN belongs in the FROM clause and exposes elements as VALUE",
        ),
        CallRule(
            rule_id="dbx_sf.from_utc_timestamp",
            name="FROM_UTC_TIMESTAMP",
            args=(_X, _TZ),
            template="CONVERT_TIMEZONE('UTC', {tz}, {x})",
            severity=WARNING,
            message="Converted FROM_UTC_TIMESTAMP(ts, tz) to CONVERT_TIMEZONE('UTC', tz, ts)",
            suggestion="Check the TIMESTAMP_* type of the Snowflake column",
        ),
        RenameRule(
            rule_id="dbx_sf.collect_list",
            name="COLLECT_LIST",
            replacement="ARRAY_AGG",
            severity=WARNING,
            message="Converted COLLECT_LIST to ARRAY_AGG",
            suggestion="Use WITHIN GROUP (ORDER BY ...) if element order matters",
        ),
        RenameRule(
            rule_id="dbx_sf.size",
            name="SIZE",
            replacement="ARRAY_SIZE",
            severity=INFO,
            message="Converted SIZE to ARRAY_SIZE",
        ),
        RenameRule(
            rule_id="dbx_sf.uuid",
            name="UUID",
            replacement="UUID_STRING",
            severity=INFO,
            message="Converted UUID to UUID_STRING",
        ),
        RenameRule(
            rule_id="dbx_sf.current_catalog",
            name="CURRENT_CATALOG",
            replacement="CURRENT_DATABASE",
            severity=INFO,
            message="Converted CURRENT_CATALOG to CURRENT_DATABASE",
        ),
        RenameRule(
            rule_id="dbx_sf.current_database",
            name="CURRENT_DATABASE",
            replacement="CURRENT_SCHEMA",
            severity=INFO,
            message="Converted CURRENT_DATABASE to CURRENT_SCHEMA",
        ),
        RenameRule(
            rule_id="dbx_sf.zorder",
            name="ZORDER BY",
            replacement="CLUSTER BY",
            call_only=False,
            severity=WARNING,
            message="Converted ZORDER BY to CLUSTER BY",
            suggestion="Snowflake clustering is maintained in the background and billed separately",
        ),
        UnsupportedRule(
            rule_id="dbx_sf.optimize",
            name="OPTIMIZE",
            message="OPTIMIZE is a Delta Lake maintenance command",
            suggestion="Snowflake manages micro-partitions automatically; remove the statement",
        ),
        UnsupportedRule(
            rule_id="dbx_sf.vacuum",
            name="VACUUM",
            message="VACUUM is a Delta Lake maintenance command",
            suggestion="Configure DATA_RETENTION_TIME_IN_DAYS instead",
        ),
        UnsupportedRule(
            rule_id="dbx_sf.using_delta",
            name="USING DELTA",
            message="USING DELTA selects a Delta Lake table format",
            suggestion="Remove the clause or create an Iceberg table",
        ),
    ),
)


RULE_CATALOG: Mapping[tuple[Platform, Platform], RuleSet] = MappingProxyType(
    {
        (rules.source, rules.target): rules
        for rules in (_BQ_TO_SF, _BQ_TO_DBX, _SF_TO_BQ, _SF_TO_DBX, _DBX_TO_BQ, _DBX_TO_SF)
    }
)


def get_rule_set(source: Platform, target: Platform) -> RuleSet:
    """Return the rules for translating *source* SQL into *target* SQL.

    An identical pair has nothing to rewrite and yields an empty set.
    """
    if source is target:
        return RuleSet(source=source, target=target)
    return RULE_CATALOG[(source, target)]
