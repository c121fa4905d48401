"""Keyword and function tables used by the lexical classifier.

Entries are upper-case; lookups upper-case the candidate word first.
"""

from __future__ import annotations

from ._types import Platform

OPERATORS: frozenset[str] = frozenset({"=", "<>", "!=", ">", "<", ">=", "<=", "+", "-", "*", "/", "%"})

LITERALS: frozenset[str] = frozenset({"TRUE", "FALSE", "NULL"})

COMMON_KEYWORDS: frozenset[str] = frozenset(
    {
        "SELECT", "FROM", "WHERE", "JOIN", "LEFT", "RIGHT", "INNER", "OUTER",
        "FULL", "CROSS", "ON", "GROUP", "BY", "ORDER", "HAVING", "LIMIT",
        "OFFSET", "UNION", "ALL", "INTERSECT", "EXCEPT", "AS", "AND", "OR",
        "NOT", "IN", "EXISTS", "BETWEEN", "LIKE", "IS", "NULL", "ASC", "DESC",
        "DISTINCT", "CASE", "WHEN", "THEN", "ELSE", "END", "WITH", "INTERVAL",
        "INSERT", "INTO", "VALUES", "UPDATE", "SET", "DELETE", "CREATE",
        "TABLE", "VIEW", "REPLACE",
    }
)  # fmt: skip

PLATFORM_KEYWORDS: dict[Platform, frozenset[str]] = {
    Platform.BIGQUERY: frozenset(
        {
            "PARTITION", "CLUSTER", "QUALIFY", "WINDOW", "OVER", "STRUCT",
            "ARRAY", "UNNEST", "GENERATE_ARRAY", "GENERATE_DATE_ARRAY",
            "DATE_TRUNC",
        }
    ),
    Platform.SNOWFLAKE: frozenset(
        {
            "SAMPLE", "QUALIFY", "PIVOT", "UNPIVOT", "MATCH_RECOGNIZE", "IFF",
            "FLATTEN", "LATERAL", "VARIANT", "OBJECT", "ARRAY", "COPY", "MERGE",
        }
    ),
    Platform.DATABRICKS: frozenset(
        {
            "OPTIMIZE", "ZORDER", "DELTA", "VACUUM", "STREAM", "STREAMING",
            "TEMPORARY", "UNCACHED", "SKEW", "USING", "CATALOG", "SCHEMA",
        }
    ),
}  # fmt: skip

COMMON_FUNCTIONS: frozenset[str] = frozenset(
    {
        "COUNT", "SUM", "AVG", "MIN", "MAX", "UPPER", "LOWER", "CAST",
        "CONCAT", "TRIM", "LTRIM", "RTRIM", "LENGTH", "SUBSTR", "SUBSTRING",
        "REPLACE", "ROUND", "FLOOR", "CEIL", "ABS", "COALESCE", "NULLIF",
        "CURRENT_DATE", "CURRENT_TIMESTAMP",
    }
)  # fmt: skip

PLATFORM_FUNCTIONS: dict[Platform, frozenset[str]] = {
    Platform.BIGQUERY: frozenset(
        {
            "ARRAY_AGG", "STRING_AGG", "ROW_NUMBER", "RANK", "DENSE_RANK",
            "DATE_ADD", "DATE_SUB", "DATE_DIFF", "TIMESTAMP_ADD",
            "TIMESTAMP_SUB", "TIMESTAMP_DIFF", "JSON_EXTRACT", "PARSE_DATE",
            "FORMAT_DATE", "ST_GEOGPOINT", "ST_DISTANCE",
        }
    ),
    Platform.SNOWFLAKE: frozenset(
        {
            "DATEADD", "DATEDIFF", "TO_VARIANT", "PARSE_JSON", "GET_PATH",
            "TRY_CAST", "CONVERT_TIMEZONE", "TO_CHAR", "IFF", "IFNULL", "NVL",
            "LISTAGG", "OBJECT_CONSTRUCT", "ARRAY_CONSTRUCT", "SPLIT_TO_TABLE",
        }
    ),
    Platform.DATABRICKS: frozenset(
        {
            "EXPLODE", "FROM_JSON", "TO_JSON", "DATE_FORMAT", "FROM_UNIXTIME",
            "ARRAY_CONTAINS", "MAP_KEYS", "MAP_VALUES", "TRANSFORM", "REDUCE",
            "VERSION", "CURRENT_CATALOG", "CURRENT_USER", "NEXT_DAY",
        }
    ),
}  # fmt: skip
