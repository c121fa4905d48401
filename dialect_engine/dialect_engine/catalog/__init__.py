"""Dialect rule catalog: per-pair rewrite rules and the rule kinds they use."""

from dialect_engine.catalog.rules import (
    ArrayLiteralRule,
    CallRule,
    DdlClauseRule,
    JsonPathRule,
    PathStyle,
    RenameRule,
    Rule,
    RuleMatch,
    RuleSet,
    SubscriptRule,
    TablePathRule,
    UnsupportedRule,
)
from dialect_engine.catalog.tables import RULE_CATALOG, get_rule_set

__all__ = [
    "RULE_CATALOG",
    "ArrayLiteralRule",
    "CallRule",
    "DdlClauseRule",
    "JsonPathRule",
    "PathStyle",
    "RenameRule",
    "Rule",
    "RuleMatch",
    "RuleSet",
    "SubscriptRule",
    "TablePathRule",
    "UnsupportedRule",
    "get_rule_set",
]
