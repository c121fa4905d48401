"""Schema lineage extraction."""

from dialect_engine.graph.schema_extractor import extract_schema
from dialect_engine.graph.table_refs import (
    BlockKind,
    QueryBlock,
    SelectItem,
    TableReference,
    find_cte_names,
    find_query_blocks,
    find_select_items,
    find_table_references,
    item_output_name,
)

__all__ = [
    "BlockKind",
    "QueryBlock",
    "SelectItem",
    "TableReference",
    "extract_schema",
    "find_cte_names",
    "find_query_blocks",
    "find_select_items",
    "find_table_references",
    "item_output_name",
]
