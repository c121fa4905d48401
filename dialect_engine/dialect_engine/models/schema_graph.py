"""Schema lineage graph value objects.

Graphs are built fresh by each call to
:func:`~dialect_engine.graph.schema_extractor.extract_schema` and owned
by the caller.  Column links are stored as ordered, duplicate-free id
lists so the same query always yields the same graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

JOIN_EQUALITY = "join-equality"
FOREIGN_KEY_NAMING = "foreign-key-naming"
CTE_REFERENCE = "cte-reference"
SUBQUERY = "subquery"


@dataclass(slots=True)
class ColumnNode:
    """A column observed in the query.

    ``references`` lists the ids of columns this column points to;
    ``referenced_by`` is the inverse view of the same relation.
    """

    id: str
    name: str
    table_id: str
    references: list[str] = field(default_factory=list)
    referenced_by: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "table_id": self.table_id,
            "references": list(self.references),
            "referenced_by": list(self.referenced_by),
        }


@dataclass(slots=True)
class TableNode:
    """A table referenced by the query.

    ``id`` is the normalized table name, or the alias when the same
    table is joined under several aliases.
    """

    id: str
    name: str
    alias: str | None = None
    columns: list[ColumnNode] = field(default_factory=list)

    def column(self, name: str) -> ColumnNode | None:
        key = name.lower()
        for col in self.columns:
            if col.name.lower() == key:
                return col
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "alias": self.alias,
            "columns": [col.to_dict() for col in self.columns],
        }


@dataclass(frozen=True, slots=True)
class Relationship:
    """A table-level edge and the basis on which it was inferred."""

    source: str
    target: str
    type: str
    source_column: str | None = None
    target_column: str | None = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source, self.target, self.type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "source_column": self.source_column,
            "target_column": self.target_column,
        }


@dataclass(slots=True)
class SchemaGraph:
    """Tables, their columns, and the relationships between them."""

    tables: list[TableNode] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tables

    def table(self, table_id: str) -> TableNode | None:
        for tbl in self.tables:
            if tbl.id == table_id:
                return tbl
        return None

    def column(self, column_id: str) -> ColumnNode | None:
        for tbl in self.tables:
            for col in tbl.columns:
                if col.id == column_id:
                    return col
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tables": [tbl.to_dict() for tbl in self.tables],
            "relationships": [rel.to_dict() for rel in self.relationships],
        }
