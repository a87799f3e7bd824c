"""Core domain models for schema introspection and code generation.

These models describe catalog tables and the records generated from them in a
simple, immutable form. They carry no driver types and no UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass

from structgen.core.types import TypeDescriptor


@dataclass(frozen=True)
class ColumnDefinition:
    """A column as reported by the catalog.

    Attributes:
        name: Column name exactly as stored in the catalog.
        raw_type: CQL type string, e.g. ``map<text, int>``.
        kind: Catalog column kind (``partition_key``, ``clustering``,
              ``static`` or ``regular``), if the catalog reports it.
        position: Position within the partition or clustering key;
                  ``-1`` for other columns.
    """

    name: str
    raw_type: str
    kind: str | None = None
    position: int = -1


@dataclass(frozen=True)
class TableSchema:
    """A table name and its columns in canonical order."""

    name: str
    columns: tuple[ColumnDefinition, ...] = ()


@dataclass(frozen=True)
class FieldDefinition:
    """One generated struct field.

    ``serialized_tag`` is always the untransformed column name so that the
    tag recovers the catalog column regardless of identifier casing.
    """

    identifier: str
    type: TypeDescriptor
    serialized_tag: str


@dataclass(frozen=True)
class RecordDefinition:
    """A generated struct mirroring one table."""

    name: str
    fields: tuple[FieldDefinition, ...] = ()
    table: str | None = None
