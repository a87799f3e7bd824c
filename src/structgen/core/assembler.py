"""Assembly of record definitions from table schemas.

This module turns a TableSchema into a RecordDefinition by resolving every
column type and identifier. It does no I/O; the caller decides what to do
when a table cannot be assembled.
"""

from __future__ import annotations

from structgen.core.errors import IdentifierConflictError, UnknownTypeError
from structgen.core.models import FieldDefinition, RecordDefinition, TableSchema
from structgen.core.naming import to_identifier
from structgen.core.types import MapType, ScalarType, TypeDescriptor, parse_type, walk


def resolve_column_type(raw_type: str) -> TypeDescriptor:
    """
    Parse a column type and check that it has a Go equivalent.

    Go map keys must be comparable, so a map keyed by a list, set or map
    is rejected like any other unmapped type.

    Raises:
        UnknownTypeError: If the type does not parse or has a collection
                          map key.
    """
    descriptor = parse_type(raw_type)
    for node in walk(descriptor):
        if isinstance(node, MapType) and not isinstance(node.key, ScalarType):
            raise UnknownTypeError(raw_type, token=node.key.cql)
    return descriptor


def assemble(schema: TableSchema) -> RecordDefinition:
    """
    Build the record definition for one table.

    Fields follow the order of ``schema.columns``. Each field keeps the
    original column name as its serialized tag.

    Args:
        schema: Table name and its ordered columns.

    Returns:
        The immutable record definition for the table.

    Raises:
        UnknownTypeError: If a column type has no mapping. The error names
                          the column and table.
        IdentifierConflictError: If two columns map to the same identifier.
    """
    fields: list[FieldDefinition] = []
    seen: dict[str, str] = {}

    for column in schema.columns:
        try:
            descriptor = resolve_column_type(column.raw_type)
        except UnknownTypeError as exc:
            raise exc.for_column(column.name, schema.name) from exc

        identifier = to_identifier(column.name)
        if identifier in seen:
            raise IdentifierConflictError(
                identifier, seen[identifier], column.name, scope=f"table {schema.name}"
            )
        seen[identifier] = column.name

        fields.append(
            FieldDefinition(
                identifier=identifier,
                type=descriptor,
                serialized_tag=column.name,
            )
        )

    return RecordDefinition(
        name=to_identifier(schema.name),
        fields=tuple(fields),
        table=schema.name,
    )
