"""Typed failures raised by the generation core and its collaborators.

Every error derives from StructgenError so frontends can tell core failures
apart from programming errors. The core never exits the process; callers
decide which of these are fatal and which only skip a single table.
"""

from __future__ import annotations


class StructgenError(RuntimeError):
    """Base class for all structgen failures."""


class CatalogError(StructgenError):
    """Raised when the schema catalog cannot be reached or queried."""


class UnknownTypeError(StructgenError, ValueError):
    """Raised when a CQL column type has no mapping.

    Attributes:
        raw_type: The full type string as returned by the catalog.
        token: The offending part of ``raw_type`` (may equal ``raw_type``).
        column: Column the type belongs to, once known.
        table: Table the column belongs to, once known.
    """

    def __init__(
        self,
        raw_type: str,
        *,
        token: str | None = None,
        column: str | None = None,
        table: str | None = None,
    ):
        self.raw_type = raw_type
        self.token = token if token is not None else raw_type
        self.column = column
        self.table = table
        super().__init__(self._message())

    def _message(self) -> str:
        msg = f"unknown CQL type: {self.token!r}"
        if self.token != self.raw_type:
            msg += f" in {self.raw_type!r}"
        if self.column:
            where = f"{self.table}.{self.column}" if self.table else self.column
            msg += f" (column {where})"
        return msg

    def for_column(self, column: str, table: str | None = None) -> UnknownTypeError:
        """Return a copy of this error annotated with its column and table."""
        return UnknownTypeError(
            self.raw_type, token=self.token, column=column, table=table
        )


class IdentifierConflictError(StructgenError):
    """Raised when two names collapse to the same generated identifier."""

    def __init__(self, identifier: str, first: str, second: str, *, scope: str):
        self.identifier = identifier
        self.first = first
        self.second = second
        self.scope = scope
        super().__init__(
            f"{scope}: {first!r} and {second!r} both map to identifier {identifier!r}"
        )


class SinkError(StructgenError):
    """Raised when generated output cannot be persisted."""
