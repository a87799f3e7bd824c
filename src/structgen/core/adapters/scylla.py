from __future__ import annotations

import logging

from cassandra import DriverException
from cassandra.cluster import NoHostAvailable, Session

from structgen.core.errors import CatalogError
from structgen.core.models import ColumnDefinition

log = logging.getLogger(__name__)


class ScyllaCatalogAdapter:
    """Adapter around a cassandra-driver session (system_schema keyspaces/tables/columns)."""

    _KEYSPACE_QUERY = (
        "SELECT keyspace_name FROM system_schema.keyspaces WHERE keyspace_name = %s"
    )
    _TABLES_QUERY = "SELECT table_name FROM system_schema.tables WHERE keyspace_name = %s"
    _COLUMNS_QUERY = (
        "SELECT column_name, type, kind, position FROM system_schema.columns "
        "WHERE keyspace_name = %s AND table_name = %s"
    )

    def __init__(self, session: Session) -> None:
        self.session = session

    def _query(self, query: str, params: tuple[str, ...]) -> list:
        """Run a catalog query and return all rows."""
        log.debug("Catalog query: %s %s", query, params)
        try:
            return list(self.session.execute(query, params))
        except (DriverException, NoHostAvailable) as exc:
            raise CatalogError(f"Catalog query failed: {exc}") from exc

    def keyspace_exists(self, keyspace: str) -> bool:
        """Return True if the keyspace is defined in the catalog."""
        return bool(self._query(self._KEYSPACE_QUERY, (keyspace,)))

    def list_tables(self, keyspace: str) -> list[str]:
        """List table names in a keyspace, in catalog order."""
        out: list[str] = []
        for row in self._query(self._TABLES_QUERY, (keyspace,)):
            name = getattr(row, "table_name", None)
            if not name:
                continue
            out.append(name)
        return out

    def list_columns(self, keyspace: str, table: str) -> list[ColumnDefinition]:
        """List columns with their CQL types for keyspace.table, in catalog order."""
        out: list[ColumnDefinition] = []
        for row in self._query(self._COLUMNS_QUERY, (keyspace, table)):
            name = getattr(row, "column_name", None)
            if not name:
                continue
            position = getattr(row, "position", None)
            out.append(
                ColumnDefinition(
                    name=name,
                    raw_type=getattr(row, "type", "") or "",
                    kind=getattr(row, "kind", None),
                    position=int(position) if position is not None else -1,
                )
            )
        return out

    def close(self) -> None:
        """Shut down the session's cluster connection."""
        self.session.cluster.shutdown()
