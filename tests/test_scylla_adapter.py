from types import SimpleNamespace

import pytest
from cassandra import DriverException

from structgen.core.adapters.scylla import ScyllaCatalogAdapter
from structgen.core.errors import CatalogError
from structgen.core.models import ColumnDefinition


class _Session:
    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.executed = []
        self.cluster = SimpleNamespace(shutdown_calls=0)
        self.cluster.shutdown = self._shutdown

    def _shutdown(self):
        self.cluster.shutdown_calls += 1

    def execute(self, query, params):
        self.executed.append((query, params))
        if self.error is not None:
            raise self.error
        return iter(self.rows)


def test_list_tables_passes_keyspace_as_parameter():
    session = _Session(rows=[SimpleNamespace(table_name="users"), SimpleNamespace(table_name="")])

    tables = ScyllaCatalogAdapter(session).list_tables("shop")

    assert tables == ["users"]
    query, params = session.executed[0]
    assert "system_schema.tables" in query
    assert params == ("shop",)


def test_list_columns_builds_column_definitions():
    session = _Session(
        rows=[
            SimpleNamespace(column_name="id", type="uuid", kind="partition_key", position=0),
            SimpleNamespace(column_name="tags", type="set<text>", kind="regular", position=-1),
        ]
    )

    columns = ScyllaCatalogAdapter(session).list_columns("shop", "users")

    assert columns == [
        ColumnDefinition("id", "uuid", "partition_key", 0),
        ColumnDefinition("tags", "set<text>", "regular", -1),
    ]
    assert session.executed[0][1] == ("shop", "users")


def test_keyspace_exists():
    assert ScyllaCatalogAdapter(_Session(rows=[SimpleNamespace(keyspace_name="shop")])).keyspace_exists("shop")
    assert not ScyllaCatalogAdapter(_Session()).keyspace_exists("shop")


def test_driver_errors_become_catalog_errors():
    adapter = ScyllaCatalogAdapter(_Session(error=DriverException("read timeout")))

    with pytest.raises(CatalogError, match="read timeout"):
        adapter.list_columns("shop", "users")


def test_close_shuts_down_cluster():
    session = _Session()

    ScyllaCatalogAdapter(session).close()

    assert session.cluster.shutdown_calls == 1
