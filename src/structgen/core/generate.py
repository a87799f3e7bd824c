"""Keyspace-level generation pipeline.

Tables are fetched and assembled one by one (optionally on a thread pool),
each producing an independent TableResult. A table that cannot be generated
is skipped with its reason; it never affects sibling tables. Results are
merged in table-name order so the emitted unit is deterministic.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, Sequence

from structgen.core.assembler import assemble
from structgen.core.emitter import UnitHeader, emit
from structgen.core.errors import (
    CatalogError,
    IdentifierConflictError,
    UnknownTypeError,
)
from structgen.core.models import ColumnDefinition, RecordDefinition, TableSchema
from structgen.core.sink import Sink

log = logging.getLogger(__name__)

# Partition key, clustering, static, then regular columns.
_KIND_RANK = {"partition_key": 0, "clustering": 1, "static": 2, "regular": 3}


class CatalogAdapter(Protocol):
    """Interface for the catalog queries used by the pipeline."""

    def list_tables(self, keyspace: str) -> list[str]:
        """Return the table names of a keyspace."""
        ...

    def list_columns(self, keyspace: str, table: str) -> list[ColumnDefinition]:
        """Return the columns of keyspace.table."""
        ...


@dataclass(frozen=True)
class TableResult:
    """Outcome of generating a single table."""

    table: str
    record: RecordDefinition | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def failed(cls, table: str, exc: Exception) -> TableResult:
        return cls(table=table, error=str(exc), error_type=type(exc).__name__)


@dataclass(frozen=True)
class GenerationReport:
    """Per-table outcomes for one keyspace, in table-name order."""

    keyspace: str
    results: tuple[TableResult, ...] = ()

    @property
    def records(self) -> tuple[RecordDefinition, ...]:
        return tuple(r.record for r in self.results if r.record is not None)

    @property
    def succeeded(self) -> list[TableResult]:
        return [r for r in self.results if r.ok]

    @property
    def skipped(self) -> list[TableResult]:
        return [r for r in self.results if not r.ok]


def filter_tables(tables: Iterable[str], name_regex: str | None) -> list[str]:
    """Return unique table names in sorted order, filtered by regex if given."""
    names = sorted(set(tables))
    if not name_regex:
        return names
    rx = re.compile(name_regex)
    return [t for t in names if rx.search(t)]


def order_columns(columns: Iterable[ColumnDefinition]) -> tuple[ColumnDefinition, ...]:
    """
    Put columns in canonical order.

    Partition key columns come first, then clustering columns, each by their
    key position; static and regular columns follow, sorted by name. The
    order does not depend on the order the catalog returned.
    """

    def _key(column: ColumnDefinition) -> tuple[int, int, str]:
        rank = _KIND_RANK.get(column.kind or "regular", len(_KIND_RANK))
        position = column.position if rank < 2 else 0
        return rank, position, column.name

    return tuple(sorted(columns, key=_key))


def load_schema(adapter: CatalogAdapter, keyspace: str, table: str) -> TableSchema:
    """Fetch a table's columns from the catalog and put them in canonical order."""
    columns = adapter.list_columns(keyspace, table)
    return TableSchema(name=table, columns=order_columns(columns))


def build_table(adapter: CatalogAdapter, keyspace: str, table: str) -> TableResult:
    """
    Fetch and assemble one table.

    Catalog, type mapping and identifier failures are returned as a skipped
    TableResult instead of being raised.
    """
    try:
        record = assemble(load_schema(adapter, keyspace, table))
    except (CatalogError, UnknownTypeError, IdentifierConflictError) as exc:
        log.warning("Skipping table %s.%s: %s", keyspace, table, exc)
        return TableResult.failed(table, exc)
    return TableResult(table=table, record=record)


def _drop_duplicate_records(keyspace: str, results: list[TableResult]) -> list[TableResult]:
    """Skip tables whose struct name was already taken by an earlier table."""
    owner_by_name: dict[str, str] = {}
    out: list[TableResult] = []
    for result in results:
        if result.record is None:
            out.append(result)
            continue
        first = owner_by_name.get(result.record.name)
        if first is not None:
            exc = IdentifierConflictError(
                result.record.name, first, result.table, scope=f"keyspace {keyspace}"
            )
            log.warning("Skipping table %s.%s: %s", keyspace, result.table, exc)
            out.append(TableResult.failed(result.table, exc))
            continue
        owner_by_name[result.record.name] = result.table
        out.append(result)
    return out


def generate_records(
    adapter: CatalogAdapter,
    keyspace: str,
    tables: Iterable[str],
    *,
    max_parallel: int = 1,
    on_result: Callable[[TableResult], None] | None = None,
) -> GenerationReport:
    """
    Generate records for the given tables of a keyspace.

    Up to ``max_parallel`` tables are fetched and assembled concurrently.
    ``on_result`` is called once per table as soon as its result is known,
    always from the calling thread.

    Args:
        adapter: Catalog adapter used to fetch columns.
        keyspace: Keyspace the tables belong to.
        tables: Table names to generate.
        max_parallel: Maximum number of tables processed concurrently.
        on_result: Optional progress callback.

    Returns:
        A GenerationReport with one result per table, in table-name order.
    """
    if max_parallel < 1:
        raise ValueError("max_parallel must be >= 1")

    ordered = sorted(set(tables))
    if not ordered:
        return GenerationReport(keyspace=keyspace)

    by_table: dict[str, TableResult] = {}
    with ThreadPoolExecutor(max_workers=max_parallel) as pool:
        futures = [
            pool.submit(build_table, adapter, keyspace, table) for table in ordered
        ]
        for f in as_completed(futures):
            result = f.result()
            by_table[result.table] = result
            if on_result is not None:
                on_result(result)

    results = _drop_duplicate_records(keyspace, [by_table[t] for t in ordered])
    return GenerationReport(keyspace=keyspace, results=tuple(results))


def generate_keyspace(
    adapter: CatalogAdapter,
    keyspace: str,
    *,
    name_regex: str | None = None,
    max_parallel: int = 1,
    on_result: Callable[[TableResult], None] | None = None,
) -> GenerationReport:
    """
    List the keyspace's tables and generate a record for each of them.

    Raises:
        CatalogError: If the table list cannot be fetched. Nothing has been
                      generated at that point.
    """
    tables = filter_tables(adapter.list_tables(keyspace), name_regex)
    return generate_records(
        adapter,
        keyspace,
        tables,
        max_parallel=max_parallel,
        on_result=on_result,
    )


def render_unit(
    report: GenerationReport,
    *,
    package: str = "main",
    tag_keys: Sequence[str] = ("json",),
) -> str:
    """Emit the Go source for all generated records of a report."""
    header = UnitHeader(package=package, source=f'keyspace "{report.keyspace}"')
    return emit(report.records, header, tag_keys=tag_keys)


def write_unit(
    sink: Sink,
    report: GenerationReport,
    *,
    package: str = "main",
    tag_keys: Sequence[str] = ("json",),
) -> object:
    """
    Emit the report's records and hand the text to the sink.

    Returns whatever the sink returns (the file path for DirectorySink).

    Raises:
        SinkError: If the sink cannot persist the unit.
    """
    content = render_unit(report, package=package, tag_keys=tag_keys)
    return sink.write(report.keyspace, content)
