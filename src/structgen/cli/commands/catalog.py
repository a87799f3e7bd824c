from __future__ import annotations

import re
from dataclasses import dataclass

import typer

from structgen.cli.common.context import CliState, open_catalog, resolve_keyspace
from structgen.cli.common.exits import die, exit_from_exc, warn_exit
from structgen.cli.common.options import KeyspaceOpt, NameOpt, TagOpt
from structgen.cli.common.output import out
from structgen.core.assembler import assemble, resolve_column_type
from structgen.core.emitter import go_type, render_record, validate_tag_keys
from structgen.core.errors import CatalogError, IdentifierConflictError, UnknownTypeError
from structgen.core.generate import filter_tables, load_schema
from structgen.core.models import TableSchema
from structgen.core.naming import to_identifier

catalog_app = typer.Typer(
    help="Inspect keyspace tables and their type mapping.",
    no_args_is_help=True,
)


@dataclass(frozen=True)
class ColumnMapping:
    """How one catalog column maps onto a struct field."""

    column: str
    kind: str | None
    cql_type: str
    field: str
    go_type: str | None


def map_columns(schema: TableSchema) -> list[ColumnMapping]:
    """Resolve every column of a schema, marking unmapped types with go_type=None."""
    rows: list[ColumnMapping] = []
    for column in schema.columns:
        try:
            rendered = go_type(resolve_column_type(column.raw_type))
        except UnknownTypeError:
            rendered = None
        rows.append(
            ColumnMapping(
                column=column.name,
                kind=column.kind,
                cql_type=column.raw_type,
                field=to_identifier(column.name),
                go_type=rendered,
            )
        )
    return rows


@catalog_app.command("tables")
def tables_list(
    ctx: typer.Context,
    keyspace: str | None = KeyspaceOpt,
    name: str | None = NameOpt,
):
    """List the tables of a keyspace."""
    state: CliState = ctx.obj
    keyspace = resolve_keyspace(keyspace, state.settings)
    if name:
        try:
            re.compile(name)
        except re.error as exc:
            exit_from_exc(exc, message=f"Invalid regex for --name: {exc}", code=2)

    adapter = open_catalog(ctx, state.settings).adapter
    try:
        with out.status("Loading tables..."):
            tables = filter_tables(adapter.list_tables(keyspace), name)
    except CatalogError as exc:
        exit_from_exc(exc, message=f"Could not list tables: {exc}", code=1)

    if not tables:
        warn_exit("No tables found.", code=0)

    out.header("Tables")
    out.info(f"Keyspace: {keyspace} | Tables: {len(tables)}")
    out.tables_table(tables, title="Tables")


@catalog_app.command("describe")
def describe(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table name"),
    keyspace: str | None = KeyspaceOpt,
    tag: list[str] = TagOpt,
):
    """Show how the columns of a table map to Go struct fields."""
    state: CliState = ctx.obj
    keyspace = resolve_keyspace(keyspace, state.settings)
    tag_keys = list(tag) or ["json"]
    try:
        validate_tag_keys(tag_keys)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=2)

    adapter = open_catalog(ctx, state.settings).adapter
    try:
        with out.status("Loading columns..."):
            schema = load_schema(adapter, keyspace, table)
    except CatalogError as exc:
        exit_from_exc(exc, message=f"Could not load columns: {exc}", code=1)

    if not schema.columns:
        die(f"Table '{keyspace}.{table}' does not exist or has no columns.", code=1)

    out.header(f"{keyspace}.{table}")
    out.columns_table(map_columns(schema), title="Columns")

    try:
        record = assemble(schema)
    except (UnknownTypeError, IdentifierConflictError) as exc:
        out.warn(f"Table would be skipped: {exc}")
        raise typer.Exit(1) from exc

    out.source(render_record(record, tag_keys))
