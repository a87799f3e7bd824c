"""Command for generating Go structs from a keyspace."""

from __future__ import annotations

import re

import typer

from structgen.cli.common.context import CliState, open_catalog, resolve_keyspace
from structgen.cli.common.exits import die, exit_from_exc, warn_exit
from structgen.cli.common.options import (
    DryRunOpt,
    FileNameOpt,
    KeyspaceOpt,
    NameOpt,
    OutputDirOpt,
    PackageOpt,
    ParallelOpt,
    SelectOpt,
    StrictOpt,
    TagOpt,
)
from structgen.cli.common.output import out
from structgen.cli.common.progress import generate_with_progress
from structgen.core.emitter import UnitHeader, validate_tag_keys
from structgen.core.errors import CatalogError, SinkError
from structgen.core.generate import filter_tables, render_unit, write_unit
from structgen.core.sink import DirectorySink


def _compile_regex_or_exit(pattern: str | None, *, option_name: str) -> None:
    """Validate a regex pattern and convert invalid syntax into CLI input errors."""
    if not pattern:
        return
    try:
        re.compile(pattern)
    except re.error as exc:
        exit_from_exc(exc, message=f"Invalid regex for {option_name}: {exc}", code=2)


def generate(
    ctx: typer.Context,
    keyspace: str | None = KeyspaceOpt,
    output_dir: str | None = OutputDirOpt,
    package: str | None = PackageOpt,
    file_name: str | None = FileNameOpt,
    name: str | None = NameOpt,
    tag: list[str] = TagOpt,
    select: bool = SelectOpt,
    parallel: int | None = ParallelOpt,
    dry_run: bool = DryRunOpt,
    strict: bool = StrictOpt,
):
    """Generate one Go struct per table of a keyspace."""
    state: CliState = ctx.obj
    settings = state.settings
    keyspace = resolve_keyspace(keyspace, settings)
    _compile_regex_or_exit(name, option_name="--name")

    package = package or settings.package
    tag_keys = list(tag) or ["json"]
    max_parallel = parallel or settings.parallel
    try:
        UnitHeader(package=package)
        validate_tag_keys(tag_keys)
        sink = DirectorySink(
            output_dir or settings.output_dir,
            file_name or settings.file_name,
        )
        sink.path_for(keyspace)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=2)

    adapter = open_catalog(ctx, settings).adapter

    try:
        with out.status("Loading tables..."):
            exists = adapter.keyspace_exists(keyspace)
            tables = filter_tables(adapter.list_tables(keyspace), name) if exists else []
    except CatalogError as exc:
        exit_from_exc(exc, message=f"Could not list tables: {exc}", code=1)

    if not exists:
        die(f"Keyspace '{keyspace}' does not exist.", code=1)

    if not tables:
        warn_exit("No tables found.", code=0)

    if select:
        tables = out.select_many("Select tables to generate:", tables)
        if not tables:
            warn_exit("No tables selected.", code=0)

    out.info(f"Keyspace: {keyspace} | Tables: {len(tables)}")
    report = generate_with_progress(adapter, keyspace, tables, max_parallel=max_parallel)

    out.generation_results_table(report.results, title="Generation results")

    if not report.records:
        die("No table could be generated.", code=1)

    if dry_run:
        out.warn("DRY RUN: nothing will be written.")
        out.source(render_unit(report, package=package, tag_keys=tag_keys))
    else:
        try:
            with out.status("Writing output..."):
                path = write_unit(sink, report, package=package, tag_keys=tag_keys)
        except SinkError as exc:
            exit_from_exc(exc, message=str(exc), code=1)
        out.success(f"Wrote {len(report.records)} struct(s) to {path}")

    if report.skipped:
        out.warn(f"Skipped {len(report.skipped)} table(s).")
        if strict:
            raise typer.Exit(1)
