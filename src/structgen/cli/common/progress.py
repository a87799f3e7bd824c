"""Progress display for table generation."""

from __future__ import annotations

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from structgen.cli.common.output import console
from structgen.core.generate import (
    CatalogAdapter,
    GenerationReport,
    TableResult,
    generate_records,
)

_MAX_TABLE_NAME_WIDTH = 40


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _result_label(result: TableResult) -> str:
    """Render the last finished table for the progress line."""
    name = _truncate(result.table, _MAX_TABLE_NAME_WIDTH)
    return name if result.ok else f"{name} (skipped)"


def generate_with_progress(
    adapter: CatalogAdapter,
    keyspace: str,
    tables: list[str],
    *,
    max_parallel: int = 1,
) -> GenerationReport:
    """
    Generate records for ``tables`` while showing:
      - an overall progress bar (x/y tables + skipped count)
      - the most recently finished table

    Returns the GenerationReport.
    """
    skipped: list[str] = []

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]Generating[/]"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("skipped=[bold red]{task.fields[skipped]}[/]"),
        TextColumn("[dim]{task.fields[last]}[/]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    with progress:
        task_id = progress.add_task(
            "tables",
            total=max(len(tables), 1),
            skipped=0,
            last="",
        )

        def _on_result(result: TableResult) -> None:
            if not result.ok:
                skipped.append(result.table)
            progress.update(
                task_id,
                advance=1,
                skipped=len(skipped),
                last=_result_label(result),
            )

        report = generate_records(
            adapter,
            keyspace,
            tables,
            max_parallel=max_parallel,
            on_result=_on_result,
        )

    return report
