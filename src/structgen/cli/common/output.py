"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable

import questionary
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.theme import Theme

from structgen.cli.common.tui_style import QUESTIONARY_STYLE_SELECT

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "checked_icon", "unchecked_icon", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts so they read as structgen prompts."""
        return f"[structgen] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def source(self, text: str, *, lexer: str = "go") -> None:
        """Print generated source with syntax highlighting."""
        console.print(Syntax(text, lexer, theme="ansi_dark", word_wrap=False))

    def select_many(self, message: str, choices: list[str]) -> list[str]:
        """
        Prompt the user to select multiple items from a list.

        Uses the questionary checkbox UI. Returns a list of selected values.
        """
        if not choices:
            return []

        prompt = self._q_try(
            questionary.checkbox,
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓, space, a (all), i (invert), enter",
            pointer="❯",
            checked_icon="▣",
            unchecked_icon="▢",
        )
        picked = prompt.ask()
        return list(picked or [])

    def tables_table(self, tables: Iterable[str], title: str = "Tables") -> None:
        """Render a list of table names."""
        t = Table(title=title, show_lines=False)
        t.add_column("Table", style="ok")

        for name in tables:
            t.add_row(name)

        console.print(t)

    def columns_table(self, rows: Iterable[Any], title: str = "Columns") -> None:
        """
        Render the column mapping of one table.

        Expects objects with:
          - `.column`, `.kind`, `.cql_type`, `.field`
          - `.go_type` (None when the CQL type has no mapping)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Column", style="ok")
        t.add_column("Kind", style="meta")
        t.add_column("CQL type")
        t.add_column("Field")
        t.add_column("Go type")

        for r in rows:
            go_type = getattr(r, "go_type", None)
            t.add_row(
                str(r.column),
                str(getattr(r, "kind", "") or ""),
                str(r.cql_type),
                str(r.field),
                go_type if go_type else "[err]unmapped[/err]",
            )

        console.print(t)

    def generation_results_table(
        self, results: Iterable[Any], title: str = "Generation results"
    ) -> None:
        """
        Render per-table generation results.

        Expects objects with:
          - `.table`
          - `.record` (None when skipped, else has `.name` and `.fields`)
          - optional `.error_type` and `.error`
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Table", style="ok")
        t.add_column("Struct")
        t.add_column("Fields", justify="right")
        t.add_column("Status")
        t.add_column("Reason", style="err")

        for r in results:
            record = getattr(r, "record", None)
            if record is not None:
                t.add_row(
                    str(r.table),
                    record.name,
                    str(len(record.fields)),
                    "[ok]generated[/ok]",
                    "",
                )
                continue
            error_type = getattr(r, "error_type", None) or ""
            error = str(getattr(r, "error", "") or "")
            reason = f"{error_type}: {error}" if error_type else error
            t.add_row(str(r.table), "", "", "[warn]skipped[/warn]", reason)

        console.print(t)


out = Out()
