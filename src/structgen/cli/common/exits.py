"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from structgen.cli.common.output import out


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """
    Print an error message and exit with a given code, chaining ``exc``.
    """
    out.error(message)
    raise typer.Exit(code) from exc
