"""CLI application for generating Go structs from ScyllaDB/Cassandra schemas."""

import typer

from structgen.cli.commands.catalog import catalog_app
from structgen.cli.commands.generate import generate
from structgen.cli.common.context import CliState, build_settings
from structgen.cli.common.exits import exit_from_exc
from structgen.cli.common.options import (
    ConsistencyOpt,
    HostOpt,
    LogLevelOpt,
    PasswordOpt,
    PortOpt,
    UsernameOpt,
)
from structgen.utils.logging import configure_logging

app = typer.Typer(
    help="structgen - generate Go structs from ScyllaDB/Cassandra schemas",
    no_args_is_help=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    host: str | None = HostOpt,
    port: int | None = PortOpt,
    username: str | None = UsernameOpt,
    password: str | None = PasswordOpt,
    consistency: str | None = ConsistencyOpt,
    log_level: str | None = LogLevelOpt,
):
    """Resolve settings and configure logging."""
    settings = build_settings(
        host=host,
        port=port,
        username=username,
        password=password,
        consistency=consistency,
        log_level=log_level,
    )
    try:
        configure_logging(settings.log_level)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=2)
    ctx.obj = CliState(settings=settings)


app.command("generate")(generate)
app.add_typer(catalog_app, name="catalog", help="Inspect keyspace tables and columns.")


if __name__ == "__main__":
    app()
