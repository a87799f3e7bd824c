"""Common CLI options for the CLI.

Options default to None so that unset values fall back to Settings
(``STRUCTGEN_*`` environment variables or ``.env``).
"""

import typer

HostOpt = typer.Option(None, "--host", help="ScyllaDB/Cassandra contact point")

PortOpt = typer.Option(None, "--port", min=1, max=65535, help="Native protocol port")

UsernameOpt = typer.Option(None, "--username", "-u", help="Catalog username")

PasswordOpt = typer.Option(None, "--password", help="Catalog password")

ConsistencyOpt = typer.Option(
    None,
    "--consistency",
    help="Consistency level for catalog queries (e.g. QUORUM, ONE)",
)

LogLevelOpt = typer.Option(
    None,
    "--log-level",
    help="Log level (DEBUG, INFO, WARNING, ERROR)",
)

KeyspaceOpt = typer.Option(None, "--keyspace", "-k", help="Keyspace name (required)")

NameOpt = typer.Option(None, "--name", help="Regex filter on table names")

OutputDirOpt = typer.Option(
    None,
    "--output-dir",
    "-o",
    help="Output directory (default: ./outputs)",
)

PackageOpt = typer.Option(None, "--package", help="Go package name (default: main)")

FileNameOpt = typer.Option(
    None, "--file-name", help="Generated file name (default: main.go)"
)

TagOpt = typer.Option(
    [],
    "--tag",
    help="Struct tag key carrying the column name (default: json). This is reusable.",
    show_default=False,
)

SelectOpt = typer.Option(
    False,
    "--select",
    help="Pick tables interactively instead of generating all matched tables",
)

ParallelOpt = typer.Option(
    None,
    "--parallel",
    "-n",
    min=1,
    help="Number of tables to fetch and assemble in parallel",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Print the generated source, but don't write anything",
)

StrictOpt = typer.Option(
    False,
    "--strict",
    help="Exit with code 1 when any table was skipped",
)
