"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass

import typer
from pydantic import ValidationError

from structgen.cli.common.exits import die, exit_from_exc
from structgen.core.adapters.scylla import ScyllaCatalogAdapter
from structgen.core.errors import CatalogError
from structgen.core.session import get_session
from structgen.core.settings import Settings, get_settings


@dataclass
class CliState:
    """Settings resolved from environment and global CLI options."""

    settings: Settings


@dataclass
class CatalogAppContext:
    """Application context holding the catalog adapter for one command."""

    adapter: ScyllaCatalogAdapter


def build_settings(**overrides: object) -> Settings:
    """Return Settings with every non-None override applied.

    Exits with code 2 if the environment holds invalid values.
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        exit_from_exc(exc, message=f"Invalid STRUCTGEN_* configuration:\n{exc}", code=2)
    update = {k: v for k, v in overrides.items() if v is not None}
    return settings.model_copy(update=update)


def resolve_keyspace(keyspace: str | None, settings: Settings) -> str:
    """Return the keyspace from the option or settings, or exit with code 2."""
    resolved = (keyspace or settings.keyspace or "").strip()
    if not resolved:
        die(
            "Missing keyspace. Provide it via --keyspace or STRUCTGEN_KEYSPACE.",
            code=2,
        )
    return resolved


def build_catalog_context(settings: Settings) -> CatalogAppContext:
    """Connect to the catalog and return the application context.

    Args:
        settings: Resolved connection settings.

    Returns:
        CatalogAppContext: Context with an adapter over a connected session.
    """
    try:
        session = get_session(
            settings.host,
            settings.port,
            username=settings.username,
            password=settings.password,
            consistency=settings.consistency,
            connect_timeout=settings.connect_timeout,
        )
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=2)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)
    return CatalogAppContext(adapter=ScyllaCatalogAdapter(session))


def open_catalog(ctx: typer.Context, settings: Settings) -> CatalogAppContext:
    """Build the catalog context and close it when the command finishes."""
    appctx = build_catalog_context(settings)
    ctx.call_on_close(appctx.adapter.close)
    return appctx
