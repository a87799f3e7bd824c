"""Connection helpers for ScyllaDB/Cassandra catalogs.

This module centralizes creation of a cassandra-driver Session and turns
driver connection failures into CatalogError with a readable message, so
frontends never have to know about driver exception types.
"""

from __future__ import annotations

import logging

from cassandra import ConsistencyLevel, DriverException
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, NoHostAvailable, Session

from structgen.core.errors import CatalogError

log = logging.getLogger(__name__)


def consistency_level(name: str) -> int:
    """Resolve a consistency level name such as ``"quorum"`` to its driver value."""
    try:
        return ConsistencyLevel.name_to_value[name.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown consistency level: {name!r}") from exc


def _format_connect_error(exc: Exception, host: str, port: int) -> str:
    """Return a user-friendly connection error message."""
    errors = getattr(exc, "errors", None)
    if isinstance(exc, NoHostAvailable) and errors:
        details = "; ".join(f"{addr}: {err}" for addr, err in errors.items())
        return f"Could not connect to {host}:{port} ({details})"
    return f"Could not connect to {host}:{port}: {exc}"


def get_session(
    host: str,
    port: int = 9042,
    *,
    username: str | None = None,
    password: str | None = None,
    consistency: str = "QUORUM",
    connect_timeout: float = 10.0,
) -> Session:
    """
    Create and return a connected cassandra-driver Session.

    Credentials are only sent when a username is given. The session's
    default consistency level is set from ``consistency``.

    Raises:
        ValueError: If the consistency level name is unknown.
        CatalogError: If no host could be reached.
    """
    level = consistency_level(consistency)
    auth = (
        PlainTextAuthProvider(username=username, password=password or "")
        if username
        else None
    )
    cluster = Cluster(
        [host],
        port=port,
        auth_provider=auth,
        connect_timeout=connect_timeout,
    )

    log.debug("Connecting to %s:%s", host, port)
    try:
        session = cluster.connect()
    except (NoHostAvailable, DriverException, OSError) as exc:
        cluster.shutdown()
        raise CatalogError(_format_connect_error(exc, host, port)) from exc

    session.default_consistency_level = level
    return session
