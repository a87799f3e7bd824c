"""Persistence of emitted compilation units."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from structgen.core.errors import SinkError

log = logging.getLogger(__name__)


class Sink(Protocol):
    """Interface for persisting one emitted compilation unit."""

    def write(self, unit_name: str, content: str) -> object:
        """Persist ``content`` under ``unit_name``."""
        ...


def _check_path_part(value: str, what: str) -> str:
    if not value or value in {".", ".."} or "/" in value or "\\" in value:
        raise ValueError(f"Invalid {what}: {value!r}")
    return value


class DirectorySink:
    """Writes each unit to ``<root>/<unit_name>/<file_name>``."""

    def __init__(self, root: Path | str, file_name: str = "main.go") -> None:
        self.root = Path(root)
        self.file_name = _check_path_part(file_name, "file name")

    def path_for(self, unit_name: str) -> Path:
        """Return the file path a unit is written to."""
        return self.root / _check_path_part(unit_name, "unit name") / self.file_name

    def write(self, unit_name: str, content: str) -> Path:
        """
        Write a unit, replacing any previous content.

        Raises:
            ValueError: If ``unit_name`` is not a single path component.
            SinkError: If the directory or file cannot be written.
        """
        path = self.path_for(unit_name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise SinkError(f"Could not write {path}: {exc}") from exc

        log.info("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))
        return path
