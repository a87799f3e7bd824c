"""Go source rendering for record definitions.

The emitter is a pure function of its inputs: the same records, header and
tag keys always produce byte-identical text. Writing the text is the sink's
job.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from structgen.core.models import RecordDefinition
from structgen.core.types import (
    ListType,
    MapType,
    ScalarKind,
    ScalarType,
    SetType,
    TypeDescriptor,
    walk,
)

GOCQL_IMPORT = "github.com/gocql/gocql"
INF_IMPORT = "gopkg.in/inf.v0"
TIME_IMPORT = "time"

# Go type and required import path for each scalar kind.
GO_SCALARS: dict[ScalarKind, tuple[str, str | None]] = {
    ScalarKind.BOOLEAN: ("bool", None),
    ScalarKind.TEXT: ("string", None),
    ScalarKind.INT32: ("int32", None),
    ScalarKind.INT64: ("int64", None),
    ScalarKind.INT8: ("int8", None),
    ScalarKind.INT16: ("int16", None),
    ScalarKind.FLOAT32: ("float32", None),
    ScalarKind.FLOAT64: ("float64", None),
    ScalarKind.DECIMAL: ("*inf.Dec", INF_IMPORT),
    ScalarKind.TIMESTAMP: ("time.Time", TIME_IMPORT),
    ScalarKind.DATE: ("time.Time", TIME_IMPORT),
    ScalarKind.TIME: ("time.Duration", TIME_IMPORT),
    ScalarKind.BLOB: ("[]byte", None),
    ScalarKind.UUID: ("gocql.UUID", GOCQL_IMPORT),
}

GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer",
        "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
        "interface", "map", "package", "range", "return", "select", "struct",
        "switch", "type", "var",
    }
)

_PACKAGE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TAG_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")


@dataclass(frozen=True)
class UnitHeader:
    """Compilation-unit header: package clause and generated-code notice.

    Attributes:
        package: Go package name of the emitted file.
        source: Optional description of where the records came from,
                e.g. ``keyspace "shop"``.
    """

    package: str = "main"
    source: str | None = None

    def __post_init__(self) -> None:
        if not _PACKAGE_RE.match(self.package) or self.package in GO_KEYWORDS:
            raise ValueError(f"Invalid Go package name: {self.package!r}")

    def render(self, imports: Iterable[str] = ()) -> str:
        """Render the notice, package clause and import block."""
        origin = f" from {self.source}" if self.source else ""
        lines = [
            f"// Code generated by structgen{origin}. DO NOT EDIT.",
            "",
            f"package {self.package}",
        ]

        paths = sorted(set(imports))
        stdlib = [p for p in paths if "." not in p.split("/", 1)[0]]
        external = [p for p in paths if p not in stdlib]
        groups = [g for g in (stdlib, external) if g]
        if groups:
            lines.append("")
            lines.append("import (")
            for i, group in enumerate(groups):
                if i:
                    lines.append("")
                lines.extend(f'\t"{path}"' for path in group)
            lines.append(")")

        return "\n".join(lines)


def go_type(descriptor: TypeDescriptor, *, map_key: bool = False) -> str:
    """
    Render a type descriptor as a Go type expression.

    Lists and sets both render as slices, which is what gocql unmarshals
    them into. Go slices cannot be map keys, so a blob map key renders as
    string and a collection map key raises ValueError.
    """
    if isinstance(descriptor, ScalarType):
        if map_key and descriptor.kind is ScalarKind.BLOB:
            return "string"
        return GO_SCALARS[descriptor.kind][0]
    if isinstance(descriptor, (ListType, SetType)):
        return f"[]{go_type(descriptor.element)}"
    if isinstance(descriptor, MapType):
        if not isinstance(descriptor.key, ScalarType):
            raise ValueError(f"Go map keys cannot be collections: {descriptor.cql}")
        key = go_type(descriptor.key, map_key=True)
        return f"map[{key}]{go_type(descriptor.value)}"
    raise TypeError(f"Unsupported type descriptor: {descriptor!r}")


def go_imports(records: Iterable[RecordDefinition]) -> list[str]:
    """Return the sorted import paths needed by the fields of ``records``."""
    paths: set[str] = set()
    for record in records:
        for field in record.fields:
            for node in walk(field.type):
                if isinstance(node, ScalarType):
                    path = GO_SCALARS[node.kind][1]
                    if path:
                        paths.add(path)
    return sorted(paths)


def validate_tag_keys(tag_keys: Sequence[str]) -> None:
    """Raise ValueError unless ``tag_keys`` holds at least one valid tag key."""
    if not tag_keys:
        raise ValueError("At least one struct tag key is required.")
    for key in tag_keys:
        if not _TAG_KEY_RE.match(key):
            raise ValueError(f"Invalid struct tag key: {key!r}")


def render_tag(column: str, tag_keys: Sequence[str]) -> str:
    """Render the struct tag literal carrying the original column name."""
    value = column.replace("\\", "\\\\").replace('"', '\\"')
    tag = " ".join(f'{key}:"{value}"' for key in tag_keys)
    if "`" in tag or "\n" in tag:
        # Raw strings cannot hold a backquote; fall back to a quoted literal.
        return json.dumps(tag, ensure_ascii=False)
    return f"`{tag}`"


def render_record(record: RecordDefinition, tag_keys: Sequence[str] = ("json",)) -> str:
    """Render one record as a Go struct declaration, aligned like gofmt."""
    rows = [
        (f.identifier, go_type(f.type), render_tag(f.serialized_tag, tag_keys))
        for f in record.fields
    ]
    name_width = max((len(name) for name, _, _ in rows), default=0)
    type_width = max((len(type_) for _, type_, _ in rows), default=0)

    lines = [f"type {record.name} struct {{"]
    for name, type_, tag in rows:
        lines.append(f"\t{name.ljust(name_width)} {type_.ljust(type_width)} {tag}")
    lines.append("}")
    return "\n".join(lines)


def emit(
    records: Sequence[RecordDefinition],
    header: UnitHeader | None = None,
    *,
    tag_keys: Sequence[str] = ("json",),
) -> str:
    """
    Serialize records into one Go compilation unit.

    Args:
        records: Records in the order they should appear in the file.
        header: Package clause and notice; defaults to ``package main``.
        tag_keys: Struct tag keys that carry the column name, e.g.
                  ``("json", "cql")``.

    Returns:
        The complete source text, ending with a newline.

    Raises:
        ValueError: If no tag key is given or a tag key is malformed.
    """
    validate_tag_keys(tag_keys)
    header = header or UnitHeader()
    parts = [header.render(go_imports(records))]
    parts.extend(render_record(record, tag_keys) for record in records)
    return "\n\n".join(parts) + "\n"
