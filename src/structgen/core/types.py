"""CQL column type grammar and the type descriptors it resolves to.

Catalog type strings are parsed with a small tokenizer and a recursive-descent
parser:

    TYPE   := MAP | LIST | SET | SCALAR
    MAP    := "map" "<" TYPE "," TYPE ">"
    LIST   := "list" "<" TYPE ">"
    SET    := "set" "<" TYPE ">"
    SCALAR := one of SCALAR_TYPES

Each collection parses its own element types completely before looking for
the next "," or ">", so a comma inside a nested collection is never taken as
the separator of the enclosing map. Matching is case-insensitive and
whitespace between tokens is ignored.

There is no fallback type: anything outside the grammar (frozen collections,
tuples, user-defined types, malformed text) raises UnknownTypeError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from structgen.core.errors import UnknownTypeError


class ScalarKind(str, Enum):
    """The fixed set of scalar kinds a column can resolve to."""

    BOOLEAN = "boolean"
    TEXT = "text"
    INT32 = "int32"
    INT64 = "int64"
    INT8 = "int8"
    INT16 = "int16"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DECIMAL = "decimal"
    TIMESTAMP = "timestamp"
    DATE = "date"
    TIME = "time"
    BLOB = "blob"
    UUID = "uuid"


# CQL spelling accepted for each scalar kind, aliases included.
SCALAR_TYPES: dict[str, ScalarKind] = {
    "boolean": ScalarKind.BOOLEAN,
    "text": ScalarKind.TEXT,
    "varchar": ScalarKind.TEXT,
    "ascii": ScalarKind.TEXT,
    "int": ScalarKind.INT32,
    "bigint": ScalarKind.INT64,
    "counter": ScalarKind.INT64,
    "tinyint": ScalarKind.INT8,
    "smallint": ScalarKind.INT16,
    "float": ScalarKind.FLOAT32,
    "double": ScalarKind.FLOAT64,
    "decimal": ScalarKind.DECIMAL,
    "timestamp": ScalarKind.TIMESTAMP,
    "date": ScalarKind.DATE,
    "time": ScalarKind.TIME,
    "blob": ScalarKind.BLOB,
    "uuid": ScalarKind.UUID,
    "timeuuid": ScalarKind.UUID,
}

# Canonical CQL spelling used when rendering a descriptor back to text.
_CANONICAL_CQL: dict[ScalarKind, str] = {
    ScalarKind.BOOLEAN: "boolean",
    ScalarKind.TEXT: "text",
    ScalarKind.INT32: "int",
    ScalarKind.INT64: "bigint",
    ScalarKind.INT8: "tinyint",
    ScalarKind.INT16: "smallint",
    ScalarKind.FLOAT32: "float",
    ScalarKind.FLOAT64: "double",
    ScalarKind.DECIMAL: "decimal",
    ScalarKind.TIMESTAMP: "timestamp",
    ScalarKind.DATE: "date",
    ScalarKind.TIME: "time",
    ScalarKind.BLOB: "blob",
    ScalarKind.UUID: "uuid",
}


@dataclass(frozen=True)
class ScalarType:
    kind: ScalarKind

    @property
    def cql(self) -> str:
        return _CANONICAL_CQL[self.kind]


@dataclass(frozen=True)
class ListType:
    element: TypeDescriptor

    @property
    def cql(self) -> str:
        return f"list<{self.element.cql}>"


@dataclass(frozen=True)
class SetType:
    element: TypeDescriptor

    @property
    def cql(self) -> str:
        return f"set<{self.element.cql}>"


@dataclass(frozen=True)
class MapType:
    key: TypeDescriptor
    value: TypeDescriptor

    @property
    def cql(self) -> str:
        return f"map<{self.key.cql}, {self.value.cql}>"


TypeDescriptor = Union[ScalarType, ListType, SetType, MapType]

_COLLECTION_ARITY = {"list": 1, "set": 1, "map": 2}

_TOKEN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*|[<>,]|\S")


class _Parser:
    """Recursive-descent parser over the tokens of one type string."""

    def __init__(self, raw: str):
        self.raw = raw
        self.tokens: list[str] = _TOKEN_RE.findall(raw)
        self.pos = 0

    def parse(self) -> TypeDescriptor:
        descriptor = self._parse_type()
        if self.pos != len(self.tokens):
            raise self._error(self.tokens[self.pos])
        return descriptor

    def _error(self, token: str | None = None) -> UnknownTypeError:
        return UnknownTypeError(self.raw, token=token)

    def _peek(self) -> str | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise self._error()
        self.pos += 1
        return token

    def _expect(self, punct: str) -> None:
        token = self._next()
        if token != punct:
            raise self._error(token)

    def _parse_type(self) -> TypeDescriptor:
        token = self._next()
        name = token.lower()

        arity = _COLLECTION_ARITY.get(name)
        if arity is not None:
            self._expect("<")
            args = [self._parse_type()]
            while self._peek() == ",":
                self.pos += 1
                args.append(self._parse_type())
            self._expect(">")
            if len(args) != arity:
                raise self._error()
            if name == "map":
                return MapType(args[0], args[1])
            if name == "list":
                return ListType(args[0])
            return SetType(args[0])

        kind = SCALAR_TYPES.get(name)
        if kind is None:
            raise self._error(token)
        return ScalarType(kind)


def parse_type(raw: str) -> TypeDescriptor:
    """
    Parse a catalog column type into a fully resolved TypeDescriptor.

    Args:
        raw: CQL type string such as ``"map<text, list<int>>"``.

    Returns:
        The descriptor tree for the type.

    Raises:
        UnknownTypeError: If the text is not a well-formed type of the
                          supported grammar.
    """
    return _Parser(raw).parse()


def walk(descriptor: TypeDescriptor) -> Iterator[TypeDescriptor]:
    """Yield the descriptor and all nested descriptors, depth-first."""
    yield descriptor
    if isinstance(descriptor, (ListType, SetType)):
        yield from walk(descriptor.element)
    elif isinstance(descriptor, MapType):
        yield from walk(descriptor.key)
        yield from walk(descriptor.value)
