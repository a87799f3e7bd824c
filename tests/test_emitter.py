import pytest

from structgen.core.emitter import (
    GOCQL_IMPORT,
    INF_IMPORT,
    UnitHeader,
    emit,
    go_imports,
    go_type,
    render_record,
    render_tag,
)
from structgen.core.models import FieldDefinition, RecordDefinition
from structgen.core.types import parse_type


def _record(name, *fields):
    return RecordDefinition(
        name=name,
        fields=tuple(
            FieldDefinition(identifier=ident, type=parse_type(raw), serialized_tag=tag)
            for ident, raw, tag in fields
        ),
    )


USERS = _record(
    "Users",
    ("Id", "uuid", "id"),
    ("Name", "text", "name"),
    ("Tags", "set<text>", "tags"),
)


def test_emit_renders_complete_unit():
    assert emit([USERS]) == (
        "// Code generated by structgen. DO NOT EDIT.\n"
        "\n"
        "package main\n"
        "\n"
        "import (\n"
        '\t"github.com/gocql/gocql"\n'
        ")\n"
        "\n"
        "type Users struct {\n"
        '\tId   gocql.UUID `json:"id"`\n'
        '\tName string     `json:"name"`\n'
        '\tTags []string   `json:"tags"`\n'
        "}\n"
    )


def test_emit_is_deterministic():
    records = [USERS, _record("Orders", ("Total", "decimal", "total"))]

    assert emit(records) == emit(list(records))


def test_emit_without_records_has_no_import_block():
    text = emit([], UnitHeader(package="models", source='keyspace "shop"'))

    assert text == (
        '// Code generated by structgen from keyspace "shop". DO NOT EDIT.\n'
        "\n"
        "package models\n"
    )


def test_header_groups_stdlib_imports_before_external():
    header = UnitHeader().render([GOCQL_IMPORT, "time", INF_IMPORT, "time"])

    assert header.endswith(
        "import (\n"
        '\t"time"\n'
        "\n"
        '\t"github.com/gocql/gocql"\n'
        '\t"gopkg.in/inf.v0"\n'
        ")"
    )


def test_go_imports_only_lists_used_packages():
    plain = _record("Plain", ("Name", "text", "name"), ("Data", "blob", "data"))
    nested = _record("Nested", ("Seen", "map<text, list<timestamp>>", "seen"))

    assert go_imports([plain]) == []
    assert go_imports([plain, nested]) == ["time"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("int", "int32"),
        ("counter", "int64"),
        ("decimal", "*inf.Dec"),
        ("date", "time.Time"),
        ("time", "time.Duration"),
        ("blob", "[]byte"),
        ("timeuuid", "gocql.UUID"),
        ("list<text>", "[]string"),
        ("set<bigint>", "[]int64"),
        ("map<text, double>", "map[string]float64"),
        ("map<text, map<int, list<boolean>>>", "map[string]map[int32][]bool"),
        ("map<blob, blob>", "map[string][]byte"),
    ],
)
def test_go_type(raw, expected):
    assert go_type(parse_type(raw)) == expected


def test_render_record_aligns_columns():
    record = _record(
        "Metrics",
        ("A", "int", "a"),
        ("LongerName", "map<text, bigint>", "longer_name"),
    )

    lines = render_record(record).splitlines()

    assert lines[0] == "type Metrics struct {"
    assert lines[1] == '\tA          int32            `json:"a"`'
    assert lines[2] == '\tLongerName map[string]int64 `json:"longer_name"`'
    assert lines[-1] == "}"


def test_render_record_without_fields():
    assert render_record(RecordDefinition(name="Empty")) == "type Empty struct {\n}"


def test_render_tag_with_several_keys():
    assert render_tag("user_id", ["json", "cql"]) == '`json:"user_id" cql:"user_id"`'


def test_render_tag_escapes_quotes_and_backslashes():
    assert render_tag('a"b\\c', ["json"]) == '`json:"a\\"b\\\\c"`'


def test_render_tag_falls_back_to_quoted_literal_for_backquotes():
    assert render_tag("a`b", ["json"]) == '"json:\\"a`b\\""'


@pytest.mark.parametrize("package", ["", "1abc", "my-pkg", "type", "func"])
def test_unit_header_rejects_invalid_package(package):
    with pytest.raises(ValueError, match="package"):
        UnitHeader(package=package)


@pytest.mark.parametrize("tag_keys", [[], ["json", ""], ["bad key"], ['x"y']])
def test_emit_rejects_invalid_tag_keys(tag_keys):
    with pytest.raises(ValueError, match="tag key"):
        emit([USERS], tag_keys=tag_keys)


def test_go_type_rejects_collection_map_key():
    with pytest.raises(ValueError, match="map keys"):
        go_type(parse_type("map<list<int>, text>"))
