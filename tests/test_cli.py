import logging
from types import SimpleNamespace

import click
import pytest
from typer.testing import CliRunner

import structgen.cli.commands.catalog as catalog_cmd
import structgen.cli.commands.generate as generate_cmd
import structgen.cli.common.context as context_mod
from structgen.cli.cli import app
from structgen.core.errors import CatalogError
from structgen.core.models import ColumnDefinition
from structgen.core.settings import Settings

runner = CliRunner()


class _Catalog:
    def __init__(self, tables, *, keyspaces=("shop",), list_error=None):
        self.tables = tables
        self.keyspaces = set(keyspaces)
        self.list_error = list_error

    def keyspace_exists(self, keyspace):
        return keyspace in self.keyspaces

    def list_tables(self, keyspace):
        if self.list_error is not None:
            raise self.list_error
        return list(self.tables)

    def list_columns(self, keyspace, table):
        return [
            ColumnDefinition(name=n, raw_type=t, kind=k, position=p)
            for n, t, k, p in self.tables.get(table, [])
        ]

    def close(self):
        pass


SHOP = {
    "users": [
        ("id", "uuid", "partition_key", 0),
        ("name", "text", "regular", -1),
    ],
    "orders": [
        ("id", "uuid", "partition_key", 0),
        ("items", "frozen<list<text>>", "regular", -1),
    ],
}


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def catalog(monkeypatch):
    fake = _Catalog(SHOP)

    def _open(ctx, settings):
        return SimpleNamespace(adapter=fake)

    monkeypatch.setattr(generate_cmd, "open_catalog", _open)
    monkeypatch.setattr(catalog_cmd, "open_catalog", _open)
    return fake


def test_generate_requires_keyspace(catalog):
    result = runner.invoke(app, ["generate"])

    assert result.exit_code == 2
    assert "Missing keyspace" in result.output


def test_generate_writes_generated_tables_and_reports_skipped(catalog, tmp_path):
    result = runner.invoke(app, ["generate", "-k", "shop", "-o", str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    assert "Skipped 1 table(s)." in result.output
    assert "orders" in result.output

    text = (tmp_path / "out" / "shop" / "main.go").read_text(encoding="utf-8")
    assert text.startswith('// Code generated by structgen from keyspace "shop".')
    assert "type Users struct {" in text
    assert "Orders" not in text


def test_generate_strict_fails_when_a_table_is_skipped(catalog, tmp_path):
    result = runner.invoke(
        app, ["generate", "-k", "shop", "-o", str(tmp_path), "--strict"]
    )

    assert result.exit_code == 1
    assert (tmp_path / "shop" / "main.go").exists()


def test_generate_dry_run_prints_source_without_writing(catalog, tmp_path):
    result = runner.invoke(
        app,
        ["generate", "-k", "shop", "-o", str(tmp_path), "--dry-run", "--package", "models"],
    )

    assert result.exit_code == 0, result.output
    assert "package models" in result.output
    assert "type Users struct {" in result.output
    assert not (tmp_path / "shop").exists()


def test_generate_uses_keyspace_and_output_from_environment(catalog, tmp_path, monkeypatch):
    monkeypatch.setenv("STRUCTGEN_KEYSPACE", "shop")
    monkeypatch.setenv("STRUCTGEN_OUTPUT_DIR", str(tmp_path / "env"))
    monkeypatch.setenv("STRUCTGEN_FILE_NAME", "models.go")

    result = runner.invoke(app, ["generate", "--name", "^users$", "--tag", "json", "--tag", "cql"])

    assert result.exit_code == 0, result.output
    text = (tmp_path / "env" / "shop" / "models.go").read_text(encoding="utf-8")
    assert 'json:"name" cql:"name"' in text


def test_generate_fails_when_no_table_can_be_generated(catalog, tmp_path):
    result = runner.invoke(
        app, ["generate", "-k", "shop", "-o", str(tmp_path), "--name", "orders"]
    )

    assert result.exit_code == 1
    assert "No table could be generated" in result.output
    assert not (tmp_path / "shop").exists()


def test_generate_fails_for_unknown_keyspace(catalog, tmp_path):
    result = runner.invoke(app, ["generate", "-k", "nope", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_generate_fails_when_table_list_cannot_be_read(catalog, tmp_path):
    catalog.list_error = CatalogError("catalog timed out")

    result = runner.invoke(app, ["generate", "-k", "shop", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "catalog timed out" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["--package", "my-pkg"],
        ["--tag", "bad key"],
        ["--name", "("],
        ["--file-name", "a/b.go"],
    ],
)
def test_generate_rejects_invalid_input(catalog, tmp_path, args):
    result = runner.invoke(app, ["generate", "-k", "shop", "-o", str(tmp_path), *args])

    assert result.exit_code == 2
    assert not (tmp_path / "shop").exists()


def test_generate_reports_connection_failure(monkeypatch, tmp_path):
    def _refuse(*args, **kwargs):
        raise CatalogError("Could not connect to localhost:9042: refused")

    monkeypatch.setattr(context_mod, "get_session", _refuse)

    result = runner.invoke(app, ["generate", "-k", "shop", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "Could not connect" in result.output


def test_invalid_log_level_is_an_input_error(catalog):
    result = runner.invoke(app, ["--log-level", "loud", "generate", "-k", "shop"])

    assert result.exit_code == 2
    assert "Unknown log level" in result.output


def test_catalog_tables_lists_sorted_names(catalog):
    result = runner.invoke(app, ["catalog", "tables", "-k", "shop"])

    assert result.exit_code == 0, result.output
    assert result.output.index("orders") < result.output.index("users")


def test_catalog_describe_prints_struct(catalog):
    result = runner.invoke(app, ["catalog", "describe", "users", "-k", "shop"])

    assert result.exit_code == 0, result.output
    assert "gocql.UUID" in result.output
    assert "type Users struct {" in result.output


def test_catalog_describe_flags_table_that_would_be_skipped(catalog):
    result = runner.invoke(app, ["catalog", "describe", "orders", "-k", "shop"])

    assert result.exit_code == 1
    assert "unmapped" in result.output
    assert "would be skipped" in result.output


def test_catalog_describe_unknown_table(catalog):
    result = runner.invoke(app, ["catalog", "describe", "ghost", "-k", "shop"])

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_catalog_map_columns_marks_unmapped_types():
    schema = catalog_cmd.TableSchema(
        name="t",
        columns=(
            ColumnDefinition("user_id", "map<text, int>", "regular"),
            ColumnDefinition("pos", "tuple<int, int>", "regular"),
            ColumnDefinition("by_tags", "map<set<text>, int>", "regular"),
        ),
    )

    rows = catalog_cmd.map_columns(schema)

    assert [(r.field, r.go_type) for r in rows] == [
        ("UserId", "map[string]int32"),
        ("Pos", None),
        ("ByTags", None),
    ]


def test_open_catalog_closes_session_when_command_ends(monkeypatch):
    shutdowns = []
    session = SimpleNamespace(cluster=SimpleNamespace(shutdown=lambda: shutdowns.append(1)))
    monkeypatch.setattr(context_mod, "get_session", lambda *args, **kwargs: session)

    ctx = click.Context(click.Command("generate"))
    with ctx:
        appctx = context_mod.open_catalog(ctx, Settings())
        assert appctx.adapter.session is session
        assert shutdowns == []

    assert shutdowns == [1]
