import pytest

from structgen.core.errors import SinkError
from structgen.core.sink import DirectorySink


def test_directory_sink_writes_unit_under_its_own_directory(tmp_path):
    sink = DirectorySink(tmp_path / "outputs")

    path = sink.write("shop", "package main\n")

    assert path == tmp_path / "outputs" / "shop" / "main.go"
    assert path.read_text(encoding="utf-8") == "package main\n"


def test_directory_sink_replaces_longer_previous_content(tmp_path):
    sink = DirectorySink(tmp_path, file_name="models.go")
    sink.write("shop", "x" * 100)

    path = sink.write("shop", "short\n")

    assert path.name == "models.go"
    assert path.read_text(encoding="utf-8") == "short\n"


@pytest.mark.parametrize("unit", ["", ".", "..", "a/b", "..\\x"])
def test_directory_sink_rejects_unit_names_outside_root(tmp_path, unit):
    with pytest.raises(ValueError, match="unit name"):
        DirectorySink(tmp_path).write(unit, "")


def test_directory_sink_rejects_nested_file_name(tmp_path):
    with pytest.raises(ValueError, match="file name"):
        DirectorySink(tmp_path, file_name="sub/main.go")


def test_directory_sink_wraps_os_errors(tmp_path):
    blocker = tmp_path / "outputs"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(SinkError, match="Could not write"):
        DirectorySink(blocker).write("shop", "package main\n")
