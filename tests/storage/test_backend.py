import pytest

from keyrotor.storage.backend import FileSystemBackend


@pytest.mark.unit
def test_write_then_read(tmp_path):
    backend = FileSystemBackend(tmp_path)
    backend.write_text("latest.json", "QUJD")
    assert backend.read_text("latest.json") == "QUJD"
    assert (tmp_path / "latest.json").read_text() == "QUJD"


@pytest.mark.unit
def test_read_missing_returns_none(tmp_path):
    assert FileSystemBackend(tmp_path).read_text("missing.json") is None


@pytest.mark.unit
def test_write_replaces_and_leaves_no_temp_file(tmp_path):
    backend = FileSystemBackend(tmp_path)
    backend.write_text("key_b.txt", "old")
    backend.write_text("key_b.txt", "new")
    assert backend.read_text("key_b.txt") == "new"
    assert backend.list_names() == ["key_b.txt"]


@pytest.mark.unit
def test_write_creates_root(tmp_path):
    backend = FileSystemBackend(tmp_path / "nested" / "root")
    backend.write_text("a.json", "x")
    assert (tmp_path / "nested" / "root" / "a.json").exists()


@pytest.mark.unit
def test_list_names_skips_directories(tmp_path):
    (tmp_path / "subdir").mkdir()
    (tmp_path / "b.json").write_text("b")
    (tmp_path / "a.json").write_text("a")
    assert FileSystemBackend(tmp_path).list_names() == ["a.json", "b.json"]


@pytest.mark.unit
def test_list_names_missing_root(tmp_path):
    assert FileSystemBackend(tmp_path / "nope").list_names() == []


@pytest.mark.unit
def test_delete(tmp_path):
    backend = FileSystemBackend(tmp_path)
    backend.write_text("a.json", "a")
    backend.delete("a.json")
    assert backend.read_text("a.json") is None
    with pytest.raises(FileNotFoundError):
        backend.delete("a.json")
