#!filepath: tests/utils/test_filesystem.py
from ccperf.utils.filesystem import FileSystem


def test_ensure_dir(tmp_path):
    new_dir = tmp_path / "new_folder" / "nested"
    assert not new_dir.exists()

    FileSystem.ensure_dir(new_dir)
    assert new_dir.is_dir()


def test_safe_write(tmp_path):
    file_path = tmp_path / "out" / "results.json"

    data = b"{}"
    FileSystem.safe_write(file_path, data)

    assert file_path.read_bytes() == data
    assert not (tmp_path / "out" / "results.json.tmp").exists()


def test_safe_write_replaces(tmp_path):
    file_path = tmp_path / "results.json"
    file_path.write_bytes(b"old")
    FileSystem.safe_write(file_path, b"new")
    assert file_path.read_bytes() == b"new"
