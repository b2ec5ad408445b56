"""Tests for FileStorage - durable JSON file slots."""

import json

import pytest

from clients.file_storage import FileStorage, FileStorageError
from clients.storage import KeyValueStorage


@pytest.fixture
def path(tmp_path):
    return tmp_path / "nested" / "storage.json"


class TestBasicOperations:
    """Get/set/delete operations."""

    def test_implements_protocol(self, path):
        assert isinstance(FileStorage(path), KeyValueStorage)

    def test_creates_parent_directory(self, path):
        FileStorage(path)

        assert path.parent.is_dir()

    def test_missing_file_reads_empty(self, path):
        storage = FileStorage(path)

        assert storage.get("key") is None
        assert storage.exists("key") is False

    def test_set_and_get(self, path):
        storage = FileStorage(path)
        storage.set("key", "value")

        assert storage.get("key") == "value"

    def test_persists_across_instances(self, path):
        FileStorage(path).set("key", "value")

        assert FileStorage(path).get("key") == "value"

    def test_file_is_json_object(self, path):
        FileStorage(path).set("app_users", "[]")

        assert json.loads(path.read_text(encoding="utf-8")) == {"app_users": "[]"}

    def test_delete(self, path):
        storage = FileStorage(path)
        storage.set("key", "value")

        assert storage.delete("key") is True
        assert storage.delete("key") is False
        assert storage.get("key") is None

    def test_no_temp_files_left(self, path):
        storage = FileStorage(path)
        storage.set("a", "1")
        storage.set("b", "2")

        assert [p.name for p in path.parent.iterdir()] == ["storage.json"]


class TestCorruptFile:
    """Whole-file corruption fails fast."""

    def test_invalid_json(self, path):
        storage = FileStorage(path)
        path.write_text("{oops", encoding="utf-8")

        with pytest.raises(FileStorageError):
            storage.get("key")

    def test_non_string_values(self, path):
        storage = FileStorage(path)
        path.write_text('{"key": 1}', encoding="utf-8")

        with pytest.raises(FileStorageError):
            storage.get("key")
