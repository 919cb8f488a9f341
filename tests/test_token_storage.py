import json

import pytest

from portal.core.errors import StorageError
from portal.core.token_storage import (
    FaultTolerantStorage,
    FileTokenStorage,
    MemoryTokenStorage,
    TokenStorage,
)


class ExplodingStorage(TokenStorage):
    def get_item(self, key):
        raise StorageError("read denied")

    def set_item(self, key, value):
        raise StorageError("write denied")

    def remove_item(self, key):
        raise OSError("disk gone")


class TestFileTokenStorage:
    def test_set_get_remove(self, tmp_path):
        storage = FileTokenStorage(tmp_path / "nested" / "session.json")

        assert storage.get_item("token") is None

        storage.set_item("token", "abc")
        storage.set_item("other", "xyz")
        assert storage.get_item("token") == "abc"

        storage.remove_item("token")
        assert storage.get_item("token") is None
        assert json.loads((tmp_path / "nested" / "session.json").read_text()) == {"other": "xyz"}

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")

        with pytest.raises(StorageError):
            FileTokenStorage(path).get_item("token")

    def test_non_object_content_raises_storage_error(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("[1, 2]")

        with pytest.raises(StorageError):
            FileTokenStorage(path).get_item("token")


class TestFaultTolerantStorage:
    def test_passes_through_to_backend(self):
        backend = MemoryTokenStorage()
        storage = FaultTolerantStorage(backend)

        storage.set_item("k", "v")
        assert backend.items == {"k": "v"}
        assert storage.get_item("k") == "v"

        storage.remove_item("k")
        assert backend.items == {}

    def test_failures_degrade_to_not_found(self):
        storage = FaultTolerantStorage(ExplodingStorage())

        assert storage.get_item("k") is None
        storage.set_item("k", "v")
        storage.remove_item("k")

    def test_corrupt_file_reads_as_missing(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("garbage")

        assert FaultTolerantStorage(FileTokenStorage(path)).get_item("k") is None
