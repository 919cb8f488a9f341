# portal/core/token_storage.py
"""
Token persistence backends for the Session Store.

Backends:
  - MemoryTokenStorage: process-local dict (tests, ephemeral runs)
  - FileTokenStorage: small JSON document on disk (default)

Both are wrapped in FaultTolerantStorage before the Session Store sees
them: every read/write/delete runs inside a scoped acquisition that
catches the failure, logs it, and degrades to "not found". Persistence is
best-effort and never fatal to session logic.
"""

import json
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from portal.core.errors import StorageError

logger = logging.getLogger(__name__)


class TokenStorage(ABC):
    """Key/value slot contract: get(key) -> value | None, set, remove."""

    @abstractmethod
    def get_item(self, key: str) -> str | None: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...


class MemoryTokenStorage(TokenStorage):
    def __init__(self):
        self.items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileTokenStorage(TokenStorage):
    """
    Store items in a single JSON object on disk.

    Example file (SESSION_STORAGE_PATH=.portal/session.json):

        {"portal-auth-token": "{\"subject_id\": ...}"}

    Raises:
        StorageError: on any I/O or decoding failure.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self.path}")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class FaultTolerantStorage(TokenStorage):
    """
    Exception-safe wrapper around another TokenStorage.

    Reads that fail return None; writes and deletes that fail are
    dropped. Every failure is logged.
    """

    def __init__(self, backend: TokenStorage):
        self.backend = backend

    @contextmanager
    def _acquire(self, operation: str, key: str) -> Iterator[TokenStorage]:
        try:
            yield self.backend
        except Exception as exc:
            # Backends raise StorageError; anything else is treated the same.
            logger.error("Token storage %s failed for %r: %s", operation, key, exc)

    def get_item(self, key: str) -> str | None:
        value = None
        with self._acquire("read", key) as backend:
            value = backend.get_item(key)
        return value

    def set_item(self, key: str, value: str) -> None:
        with self._acquire("write", key) as backend:
            backend.set_item(key, value)

    def remove_item(self, key: str) -> None:
        with self._acquire("delete", key) as backend:
            backend.remove_item(key)
