"""Shared file handling for the JSON document collections.

Each collection is one JSON file holding a list of documents. I/O and
decode failures surface as RepositoryError.

Writers hold the collection's lock file across load, compare and
persist, so version checks stay valid between processes. Files are
replaced atomically, so readers never see a half-written document.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from storefront.domain.exceptions import RepositoryError


class JsonCollection:

    def __init__(self, file_path: Path, lock_timeout: float = 10.0) -> None:
        self._file_path = file_path
        self._ensure_file()
        self._lock = FileLock(f"{file_path}.lock", timeout=lock_timeout)

    def load(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise RepositoryError(f"Could not read {self._file_path}: {exc}") from exc

    def persist(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            tmp_path.replace(self._file_path)
        except OSError as exc:
            raise RepositoryError(f"Could not write {self._file_path}: {exc}") from exc

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the collection lock for a read-modify-write cycle."""
        try:
            self._lock.acquire()
        except Timeout as exc:
            raise RepositoryError(
                f"Timed out waiting for lock on {self._file_path}"
            ) from exc
        try:
            yield
        finally:
            self._lock.release()

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
