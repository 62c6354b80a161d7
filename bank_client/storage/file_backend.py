"""General backend: JSON document on local disk.

Always available but only as private as the user's home directory. The whole
document is rewritten atomically (temp file + rename) on every change.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path

from bank_client.storage.protocol import BackendError
from bank_client.utils.logger import get_logger

logger = get_logger("bank_client.storage.file")


class FileBackend:
    """Credential cell stored as {key: value} in a JSON file."""

    name = "general"

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the document. Missing file is empty; unreadable or corrupt file raises."""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise BackendError(self.name, f"cannot read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise BackendError(self.name, f"unexpected document type in {self._path}")
        return data

    def _load_for_update(self) -> dict[str, str]:
        try:
            return self._load()
        except BackendError as e:
            logger.warning("file_backend.replacing_corrupt_document", path=str(self._path), error=str(e))
            return {}

    def _save(self, data: dict[str, str]) -> None:
        """Write the document atomically. Caller should hold _lock."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".credentials-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise BackendError(self.name, f"cannot write {self._path}: {e}") from e

    def _write_sync(self, key: str, value: str) -> None:
        data = self._load_for_update()
        data[key] = value
        self._save(data)

    def _delete_sync(self, key: str) -> None:
        try:
            data = self._load()
        except BackendError as e:
            # A corrupt document may still contain the credential bytes
            logger.warning("file_backend.discarding_corrupt_document", path=str(self._path), error=str(e))
            self._save({})
            return
        if key not in data:
            return
        del data[key]
        self._save(data)

    async def write(self, key: str, value: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write_sync, key, value)
        logger.debug("file_backend.write", path=str(self._path), key=key)

    async def read(self, key: str) -> str | None:
        async with self._lock:
            data = await asyncio.to_thread(self._load)
        value = data.get(key)
        logger.debug("file_backend.read", path=str(self._path), key=key, hit=value is not None)
        return value if isinstance(value, str) else None

    async def delete(self, key: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._delete_sync, key)
        logger.debug("file_backend.delete", path=str(self._path), key=key)
