"""
Filesystem blob storage: one file per key under a root directory
"""
import logging
from pathlib import Path
from typing import Iterable
from urllib.parse import quote

from lifesync.domain.errors import StorageError
from lifesync.infrastructure.storage.base import BlobStorage, validate_key

logger = logging.getLogger(__name__)


class LocalBlobStorage(BlobStorage):
    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        return self.root / validate_key(key)

    def upload(self, key: str, data: bytes) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Upload of {key} failed: {exc}") from exc
        logger.debug("Stored %d bytes at %s", len(data), key)

    def remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            path = self._path(key)
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise StorageError(f"Removal of {key} failed: {exc}") from exc

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{quote(validate_key(key))}"

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()
