"""
Blob storage abstraction for uploaded files

Keys look like "{path}/{timestamp_ms}-{original name}". Every failure of an
implementation is raised as StorageError.
"""
from abc import ABC, abstractmethod
from typing import Iterable

from lifesync.domain.errors import StorageError


def validate_key(key: str) -> str:
    """Reject empty keys, absolute keys and keys escaping the bucket via '..'."""
    if not key or key.startswith("/") or "\\" in key:
        raise StorageError(f"Invalid storage key: {key!r}")
    if any(part in ("", ".", "..") for part in key.split("/")):
        raise StorageError(f"Invalid storage key: {key!r}")
    return key


class BlobStorage(ABC):
    """Object store for file contents"""

    @abstractmethod
    def upload(self, key: str, data: bytes) -> None:
        """Store data under key (overwrites)."""

    @abstractmethod
    def remove(self, keys: Iterable[str]) -> None:
        """Remove objects; missing keys are ignored."""

    @abstractmethod
    def public_url(self, key: str) -> str:
        """URL under which the object can be fetched."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass
