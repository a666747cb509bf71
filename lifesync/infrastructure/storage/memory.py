"""
In-memory blob storage (session-only backend, tests)
"""
from typing import Dict, Iterable

from lifesync.infrastructure.storage.base import BlobStorage, validate_key


class InMemoryBlobStorage(BlobStorage):
    def __init__(self, base_url: str = "memory://files"):
        self.base_url = base_url.rstrip("/")
        self.objects: Dict[str, bytes] = {}

    def upload(self, key: str, data: bytes) -> None:
        self.objects[validate_key(key)] = bytes(data)

    def remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.objects.pop(validate_key(key), None)

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{validate_key(key)}"

    def exists(self, key: str) -> bool:
        return key in self.objects
