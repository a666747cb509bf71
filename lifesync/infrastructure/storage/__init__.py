"""
Blob storage factory
"""
import logging

from lifesync.config import Settings
from lifesync.infrastructure.storage.base import BlobStorage
from lifesync.infrastructure.storage.local import LocalBlobStorage
from lifesync.infrastructure.storage.memory import InMemoryBlobStorage

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> BlobStorage:
    """Filesystem storage for the database backend, in-memory for the session-only one."""
    if settings.DATA_BACKEND == "local":
        return InMemoryBlobStorage()
    logger.info("Using filesystem blob storage at %s", settings.STORAGE_ROOT)
    return LocalBlobStorage(settings.STORAGE_ROOT, settings.STORAGE_PUBLIC_URL)


__all__ = ["BlobStorage", "LocalBlobStorage", "InMemoryBlobStorage", "build_storage"]
