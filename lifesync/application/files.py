"""
File attachments: metadata rows in the database, bytes in blob storage.

Upload writes the blob first and removes it again if the row cannot be
inserted. Delete removes the blob first; when storage fails the row stays
live so the metadata never points at nothing.
"""
import logging
import time
from typing import List, Optional

from sqlalchemy.orm import Session

from lifesync.application.base import SoftDeleteService
from lifesync.domain.enums import RelatedType
from lifesync.domain.errors import LifeSyncError, ValidationError
from lifesync.infrastructure.db.models import FileModel
from lifesync.infrastructure.storage.base import BlobStorage

logger = logging.getLogger(__name__)


class FileValidationError(ValidationError):
    pass


def storage_key(path: str, name: str, timestamp_ms: Optional[int] = None) -> str:
    """Key layout: {path}/{timestamp_ms}-{name}"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{path.strip('/')}/{timestamp_ms}-{name}"


class FileService(SoftDeleteService[FileModel]):
    model = FileModel
    validation_error = FileValidationError
    required_fields = ("owner_id", "name", "storage_path")
    enum_fields = {"related_type": RelatedType}
    order_by = (FileModel.created_at.desc(),)

    def __init__(self, db: Session, storage: BlobStorage):
        super().__init__(db)
        self.storage = storage

    def upload(self, data: bytes, name: str, path: str, owner_id: str, **metadata) -> FileModel:
        """
        Store data and record its metadata.

        Extra keyword arguments (mime_type, note_id, related_type, related_id)
        are written to the row. size defaults to len(data).
        """
        if not name or "/" in name:
            raise FileValidationError(f"Invalid file name: {name!r}")
        key = storage_key(path, name)
        metadata.setdefault("size", len(data))

        self.storage.upload(key, data)
        try:
            return self.create(owner_id=owner_id, name=name, storage_path=key, **metadata)
        except LifeSyncError:
            logger.warning("Insert of file row for %s failed, removing blob", key)
            self.storage.remove([key])
            raise

    def list(self, owner_id: Optional[str] = None, **filters) -> List[FileModel]:
        return super().list(owner_id=owner_id, **filters)

    def list_by_note(self, note_id: str) -> List[FileModel]:
        return self.list(note_id=note_id)

    def list_by_related(self, related_type, related_id: str) -> List[FileModel]:
        return self.list(related_type=related_type, related_id=related_id)

    def delete(self, file_id: str) -> None:
        """Remove the blob, then soft-delete the row. Unknown ids are a no-op."""
        row = self.get_by_id(file_id)
        if row is None:
            return
        # StorageError propagates; the row is left untouched
        self.storage.remove([row.storage_path])
        self.soft_delete(file_id)

    def get_url(self, storage_path: str) -> str:
        return self.storage.public_url(storage_path)
