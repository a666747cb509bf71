"""
Tests for FileService: blob/row ordering on upload and delete
"""
import re

import pytest

from lifesync.application.files import FileService, FileValidationError, storage_key
from lifesync.domain.errors import StorageError
from lifesync.infrastructure.db.models import FileModel
from lifesync.infrastructure.storage.memory import InMemoryBlobStorage


class FailingRemoveStorage(InMemoryBlobStorage):
    def remove(self, keys):
        raise StorageError("bucket unavailable")


@pytest.fixture
def storage():
    return InMemoryBlobStorage()


@pytest.fixture
def service(db_session, storage):
    return FileService(db_session, storage)


class TestStorageKey:
    def test_layout(self):
        assert storage_key("user-1/notes", "plan.pdf", timestamp_ms=1700000000000) == "user-1/notes/1700000000000-plan.pdf"

    def test_strips_slashes(self):
        assert storage_key("/docs/", "a.txt", timestamp_ms=1) == "docs/1-a.txt"


class TestUpload:
    def test_blob_and_row(self, service, storage, sample_user_id):
        row = service.upload(b"%PDF-1.7", "plan.pdf", sample_user_id, sample_user_id, mime_type="application/pdf")

        assert re.fullmatch(rf"{sample_user_id}/\d+-plan\.pdf", row.storage_path)
        assert storage.objects[row.storage_path] == b"%PDF-1.7"
        assert row.size == 8
        assert row.mime_type == "application/pdf"

    def test_failed_insert_removes_blob(self, service, storage, sample_user_id):
        with pytest.raises(FileValidationError):
            service.upload(b"x", "a.txt", "docs", sample_user_id, related_type="calendar")
        assert storage.objects == {}

    def test_invalid_name(self, service, sample_user_id):
        with pytest.raises(FileValidationError):
            service.upload(b"x", "../a.txt", "docs", sample_user_id)

    def test_listing(self, service, sample_user_id, other_user_id):
        note_file = service.upload(b"1", "a.txt", "docs", sample_user_id, note_id="note-1")
        task_file = service.upload(b"2", "b.txt", "docs", sample_user_id, related_type="task", related_id="t1")
        service.upload(b"3", "c.txt", "docs", other_user_id)

        assert {f.id for f in service.list(sample_user_id)} == {note_file.id, task_file.id}
        assert [f.id for f in service.list_by_note("note-1")] == [note_file.id]
        assert [f.id for f in service.list_by_related("task", "t1")] == [task_file.id]


class TestDelete:
    def test_removes_blob_then_soft_deletes(self, service, storage, sample_user_id, db_session):
        row = service.upload(b"x", "a.txt", "docs", sample_user_id)
        path = row.storage_path

        service.delete(row.id)

        assert path not in storage.objects
        assert service.get_by_id(row.id) is None
        stored = db_session.query(FileModel).filter(FileModel.id == row.id).one()
        assert stored.deleted_at is not None

    def test_storage_failure_keeps_row(self, db_session, sample_user_id):
        storage = FailingRemoveStorage()
        service = FileService(db_session, storage)
        row = service.upload(b"x", "a.txt", "docs", sample_user_id)

        with pytest.raises(StorageError):
            service.delete(row.id)

        assert service.get_by_id(row.id) is not None
        assert row.storage_path in storage.objects

    def test_unknown_id_is_noop(self, service):
        service.delete("missing")

    def test_get_url(self, service):
        assert service.get_url("docs/1-a.txt") == "memory://files/docs/1-a.txt"
