"""
File API endpoints: raw-body upload, listing, download URL, delete
"""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from lifesync.api.deps import get_current_user_id, get_file_service
from lifesync.application.files import FileService
from lifesync.domain.enums import RelatedType
from lifesync.infrastructure.db.models import FileModel


router = APIRouter(prefix="/api/v1/files", tags=["files"])


class FileResponse(BaseModel):
    id: str
    name: str
    mime_type: str | None = None
    size: int | None = None
    storage_path: str
    note_id: str | None = None
    related_type: RelatedType | None = None
    related_id: str | None = None
    url: str
    created_at: datetime


def _response(service: FileService, row: FileModel) -> FileResponse:
    return FileResponse(
        id=row.id,
        name=row.name,
        mime_type=row.mime_type,
        size=row.size,
        storage_path=row.storage_path,
        note_id=row.note_id,
        related_type=row.related_type,
        related_id=row.related_id,
        url=service.get_url(row.storage_path),
        created_at=row.created_at,
    )


def _owned(service: FileService, file_id: str, user_id: str) -> FileModel:
    row = service.get_by_id(file_id)
    if row is None or row.owner_id != user_id:
        raise HTTPException(status_code=404, detail="File not found")
    return row


@router.post("", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Request,
    name: str,
    path: str = "uploads",
    note_id: str | None = None,
    related_type: RelatedType | None = None,
    related_id: str | None = None,
    user_id: str = Depends(get_current_user_id),
    service: FileService = Depends(get_file_service),
):
    """Body is the file content; its Content-Type becomes mime_type."""
    data = await request.body()
    row = service.upload(
        data, name, path, user_id,
        mime_type=request.headers.get("content-type"),
        note_id=note_id,
        related_type=related_type,
        related_id=related_id,
    )
    return _response(service, row)


@router.get("", response_model=List[FileResponse])
def list_files(
    note_id: str | None = None,
    user_id: str = Depends(get_current_user_id),
    service: FileService = Depends(get_file_service),
):
    return [_response(service, row) for row in service.list(owner_id=user_id, note_id=note_id)]


@router.get("/{file_id}", response_model=FileResponse)
def get_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FileService = Depends(get_file_service),
):
    return _response(service, _owned(service, file_id, user_id))


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FileService = Depends(get_file_service),
):
    _owned(service, file_id, user_id)
    service.delete(file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
