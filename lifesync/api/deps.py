"""
FastAPI dependencies (DB session, current user, stores)
"""
from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from lifesync.application.backends import TaskBackend, build_task_backend
from lifesync.application.files import FileService
from lifesync.application.local_seed import DEMO_USER
from lifesync.application.local_store import LocalDataStore
from lifesync.config import get_settings
from lifesync.domain.errors import StorageError
from lifesync.domain.local_models import UserSnapshot
from lifesync.infrastructure.db.session import get_db as _get_db
from lifesync.infrastructure.preferences import CurrentUserPreference
from lifesync.infrastructure.storage.base import BlobStorage


# Routers and test overrides share this one symbol
get_db = _get_db


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """
    Id of the calling user, taken from the X-User-Id header

    Raises:
        HTTPException(401): header missing
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return x_user_id


def get_local_store(request: Request) -> LocalDataStore:
    return request.app.state.local_store


def get_preferences(request: Request) -> CurrentUserPreference:
    return request.app.state.preferences


def get_local_user(prefs: CurrentUserPreference = Depends(get_preferences)) -> UserSnapshot:
    """
    Identity of the session-only experience: the stored snapshot, or the demo
    user while nothing has been stored yet
    """
    snapshot = prefs.load()
    if snapshot is None:
        return DEMO_USER
    try:
        return UserSnapshot(
            id=str(snapshot["id"]),
            name=snapshot["name"],
            avatar=snapshot.get("avatar", ""),
            tag=snapshot["tag"],
        )
    except KeyError as exc:
        raise StorageError(f"Stored current user has no {exc.args[0]}") from exc


def get_blob_storage(request: Request) -> BlobStorage:
    return request.app.state.storage


def get_file_service(
    db: Session = Depends(get_db),
    storage: BlobStorage = Depends(get_blob_storage),
) -> FileService:
    return FileService(db, storage)


def get_task_backend(
    store: LocalDataStore = Depends(get_local_store),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> TaskBackend:
    return build_task_backend(get_settings(), store=store, db=db, owner_id=user_id)
