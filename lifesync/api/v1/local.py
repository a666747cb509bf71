"""
Session-only store endpoints: current user, snapshot, friends, chat
"""
from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from lifesync.api.deps import get_local_store, get_local_user, get_preferences
from lifesync.application.local_store import LocalDataStore
from lifesync.domain.enums import RequestAction
from lifesync.domain.local_models import UserSnapshot
from lifesync.infrastructure.preferences import CurrentUserPreference


router = APIRouter(prefix="/api/v1/local", tags=["local"])


class CurrentUserRequest(BaseModel):
    id: str
    name: str
    avatar: str = ""
    tag: str


class UpdateCurrentUserRequest(BaseModel):
    name: str | None = None
    avatar: str | None = None
    tag: str | None = None


class FriendRequestAction(BaseModel):
    action: RequestAction


class AddFriendRequest(BaseModel):
    tag: str


class SendChatMessageRequest(BaseModel):
    content: str


# === Current user ===

@router.get("/me")
def current_user(me: UserSnapshot = Depends(get_local_user)):
    return asdict(me)


@router.put("/me")
def sign_in(
    req: CurrentUserRequest,
    prefs: CurrentUserPreference = Depends(get_preferences),
    store: LocalDataStore = Depends(get_local_store),
):
    """Store the session identity and make it discoverable by tag."""
    user = UserSnapshot(**req.model_dump())
    prefs.save(asdict(user))
    store.register_user(user)
    return asdict(user)


@router.patch("/me")
def update_current_user(
    req: UpdateCurrentUserRequest,
    prefs: CurrentUserPreference = Depends(get_preferences),
):
    updated = prefs.update(**req.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(status_code=404, detail="No current user stored")
    return updated


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(prefs: CurrentUserPreference = Depends(get_preferences)):
    prefs.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# === Store ===

@router.get("/snapshot")
def snapshot(store: LocalDataStore = Depends(get_local_store)) -> Dict[str, List[Any]]:
    return jsonable_encoder(store.snapshot())


@router.post("/friends", status_code=status.HTTP_201_CREATED)
def add_friend(
    req: AddFriendRequest,
    store: LocalDataStore = Depends(get_local_store),
    me: UserSnapshot = Depends(get_local_user),
):
    request = store.add_friend(req.tag, me)
    if request is None:
        raise HTTPException(status_code=409, detail=f"Cannot send a friend request to {req.tag}")
    return jsonable_encoder(request)


@router.post("/friend-requests/{request_id}")
def handle_friend_request(
    request_id: str,
    req: FriendRequestAction,
    store: LocalDataStore = Depends(get_local_store),
):
    handled = store.handle_friend_request(request_id, req.action)
    if handled is None:
        raise HTTPException(status_code=404, detail="Friend request not found")
    return jsonable_encoder(handled)


@router.get("/conversations/{conversation_id}")
def conversation(conversation_id: str, store: LocalDataStore = Depends(get_local_store)):
    return jsonable_encoder(store.conversation(conversation_id))


@router.post("/conversations/{conversation_id}")
def send_chat_message(
    conversation_id: str,
    req: SendChatMessageRequest,
    store: LocalDataStore = Depends(get_local_store),
    me: UserSnapshot = Depends(get_local_user),
):
    if not req.content.strip():
        raise HTTPException(status_code=422, detail="content cannot be empty")
    message = store.send_message(req.content, conversation_id, me.id)
    return jsonable_encoder(message)
