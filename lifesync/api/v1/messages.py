"""
Direct message API endpoints
"""
from datetime import datetime
from typing import Dict, List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from lifesync.api.deps import get_current_user_id, get_db
from lifesync.application.messages import MessageService


router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


class SendMessageRequest(BaseModel):
    recipient_id: str
    content: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sender_id: str
    recipient_id: str
    content: str
    read_at: datetime | None = None
    created_at: datetime


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    req: SendMessageRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return MessageService(db).send(user_id, req.recipient_id, req.content)


@router.get("/conversations", response_model=List[MessageResponse])
def recent_conversations(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Latest message per conversation partner, newest first"""
    return MessageService(db).recent_conversations(user_id)


@router.get("/unread", response_model=Dict[str, int])
def unread_count(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return MessageService(db).unread_count(user_id)


@router.get("/with/{other_id}", response_model=List[MessageResponse])
def get_conversation(
    other_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return MessageService(db).get_conversation(user_id, other_id)


@router.post("/with/{other_id}/read")
def mark_conversation_read(
    other_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    count = MessageService(db).mark_conversation_read(user_id, other_id)
    return {"marked": count}
