"""
Direct messages between two users.

A conversation is the set of messages exchanged between a pair of users in
either direction.
"""
import logging
from typing import Dict, List

from sqlalchemy import and_, or_

from lifesync.application.base import SoftDeleteService
from lifesync.domain.aggregation import count_unread, dedupe_conversations
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import MessageModel
from lifesync.utils.clock import utcnow

logger = logging.getLogger(__name__)


class MessageValidationError(ValidationError):
    pass


def _between(user_id: str, other_id: str):
    return or_(
        and_(MessageModel.sender_id == user_id, MessageModel.recipient_id == other_id),
        and_(MessageModel.sender_id == other_id, MessageModel.recipient_id == user_id),
    )


class MessageService(SoftDeleteService[MessageModel]):
    model = MessageModel
    validation_error = MessageValidationError
    required_fields = ("sender_id", "recipient_id", "content")
    immutable_fields = frozenset({"id", "created_at", "deleted_at", "sender_id", "recipient_id"})
    order_by = (MessageModel.created_at.desc(),)

    def get_conversation(self, user_id: str, other_id: str) -> List[MessageModel]:
        """Messages between the two users, oldest first."""
        return self._all(
            self._query().filter(_between(user_id, other_id)).order_by(MessageModel.created_at.asc())
        )

    def send(self, sender_id: str, recipient_id: str, content: str) -> MessageModel:
        return self.create(sender_id=sender_id, recipient_id=recipient_id, content=content)

    def list_unread(self, user_id: str) -> List[MessageModel]:
        return self._all(
            self._query().filter(
                MessageModel.recipient_id == user_id,
                MessageModel.read_at.is_(None),
            ).order_by(*self.order_by)
        )

    def mark_read(self, message_id: str) -> MessageModel:
        return self.update(message_id, read_at=utcnow())

    def mark_conversation_read(self, user_id: str, other_id: str) -> int:
        """Mark everything other_id sent to user_id as read; returns the count."""
        with self._store_errors("update"):
            count = self._query().filter(
                MessageModel.sender_id == other_id,
                MessageModel.recipient_id == user_id,
                MessageModel.read_at.is_(None),
            ).update({"read_at": utcnow()}, synchronize_session="fetch")
            self.db.commit()
        logger.debug("Marked %d messages from %s to %s read", count, other_id, user_id)
        return count

    def recent_conversations(self, user_id: str) -> List[MessageModel]:
        """Latest message of each conversation user_id takes part in, newest first."""
        messages = self._all(
            self._query().filter(
                or_(MessageModel.sender_id == user_id, MessageModel.recipient_id == user_id)
            ).order_by(*self.order_by)
        )
        return dedupe_conversations(messages, user_id)

    def unread_count(self, user_id: str) -> Dict[str, int]:
        """Unread messages addressed to user_id, per sender."""
        return count_unread(self.list_unread(user_id), user_id)
