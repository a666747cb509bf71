"""
Friend relationships.

A relationship is stored once, directionally: user_id is whoever sent the
request. Lookups that mean "are A and B friends" therefore check both
orderings.
"""
import logging
from typing import List

from sqlalchemy import and_, or_

from lifesync.application.base import RecordService
from lifesync.domain.enums import FriendStatus
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import FriendModel

logger = logging.getLogger(__name__)


class FriendValidationError(ValidationError):
    pass


def _pair(user_id: str, other_id: str):
    return or_(
        and_(FriendModel.user_id == user_id, FriendModel.friend_id == other_id),
        and_(FriendModel.user_id == other_id, FriendModel.friend_id == user_id),
    )


class FriendService(RecordService[FriendModel]):
    model = FriendModel
    validation_error = FriendValidationError
    required_fields = ("user_id", "friend_id")
    enum_fields = {"status": FriendStatus}
    order_by = (FriendModel.created_at.desc(),)

    def list_friends(self, user_id: str, status=FriendStatus.ACCEPTED) -> List[FriendModel]:
        """Relationships of user_id in the given status, whichever side requested."""
        status = self._enum_value("status", status)
        return self._all(
            self._query().filter(
                or_(FriendModel.user_id == user_id, FriendModel.friend_id == user_id),
                FriendModel.status == status,
            ).order_by(*self.order_by)
        )

    def list_pending_requests(self, user_id: str) -> List[FriendModel]:
        """Requests addressed to user_id that are still pending."""
        return self.list(friend_id=user_id, status=FriendStatus.PENDING)

    def send_request(self, user_id: str, friend_id: str) -> FriendModel:
        if user_id == friend_id:
            raise FriendValidationError("Cannot send a friend request to yourself")
        existing = self._all(self._query().filter(_pair(user_id, friend_id)))
        if existing:
            raise FriendValidationError(
                f"A relationship between {user_id} and {friend_id} already exists ({existing[0].status})"
            )
        return self.create(user_id=user_id, friend_id=friend_id, status=FriendStatus.PENDING)

    def accept_request(self, request_id: str) -> FriendModel:
        request = self._get_or_raise(request_id)
        if request.status != FriendStatus.PENDING.value:
            raise FriendValidationError(f"Request {request_id} is not pending")
        return self.update(request_id, status=FriendStatus.ACCEPTED)

    def reject_request(self, request_id: str) -> None:
        """Drop a pending request (hard delete)."""
        self._hard_delete(
            FriendModel.id == request_id,
            FriendModel.status == FriendStatus.PENDING.value,
        )

    def block(self, relationship_id: str) -> FriendModel:
        return self.update(relationship_id, status=FriendStatus.BLOCKED)

    def unblock(self, relationship_id: str) -> None:
        """Unblocking forgets the relationship entirely."""
        self._hard_delete(
            FriendModel.id == relationship_id,
            FriendModel.status == FriendStatus.BLOCKED.value,
        )

    def remove_friend(self, user_id: str, friend_id: str) -> None:
        removed = self._hard_delete(_pair(user_id, friend_id))
        if removed:
            logger.info("Removed friendship %s <-> %s", user_id, friend_id)

    def is_friend(self, user_id: str, friend_id: str) -> bool:
        with self._store_errors("get"):
            row = self._query().filter(
                _pair(user_id, friend_id),
                FriendModel.status == FriendStatus.ACCEPTED.value,
            ).first()
        return row is not None
