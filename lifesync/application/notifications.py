"""In-app notifications (hard delete, no soft-delete column)"""
import logging
from typing import List, Optional

from lifesync.application.base import RecordService
from lifesync.domain.enums import NotificationType
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import NotificationModel
from lifesync.utils.clock import utcnow

logger = logging.getLogger(__name__)


class NotificationValidationError(ValidationError):
    pass


class NotificationService(RecordService[NotificationModel]):
    model = NotificationModel
    validation_error = NotificationValidationError
    required_fields = ("user_id", "type", "title")
    enum_fields = {"type": NotificationType}
    order_by = (NotificationModel.created_at.desc(),)

    def list(self, user_id: Optional[str] = None, **filters) -> List[NotificationModel]:
        return super().list(user_id=user_id, **filters)

    def list_unread(self, user_id: str) -> List[NotificationModel]:
        return self._all(
            self._query().filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            ).order_by(*self.order_by)
        )

    def list_by_type(self, user_id: str, notification_type) -> List[NotificationModel]:
        return self.list(user_id=user_id, type=notification_type)

    def mark_read(self, notification_id: str) -> NotificationModel:
        return self.update(notification_id, read_at=utcnow())

    def mark_all_read(self, user_id: str) -> int:
        with self._store_errors("update"):
            count = self._query().filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            ).update({"read_at": utcnow()}, synchronize_session="fetch")
            self.db.commit()
        return count

    def delete(self, notification_id: str) -> None:
        if self._hard_delete(NotificationModel.id == notification_id):
            logger.info("Deleted notification %s", notification_id)
