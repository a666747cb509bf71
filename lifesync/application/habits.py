"""Habits and daily habit logs"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from lifesync.application.base import RecordService, SoftDeleteService
from lifesync.domain.enums import HabitFrequency
from lifesync.domain.errors import NotFoundError, ValidationError
from lifesync.infrastructure.db.models import HabitModel, HabitLogModel

logger = logging.getLogger(__name__)


class HabitValidationError(ValidationError):
    pass


class HabitLogService(RecordService[HabitLogModel]):
    model = HabitLogModel
    validation_error = HabitValidationError
    required_fields = ("habit_id", "log_date")
    order_by = (HabitLogModel.log_date.desc(),)


class HabitService(SoftDeleteService[HabitModel]):
    model = HabitModel
    validation_error = HabitValidationError
    required_fields = ("owner_id", "name", "category", "start_date")
    enum_fields = {"frequency": HabitFrequency}
    order_by = (HabitModel.created_at.desc(),)

    def __init__(self, db):
        super().__init__(db)
        self.logs = HabitLogService(db)

    def log(self, habit_id: str, log_date: date, value: float | Decimal = 1, notes: Optional[str] = None) -> HabitLogModel:
        """
        Record the habit for a day.

        Upsert on (habit_id, log_date): logging the same day again replaces
        value and notes of the existing row.
        """
        if self.get_by_id(habit_id) is None:
            raise NotFoundError(f"habit {habit_id} not found")
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise HabitValidationError(f"Invalid log value: {value!r}")
        value = float(value)

        existing = self.get_log(habit_id, log_date)
        if existing is not None:
            entry = self.logs.update(existing.id, value=value, notes=notes)
            logger.debug("Habit %s log %s replaced", habit_id, log_date)
            return entry
        return self.logs.create(habit_id=habit_id, log_date=log_date, value=value, notes=notes)

    def get_log(self, habit_id: str, log_date: date) -> Optional[HabitLogModel]:
        rows = self.logs.list(habit_id=habit_id, log_date=log_date)
        return rows[0] if rows else None

    def list_logs(self, habit_id: str, start: Optional[date] = None, end: Optional[date] = None) -> List[HabitLogModel]:
        """Logs of a habit, newest day first; start/end are inclusive."""
        query = self.logs._query().filter(HabitLogModel.habit_id == habit_id)
        if start is not None:
            query = query.filter(HabitLogModel.log_date >= start)
        if end is not None:
            query = query.filter(HabitLogModel.log_date <= end)
        return self.logs._all(query.order_by(*self.logs.order_by))

    def list_active(self) -> List[HabitModel]:
        return self.list(is_active=True)

    def _validate(self, data, row):
        start = data.get("start_date", row.start_date if row else None)
        end = data.get("end_date", row.end_date if row else None)
        if start and end and end < start:
            raise HabitValidationError("end_date cannot precede start_date")
        if data.get("goal_value") is not None and data["goal_value"] <= 0:
            raise HabitValidationError("goal_value must be positive")
