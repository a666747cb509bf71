"""
Calendar events.

An event may be a materialized copy of another entity (source_type /
source_id). The copy is independent: changing or deleting the source does
not touch it.
"""
from datetime import datetime
from typing import List, Optional

from lifesync.application.base import SoftDeleteService
from lifesync.domain.enums import SourceType
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import CalendarEventModel


class EventValidationError(ValidationError):
    pass


class EventService(SoftDeleteService[CalendarEventModel]):
    model = CalendarEventModel
    validation_error = EventValidationError
    required_fields = ("owner_id", "title", "start_time")
    enum_fields = {"source_type": SourceType}
    order_by = (CalendarEventModel.start_time.asc(),)

    def list(self, start: Optional[datetime] = None, end: Optional[datetime] = None, **filters) -> List[CalendarEventModel]:
        """Live events by start time; start/end bound start_time inclusively."""
        query = self._query()
        if start is not None:
            query = query.filter(CalendarEventModel.start_time >= start)
        if end is not None:
            query = query.filter(CalendarEventModel.start_time <= end)
        query = self._filter_equal(query, filters)
        return self._all(query.order_by(*self.order_by))

    def list_by_source(self, source_type, source_id: str) -> List[CalendarEventModel]:
        return self.list(source_type=source_type, source_id=source_id)

    def list_by_team(self, team_id: str) -> List[CalendarEventModel]:
        return self.list(team_id=team_id)

    def _validate(self, data, row):
        start = data.get("start_time", row.start_time if row else None)
        end = data.get("end_time", row.end_time if row else None)
        if start is not None and end is not None and _naive(end) < _naive(start):
            raise EventValidationError("end_time cannot precede start_time")
        if data.get("is_recurring") is False:
            data.setdefault("recurrence_rule", None)


def _naive(value: datetime) -> datetime:
    # rows loaded back from SQLite are naive; compare wall-clock values
    return value.replace(tzinfo=None)
