"""Notes / diary entries"""
from typing import List

from sqlalchemy import or_

from lifesync.application.base import SoftDeleteService, escape_like
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import NoteModel


class NoteValidationError(ValidationError):
    pass


class NoteService(SoftDeleteService[NoteModel]):
    model = NoteModel
    validation_error = NoteValidationError
    required_fields = ("owner_id", "content")
    order_by = (NoteModel.created_at.desc(),)

    def list_by_category(self, category: str) -> List[NoteModel]:
        return self.list(category=category)

    def list_favorites(self) -> List[NoteModel]:
        return self.list(is_favorite=True)

    def search(self, query: str) -> List[NoteModel]:
        """Case-insensitive substring search over title and content."""
        pattern = f"%{escape_like(query)}%"
        return self._all(
            self._query().filter(or_(
                NoteModel.title.ilike(pattern, escape="\\"),
                NoteModel.content.ilike(pattern, escape="\\"),
            )).order_by(*self.order_by)
        )
