"""
Shared CRUD plumbing for the per-entity services.

RecordService      - get/list/create/update over one table
SoftDeleteService  - same, but reads hide rows with deleted_at set and
                     delete only stamps deleted_at

Every public call commits its own unit of work. SQLAlchemy failures roll the
session back and surface as StoreError.
"""
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from lifesync.domain.enums import parse_enum
from lifesync.domain.errors import NotFoundError, StoreError, ValidationError
from lifesync.utils.clock import utcnow

logger = logging.getLogger(__name__)

M = TypeVar("M")

SYSTEM_FIELDS = frozenset({"id", "created_at", "updated_at", "deleted_at", "completed_at", "joined_at"})


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input is matched literally (escape char: backslash)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RecordService(Generic[M]):
    model: ClassVar[type]
    validation_error: ClassVar[type[ValidationError]] = ValidationError

    # columns that must be present (and non-blank) on create
    required_fields: ClassVar[Tuple[str, ...]] = ()
    # column name -> enum class; values are stored as enum .value
    enum_fields: ClassVar[Dict[str, type[Enum]]] = {}
    # columns callers may set on create but never change afterwards;
    # SYSTEM_FIELDS are never written by callers at all
    immutable_fields: ClassVar[frozenset] = frozenset({"id", "created_at", "updated_at", "deleted_at"})
    # default ordering for list(); tuple of SQLAlchemy order clauses
    order_by: ClassVar[tuple] = ()

    def __init__(self, db: Session):
        self.db = db

    # ── Reads ──

    def _query(self) -> Query:
        return self.db.query(self.model)

    def list(self, **filters) -> List[M]:
        """Rows matching equality filters (None values are ignored), in default order."""
        query = self._filter_equal(self._query(), filters)
        return self._all(query.order_by(*self.order_by))

    def get_by_id(self, record_id: str) -> Optional[M]:
        """The row with this id, or None."""
        with self._store_errors("get"):
            return self._query().filter(self.model.id == record_id).first()

    def _get_or_raise(self, record_id: str) -> M:
        row = self.get_by_id(record_id)
        if row is None:
            raise NotFoundError(f"{self._label()} {record_id} not found")
        return row

    def _all(self, query: Query) -> List[M]:
        with self._store_errors("list"):
            return query.all()

    def _filter_equal(self, query: Query, filters: Dict[str, Any]) -> Query:
        columns = self._columns()
        for name, value in filters.items():
            if name not in columns:
                raise self.validation_error(f"Unknown filter for {self._label()}: {name}")
            if value is None:
                continue
            if name in self.enum_fields:
                value = self._enum_value(name, value)
            query = query.filter(getattr(self.model, name) == value)
        return query

    # ── Writes ──

    def create(self, **payload) -> M:
        data = self._clean(payload, row=None)
        self._before_write(data, row=None)
        row = self.model(**data)
        with self._store_errors("create"):
            self.db.add(row)
            self.db.commit()
        logger.info("Created %s %s", self._label(), row.id)
        return row

    def update(self, record_id: str, **changes) -> M:
        """Merge changes into a live row and stamp updated_at; NotFoundError if absent."""
        row = self._get_or_raise(record_id)
        data = self._clean(changes, row=row)
        self._before_write(data, row=row)
        for name, value in data.items():
            setattr(row, name, value)
        if "updated_at" in self._columns():
            row.updated_at = utcnow()
        with self._store_errors("update"):
            self.db.commit()
        logger.debug("Updated %s %s: %s", self._label(), record_id, sorted(data))
        return row

    def _hard_delete(self, *criteria) -> int:
        with self._store_errors("delete"):
            deleted = self.db.query(self.model).filter(*criteria).delete(synchronize_session="fetch")
            self.db.commit()
        return deleted

    # ── Validation ──

    def _clean(self, payload: Dict[str, Any], row: Optional[M]) -> Dict[str, Any]:
        columns = self._columns()
        data: Dict[str, Any] = {}
        for name, value in payload.items():
            if name not in columns:
                raise self.validation_error(f"Unknown field for {self._label()}: {name}")
            if name in SYSTEM_FIELDS or (row is not None and name in self.immutable_fields):
                raise self.validation_error(f"Field {name} cannot be set")
            if name in self.enum_fields and value is not None:
                value = self._enum_value(name, value)
            data[name] = value

        for name in self.required_fields:
            if row is None and name not in data:
                raise self.validation_error(f"{name} is required")
            value = data.get(name)
            if name in data and (value is None or (isinstance(value, str) and not value.strip())):
                raise self.validation_error(f"{name} cannot be empty")

        self._validate(data, row)
        return data

    def _enum_value(self, name: str, value) -> str:
        try:
            return parse_enum(self.enum_fields[name], value, name).value
        except ValidationError as exc:
            raise self.validation_error(str(exc)) from None

    def _validate(self, data: Dict[str, Any], row: Optional[M]) -> None:
        """Entity-specific checks; row is None on create."""

    def _before_write(self, data: Dict[str, Any], row: Optional[M]) -> None:
        """Hook to derive extra columns from validated data."""

    # ── Helpers ──

    @contextmanager
    def _store_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("%s on %s failed", action, self.model.__tablename__)
            raise StoreError(f"{action} on {self.model.__tablename__} failed: {exc}") from exc

    def _columns(self) -> frozenset:
        return frozenset(self.model.__table__.columns.keys())

    def _label(self) -> str:
        return self.model.__tablename__.rstrip("s")


class SoftDeleteService(RecordService[M]):
    """Rows are never removed: delete stamps deleted_at and every read skips them."""

    def _query(self) -> Query:
        return self.db.query(self.model).filter(self.model.deleted_at.is_(None))

    def soft_delete(self, record_id: str) -> None:
        """
        Stamp deleted_at on a live row.

        Idempotent: an already deleted or unknown id is a no-op.
        """
        with self._store_errors("delete"):
            count = self.db.query(self.model).filter(
                self.model.id == record_id,
                self.model.deleted_at.is_(None),
            ).update({"deleted_at": utcnow()}, synchronize_session="fetch")
            self.db.commit()
        if count:
            logger.info("Soft-deleted %s %s", self._label(), record_id)
