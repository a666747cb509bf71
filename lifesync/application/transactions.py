"""Money transactions and per-category summaries"""
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Query

from lifesync.application.base import SoftDeleteService
from lifesync.domain.aggregation import summarize_by_category
from lifesync.domain.enums import TransactionType
from lifesync.domain.errors import ValidationError
from lifesync.infrastructure.db.models import TransactionModel
from lifesync.utils.validation import normalize_currency, parse_amount


class TransactionValidationError(ValidationError):
    pass


class TransactionService(SoftDeleteService[TransactionModel]):
    model = TransactionModel
    validation_error = TransactionValidationError
    required_fields = ("owner_id", "type", "category", "amount", "transaction_date")
    enum_fields = {"type": TransactionType}
    order_by = (TransactionModel.transaction_date.desc(), TransactionModel.created_at.desc())

    def list(self, start: Optional[date] = None, end: Optional[date] = None, **filters) -> List[TransactionModel]:
        """Live transactions, newest first, optionally within [start, end]."""
        query = self._filter_equal(self._window(start, end), filters)
        return self._all(query.order_by(*self.order_by))

    def list_by_category(self, category: str, start: Optional[date] = None, end: Optional[date] = None) -> List[TransactionModel]:
        return self.list(start, end, category=category)

    def list_by_type(self, type, start: Optional[date] = None, end: Optional[date] = None) -> List[TransactionModel]:
        return self.list(start, end, type=type)

    def summary_by_category(self, start: date, end: date, **filters) -> Dict[str, Dict[str, Decimal]]:
        """{category: {"income": total, "expense": total}} over the inclusive window."""
        return summarize_by_category(self.list(start, end, **filters))

    def _window(self, start: Optional[date], end: Optional[date]) -> Query:
        query = self._query()
        if start is not None:
            query = query.filter(TransactionModel.transaction_date >= start)
        if end is not None:
            query = query.filter(TransactionModel.transaction_date <= end)
        return query

    def _validate(self, data, row):
        try:
            if "amount" in data:
                data["amount"] = parse_amount(data["amount"])
            if "currency" in data:
                data["currency"] = normalize_currency(data["currency"])
        except ValidationError as exc:
            raise TransactionValidationError(str(exc)) from None
        if data.get("tags") is not None:
            data["tags"] = [str(t).strip() for t in data["tags"] if str(t).strip()]
