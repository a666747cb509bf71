"""
Tests for TransactionService: amount parsing, windows, category summary
"""
from datetime import date
from decimal import Decimal

import pytest

from lifesync.application.transactions import TransactionService, TransactionValidationError


@pytest.fixture
def service(db_session):
    return TransactionService(db_session)


def _create(service, owner_id, type_, category, amount, day):
    return service.create(
        owner_id=owner_id, type=type_, category=category,
        amount=amount, transaction_date=day,
    )


class TestCreate:
    def test_amount_with_comma(self, service, sample_user_id):
        tx = _create(service, sample_user_id, "expense", "Lebensmittel", "12,50", date(2026, 2, 1))
        assert tx.amount == Decimal("12.50")
        assert tx.currency == "EUR"

    def test_currency_normalized(self, service, sample_user_id):
        tx = service.create(
            owner_id=sample_user_id, type="income", category="Gehalt",
            amount=Decimal("3000"), transaction_date=date(2026, 2, 1), currency="usd",
        )
        assert tx.currency == "USD"

    def test_too_many_decimals(self, service, sample_user_id):
        with pytest.raises(TransactionValidationError):
            _create(service, sample_user_id, "expense", "x", "1.005", date(2026, 2, 1))

    def test_unknown_type(self, service, sample_user_id):
        with pytest.raises(TransactionValidationError, match="type"):
            _create(service, sample_user_id, "refund", "x", "1", date(2026, 2, 1))


class TestList:
    def test_window_is_inclusive_newest_first(self, service, sample_user_id):
        for day in (1, 10, 20, 28):
            _create(service, sample_user_id, "expense", "Food", "5", date(2026, 2, day))

        rows = service.list(start=date(2026, 2, 10), end=date(2026, 2, 20))
        assert [tx.transaction_date for tx in rows] == [date(2026, 2, 20), date(2026, 2, 10)]

    def test_by_category_and_type(self, service, sample_user_id):
        _create(service, sample_user_id, "expense", "Food", "5", date(2026, 2, 1))
        _create(service, sample_user_id, "income", "Salary", "100", date(2026, 2, 1))

        assert [tx.category for tx in service.list_by_category("Food")] == ["Food"]
        assert [tx.category for tx in service.list_by_type("income")] == ["Salary"]

    def test_deleted_rows_hidden(self, service, sample_user_id):
        tx = _create(service, sample_user_id, "expense", "Food", "5", date(2026, 2, 1))
        service.soft_delete(tx.id)
        assert service.list() == []


class TestSummary:
    def test_category_summary(self, service, sample_user_id):
        _create(service, sample_user_id, "income", "Food", "100", date(2026, 2, 3))
        _create(service, sample_user_id, "expense", "Food", "10", date(2026, 2, 4))
        _create(service, sample_user_id, "expense", "Food", "5", date(2026, 2, 5))
        _create(service, sample_user_id, "expense", "Food", "99", date(2026, 3, 1))

        summary = service.summary_by_category(date(2026, 2, 1), date(2026, 2, 28))

        assert summary == {"Food": {"income": Decimal("100"), "expense": Decimal("15")}}

    def test_transfer_lands_in_expense(self, service, sample_user_id):
        _create(service, sample_user_id, "transfer", "Sparen", "50", date(2026, 2, 3))

        summary = service.summary_by_category(date(2026, 2, 1), date(2026, 2, 28))

        assert summary["Sparen"]["expense"] == Decimal("50")
        assert summary["Sparen"]["income"] == Decimal("0")

    def test_scoped_to_owner(self, service, sample_user_id, other_user_id):
        _create(service, sample_user_id, "expense", "Food", "5", date(2026, 2, 3))
        _create(service, other_user_id, "expense", "Food", "7", date(2026, 2, 3))

        summary = service.summary_by_category(date(2026, 2, 1), date(2026, 2, 28), owner_id=other_user_id)

        assert summary["Food"]["expense"] == Decimal("7")
