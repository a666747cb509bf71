"""
Pure aggregations over already-loaded rows (no I/O).

Works with ORM rows or any object exposing the same attribute names.
"""
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from lifesync.domain.enums import TransactionType


def _type_value(raw) -> str:
    return raw.value if isinstance(raw, TransactionType) else raw


def summarize_by_category(transactions: Iterable[Any]) -> Dict[str, Dict[str, Decimal]]:
    """
    Sum amounts per category into income/expense buckets.

    Income goes to "income"; every other type (expense, transfer) goes to
    "expense". Unknown types never reach this point: the services reject
    them on write.

    Example:
        >>> summarize_by_category(rows)
        {"Food": {"income": Decimal("100"), "expense": Decimal("15")}}
    """
    summary: Dict[str, Dict[str, Decimal]] = {}
    for tx in transactions:
        bucket = summary.setdefault(
            tx.category, {"income": Decimal("0"), "expense": Decimal("0")}
        )
        amount = Decimal(tx.amount)
        if _type_value(tx.type) == TransactionType.INCOME.value:
            bucket["income"] += amount
        else:
            bucket["expense"] += amount
    return summary


def dedupe_conversations(messages: Iterable[Any], user_id: str) -> List[Any]:
    """
    One representative message per counterpart of user_id.

    Messages must be ordered newest first; the first message seen for each
    counterpart wins, so the result keeps that ordering.
    """
    conversations: "OrderedDict[str, Any]" = OrderedDict()
    for msg in messages:
        other_id = msg.recipient_id if msg.sender_id == user_id else msg.sender_id
        if other_id not in conversations:
            conversations[other_id] = msg
    return list(conversations.values())


def count_unread(messages: Iterable[Any], user_id: str) -> Dict[str, int]:
    """Unread incoming messages of user_id, counted per sender."""
    counts: Dict[str, int] = {}
    for msg in messages:
        if msg.recipient_id == user_id and msg.read_at is None:
            counts[msg.sender_id] = counts.get(msg.sender_id, 0) + 1
    return counts
