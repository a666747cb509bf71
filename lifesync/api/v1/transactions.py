"""
Transaction API endpoints
"""
from datetime import date
from typing import Dict, List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from lifesync.api.deps import get_current_user_id, get_db
from lifesync.application.transactions import TransactionService
from lifesync.domain.enums import TransactionType
from lifesync.infrastructure.db.models import TransactionModel


router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


# === Request models ===

class CreateTransactionRequest(BaseModel):
    type: TransactionType
    category: str
    amount: str  # Decimal as string
    transaction_date: date
    currency: str = "EUR"
    description: str | None = None
    payment_method: str | None = None
    tags: List[str] = []


class TransactionResponse(BaseModel):
    id: str
    type: str
    category: str
    amount: str
    currency: str
    transaction_date: date
    description: str | None = None
    tags: List[str] = []


class CategorySummary(BaseModel):
    income: str
    expense: str


def _response(tx: TransactionModel) -> TransactionResponse:
    return TransactionResponse(
        id=tx.id,
        type=tx.type,
        category=tx.category,
        amount=str(tx.amount),
        currency=tx.currency,
        transaction_date=tx.transaction_date,
        description=tx.description,
        tags=tx.tags or [],
    )


# === Endpoints ===

@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    req: CreateTransactionRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    tx = TransactionService(db).create(owner_id=user_id, **req.model_dump(exclude_none=True))
    return _response(tx)


@router.get("", response_model=List[TransactionResponse])
def list_transactions(
    start: date | None = None,
    end: date | None = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return [_response(tx) for tx in TransactionService(db).list(start=start, end=end, owner_id=user_id)]


@router.get("/summary", response_model=Dict[str, CategorySummary])
def summary(
    start: date,
    end: date,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Income/expense totals per category (amounts as strings)"""
    totals = TransactionService(db).summary_by_category(start, end, owner_id=user_id)
    return {
        category: CategorySummary(income=str(bucket["income"]), expense=str(bucket["expense"]))
        for category, bucket in totals.items()
    }
