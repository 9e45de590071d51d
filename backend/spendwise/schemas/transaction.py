from datetime import date, datetime
from pydantic import BaseModel, Field, computed_field

from ..domain import TransactionType


class TransactionBase(BaseModel):
    """Base transaction fields."""
    category_id: int
    posted_date: date
    transaction_type: TransactionType = TransactionType.EXPENSE
    note: str | None = None
    receipt_id: int | None = None


class TransactionCreate(TransactionBase):
    """Fields for creating a transaction. ``currency`` defaults to the base currency."""
    amount_cents: int = Field(..., ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)


class TransactionUpdate(BaseModel):
    """Fields for updating a transaction (all optional)."""
    category_id: int | None = None
    posted_date: date | None = None
    amount_cents: int | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    transaction_type: TransactionType | None = None
    note: str | None = None
    receipt_id: int | None = None


class TransactionResponse(TransactionBase):
    """Transaction response with all fields."""
    id: int
    amount_cents: int
    currency: str
    original_amount_cents: int | None = None
    original_currency: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def amount(self) -> float:
        """Amount in currency units."""
        return self.amount_cents / 100.0

    class Config:
        from_attributes = True
