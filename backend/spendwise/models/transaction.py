from datetime import date
from sqlalchemy import String, Integer, Date, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..domain import TransactionType
from .base import Base, TimestampMixin


class Transaction(Base, TimestampMixin):
    """
    A recorded expense or income.

    Amounts are stored as integer cents to avoid floating point issues.
    ``amount_cents`` is in ``currency``, the user's base currency when the
    transaction was recorded; ``original_amount_cents`` / ``original_currency``
    keep the entered amount when it was converted.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    # Core fields
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    posted_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    transaction_type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType), nullable=False, default=TransactionType.EXPENSE
    )

    # Pre-conversion facts
    original_amount_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    original_currency: Mapped[str | None] = mapped_column(String(3), nullable=True)

    note: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    receipt_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("receipts.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    category: Mapped["Category"] = relationship("Category", back_populates="transactions")
    receipt: Mapped["Receipt | None"] = relationship("Receipt")

    @property
    def amount(self) -> float:
        """Get amount as decimal units."""
        return self.amount_cents / 100.0

    @amount.setter
    def amount(self, value: float) -> None:
        """Set amount from decimal units."""
        self.amount_cents = int(round(value * 100))

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, date={self.posted_date}, "
            f"amount={self.amount:.2f} {self.currency})>"
        )
