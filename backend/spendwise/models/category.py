from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    """
    Spending category owned by a user.

    ``budget_cents`` is the default monthly budget; per-month overrides live in
    CategoryMonthBudget. ``spent_cents`` is a cached all-time total kept in
    step with the category's transactions.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    color: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    budget_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spent_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    monthly_budgets: Mapped[list["CategoryMonthBudget"]] = relationship(
        "CategoryMonthBudget", back_populates="category", cascade="all, delete-orphan"
    )
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="category", cascade="all, delete-orphan"
    )

    @property
    def budget(self) -> float:
        return self.budget_cents / 100.0

    @property
    def spent(self) -> float:
        return self.spent_cents / 100.0

    def monthly_budget_map(self) -> dict[str, int]:
        """Month key -> override in cents."""
        return {mb.month: mb.amount_cents for mb in self.monthly_budgets}

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
