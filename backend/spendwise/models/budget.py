from sqlalchemy import String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class BudgetDefaults(Base, TimestampMixin):
    """Per-user fallback income, used for months without an explicit income."""

    __tablename__ = "budget_defaults"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    default_income_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<BudgetDefaults(user={self.user_id}, income={self.default_income_cents})>"


class MonthlyIncome(Base, TimestampMixin):
    """Explicit income for one month, overriding the default."""

    __tablename__ = "monthly_incomes"
    __table_args__ = (
        UniqueConstraint("user_id", "month", name="uq_income_user_month"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    month: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<MonthlyIncome(user={self.user_id}, month={self.month}, amount={self.amount_cents})>"


class CategoryMonthBudget(Base, TimestampMixin):
    """A category's budget for one month, overriding the category default."""

    __tablename__ = "category_month_budgets"
    __table_args__ = (
        UniqueConstraint("category_id", "month", name="uq_category_month"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    category: Mapped["Category"] = relationship("Category", back_populates="monthly_budgets")

    def __repr__(self) -> str:
        return f"<CategoryMonthBudget(category={self.category_id}, month={self.month}, amount={self.amount_cents})>"
