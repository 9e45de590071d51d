import logging
from sqlalchemy.orm import Session

from ..config import get_config
from ..errors import NotFoundError
from ..models import Category, CategoryMonthBudget, Receipt, Transaction
from ..months import current_month
from ..policy import check_guest_limit

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, db: Session, user_id: str, role: str | None = None):
        self.db = db
        self.user_id = user_id
        self.role = role

    def list_categories(self) -> list[Category]:
        return (
            self.db.query(Category)
            .filter(Category.user_id == self.user_id)
            .order_by(Category.name)
            .all()
        )

    def get_category(self, category_id: int) -> Category:
        category = (
            self.db.query(Category)
            .filter(Category.id == category_id, Category.user_id == self.user_id)
            .first()
        )
        if not category:
            raise NotFoundError("Category not found")
        return category

    def count_categories(self) -> int:
        return self.db.query(Category).filter(Category.user_id == self.user_id).count()

    def create_category(
        self,
        name: str,
        icon: str = "",
        color: str = "",
        budget_cents: int = 0,
        is_default: bool = True,
        month: str | None = None,
    ) -> Category:
        """
        Create a category.

        With ``is_default`` the budget becomes the category default; otherwise
        it is stored only as the override for ``month`` (the current month when
        omitted) and the default stays 0.
        """
        check_guest_limit(
            self.role, "category", self.count_categories(), get_config().guest_limits
        )

        category = Category(
            user_id=self.user_id,
            name=name,
            icon=icon,
            color=color,
            budget_cents=budget_cents if is_default else 0,
            spent_cents=0,
        )
        self.db.add(category)
        self.db.flush()

        if not is_default:
            self.db.add(CategoryMonthBudget(
                category_id=category.id,
                month=month or current_month(),
                amount_cents=budget_cents,
            ))
            self.db.flush()

        self.db.refresh(category)
        return category

    def update_category(
        self,
        category: Category,
        name: str | None = None,
        icon: str | None = None,
        color: str | None = None,
        budget_cents: int | None = None,
    ) -> Category:
        if name is not None:
            category.name = name
        if icon is not None:
            category.icon = icon
        if color is not None:
            category.color = color
        if budget_cents is not None:
            category.budget_cents = budget_cents
        self.db.flush()
        return category

    def set_monthly_budget(self, category: Category, month: str, amount_cents: int) -> Category:
        """Create or replace the category's override for ``month``."""
        existing = (
            self.db.query(CategoryMonthBudget)
            .filter(
                CategoryMonthBudget.category_id == category.id,
                CategoryMonthBudget.month == month,
            )
            .first()
        )
        if existing:
            existing.amount_cents = amount_cents
        else:
            self.db.add(CategoryMonthBudget(
                category_id=category.id,
                month=month,
                amount_cents=amount_cents,
            ))
        self.db.flush()
        self.db.refresh(category)
        return category

    def clear_monthly_budget(self, category: Category, month: str) -> Category:
        """Remove the override so the default applies again."""
        self.db.query(CategoryMonthBudget).filter(
            CategoryMonthBudget.category_id == category.id,
            CategoryMonthBudget.month == month,
        ).delete()
        self.db.flush()
        self.db.refresh(category)
        return category

    def delete_category(self, category: Category) -> int:
        """
        Delete a category together with all of its transactions.

        Runs inside the request's session, so the cascade commits or rolls
        back as a whole. Returns the number of transactions removed.
        """
        transactions = (
            self.db.query(Transaction)
            .filter(Transaction.category_id == category.id)
            .all()
        )
        receipt_ids = [t.receipt_id for t in transactions if t.receipt_id is not None]

        for transaction in transactions:
            self.db.delete(transaction)
        self.db.flush()

        if receipt_ids:
            self.db.query(Receipt).filter(
                Receipt.id.in_(receipt_ids),
                Receipt.user_id == self.user_id,
            ).delete(synchronize_session=False)

        self.db.delete(category)
        self.db.flush()

        logger.info(
            "Deleted category %s with %d transactions", category.id, len(transactions)
        )
        return len(transactions)
