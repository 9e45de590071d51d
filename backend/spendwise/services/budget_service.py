import logging
from sqlalchemy.orm import Session

from ..models import BudgetDefaults, Category, CategoryMonthBudget, MonthlyIncome
from ..errors import NotFoundError

logger = logging.getLogger(__name__)


class BudgetService:
    """Income and category budgets, by month and as defaults."""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    # --- Defaults ---

    def get_budget_defaults(self) -> BudgetDefaults:
        defaults = self.db.get(BudgetDefaults, self.user_id)
        if defaults is None:
            defaults = BudgetDefaults(user_id=self.user_id, default_income_cents=0)
            self.db.add(defaults)
            self.db.flush()
        return defaults

    def get_defaults(self) -> dict:
        defaults = self.get_budget_defaults()
        return {
            "default_income_cents": defaults.default_income_cents,
            "default_category_budgets": {
                c.id: c.budget_cents for c in self._categories()
            },
        }

    def set_defaults(
        self,
        default_income_cents: int,
        default_category_budgets: dict[int, int],
    ) -> dict:
        categories = self._categories_by_id(default_category_budgets.keys())

        defaults = self.get_budget_defaults()
        defaults.default_income_cents = default_income_cents
        for category_id, amount_cents in default_category_budgets.items():
            categories[category_id].budget_cents = amount_cents

        self.db.flush()
        return self.get_defaults()

    # --- Per month ---

    def monthly_incomes(self) -> dict[str, int]:
        """Month key -> explicit income in cents."""
        rows = (
            self.db.query(MonthlyIncome)
            .filter(MonthlyIncome.user_id == self.user_id)
            .all()
        )
        return {row.month: row.amount_cents for row in rows}

    def get_month(self, month: str) -> dict | None:
        """
        The budget recorded for ``month``.

        Returns None when the month has neither an explicit income nor any
        category override; callers then fall back to the defaults.
        ``income_is_explicit`` is False when only overrides exist and
        ``income_cents`` is the default income.
        """
        income = self._month_income(month)
        overrides = self._month_overrides(month)
        if income is None and not overrides:
            return None

        if income is None:
            income_cents = self.get_budget_defaults().default_income_cents
        else:
            income_cents = income.amount_cents

        return {
            "month": month,
            "income_cents": income_cents,
            "income_is_explicit": income is not None,
            "categories": {
                c.id: overrides.get(c.id, c.budget_cents) for c in self._categories()
            },
        }

    def set_month(
        self,
        month: str,
        income_cents: int,
        categories: dict[int, int],
    ) -> dict:
        """Record an explicit income and category budgets for one month."""
        owned = self._categories_by_id(categories.keys())
        self.set_month_income(month, income_cents)

        existing = {
            mb.category_id: mb
            for mb in self.db.query(CategoryMonthBudget).filter(
                CategoryMonthBudget.month == month,
                CategoryMonthBudget.category_id.in_(list(owned.keys())),
            )
        }
        for category_id, amount_cents in categories.items():
            if category_id in existing:
                existing[category_id].amount_cents = amount_cents
            else:
                self.db.add(CategoryMonthBudget(
                    category_id=category_id,
                    month=month,
                    amount_cents=amount_cents,
                ))

        self.db.flush()
        return self.get_month(month)

    def set_month_income(self, month: str, income_cents: int) -> None:
        income = self._month_income(month)
        if income:
            income.amount_cents = income_cents
        else:
            self.db.add(MonthlyIncome(
                user_id=self.user_id,
                month=month,
                amount_cents=income_cents,
            ))
        self.db.flush()

    def delete_month(self, month: str) -> None:
        """Drop a month's income and overrides so the defaults apply again."""
        self.db.query(MonthlyIncome).filter(
            MonthlyIncome.user_id == self.user_id,
            MonthlyIncome.month == month,
        ).delete()

        category_ids = [c.id for c in self._categories()]
        if category_ids:
            self.db.query(CategoryMonthBudget).filter(
                CategoryMonthBudget.month == month,
                CategoryMonthBudget.category_id.in_(category_ids),
            ).delete(synchronize_session=False)
        self.db.flush()
        logger.info("Cleared budget for %s (user %s)", month, self.user_id)

    # --- Helpers ---

    def _categories(self) -> list[Category]:
        return (
            self.db.query(Category)
            .filter(Category.user_id == self.user_id)
            .order_by(Category.name)
            .all()
        )

    def _categories_by_id(self, category_ids) -> dict[int, Category]:
        """The user's categories for the given ids; all of them must exist."""
        wanted = set(category_ids)
        found = {c.id: c for c in self._categories() if c.id in wanted}
        missing = wanted - found.keys()
        if missing:
            raise NotFoundError(f"Category not found: {sorted(missing)[0]}")
        return found

    def _month_income(self, month: str) -> MonthlyIncome | None:
        return (
            self.db.query(MonthlyIncome)
            .filter(MonthlyIncome.user_id == self.user_id, MonthlyIncome.month == month)
            .first()
        )

    def _month_overrides(self, month: str) -> dict[int, int]:
        rows = (
            self.db.query(CategoryMonthBudget)
            .join(Category, CategoryMonthBudget.category_id == Category.id)
            .filter(Category.user_id == self.user_id, CategoryMonthBudget.month == month)
            .all()
        )
        return {row.category_id: row.amount_cents for row in rows}
