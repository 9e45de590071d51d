from sqlalchemy.orm import Session

from ..aggregation import MonthSummary, summarize_month
from ..config import get_config
from ..months import first_income_month, resolve_active_month, selectable_months
from .budget_service import BudgetService
from .category_service import CategoryService
from .mapping import to_domain_category, to_domain_transaction
from .settings_service import SettingsService, configured_rates
from .transaction_service import TransactionService


class SummaryService:
    """Feeds stored data through the pure aggregator."""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def month_summary(self, month: str) -> MonthSummary:
        budgets = BudgetService(self.db, self.user_id)
        categories = CategoryService(self.db, self.user_id).list_categories()
        transactions = TransactionService(self.db, self.user_id).list_transactions()

        return summarize_month(
            month=month,
            categories=[to_domain_category(c) for c in categories],
            transactions=[to_domain_transaction(t) for t in transactions],
            base_currency=SettingsService(self.db, self.user_id).base_currency(),
            rates=configured_rates(),
            default_income=budgets.get_budget_defaults().default_income_cents / 100.0,
            monthly_incomes={
                m: cents / 100.0 for m, cents in budgets.monthly_incomes().items()
            },
        )

    def earliest_month(self) -> str:
        budgets = BudgetService(self.db, self.user_id)
        transactions = TransactionService(self.db, self.user_id).list_transactions()
        return first_income_month(
            default_income=budgets.get_budget_defaults().default_income_cents,
            monthly_incomes=budgets.monthly_incomes(),
            transaction_dates=[t.posted_date for t in transactions],
        )

    def month_window(self, anchor: str | None, active: str | None) -> dict:
        """Selectable months, newest first, and the active month within them."""
        earliest = self.earliest_month()
        months = selectable_months(
            anchor, earliest, limit=get_config().max_lookback_months
        )
        return {
            "months": months,
            "active_month": resolve_active_month(active, months),
            "earliest_month": earliest,
        }
