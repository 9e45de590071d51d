from .budget_service import BudgetService
from .category_service import CategoryService
from .transaction_service import TransactionService
from .receipt_service import ReceiptService
from .settings_service import SettingsService, configured_currencies, configured_rates
from .summary_service import SummaryService

__all__ = [
    "BudgetService",
    "CategoryService",
    "TransactionService",
    "ReceiptService",
    "SettingsService",
    "SummaryService",
    "configured_currencies",
    "configured_rates",
]
