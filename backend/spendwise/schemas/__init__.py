from .category import CategoryCreate, CategoryUpdate, CategoryResponse, MonthlyBudgetInput
from .transaction import TransactionCreate, TransactionUpdate, TransactionResponse
from .budget import (
    MonthBudgetInput,
    MonthBudgetResponse,
    BudgetDefaultsInput,
    BudgetDefaultsResponse,
)
from .receipt import ReceiptCreate, ReceiptResponse
from .settings import SettingsUpdate, SettingsResponse, CurrencyResponse
from .summary import (
    CategorySummaryResponse,
    MonthSummaryResponse,
    MonthWindowResponse,
    SpentMismatchResponse,
)

__all__ = [
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "MonthlyBudgetInput",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "MonthBudgetInput",
    "MonthBudgetResponse",
    "BudgetDefaultsInput",
    "BudgetDefaultsResponse",
    "ReceiptCreate",
    "ReceiptResponse",
    "SettingsUpdate",
    "SettingsResponse",
    "CurrencyResponse",
    "CategorySummaryResponse",
    "MonthSummaryResponse",
    "MonthWindowResponse",
    "SpentMismatchResponse",
]
