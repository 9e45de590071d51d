from .base import Base
from .category import Category
from .transaction import Transaction
from .budget import BudgetDefaults, MonthlyIncome, CategoryMonthBudget
from .receipt import Receipt
from .settings import UserSettings

__all__ = [
    "Base",
    "Category",
    "Transaction",
    "BudgetDefaults",
    "MonthlyIncome",
    "CategoryMonthBudget",
    "Receipt",
    "UserSettings",
]
