from pydantic import BaseModel


class CategorySummaryResponse(BaseModel):
    category_id: int
    name: str
    icon: str
    color: str
    budget: float
    budget_is_override: bool
    spent: float
    remaining: float
    percentage: float
    over_budget: bool

    class Config:
        from_attributes = True


class MonthSummaryResponse(BaseModel):
    """Month totals in base-currency units."""
    month: str
    base_currency: str
    income: float
    default_income: float
    income_is_override: bool
    using_default_income: bool
    total_budget: float
    total_spent: float
    remaining: float
    budget_remaining: float
    over_income: bool
    over_budget: bool
    percentage_spent: float
    budget_percentage: float
    expense_total: float
    income_total: float
    transaction_count: int
    categories: list[CategorySummaryResponse]
    unconverted_transaction_ids: list[int]

    class Config:
        from_attributes = True


class MonthWindowResponse(BaseModel):
    months: list[str]
    active_month: str
    earliest_month: str


class SpentMismatchResponse(BaseModel):
    category_id: int
    cached: float
    computed: float

    class Config:
        from_attributes = True
