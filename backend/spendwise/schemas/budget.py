from pydantic import BaseModel, Field


class MonthBudgetInput(BaseModel):
    income_cents: int = Field(..., ge=0)
    categories: dict[int, int] = {}


class MonthBudgetResponse(BaseModel):
    month: str
    income_cents: int
    income_is_explicit: bool
    categories: dict[int, int]


class BudgetDefaultsInput(BaseModel):
    default_income_cents: int = Field(..., ge=0)
    default_category_budgets: dict[int, int] = {}


class BudgetDefaultsResponse(BaseModel):
    default_income_cents: int
    default_category_budgets: dict[int, int]
