from datetime import datetime
from pydantic import BaseModel, Field, computed_field


class CategoryBase(BaseModel):
    """Base category fields."""
    name: str = Field(..., min_length=1)
    icon: str = ""
    color: str = ""


class CategoryCreate(CategoryBase):
    """Fields for creating a category."""
    budget_cents: int = Field(0, ge=0)
    # False stores the budget as an override for `month` only
    is_default: bool = True
    month: str | None = Field(None, pattern=r"^\d{4}-\d{2}$")


class CategoryUpdate(BaseModel):
    """Fields for updating a category (all optional)."""
    name: str | None = Field(None, min_length=1)
    icon: str | None = None
    color: str | None = None
    budget_cents: int | None = Field(None, ge=0)


class MonthlyBudgetInput(BaseModel):
    amount_cents: int = Field(..., ge=0)


class CategoryResponse(CategoryBase):
    """Category response with all fields."""
    id: int
    budget_cents: int
    spent_cents: int
    monthly_budgets: dict[str, int]
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def budget(self) -> float:
        return self.budget_cents / 100.0

    @computed_field
    @property
    def spent(self) -> float:
        return self.spent_cents / 100.0
