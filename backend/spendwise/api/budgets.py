from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import (
    MonthBudgetInput,
    MonthBudgetResponse,
    BudgetDefaultsInput,
    BudgetDefaultsResponse,
)
from ..services import BudgetService
from .deps import CurrentUser, get_current_user, month_from_parts

router = APIRouter()


@router.get("/defaults", response_model=BudgetDefaultsResponse)
def get_defaults(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return BudgetService(db, user.user_id).get_defaults()


@router.put("/defaults", response_model=BudgetDefaultsResponse)
def set_defaults(
    data: BudgetDefaultsInput,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = BudgetService(db, user.user_id)
    return service.set_defaults(
        default_income_cents=data.default_income_cents,
        default_category_budgets=data.default_category_budgets,
    )


@router.get("/{year}/{month}", response_model=MonthBudgetResponse | None)
def get_month_budget(
    year: int,
    month: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The month's explicit budget, or null when only defaults apply."""
    return BudgetService(db, user.user_id).get_month(month_from_parts(year, month))


@router.put("/{year}/{month}", response_model=MonthBudgetResponse)
def set_month_budget(
    year: int,
    month: int,
    data: MonthBudgetInput,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = BudgetService(db, user.user_id)
    return service.set_month(
        month_from_parts(year, month),
        income_cents=data.income_cents,
        categories=data.categories,
    )


@router.delete("/{year}/{month}", status_code=204)
def delete_month_budget(
    year: int,
    month: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    BudgetService(db, user.user_id).delete_month(month_from_parts(year, month))
    return None
