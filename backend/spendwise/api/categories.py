from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import CategoryCreate, CategoryUpdate, CategoryResponse, MonthlyBudgetInput
from ..services import CategoryService
from .deps import CurrentUser, get_current_user, require_month

router = APIRouter()


def _build_response(category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
        "budget_cents": category.budget_cents,
        "spent_cents": category.spent_cents,
        "monthly_budgets": category.monthly_budget_map(),
        "created_at": category.created_at,
        "updated_at": category.updated_at,
    }


@router.get("/", response_model=list[CategoryResponse])
def list_categories(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all categories."""
    service = CategoryService(db, user.user_id)
    return [_build_response(c) for c in service.list_categories()]


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a single category by ID."""
    service = CategoryService(db, user.user_id)
    return _build_response(service.get_category(category_id))


@router.post("/", response_model=CategoryResponse, status_code=201)
def create_category(
    data: CategoryCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a new category."""
    service = CategoryService(db, user.user_id, user.role)
    category = service.create_category(
        name=data.name,
        icon=data.icon,
        color=data.color,
        budget_cents=data.budget_cents,
        is_default=data.is_default,
        month=require_month(data.month) if data.month else None,
    )
    return _build_response(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a category."""
    service = CategoryService(db, user.user_id)
    category = service.update_category(
        service.get_category(category_id),
        **data.model_dump(exclude_unset=True),
    )
    return _build_response(category)


@router.put("/{category_id}/budgets/{month}", response_model=CategoryResponse)
def set_monthly_budget(
    category_id: int,
    month: str,
    data: MonthlyBudgetInput,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set the category's budget for one month."""
    service = CategoryService(db, user.user_id)
    category = service.set_monthly_budget(
        service.get_category(category_id), require_month(month), data.amount_cents
    )
    return _build_response(category)


@router.delete("/{category_id}/budgets/{month}", response_model=CategoryResponse)
def clear_monthly_budget(
    category_id: int,
    month: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove the month's override so the default budget applies."""
    service = CategoryService(db, user.user_id)
    category = service.clear_monthly_budget(
        service.get_category(category_id), require_month(month)
    )
    return _build_response(category)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a category and every transaction in it."""
    service = CategoryService(db, user.user_id)
    service.delete_category(service.get_category(category_id))
    return None
