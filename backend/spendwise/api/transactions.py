from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import TransactionCreate, TransactionUpdate, TransactionResponse
from ..services import TransactionService
from .deps import CurrentUser, get_current_user, month_from_parts

router = APIRouter()


@router.get("/", response_model=list[TransactionResponse])
def list_transactions(
    year: int | None = Query(None),
    month: int | None = Query(None),
    category_id: int | None = Query(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get transactions with optional filters.

    If year/month provided, returns transactions for that month.
    """
    if year is not None and month is not None:
        month_from_parts(year, month)
    service = TransactionService(db, user.user_id)
    return service.list_transactions(year=year, month=month, category_id=category_id)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a single transaction by ID."""
    return TransactionService(db, user.user_id).get_transaction(transaction_id)


@router.post("/", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a new transaction, converting it to the base currency."""
    service = TransactionService(db, user.user_id, user.role)
    return service.create_transaction(
        category_id=data.category_id,
        amount_cents=data.amount_cents,
        posted_date=data.posted_date,
        currency=data.currency.upper() if data.currency else None,
        transaction_type=data.transaction_type,
        note=data.note,
        receipt_id=data.receipt_id,
    )


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a transaction."""
    service = TransactionService(db, user.user_id)
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("currency"):
        update_data["currency"] = update_data["currency"].upper()
    return service.update_transaction(service.get_transaction(transaction_id), **update_data)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a transaction and its receipt."""
    service = TransactionService(db, user.user_id)
    service.delete_transaction(service.get_transaction(transaction_id))
    return None
