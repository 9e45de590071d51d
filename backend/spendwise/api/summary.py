from dataclasses import asdict
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..months import current_month
from ..schemas import MonthSummaryResponse, MonthWindowResponse, SpentMismatchResponse
from ..services import SummaryService, TransactionService
from .deps import CurrentUser, get_current_user, require_month

router = APIRouter()


@router.get("/", response_model=MonthSummaryResponse)
def month_summary(
    month: str | None = Query(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Income, budgets and spend for a month (current month by default)."""
    month = require_month(month) if month else current_month()
    return asdict(SummaryService(db, user.user_id).month_summary(month))


@router.get("/months", response_model=MonthWindowResponse)
def month_window(
    anchor: str | None = Query(None),
    active: str | None = Query(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Selectable months, newest first. A malformed anchor means the current month."""
    return SummaryService(db, user.user_id).month_window(anchor, active)


@router.get("/spent-check", response_model=list[SpentMismatchResponse])
def spent_check(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Categories whose cached spent counter disagrees with their transactions."""
    mismatches = TransactionService(db, user.user_id).verify_spent_counters()
    return [asdict(m) for m in mismatches]
