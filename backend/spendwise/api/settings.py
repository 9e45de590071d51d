from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import SettingsUpdate, SettingsResponse, CurrencyResponse
from ..services import SettingsService, configured_currencies
from .deps import CurrentUser, get_current_user

router = APIRouter()


@router.get("/settings", response_model=SettingsResponse)
def get_settings(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SettingsService(db, user.user_id).get_settings()


@router.put("/settings", response_model=SettingsResponse)
def update_settings(
    data: SettingsUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("currency"):
        update_data["currency"] = update_data["currency"].upper()
    return SettingsService(db, user.user_id).update_settings(**update_data)


@router.get("/currencies", response_model=list[CurrencyResponse])
def list_currencies():
    """The currency table, rates in units per USD."""
    return configured_currencies()
