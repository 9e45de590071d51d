from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import ReceiptCreate, ReceiptResponse
from ..services import ReceiptService
from .deps import CurrentUser, get_current_user

router = APIRouter()


@router.get("/", response_model=list[ReceiptResponse])
def list_receipts(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReceiptService(db, user.user_id).list_receipts()


@router.get("/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(
    receipt_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReceiptService(db, user.user_id).get_receipt(receipt_id)


@router.post("/", response_model=ReceiptResponse, status_code=201)
def upload_receipt(
    data: ReceiptCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReceiptService(db, user.user_id).upload_receipt(data.image_url, data.data)


@router.delete("/{receipt_id}", status_code=204)
def delete_receipt(
    receipt_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = ReceiptService(db, user.user_id)
    service.delete_receipt(service.get_receipt(receipt_id))
    return None
