from typing import Any
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import Receipt


class ReceiptService:
    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def list_receipts(self) -> list[Receipt]:
        return (
            self.db.query(Receipt)
            .filter(Receipt.user_id == self.user_id)
            .order_by(Receipt.created_at.desc(), Receipt.id.desc())
            .all()
        )

    def get_receipt(self, receipt_id: int) -> Receipt:
        receipt = (
            self.db.query(Receipt)
            .filter(Receipt.id == receipt_id, Receipt.user_id == self.user_id)
            .first()
        )
        if not receipt:
            raise NotFoundError("Receipt not found")
        return receipt

    def upload_receipt(self, image_url: str, data: dict[str, Any] | None = None) -> Receipt:
        receipt = Receipt(user_id=self.user_id, image_url=image_url, data=data)
        self.db.add(receipt)
        self.db.flush()
        self.db.refresh(receipt)
        return receipt

    def delete_receipt(self, receipt: Receipt) -> None:
        # transactions.receipt_id is cleared by the foreign key (ON DELETE SET NULL)
        self.db.delete(receipt)
        self.db.flush()
