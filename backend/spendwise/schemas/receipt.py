from datetime import datetime
from typing import Any
from pydantic import BaseModel


class ReceiptCreate(BaseModel):
    image_url: str
    data: dict[str, Any] | None = None


class ReceiptResponse(BaseModel):
    id: int
    image_url: str
    data: dict[str, Any] | None = None
    created_at: datetime

    class Config:
        from_attributes = True
