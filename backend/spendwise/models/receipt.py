from typing import Any
from sqlalchemy import String, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Receipt(Base, TimestampMixin):
    """A captured receipt image and whatever was extracted from it."""

    __tablename__ = "receipts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<Receipt(id={self.id}, user={self.user_id})>"
