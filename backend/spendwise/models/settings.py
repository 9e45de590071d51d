from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class UserSettings(Base, TimestampMixin):
    """Per-user preferences. ``currency`` is the user's base currency."""

    __tablename__ = "user_settings"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    theme: Mapped[str] = mapped_column(String(20), nullable=False, default="light")
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="en")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
