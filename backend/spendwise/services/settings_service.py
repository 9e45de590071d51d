import logging
from sqlalchemy.orm import Session

from ..config import get_config
from ..currency import DEFAULT_CURRENCIES, apply_rate_overrides, rate_table
from ..domain import Currency
from ..models import UserSettings

logger = logging.getLogger(__name__)


def configured_currencies() -> list[Currency]:
    """Built-in currency table with any configured rate overrides applied."""
    return apply_rate_overrides(DEFAULT_CURRENCIES, get_config().currency_rates)


def configured_rates() -> dict[str, Currency]:
    return rate_table(configured_currencies())


class SettingsService:
    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def get_settings(self) -> UserSettings:
        """Return the user's settings, creating defaults on first access."""
        settings = self.db.get(UserSettings, self.user_id)
        if settings is None:
            settings = UserSettings(
                user_id=self.user_id,
                theme="light",
                language="en",
                currency=get_config().default_currency,
                notifications=True,
            )
            self.db.add(settings)
            self.db.flush()
        return settings

    def base_currency(self) -> str:
        return self.get_settings().currency

    def update_settings(
        self,
        theme: str | None = None,
        language: str | None = None,
        currency: str | None = None,
        notifications: bool | None = None,
    ) -> UserSettings:
        settings = self.get_settings()
        previous_currency = settings.currency

        if theme is not None:
            settings.theme = theme
        if language is not None:
            settings.language = language
        if currency is not None:
            settings.currency = currency
        if notifications is not None:
            settings.notifications = notifications
        self.db.flush()

        if settings.currency != previous_currency:
            # Cached spent counters are kept in base currency
            from .transaction_service import TransactionService
            logger.info(
                "Base currency for %s changed %s -> %s; recomputing spent counters",
                self.user_id, previous_currency, settings.currency,
            )
            TransactionService(self.db, self.user_id).recompute_spent()

        return settings
