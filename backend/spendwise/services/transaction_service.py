import logging
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import and_, extract

from ..aggregation import SpentMismatch, verify_spent
from ..config import get_config
from ..currency import can_convert, convert_cents
from ..domain import TransactionType
from ..errors import NotFoundError
from ..models import Category, Receipt, Transaction
from ..policy import check_guest_limit
from .category_service import CategoryService
from .mapping import to_domain_category, to_domain_transaction
from .settings_service import SettingsService, configured_rates

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, db: Session, user_id: str, role: str | None = None):
        self.db = db
        self.user_id = user_id
        self.role = role
        self.rates = configured_rates()

    def _base_currency(self) -> str:
        return SettingsService(self.db, self.user_id).base_currency()

    def _counter_cents(self, transaction: Transaction, base_currency: str) -> int:
        """What this transaction contributes to its category's spent counter."""
        return convert_cents(transaction.amount_cents, transaction.currency, base_currency, self.rates)

    @staticmethod
    def _add_spent(category: Category, cents: int) -> None:
        category.spent_cents = (category.spent_cents or 0) + cents

    @staticmethod
    def _remove_spent(category: Category, cents: int) -> None:
        # Floored at zero
        category.spent_cents = max(0, (category.spent_cents or 0) - cents)

    def _apply_amount(
        self,
        transaction: Transaction,
        amount_cents: int,
        currency: str | None,
        base_currency: str,
    ) -> None:
        """Store the amount in base currency, keeping the entered amount if converted."""
        currency = currency or base_currency
        if currency != base_currency and can_convert(currency, base_currency, self.rates):
            transaction.amount_cents = convert_cents(amount_cents, currency, base_currency, self.rates)
            transaction.currency = base_currency
            transaction.original_amount_cents = amount_cents
            transaction.original_currency = currency
        else:
            if currency != base_currency:
                logger.warning(
                    "No rate for %s -> %s; recording %s unconverted",
                    currency, base_currency, amount_cents,
                )
            transaction.amount_cents = amount_cents
            transaction.currency = currency
            transaction.original_amount_cents = None
            transaction.original_currency = None

    def list_transactions(
        self,
        year: int | None = None,
        month: int | None = None,
        category_id: int | None = None,
    ) -> list[Transaction]:
        """Transactions for the user, optionally scoped to a year+month."""
        query = self.db.query(Transaction).filter(Transaction.user_id == self.user_id)

        if year and month:
            query = query.filter(
                and_(
                    extract("year", Transaction.posted_date) == year,
                    extract("month", Transaction.posted_date) == month
                )
            )
        if category_id:
            query = query.filter(Transaction.category_id == category_id)

        return query.order_by(
            Transaction.posted_date,
            Transaction.created_at
        ).all()

    def count_transactions(self) -> int:
        return self.db.query(Transaction).filter(Transaction.user_id == self.user_id).count()

    def get_transaction(self, transaction_id: int) -> Transaction:
        transaction = (
            self.db.query(Transaction)
            .filter(Transaction.id == transaction_id, Transaction.user_id == self.user_id)
            .first()
        )
        if not transaction:
            raise NotFoundError("Transaction not found")
        return transaction

    def create_transaction(
        self,
        category_id: int,
        amount_cents: int,
        posted_date: date,
        currency: str | None = None,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        note: str | None = None,
        receipt_id: int | None = None,
    ) -> Transaction:
        check_guest_limit(
            self.role, "transaction", self.count_transactions(), get_config().guest_limits
        )
        category = CategoryService(self.db, self.user_id).get_category(category_id)
        if receipt_id is not None:
            self._check_receipt(receipt_id)

        base_currency = self._base_currency()
        transaction = Transaction(
            user_id=self.user_id,
            category=category,
            posted_date=posted_date,
            transaction_type=transaction_type,
            note=note,
            receipt_id=receipt_id,
        )
        self._apply_amount(transaction, amount_cents, currency, base_currency)
        self.db.add(transaction)
        self._add_spent(category, self._counter_cents(transaction, base_currency))
        self.db.flush()
        self.db.refresh(transaction)
        return transaction

    def update_transaction(
        self,
        transaction: Transaction,
        category_id: int | None = None,
        amount_cents: int | None = None,
        currency: str | None = None,
        posted_date: date | None = None,
        transaction_type: TransactionType | None = None,
        note: str | None = None,
        receipt_id: int | None = None,
    ) -> Transaction:
        """Update a transaction, moving its spent contribution as needed."""
        base_currency = self._base_currency()
        old_category = transaction.category
        self._remove_spent(old_category, self._counter_cents(transaction, base_currency))

        if category_id is not None and category_id != transaction.category_id:
            new_category = CategoryService(self.db, self.user_id).get_category(category_id)
            transaction.category = new_category
        if amount_cents is not None or currency is not None:
            entered_amount = transaction.original_amount_cents if transaction.original_currency else transaction.amount_cents
            entered_currency = transaction.original_currency or transaction.currency
            self._apply_amount(
                transaction,
                amount_cents if amount_cents is not None else entered_amount,
                currency or entered_currency,
                base_currency,
            )
        if posted_date is not None:
            transaction.posted_date = posted_date
        if transaction_type is not None:
            transaction.transaction_type = transaction_type
        if note is not None:
            transaction.note = note
        if receipt_id is not None:
            self._check_receipt(receipt_id)
            transaction.receipt_id = receipt_id

        self._add_spent(transaction.category, self._counter_cents(transaction, base_currency))
        self.db.flush()
        self.db.refresh(transaction)
        return transaction

    def delete_transaction(self, transaction: Transaction) -> None:
        """Delete a transaction, reversing its spent contribution and dropping its receipt."""
        base_currency = self._base_currency()
        self._remove_spent(transaction.category, self._counter_cents(transaction, base_currency))

        receipt_id = transaction.receipt_id
        self.db.delete(transaction)
        self.db.flush()

        if receipt_id is not None:
            self.db.query(Receipt).filter(
                Receipt.id == receipt_id,
                Receipt.user_id == self.user_id,
            ).delete(synchronize_session=False)

    def _check_receipt(self, receipt_id: int) -> None:
        exists = (
            self.db.query(Receipt.id)
            .filter(Receipt.id == receipt_id, Receipt.user_id == self.user_id)
            .first()
        )
        if not exists:
            raise NotFoundError("Receipt not found")

    def recompute_spent(self) -> None:
        """Rebuild every category's spent counter from its transactions."""
        base_currency = self._base_currency()
        totals: dict[int, int] = {}
        for t in self.list_transactions():
            totals[t.category_id] = totals.get(t.category_id, 0) + self._counter_cents(t, base_currency)
        for category in CategoryService(self.db, self.user_id).list_categories():
            category.spent_cents = totals.get(category.id, 0)
        self.db.flush()

    def verify_spent_counters(self) -> list[SpentMismatch]:
        """Compare cached counters with a fresh aggregation over all transactions."""
        base_currency = self._base_currency()
        categories = CategoryService(self.db, self.user_id).list_categories()
        transactions = self.list_transactions()
        mismatches = verify_spent(
            [to_domain_category(c) for c in categories],
            [to_domain_transaction(t) for t in transactions],
            base_currency,
            self.rates,
            # counters round each conversion to the cent
            tolerance=0.005 * max(1, len(transactions)),
        )
        for m in mismatches:
            logger.error(
                "Spent counter drift on category %s: cached %.2f, computed %.2f",
                m.category_id, m.cached, m.computed,
            )
        return mismatches
