"""Conversions from ORM rows to the plain snapshot types used by the aggregator."""

from ..domain import Category as DomainCategory, Transaction as DomainTransaction
from ..models import Category, Transaction


def to_domain_category(category: Category) -> DomainCategory:
    return DomainCategory(
        id=category.id,
        name=category.name,
        icon=category.icon,
        color=category.color,
        budget=category.budget,
        monthly_budgets={
            month: cents / 100.0 for month, cents in category.monthly_budget_map().items()
        },
        spent=category.spent,
    )


def to_domain_transaction(transaction: Transaction) -> DomainTransaction:
    return DomainTransaction(
        id=transaction.id,
        user_id=transaction.user_id,
        category_id=transaction.category_id,
        amount=transaction.amount,
        currency=transaction.currency,
        date=transaction.posted_date,
        type=transaction.transaction_type,
        description=transaction.note or "",
        original_amount=(
            transaction.original_amount_cents / 100.0
            if transaction.original_amount_cents is not None else None
        ),
        original_currency=transaction.original_currency,
        receipt_id=transaction.receipt_id,
    )
