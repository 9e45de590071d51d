"""Usage caps for guest (demo) accounts."""

import logging
from typing import Mapping

from .errors import GuestLimitReached

logger = logging.getLogger(__name__)

GUEST_ROLE = "guest"

GUEST_LIMITS: dict[str, int] = {
    "category": 5,
    "transaction": 20,
}

_PLURALS = {
    "category": "categories",
    "transaction": "transactions",
}


def check_guest_limit(
    role: str | None,
    kind: str,
    existing_count: int,
    limits: Mapping[str, int] = GUEST_LIMITS,
) -> None:
    """
    Raise GuestLimitReached if a guest already owns ``limit`` or more of ``kind``.

    Must run before the write; it never changes anything itself.
    """
    if role != GUEST_ROLE:
        return
    limit = limits[kind]
    if existing_count >= limit:
        logger.info("Guest limit reached for %s (%d/%d)", kind, existing_count, limit)
        raise GuestLimitReached(
            f"Guest users can only add up to {limit} {_PLURALS.get(kind, kind)}. "
            "Upgrade to unlock more!"
        )
