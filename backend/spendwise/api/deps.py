from dataclasses import dataclass
from fastapi import Header

from ..errors import InvalidMonthError, NotAuthenticated
from ..months import format_month, is_valid_month


@dataclass(frozen=True)
class CurrentUser:
    """Caller identity, forwarded by the authenticating gateway."""
    user_id: str
    role: str | None = None


def get_current_user(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> CurrentUser:
    """FastAPI dependency reading the caller from request headers."""
    if not x_user_id:
        raise NotAuthenticated("You must be logged in to access this resource")
    return CurrentUser(user_id=x_user_id, role=x_user_role)


def require_month(value: str) -> str:
    if not is_valid_month(value):
        raise InvalidMonthError(f"Month must be YYYY-MM, got {value!r}")
    return value


def month_from_parts(year: int, month: int) -> str:
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise InvalidMonthError(f"Invalid year/month: {year}/{month}")
    return format_month(year, month)
