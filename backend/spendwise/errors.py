class SpendwiseError(Exception):
    """Base error carrying a machine-readable code and a human-readable message."""

    code = "ERROR"
    status_code = 400

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(SpendwiseError):
    """Operating on a missing category, transaction or receipt."""

    code = "NOT_FOUND"
    status_code = 404


class GuestLimitReached(SpendwiseError):
    """A guest user hit a tier cap; callers route this to an upgrade prompt."""

    code = "GUEST_LIMIT_REACHED"
    status_code = 403


class InvalidMonthError(SpendwiseError):
    code = "INVALID_MONTH"
    status_code = 422


class NotAuthenticated(SpendwiseError):
    code = "UNAUTHORIZED"
    status_code = 401


class ApiError(SpendwiseError):
    """Error body returned by the API that does not map to a known type."""


ERRORS_BY_CODE: dict[str, type[SpendwiseError]] = {
    cls.code: cls
    for cls in (NotFoundError, GuestLimitReached, InvalidMonthError, NotAuthenticated)
}


def error_from_payload(payload: dict, status_code: int | None = None) -> SpendwiseError:
    """Rebuild a typed error from a `{code, message}` response body."""
    code = payload.get("code") or ApiError.code
    message = payload.get("message") or "Request failed"
    cls = ERRORS_BY_CODE.get(code)
    if cls is not None:
        return cls(message)
    error = ApiError(message, code=code)
    if status_code is not None:
        error.status_code = status_code
    return error
