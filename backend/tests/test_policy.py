import pytest

from spendwise.errors import GuestLimitReached, NotFoundError, ApiError, error_from_payload
from spendwise.policy import check_guest_limit


def test_guest_under_limit_passes():
    check_guest_limit("guest", "category", 4)
    check_guest_limit("guest", "transaction", 19)


def test_guest_at_limit_is_rejected():
    with pytest.raises(GuestLimitReached) as excinfo:
        check_guest_limit("guest", "category", 5)
    assert excinfo.value.code == "GUEST_LIMIT_REACHED"
    assert "5 categories" in excinfo.value.message

    with pytest.raises(GuestLimitReached) as excinfo:
        check_guest_limit("guest", "transaction", 20)
    assert "20 transactions" in excinfo.value.message


def test_non_guest_has_no_limit():
    check_guest_limit(None, "category", 500)
    check_guest_limit("member", "transaction", 500)


def test_custom_limits():
    with pytest.raises(GuestLimitReached):
        check_guest_limit("guest", "category", 2, {"category": 2})


def test_error_from_payload_maps_known_codes():
    error = error_from_payload({"code": "NOT_FOUND", "message": "Category not found"})
    assert isinstance(error, NotFoundError)
    assert error.message == "Category not found"
    assert isinstance(error_from_payload({"code": "GUEST_LIMIT_REACHED"}), GuestLimitReached)


def test_error_from_payload_unknown_code():
    error = error_from_payload({"code": "TEAPOT", "message": "Short and stout"}, 418)
    assert isinstance(error, ApiError)
    assert error.code == "TEAPOT"
    assert error.status_code == 418
    assert error.to_dict() == {"code": "TEAPOT", "message": "Short and stout"}
