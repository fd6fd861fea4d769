"""Error Hierarchy — HTTP status, codes and the failure envelope."""

from kringp.core.envelope import failure, success
from kringp.core.errors import (
    BusinessRuleError, ConflictError, ErrorCategory, ExternalServiceError,
    InvalidTokenError, PermissionDeniedError, ResourceNotFoundError,
)


def test_envelopes():
    assert success("ok", {"a": 1}) == {"status": True, "message": "ok", "data": {"a": 1}}
    assert failure("nope") == {"status": False, "message": "nope", "data": None}


def test_not_found_message_includes_id_when_given():
    assert ResourceNotFoundError("User", "42").message == "User '42' not found"
    assert ResourceNotFoundError("Bank detail").message == "Bank detail not found"


def test_http_status_per_error_kind():
    assert BusinessRuleError("x").http_status == 400
    assert ResourceNotFoundError("x").http_status == 404
    assert InvalidTokenError().http_status == 403
    assert PermissionDeniedError().http_status == 403
    assert ConflictError("x").http_status == 409
    assert ExternalServiceError("payment", "down").http_status == 502


def test_to_response_is_failure_envelope():
    err = BusinessRuleError("Insufficient balance", "INSUFFICIENT_BALANCE")
    assert err.to_response() == {
        "status": False, "message": "Insufficient balance", "data": None,
    }
    assert err.category is ErrorCategory.BUSINESS_RULE
