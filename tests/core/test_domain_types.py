"""Domain Types — verifies enum values and the numeric invite codes.

Tests:
    - Enums serialize to their stored string
    - request_status_code maps PENDING/ACCEPTED/REJECTED to 0/1/2
    - resolve_flag treats a missing flag as enabled
"""

import pytest

from kringp.core.domain_types import (
    OfferStatus, RequestStatus, UserType, request_status_code, resolve_flag,
)


def test_user_types_are_the_three_account_kinds():
    assert {t.value for t in UserType} == {"BUSINESS", "INFLUENCER", "ADMIN"}


def test_offer_status_has_seven_states():
    assert len(OfferStatus) == 7
    assert OfferStatus("ORDERSUBMITTED") is OfferStatus.ORDERSUBMITTED


def test_str_enum_compares_to_stored_value():
    assert UserType.BUSINESS == "BUSINESS"


@pytest.mark.parametrize("status,code", [
    (RequestStatus.PENDING, 0),
    (RequestStatus.ACCEPTED, 1),
    ("REJECTED", 2),
])
def test_request_status_code(status, code):
    assert request_status_code(status) == code


def test_request_status_code_rejects_unknown():
    with pytest.raises(ValueError):
        request_status_code("MAYBE")


def test_resolve_flag_defaults_missing_to_true():
    assert resolve_flag(None) is True
    assert resolve_flag(False) is False
