"""Order Status — wire codes, completion transition and completion dates."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from kringp.core.domain_types import NotificationType, OfferStatus
from kringp.core.errors import BusinessRuleError, ValidationFailedError
from kringp.core.order_status import (
    check_transition, code_for, notification_for, resolve_completion_date,
    status_from_code,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("code,status", [
    (0, OfferStatus.PENDING), (4, OfferStatus.ORDERSUBMITTED), (6, OfferStatus.DECLINED),
])
def test_status_from_code(code, status):
    assert status_from_code(code) is status
    assert code_for(status) == code


@pytest.mark.parametrize("code", [-1, 7, 42])
def test_unknown_codes_are_rejected(code):
    with pytest.raises(ValidationFailedError):
        status_from_code(code)


def test_code_for_accepts_stored_string():
    assert code_for("COMPLETED") == 5


def test_complete_requires_submitted_order():
    with pytest.raises(BusinessRuleError) as exc:
        check_transition(OfferStatus.ACTIVATED, OfferStatus.COMPLETED)
    assert exc.value.code == "ORDER_NOT_SUBMITTED"


def test_complete_twice_is_rejected():
    with pytest.raises(BusinessRuleError) as exc:
        check_transition("COMPLETED", OfferStatus.COMPLETED)
    assert exc.value.code == "ORDER_ALREADY_COMPLETED"


def test_submitted_order_can_complete():
    check_transition(OfferStatus.ORDERSUBMITTED, OfferStatus.COMPLETED)


def test_other_transitions_are_free():
    check_transition(OfferStatus.PENDING, OfferStatus.CANCELED)


def test_day_count_is_relative_to_now():
    assert resolve_completion_date(5, NOW) == NOW + timedelta(days=5)


def test_plain_date_becomes_utc_midnight():
    assert resolve_completion_date(date(2026, 4, 2), NOW) == datetime(
        2026, 4, 2, tzinfo=timezone.utc,
    )


def test_naive_datetime_is_treated_as_utc():
    result = resolve_completion_date(datetime(2026, 4, 2, 9, 30), NOW)
    assert result.tzinfo is timezone.utc


def test_negative_days_are_rejected():
    with pytest.raises(ValidationFailedError):
        resolve_completion_date(-1, NOW)


def test_missing_completion_date_stays_missing():
    assert resolve_completion_date(None, NOW) is None


def test_completion_notice_mentions_credited_amount():
    notice = notification_for(OfferStatus.COMPLETED, Decimal("400.00"))
    assert notice.type is NotificationType.ORDER_COMPLETED
    assert "₹400.00" in notice.body


def test_no_notice_for_activation():
    assert notification_for(OfferStatus.ACTIVATED) is None
