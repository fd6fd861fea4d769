"""Request schema validation — rules enforced before a route runs.

Invariants:
    - Signup never creates ADMIN accounts
    - Profile updates cannot carry credentials
    - Offers target exactly one of influencer / group
    - Work post list fields accept arrays or comma-separated strings
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from kringp.schemas.group import GroupCreate
from kringp.schemas.order import OrderCreate, RatingCreate
from kringp.schemas.user import ProfileUpdate, SignupRequest, VerifyOtpRequest
from kringp.schemas.work_post import WorkPostCreate


# --- Users --------------------------------------------------------------------

def test_signup_defaults_to_business():
    req = SignupRequest(email_address="a@mail.com", password="secret1", country_id=uuid4())
    assert req.type.value == "BUSINESS"


def test_signup_rejects_admin_type():
    with pytest.raises(ValidationError):
        SignupRequest(
            email_address="a@mail.com", password="secret1",
            country_id=uuid4(), type="ADMIN",
        )


def test_signup_password_too_short():
    with pytest.raises(ValidationError):
        SignupRequest(email_address="a@mail.com", password="123", country_id=uuid4())


def test_profile_update_rejects_credentials():
    with pytest.raises(ValidationError):
        ProfileUpdate(email_address="new@mail.com")
    with pytest.raises(ValidationError):
        ProfileUpdate(password="another")


def test_profile_update_may_omit_type_but_not_clear_it():
    assert ProfileUpdate(name="Asha").type is None
    with pytest.raises(ValidationError):
        ProfileUpdate(type=None)


@pytest.mark.parametrize("otp", ["12345", "1234567", "12a456"])
def test_otp_must_be_six_digits(otp):
    with pytest.raises(ValidationError):
        VerifyOtpRequest(email_address="a@mail.com", otp=otp)


# --- Orders & ratings ---------------------------------------------------------

def test_offer_needs_one_target():
    with pytest.raises(ValidationError):
        OrderCreate(business_id=uuid4())
    with pytest.raises(ValidationError):
        OrderCreate(business_id=uuid4(), influencer_id=uuid4(), group_id=uuid4())


def test_offer_accepts_day_count_or_date():
    assert OrderCreate(business_id=uuid4(), group_id=uuid4(), completion_date=5).completion_date == 5
    dated = OrderCreate(business_id=uuid4(), group_id=uuid4(), completion_date="2026-03-01")
    assert str(dated.completion_date).startswith("2026-03-01")


def test_negative_amount_rejected():
    with pytest.raises(ValidationError):
        OrderCreate(business_id=uuid4(), group_id=uuid4(), total_amount=-1)


def test_rating_targets_group_or_user_not_both():
    with pytest.raises(ValidationError):
        RatingCreate(order_id=uuid4(), rating=4)
    with pytest.raises(ValidationError):
        RatingCreate(order_id=uuid4(), rating=4, group_id=uuid4(), rated_to_user_id=uuid4())


# --- Groups & work posts ------------------------------------------------------

def test_group_invites_deduplicated_in_order():
    a, b = uuid4(), uuid4()
    group = GroupCreate(group_name="  Crew  ", invited_user_ids=[a, b, a])
    assert group.group_name == "Crew"
    assert group.invited_user_ids == [a, b]


def test_group_name_cannot_be_blank():
    with pytest.raises(ValidationError):
        GroupCreate(group_name="   ")


def test_work_post_lists_accept_comma_strings():
    post = WorkPostCreate(
        title="Brief", subcategory_id=uuid4(),
        deliverables="1 reel, 2 stories ,", tags=["a", " b "],
    )
    assert post.deliverables == ["1 reel", "2 stories"]
    assert post.tags == ["a", "b"]
    assert post.platforms is None


def test_work_post_dates_in_order():
    with pytest.raises(ValidationError):
        WorkPostCreate(
            title="Brief", subcategory_id=uuid4(),
            start_date="2026-05-02", end_date="2026-05-01",
        )
