"""Profile Completion — percentage score and suggestions for a user profile.

Invariants:
    - Both variants score exactly 15 fields, one point each
    - Score = round_half_up(completed / 15 * 100), always 0..100
    - Social-login accounts (password sentinel) never earn the password point
    - Suggestions list follows field order, one message per missing field

Design Decisions:
    - ProfileFacts decouples scoring from the ORM: callers flatten the user
      (with subcategory and platform counts) before scoring
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable

from kringp.core.domain_types import UserType

SOCIAL_LOGIN_PASSWORD = "SOCIAL_LOGIN"
TOTAL_FIELDS = 15


@dataclass(frozen=True)
class ProfileFacts:
    """Flattened user profile — only what the scoring rules look at."""
    type: str | None = None
    name: str | None = None
    email_address: str | None = None
    password: str | None = None
    country_id: object = None
    state_id: object = None
    city_id: object = None
    subcategory_count: int = 0
    user_image: str | None = None
    contact_person_name: str | None = None
    social_platform_count: int = 0
    birth_date: date | None = None
    gender: str | None = None
    sample_work_link: str | None = None
    about_you: str | None = None
    brand_type_id: object = None
    application_link: str | None = None
    description: str | None = None
    contact_person_phone_number: str | None = None
    gst_number: str | None = None


def _has_real_password(f: ProfileFacts) -> bool:
    return bool(f.password) and f.password != SOCIAL_LOGIN_PASSWORD


# (check, suggestion) pairs in scoring order
_INFLUENCER_RULES: list[tuple[Callable[[ProfileFacts], bool], str]] = [
    (lambda f: bool(f.type), "Please select your user type"),
    (lambda f: bool(f.name), "Add your name for your Profile Completion"),
    (lambda f: bool(f.email_address), "Add your email address for your Profile Completion"),
    (_has_real_password, "Set a secure password"),
    (lambda f: bool(f.country_id), "Please select your country"),
    (lambda f: bool(f.state_id), "Please select your state"),
    (lambda f: bool(f.city_id), "Please select your city"),
    (lambda f: f.subcategory_count > 0, "Choose at least one sub-category"),
    (lambda f: bool(f.user_image), "Please upload a profile image"),
    (lambda f: bool(f.contact_person_name), "Add a contact person name"),
    (lambda f: f.social_platform_count > 0,
     "Add your social media platforms for your Profile Completion"),
    (lambda f: bool(f.birth_date), "Set your birth date"),
    (lambda f: bool(f.gender), "Select your gender"),
    (lambda f: bool(f.sample_work_link), "Add your sample work link"),
    (lambda f: bool(f.about_you),
     "Write something about yourself for your Profile Completion"),
]

_BUSINESS_RULES: list[Callable[[ProfileFacts], bool]] = [
    lambda f: bool(f.type),
    lambda f: bool(f.name),
    lambda f: bool(f.email_address),
    _has_real_password,
    lambda f: bool(f.country_id),
    lambda f: bool(f.state_id),
    lambda f: bool(f.city_id),
    lambda f: bool(f.brand_type_id),
    lambda f: bool(f.user_image),
    lambda f: bool(f.application_link),
    lambda f: f.subcategory_count > 0,
    lambda f: bool(f.description),
    lambda f: bool(f.contact_person_name),
    lambda f: bool(f.contact_person_phone_number),
    lambda f: bool(f.gst_number),
]


def _percentage(completed: int) -> int:
    return math.floor(completed / TOTAL_FIELDS * 100 + 0.5)


def influencer_completion(facts: ProfileFacts) -> int:
    return _percentage(sum(1 for check, _ in _INFLUENCER_RULES if check(facts)))


def business_completion(facts: ProfileFacts) -> int:
    return _percentage(sum(1 for check in _BUSINESS_RULES if check(facts)))


def profile_completion(facts: ProfileFacts) -> int:
    """Score a profile with the rule set that matches its user type."""
    if facts.type == UserType.BUSINESS.value:
        return business_completion(facts)
    return influencer_completion(facts)


def completion_suggestions(facts: ProfileFacts) -> list[str]:
    return [msg for check, msg in _INFLUENCER_RULES if not check(facts)]
