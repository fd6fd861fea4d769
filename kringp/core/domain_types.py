"""Domain Types — enums and rich types that replace bare strings across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching in routes
    - Offer status codes 0..6 are the wire representation; OfferStatus is the stored one
    - Request status codes 0..2 mirror RequestStatus for clients that expect numbers

Design Decisions:
    - str Enums: serialize to JSON without custom encoders, store as VARCHAR
    - NewType for identifiers: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
GroupId = NewType("GroupId", UUID)
OrderId = NewType("OrderId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class UserType(str, Enum):
    BUSINESS = "BUSINESS"
    INFLUENCER = "INFLUENCER"
    ADMIN = "ADMIN"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class LoginType(str, Enum):
    """How the account authenticates."""
    NONE = "NONE"
    GOOGLE = "GOOGLE"
    APPLE = "APPLE"


class Platform(str, Enum):
    INSTAGRAM = "INSTAGRAM"
    FACEBOOK = "FACEBOOK"
    TWITTER = "TWITTER"
    YOUTUBE = "YOUTUBE"


class Visibility(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class OfferStatus(str, Enum):
    """Order lifecycle — stored on orders.status."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    CANCELED = "CANCELED"
    ACTIVATED = "ACTIVATED"
    ORDERSUBMITTED = "ORDERSUBMITTED"
    COMPLETED = "COMPLETED"
    DECLINED = "DECLINED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    REFUND = "REFUND"


class RequestStatus(str, Enum):
    """Group invite state."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class ApplicationStatus(str, Enum):
    """Work post application state."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class RatingTarget(str, Enum):
    """Who a rating is about."""
    GROUP = "GROUP"
    INFLUENCER = "INFLUENCER"
    BUSINESS = "BUSINESS"


class ReportedType(str, Enum):
    """What kind of account an abuse report is about."""
    INFLUENCER = "INFLUENCER"
    BUSINESS = "BUSINESS"
    GROUP = "GROUP"


class CoinType(str, Enum):
    REFERRAL = "REFERRAL"
    CASHOUT_BONUS = "CASHOUT_BONUS"
    PURCHASE = "PURCHASE"
    ADMIN_CREDIT = "ADMIN_CREDIT"


class CoinStatus(str, Enum):
    LOCKED = "LOCKED"
    UNLOCKED = "UNLOCKED"


class PurchaseStatus(str, Enum):
    PENDING = "PENDING"
    ONTHEWAY = "ONTHEWAY"
    DELIVERED = "DELIVERED"


class TransactionType(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class NotificationStatus(str, Enum):
    SENT = "SENT"
    FAILED = "FAILED"


class NotificationType(str, Enum):
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_ACCEPTED = "ORDER_ACCEPTED"
    ORDER_CANCELED = "ORDER_CANCELED"
    ORDER_SUBMITTED = "ORDER_SUBMITTED"
    ORDER_COMPLETED = "ORDER_COMPLETED"
    GROUP_INVITE = "GROUP_INVITE"
    GROUP_INVITE_RESPONSE = "GROUP_INVITE_RESPONSE"
    WORK_POST_APPLICATION = "WORK_POST_APPLICATION"
    APPLICATION_UPDATE = "APPLICATION_UPDATE"
    ADMIN = "ADMIN"


# ─── Status codes ────────────────────────────────────────────────

_REQUEST_STATUS_CODES: dict[RequestStatus, int] = {
    RequestStatus.PENDING: 0,
    RequestStatus.ACCEPTED: 1,
    RequestStatus.REJECTED: 2,
}


def request_status_code(status: RequestStatus | str) -> int:
    """Numeric code for an invite status (PENDING 0, ACCEPTED 1, REJECTED 2)."""
    return _REQUEST_STATUS_CODES[RequestStatus(status)]


def resolve_flag(value: bool | None) -> bool:
    """Missing boolean flags default to True (active, enabled)."""
    return True if value is None else value
