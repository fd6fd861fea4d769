"""ORM Models — SQLAlchemy declarative models for all marketplace entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the hub: almost every table carries a user_id

Design Decisions:
    - One file per aggregate for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from kringp.models.location import Country, State, City  # noqa: F401
from kringp.models.category import Category, SubCategory, BrandType  # noqa: F401
from kringp.models.user import (  # noqa: F401
    User, UserAuthToken, UserSubCategory, UserStats, RecentView, PasswordReset,
)
from kringp.models.social_media import SocialMediaPlatform  # noqa: F401
from kringp.models.bank_detail import BankDetail  # noqa: F401
from kringp.models.badge import Badge, UserBadge  # noqa: F401
from kringp.models.group import Group, GroupInvite  # noqa: F401
from kringp.models.order import Order, Earning, Withdrawal  # noqa: F401
from kringp.models.rating import Rating  # noqa: F401
from kringp.models.notification import Notification  # noqa: F401
from kringp.models.product import Product, ProductPurchase  # noqa: F401
from kringp.models.coin import CoinTransaction, ReferralCoinSummary, CoinWithdrawal  # noqa: F401
from kringp.models.work_post import WorkPost, WorkPostApplication  # noqa: F401
from kringp.models.app_setting import AppSetting  # noqa: F401
from kringp.models.support import AbuseReport, ContactRequest, DailyTip  # noqa: F401
