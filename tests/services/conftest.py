"""Service test fixtures — async DB, FastAPI test client and fake outbound clients.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - Push, payment and mail dependencies are replaced by recording fakes;
      nothing leaves the process
    - make_user inserts a user with a stored access token, so the bearer
      header it returns authenticates like a real login

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - db_manager patched so the readiness probe sees the test engine
"""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import kringp.infrastructure.database as db_module
from kringp.core.errors import ExternalServiceError
from kringp.db.base import Base
from kringp.infrastructure.database import DatabaseSessionManager, get_db
from kringp.infrastructure.mailer import get_mailer
from kringp.infrastructure.payment_gateway import get_payment_gateway
from kringp.infrastructure.push_client import get_push_client
from kringp.infrastructure.security import create_access_token, get_cipher, hash_password
from kringp.main import app
from kringp.models import (
    BankDetail, Category, Country, SubCategory, User, UserAuthToken, UserStats,
)

PASSWORD = "secret123"


class FakePush:
    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, token, title, body, data=None):
        if self.fail:
            raise ExternalServiceError("push", "provider returned 500")
        self.sent.append({"token": token, "title": title, "body": body, "data": data})
        return {"success": 1}


class FakeGateway:
    def __init__(self):
        self.refunds: list[tuple] = []
        self.payouts: list[dict] = []
        self.fail = False

    async def refund(self, payment_id, amount):
        if self.fail:
            raise ExternalServiceError("payment", "request rejected (400)")
        self.refunds.append((payment_id, amount))
        return {"id": f"rfnd_{len(self.refunds)}"}

    async def payout(self, amount, account_reference, holder_name, purpose="payout"):
        if self.fail:
            raise ExternalServiceError("payment", "request rejected (400)")
        self.payouts.append({
            "amount": amount, "account": account_reference,
            "holder": holder_name, "purpose": purpose,
        })
        return {"id": f"pout_{len(self.payouts)}"}


class FakeMailer:
    def __init__(self):
        self.outbox: list[dict] = []

    async def send(self, to, subject, body):
        self.outbox.append({"to": to, "subject": subject, "body": body})
        return True


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_push():
    return FakePush()


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest.fixture
async def client(test_engine, test_session_factory, fake_push, fake_gateway, fake_mailer):
    """FastAPI test client with DB and outbound clients overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_push_client] = lambda: fake_push
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    app.dependency_overrides[get_mailer] = lambda: fake_mailer

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def country(test_db):
    row = Country(name="India", code="IN")
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def subcategory(test_db):
    category = Category(name="Fashion")
    test_db.add(category)
    await test_db.flush()
    sub = SubCategory(name="Streetwear", category_id=category.id)
    test_db.add(sub)
    await test_db.commit()
    return sub


@pytest.fixture
def make_user(test_db):
    """Factory: insert a user and return (user, auth headers)."""
    counter = {"n": 0}

    async def _make(
        type: str = "INFLUENCER",
        name: str | None = None,
        fcm_token: str | None = "device-token",
        earnings: Decimal | None = None,
    ):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            type=type,
            name=name or f"{type.title()} {n}",
            email_address=f"{type.lower()}{n}@mail.com",
            password=hash_password(PASSWORD),
            fcm_token=fcm_token,
            referral_code=f"CODE{n:04d}",
        )
        test_db.add(user)
        await test_db.flush()
        token = create_access_token(str(user.id), user.email_address)
        test_db.add(UserAuthToken(user_id=user.id, token=token))
        if earnings is not None:
            test_db.add(UserStats(
                user_id=user.id, total_deals=1, total_earnings=earnings,
            ))
        await test_db.commit()
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def add_bank_detail(test_db):
    async def _add(user: User, account_number: str = "123456789012"):
        detail = BankDetail(
            user_id=user.id,
            account_holder_name=user.name,
            account_number=get_cipher().encrypt(account_number),
            ifsc_code="HDFC0001234",
            status=True,
        )
        test_db.add(detail)
        await test_db.commit()
        return detail

    return _add
