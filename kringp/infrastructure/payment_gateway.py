"""Payment Gateway — refunds and payouts through the Razorpay REST API.

Invariants:
    - Amounts are sent in the smallest currency unit (paise)
    - Transient failures (5xx, connection) retried with exponential backoff
    - Client errors (4xx) fail immediately
    - All failures mapped to ExternalServiceError (core/errors.py)
    - Every attempt of one refund or payout carries the same idempotency key,
      so a retried request never moves money twice

Design Decisions:
    - httpx basic auth with key id/secret; one AsyncClient per call keeps the
      wrapper stateless between requests
    - ±25% jitter on backoff, same shape as every other outbound wrapper
"""

import asyncio
import logging
import random
import uuid
from decimal import Decimal

import httpx

from kringp.config import get_settings
from kringp.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

_SERVICE = "payment"
IDEMPOTENCY_HEADER = "X-Payout-Idempotency"


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value())


class PaymentGateway:
    def __init__(
        self,
        api_url: str,
        key_id: str,
        key_secret: str,
        timeout_seconds: int = 30,
        max_retries: int = 2,
        base_delay_ms: int = 500,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.key_id = key_id
        self.key_secret = key_secret
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self._transport = transport

    async def refund(self, payment_id: str, amount: Decimal) -> dict:
        """Refund part or all of a captured payment."""
        return await self._post(
            f"/payments/{payment_id}/refund",
            {"amount": to_minor_units(amount)},
        )

    async def payout(
        self, amount: Decimal, account_reference: str, holder_name: str,
        purpose: str = "payout",
    ) -> dict:
        """Transfer `amount` to a beneficiary bank account."""
        return await self._post(
            "/payouts",
            {
                "amount": to_minor_units(amount),
                "currency": "INR",
                "mode": "IMPS",
                "purpose": purpose,
                "fund_account": {
                    "account_type": "bank_account",
                    "bank_account": {
                        "name": holder_name,
                        "account_number": account_reference,
                    },
                },
            },
        )

    async def _post(self, path: str, payload: dict) -> dict:
        if not self.key_id or not self.key_secret:
            raise ExternalServiceError(_SERVICE, "payment credentials are not configured")
        headers = {IDEMPOTENCY_HEADER: uuid.uuid4().hex}
        for attempt in range(self.max_retries + 1):
            try:
                async with httpx.AsyncClient(
                    base_url=self.api_url,
                    auth=(self.key_id, self.key_secret),
                    timeout=self.timeout_seconds,
                    transport=self._transport,
                ) as client:
                    response = await client.post(path, json=payload, headers=headers)
                if response.status_code >= 500:
                    await self._retry_or_raise(
                        f"provider returned {response.status_code}", attempt,
                    )
                    continue
                if response.status_code >= 400:
                    raise ExternalServiceError(
                        _SERVICE, f"request rejected ({response.status_code})",
                    )
                logger.info(
                    f"Payment call {path} succeeded",
                    extra={"service": _SERVICE, "attempt": attempt + 1},
                )
                return response.json()
            except httpx.HTTPError as e:
                await self._retry_or_raise(f"transport error: {e}", attempt)
        raise ExternalServiceError(_SERVICE, "retries exhausted")

    async def _retry_or_raise(self, reason: str, attempt: int) -> None:
        if attempt >= self.max_retries:
            raise ExternalServiceError(
                _SERVICE, f"{reason} after {self.max_retries} retries",
            )
        delay = self._backoff(attempt)
        logger.warning(f"Payment call failed ({reason}), retry after {delay}ms")
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = (2 ** attempt) * self.base_delay_ms
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency — overridden in tests."""
    settings = get_settings()
    return PaymentGateway(
        settings.payment_api_url,
        settings.payment_key_id,
        settings.payment_key_secret,
        settings.payment_timeout_seconds,
        settings.payment_max_retries,
    )
