"""Outbound clients — push and payment wrappers against a mocked transport.

Invariants:
    - Non-2xx push replies and transport errors become ExternalServiceError
    - Payment 5xx replies are retried; 4xx fail on the first attempt
    - Amounts reach the gateway in paise
    - Retries of one payment call reuse its idempotency key
"""

import json
from decimal import Decimal

import httpx
import pytest

from kringp.core.errors import ExternalServiceError
from kringp.infrastructure.mailer import Mailer
from kringp.infrastructure.payment_gateway import (
    IDEMPOTENCY_HEADER, PaymentGateway, to_minor_units,
)
from kringp.infrastructure.push_client import PushClient


def _recorder(responses):
    calls = []
    replies = iter(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        reply = next(replies)
        if isinstance(reply, Exception):
            raise reply
        return reply

    return calls, httpx.MockTransport(handler)


class TestPushClient:
    async def test_sends_payload_with_server_key(self):
        calls, transport = _recorder([httpx.Response(200, json={"success": 1})])
        client = PushClient("https://push.test/send", "srv-key", transport=transport)

        reply = await client.send("device-1", "Hi", "Body", {"order_id": 7})

        assert reply == {"success": 1}
        assert calls[0].headers["Authorization"] == "key=srv-key"
        assert json.loads(calls[0].content) == {
            "to": "device-1",
            "notification": {"title": "Hi", "body": "Body"},
            "data": {"order_id": "7"},
        }

    async def test_error_status_raises(self):
        _, transport = _recorder([httpx.Response(500)])
        client = PushClient("https://push.test/send", "srv-key", transport=transport)

        with pytest.raises(ExternalServiceError) as exc:
            await client.send("device-1", "Hi", "Body")
        assert exc.value.message == "push error: provider returned 500"

    async def test_non_json_success_reply_counts_as_delivered(self):
        _, transport = _recorder([httpx.Response(200, text="OK")])
        client = PushClient("https://push.test/send", "srv-key", transport=transport)

        assert await client.send("device-1", "Hi", "Body") == {}

    async def test_missing_key_raises_without_calling(self):
        calls, transport = _recorder([])
        client = PushClient("https://push.test/send", "", transport=transport)

        with pytest.raises(ExternalServiceError):
            await client.send("device-1", "Hi", "Body")
        assert calls == []


class TestPaymentGateway:
    def _gateway(self, transport, **kwargs):
        return PaymentGateway(
            "https://pay.test/v1", "key", "secret",
            base_delay_ms=0, transport=transport, **kwargs,
        )

    def test_minor_units(self):
        assert to_minor_units(Decimal("12.34")) == 1234
        assert to_minor_units(Decimal("900")) == 90000

    async def test_refund_posts_amount_in_paise(self):
        calls, transport = _recorder([httpx.Response(200, json={"id": "rfnd_1"})])

        reply = await self._gateway(transport).refund("pay_1", Decimal("450.50"))

        assert reply == {"id": "rfnd_1"}
        assert calls[0].url.path == "/v1/payments/pay_1/refund"
        assert json.loads(calls[0].content) == {"amount": 45050}

    async def test_server_errors_are_retried(self):
        calls, transport = _recorder([
            httpx.Response(503), httpx.Response(200, json={"id": "pout_1"}),
        ])

        reply = await self._gateway(transport).payout(Decimal("100"), "1234", "Asha")

        assert reply == {"id": "pout_1"}
        assert len(calls) == 2
        assert json.loads(calls[1].content)["fund_account"]["bank_account"] == {
            "name": "Asha", "account_number": "1234",
        }

    async def test_retries_reuse_one_idempotency_key(self):
        calls, transport = _recorder([
            httpx.Response(500), httpx.ConnectError("boom"),
            httpx.Response(200, json={"id": "pout_1"}),
        ])

        await self._gateway(transport).payout(Decimal("100"), "1234", "Asha")

        keys = [c.headers.get(IDEMPOTENCY_HEADER) for c in calls]
        assert len(keys) == 3
        assert keys[0] and len(set(keys)) == 1

    async def test_each_payout_gets_its_own_idempotency_key(self):
        calls, transport = _recorder([
            httpx.Response(200, json={"id": "pout_1"}),
            httpx.Response(200, json={"id": "pout_2"}),
        ])
        gateway = self._gateway(transport)

        await gateway.payout(Decimal("100"), "1234", "Asha")
        await gateway.payout(Decimal("100"), "1234", "Asha")

        assert calls[0].headers[IDEMPOTENCY_HEADER] != calls[1].headers[IDEMPOTENCY_HEADER]

    async def test_retries_exhausted(self):
        calls, transport = _recorder([httpx.Response(502)] * 2)

        with pytest.raises(ExternalServiceError) as exc:
            await self._gateway(transport, max_retries=1).refund("pay_1", Decimal("1"))
        assert "after 1 retries" in exc.value.message
        assert len(calls) == 2

    async def test_client_error_not_retried(self):
        calls, transport = _recorder([httpx.Response(400)])

        with pytest.raises(ExternalServiceError) as exc:
            await self._gateway(transport).refund("pay_1", Decimal("1"))
        assert exc.value.message == "payment error: request rejected (400)"
        assert len(calls) == 1

    async def test_transport_error_retried(self):
        calls, transport = _recorder([
            httpx.ConnectError("boom"), httpx.Response(200, json={"id": "rfnd_2"}),
        ])

        reply = await self._gateway(transport).refund("pay_1", Decimal("1"))

        assert reply == {"id": "rfnd_2"}
        assert len(calls) == 2


async def test_mailer_without_host_skips():
    mailer = Mailer("", 587, "", "", "noreply@kringp.test")
    assert await mailer.send("a@mail.com", "Subject", "Body") is False
