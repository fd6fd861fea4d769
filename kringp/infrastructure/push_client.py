"""Push Client — sends device notifications through the FCM HTTP endpoint.

Invariants:
    - One POST per device token; payload is {to, notification, data}
    - Any transport failure or non-2xx response raises ExternalServiceError
    - Unconfigured server key raises before any network call
    - A 2xx reply counts as delivered even when its body is not JSON

Design Decisions:
    - Thin httpx wrapper, no retries: a failed push is recorded as FAILED by
      the notification service and never blocks the calling request
"""

import logging

import httpx

from kringp.config import get_settings
from kringp.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

_SERVICE = "push"


class PushClient:
    def __init__(
        self,
        api_url: str,
        server_key: str,
        timeout_seconds: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url
        self.server_key = server_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def send(
        self, token: str, title: str, body: str, data: dict | None = None,
    ) -> dict:
        """Deliver one notification; returns the provider's JSON reply."""
        if not self.server_key:
            raise ExternalServiceError(_SERVICE, "push server key is not configured")
        payload = {
            "to": token,
            "notification": {"title": title, "body": body},
            "data": {k: str(v) for k, v in (data or {}).items()},
        }
        headers = {"Authorization": f"key={self.server_key}"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport,
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                _SERVICE, f"provider returned {e.response.status_code}",
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError(_SERVICE, f"transport error: {e}")
        logger.info("Push delivered", extra={"service": _SERVICE})
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.warning("Push reply was not JSON", extra={"service": _SERVICE})
            return {}


def get_push_client() -> PushClient:
    """FastAPI dependency — overridden in tests."""
    settings = get_settings()
    return PushClient(
        settings.push_api_url,
        settings.push_server_key,
        settings.push_timeout_seconds,
    )
