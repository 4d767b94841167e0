# src/reeflynk_reminders/mail/resend_sender.py

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ResendSender:
    """
    NotificationSender backed by the Resend HTTP API (POST /emails).

    - send() returns False when the API answers with a non-2xx status
      (the response body is logged).
    - Transport errors (timeouts, connection failures) are raised as httpx
      exceptions; the dispatcher records them as a failed delivery.

    A caller-provided httpx.AsyncClient is used as-is and never closed here.
    """

    def __init__(
        self,
        api_key: str,
        *,
        from_email: str,
        base_url: str = "https://api.resend.com",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("api_key is required")
        self._api_key = api_key.strip()
        self._from_email = from_email
        self._url = f"{base_url.rstrip('/')}/emails"
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds))
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, to: str, subject: str, body: str) -> dict[str, Any]:
        return {"from": self._from_email, "to": to, "subject": subject, "text": body}

    async def send(self, *, to: str, subject: str, body: str) -> bool:
        payload = self._payload(to, subject, body)

        if self._client is not None:
            res = await self._client.post(self._url, headers=self._headers(), json=payload)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                res = await client.post(self._url, headers=self._headers(), json=payload)

        if not res.is_success:
            logger.error("Resend rejected message to %s: HTTP %s %s", to, res.status_code, res.text)
            return False

        logger.debug("Resend accepted message to %s", to)
        return True
