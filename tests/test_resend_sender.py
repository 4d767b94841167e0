# tests/test_resend_sender.py

from __future__ import annotations

import json

import httpx
import pytest

from reeflynk_reminders.mail.resend_sender import ResendSender


def _sender(handler) -> tuple[ResendSender, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    sender = ResendSender(
        "re_test_key",
        from_email="notifications@reeflynk.test",
        base_url="https://api.resend.test/",
        client=client,
    )
    return sender, client


@pytest.mark.asyncio
async def test_send_posts_expected_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "email_1"})

    sender, client = _sender(handler)
    async with client:
        ok = await sender.send(to="a@example.com", subject="Hi", body="Body")

    assert ok is True
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == "https://api.resend.test/emails"
    assert req.headers["Authorization"] == "Bearer re_test_key"
    assert json.loads(req.content) == {
        "from": "notifications@reeflynk.test",
        "to": "a@example.com",
        "subject": "Hi",
        "text": "Body",
    }


@pytest.mark.asyncio
async def test_non_2xx_returns_false() -> None:
    sender, client = _sender(lambda request: httpx.Response(422, json={"message": "invalid to"}))
    async with client:
        assert await sender.send(to="bad", subject="Hi", body="Body") is False


@pytest.mark.asyncio
async def test_transport_error_is_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    sender, client = _sender(handler)
    async with client:
        with pytest.raises(httpx.ConnectError):
            await sender.send(to="a@example.com", subject="Hi", body="Body")


def test_api_key_is_required() -> None:
    with pytest.raises(ValueError):
        ResendSender("  ", from_email="x@example.com")
