"""Unit tests for the notification webhook client"""

import asyncio
import json

import httpx
import pytest
from capstack_gateway.domain.exceptions import NotificationError
from capstack_gateway.infrastructure.clients.notifications import (
    NotificationClient,
    deliver_in_background,
    is_retryable,
)


def scripted_client(statuses, seen):
    """Client whose webhook answers with each status in turn"""
    replies = iter(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(next(replies))

    return NotificationClient(
        webhook_url="http://notify.test/events",
        max_retries=3,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )


def test_alert_payload_delivered_first_try():
    seen = []
    client = scripted_client([200], seen)

    attempts = asyncio.run(client.send_alert(7, "asha@example.com", "Coverage below 3 months", "emergency_fund"))

    assert attempts == 1
    assert seen == [
        {
            "event": "ALERT",
            "user_id": 7,
            "email": "asha@example.com",
            "type": "emergency_fund",
            "message": "Coverage below 3 months",
        }
    ]


def test_server_errors_are_retried():
    seen = []
    client = scripted_client([503, 502, 200], seen)

    attempts = asyncio.run(client.send_achievement(7, "asha@example.com", "First plan", {"plan": "Vacation"}))

    assert attempts == 3
    assert len(seen) == 3
    assert seen[0]["event"] == "ACHIEVEMENT"


def test_retries_exhausted_raises():
    seen = []
    client = scripted_client([500, 500, 500], seen)

    with pytest.raises(NotificationError):
        asyncio.run(client.send_alert(7, "asha@example.com", "msg", "info"))

    assert len(seen) == 3


def test_client_error_is_not_retried():
    seen = []
    client = scripted_client([400, 200], seen)

    with pytest.raises(NotificationError):
        asyncio.run(client.send_alert(7, "asha@example.com", "msg", "info"))

    assert len(seen) == 1


def test_background_delivery_swallows_failures():
    seen = []
    client = scripted_client([500, 500, 500], seen)

    asyncio.run(deliver_in_background(client.send_alert, 7, "asha@example.com", "msg", "info"))

    assert len(seen) == 3


@pytest.mark.parametrize("status,retry", [(500, True), (503, True), (429, True), (400, False), (404, False)])
def test_is_retryable_by_status(status, retry):
    request = httpx.Request("POST", "http://notify.test/events")
    error = httpx.HTTPStatusError("boom", request=request, response=httpx.Response(status, request=request))

    assert is_retryable(error) is retry


def test_network_errors_are_retryable():
    assert is_retryable(httpx.ConnectError("refused")) is True
