"""Outbound alert/achievement webhook with retry and exponential backoff"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from capstack_gateway.config import settings
from capstack_gateway.domain.exceptions import NotificationError
from capstack_gateway.infrastructure.observability.metrics import webhook_failure_counter, webhook_latency_histogram


def is_retryable(error: Exception) -> bool:
    """Network errors, 5xx and 429 are retried; other 4xx are final"""
    if isinstance(error, httpx.HTTPStatusError):
        code = error.response.status_code
        return code >= 500 or code == 429
    return isinstance(error, httpx.RequestError)


class NotificationClient:
    """Posts ALERT and ACHIEVEMENT events to the configured notification webhook"""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_base: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base
        self.transport = transport

    async def send_event(self, payload: Dict[str, Any]) -> int:
        """
        POST one event, sleeping backoff_base * 2^(n-1) seconds after the
        n-th failed attempt.

        Returns the number of attempts used.

        Raises:
            NotificationError: on a non-retryable response or once retries are exhausted
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(1, self.max_retries + 1):
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                    return attempt
                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    webhook_failure_counter.inc()
                    if not is_retryable(e) or attempt == self.max_retries:
                        raise NotificationError(f"{payload.get('event')} delivery failed after {attempt} attempt(s): {e}") from e
                    await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))

        raise NotificationError("Notification client configured with no attempts")

    async def send_alert(self, user_id: int, email: str, message: str, alert_type: str) -> int:
        return await self.send_event(
            {"event": "ALERT", "user_id": user_id, "email": email, "type": alert_type, "message": message}
        )

    async def send_achievement(self, user_id: int, email: str, achievement: str, details: Dict[str, Any]) -> int:
        return await self.send_event(
            {"event": "ACHIEVEMENT", "user_id": user_id, "email": email, "achievement": achievement, "details": details}
        )


async def deliver_in_background(send, *args) -> None:
    """Runs after the response is sent, so failures are logged rather than raised"""
    try:
        await send(*args)
    except NotificationError as e:
        logging.error(f"Notification dropped: {e}")
