from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable

import requests

from ..records.models import ClientRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 0.25


def format_reminder_message(
    slack_id: str,
    record: ClientRecord,
    days_until_due: int | None = None,
    due_date: date | None = None,
) -> str:
    message = f"<@{slack_id}> Reminder: *{record.client_name}* is coming up for renewal"
    if days_until_due is not None:
        message += f" in {days_until_due} day{'' if days_until_due == 1 else 's'}"
    if due_date is not None:
        message += f" ({due_date.isoformat()})"
    return message + ". Please reach out to confirm their resign."


def send_notification(
    endpoint: str,
    message: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    *,
    session: requests.Session | None = None,
    timeout: int = 10,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """POST ``{"text": message}`` to the webhook, retrying with linear backoff.

    Returns True on the first 2xx response. Non-2xx responses and transport
    errors are logged and retried, sleeping ``attempt * base_delay`` seconds
    between attempts. Returns False once every attempt has failed.
    """
    client = session or requests.Session()
    attempts = max(1, max_attempts)

    for attempt in range(1, attempts + 1):
        try:
            response = client.post(endpoint, json={"text": message}, timeout=timeout)
        except requests.RequestException as exc:
            logger.warning("Webhook attempt %d/%d failed: %s", attempt, attempts, exc)
        else:
            if 200 <= response.status_code < 300:
                logger.debug("Webhook attempt %d/%d returned %d", attempt, attempts, response.status_code)
                return True
            logger.warning(
                "Webhook attempt %d/%d returned %d: %s",
                attempt,
                attempts,
                response.status_code,
                (response.text or "")[:200],
            )

        if attempt < attempts:
            sleep(attempt * base_delay)

    logger.warning("Giving up on webhook delivery after %d attempt(s).", attempts)
    return False


class SlackWebhookNotifier:
    def __init__(
        self,
        webhook_url: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        timeout: int = 10,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.webhook_url = webhook_url
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.timeout = timeout
        self._session = session or requests.Session()
        self._sleep = sleep

    def send(self, message: str) -> bool:
        return send_notification(
            self.webhook_url,
            message,
            self.max_attempts,
            self.base_delay,
            session=self._session,
            timeout=self.timeout,
            sleep=self._sleep,
        )
