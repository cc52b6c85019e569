"""EmailSender backed by a Resend-compatible HTTP API (``POST /emails``)."""

from __future__ import annotations

import logging

import httpx

from storefront.application.dispatch_notifications import EmailSender

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


class HttpEmailSender(EmailSender):

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url
        self._sender = sender
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def send(self, to: str, subject: str, body: str) -> str | None:
        payload = {"from": self._sender, "to": [to], "subject": subject, "text": body}
        try:
            response = self._client.post(self._api_url, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"email API unreachable: {exc}") from exc

        if response.status_code >= 300:
            raise EmailDeliveryError(
                f"email API returned {response.status_code}: {response.text[:200]}"
            )
        logger.debug("email API accepted message to %s", to)
        # Accepted replies may be empty (204) or plain text
        try:
            reply = response.json()
        except ValueError:
            return None
        return reply.get("id") if isinstance(reply, dict) else None

    def close(self) -> None:
        self._client.close()


class LoggingEmailSender(EmailSender):
    """Used when no API key is configured: logs the message instead of sending it."""

    def send(self, to: str, subject: str, body: str) -> str | None:
        logger.info("email to %s not sent (no API key configured): %s", to, subject)
        return None
