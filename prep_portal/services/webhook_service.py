"""
Outbound webhooks (welcome email).

Fire-and-forget: each call has its own timeout and any failure is logged
and swallowed so the request that triggered it is never affected.
"""

import logging
from typing import Any, Dict

import httpx

from prep_portal.core.config import Settings, get_settings
from prep_portal.core.errors import TransientExternalError

logger = logging.getLogger(__name__)


class WebhookService:

    def __init__(self, settings: Settings = None, transport: httpx.BaseTransport = None):
        self.settings = settings or get_settings()
        self.transport = transport

    def _post(self, url: str, payload: Dict[str, Any]) -> int:
        try:
            with httpx.Client(timeout=self.settings.webhook_timeout_seconds, transport=self.transport) as client:
                response = client.post(url, json=payload)
                response.raise_for_status()
                return response.status_code
        except httpx.TimeoutException as e:
            raise TransientExternalError(
                f"Webhook timed out after {self.settings.webhook_timeout_seconds}s", e) from e
        except httpx.HTTPError as e:
            raise TransientExternalError(f"Webhook failed: {e}", e) from e

    def send_welcome(self, email: str, username: str) -> bool:
        """POST {email, username} to the welcome webhook. True on success."""
        url = self.settings.welcome_webhook_url
        if not url:
            return False
        try:
            status = self._post(url, {"email": email, "username": username})
        except TransientExternalError as e:
            logger.error("Welcome webhook not delivered for %s: %s", email, e.message)
            return False
        logger.info("Welcome webhook sent for %s (status %s)", email, status)
        return True
