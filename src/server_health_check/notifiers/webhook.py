"""Generic webhook notification handler."""

import logging

import httpx

from server_health_check.models import FleetReport
from server_health_check.notifiers.base import BaseNotifier, NotificationError

logger = logging.getLogger(__name__)


class WebhookNotifier(BaseNotifier):
    """Send the report as structured JSON to a generic HTTP webhook."""

    def __init__(
        self,
        url: str,
        headers: dict | None = None,
        auth: tuple[str, str] | None = None,
        timeout: float = 10,
    ) -> None:
        """Initialize webhook notifier.

        Args:
            url: Webhook URL.
            headers: Optional headers to include.
            auth: Optional (username, password) tuple for basic auth.
            timeout: HTTP timeout in seconds.
        """
        self.url = url
        self.headers = headers or {}
        self.auth = auth
        self.timeout = timeout

    def send_report(self, report: FleetReport) -> bool:
        """Send report via webhook."""
        payload = {
            "event": "health_report",
            "title": self.format_title(),
            "text": report.render(),
            "report": report.to_dict(),
        }
        try:
            self._send_request(payload)
        except (httpx.HTTPError, httpx.InvalidURL, NotificationError) as e:
            logger.error(f"Failed to send webhook notification: {e}")
            return False

        logger.info(f"Webhook notification sent to {self.url}")
        return True

    def _send_request(self, payload: dict) -> None:
        auth = httpx.BasicAuth(*self.auth) if self.auth else None
        response = httpx.post(
            self.url,
            json=payload,
            headers=self.headers,
            auth=auth,
            timeout=self.timeout,
        )
        if not response.is_success:
            raise NotificationError(f"Webhook error: {response.status_code}")
