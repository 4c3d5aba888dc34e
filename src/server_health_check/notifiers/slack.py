"""Slack notification handler."""

import logging

import httpx

from server_health_check.models import FleetReport
from server_health_check.notifiers.base import BaseNotifier, NotificationError

logger = logging.getLogger(__name__)


class SlackNotifier(BaseNotifier):
    """Send the report text to a Slack incoming webhook."""

    def __init__(self, webhook_url: str, timeout: float = 10) -> None:
        """Initialize Slack notifier.

        Args:
            webhook_url: Slack incoming webhook URL.
            timeout: HTTP timeout in seconds.
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send_report(self, report: FleetReport) -> bool:
        """Send report via Slack."""
        return self.send_text(report.render())

    def send_text(self, text: str) -> bool:
        """Send already rendered report text under a titled header."""
        payload = {"text": f"*{self.format_title()}*\n{text}"}
        try:
            self._post(payload)
        except (httpx.HTTPError, httpx.InvalidURL, NotificationError) as e:
            logger.error(f"Failed to send report to Slack: {e}")
            return False

        logger.info("Report sent to Slack successfully")
        return True

    def _post(self, payload: dict) -> None:
        response = httpx.post(self.webhook_url, json=payload, timeout=self.timeout)
        if not response.is_success:
            raise NotificationError(
                f"Slack API error: {response.status_code} - {response.text}"
            )
