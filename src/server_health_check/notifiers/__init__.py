"""Report notification handlers."""

from server_health_check.config import CheckConfig
from server_health_check.notifiers.base import BaseNotifier, NotificationError
from server_health_check.notifiers.slack import SlackNotifier
from server_health_check.notifiers.webhook import WebhookNotifier

__all__ = [
    "BaseNotifier",
    "NotificationError",
    "SlackNotifier",
    "WebhookNotifier",
    "create_notifier",
]


def create_notifier(config: CheckConfig) -> BaseNotifier | None:
    """Build the notifier for the configured webhook, None when unset."""
    if not config.webhook_url:
        return None
    if config.webhook_format == "json":
        return WebhookNotifier(config.webhook_url)
    return SlackNotifier(config.webhook_url)
