"""Base notifier interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from server_health_check.models import FleetReport

REPORT_TITLE = "Daily Health Check Report"


class NotificationError(Exception):
    """The report could not be delivered."""


class BaseNotifier(ABC):
    """Abstract base class for report notifiers."""

    @abstractmethod
    def send_report(self, report: FleetReport) -> bool:
        """Deliver a fleet report.

        Delivery failures are logged, never raised.

        Args:
            report: Completed fleet report.

        Returns:
            True if the report was delivered.
        """
        ...

    def format_title(self, timestamp: datetime | None = None) -> str:
        """Title line for a report sent at ``timestamp`` (default now)."""
        timestamp = timestamp or datetime.now()
        return f"{REPORT_TITLE} - {timestamp.strftime('%Y-%m-%d %H:%M:%S')}"
