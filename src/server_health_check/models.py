"""Data models for health check results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CheckStatus(str, Enum):
    """Outcome of a single check."""

    OK = "ok"
    WARN = "warn"
    ERROR = "error"
    INFO = "info"
    UNPARSEABLE = "unparseable"


STATUS_GLYPHS = {
    CheckStatus.OK: "✅",
    CheckStatus.WARN: "⚠️",
    CheckStatus.ERROR: "❌",
    CheckStatus.INFO: "ℹ️",
    CheckStatus.UNPARSEABLE: "❓",
}

# Higher ranks win when summarising a server or the fleet
_SEVERITY = {
    CheckStatus.INFO: 0,
    CheckStatus.OK: 0,
    CheckStatus.WARN: 1,
    CheckStatus.UNPARSEABLE: 2,
    CheckStatus.ERROR: 3,
}


def worst_status(statuses: list[CheckStatus]) -> CheckStatus:
    """Return the most severe status, OK for an empty list."""
    worst = CheckStatus.OK
    for status in statuses:
        if _SEVERITY[status] > _SEVERITY[worst]:
            worst = status
    return worst


@dataclass
class CheckResult:
    """Result of one command or process check on one server."""

    server: str
    label: str
    status: CheckStatus
    detail: str
    metric: float | None = None

    @property
    def glyph(self) -> str:
        return STATUS_GLYPHS[self.status]

    def render(self) -> str:
        """Render as a single report line (without trailing newline)."""
        return f"{self.glyph} *{self.label}:* {self.detail}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "status": self.status.value,
            "detail": self.detail,
            "metric": self.metric,
        }


@dataclass
class ServerReport:
    """All check results for a single server."""

    address: str
    results: list[CheckResult] = field(default_factory=list)
    reachable: bool = True
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def banner(self) -> str:
        return f"=== Checking status of server: {self.address} ==="

    @property
    def status(self) -> CheckStatus:
        """Overall server status."""
        if not self.reachable:
            return CheckStatus.ERROR
        return worst_status([r.status for r in self.results])

    def add(
        self,
        label: str,
        status: CheckStatus,
        detail: str,
        metric: float | None = None,
    ) -> CheckResult:
        """Append a result for this server and return it."""
        result = CheckResult(
            server=self.address,
            label=label,
            status=status,
            detail=detail,
            metric=metric,
        )
        self.results.append(result)
        return result

    def get(self, label: str) -> CheckResult | None:
        """Get the first result with the given label."""
        for result in self.results:
            if result.label == label:
                return result
        return None

    def render(self) -> str:
        """Render the report fragment for this server."""
        lines = [f"\n{self.banner}\n"]
        lines.extend(f"{r.render()}\n" for r in self.results)
        return "".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "timestamp": self.timestamp.isoformat(),
            "reachable": self.reachable,
            "status": self.status.value,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class FleetReport:
    """Report for a complete run over the fleet."""

    servers: list[ServerReport] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def status(self) -> CheckStatus:
        return worst_status([s.status for s in self.servers])

    @property
    def warning_count(self) -> int:
        return sum(
            1 for s in self.servers
            if s.status in (CheckStatus.WARN, CheckStatus.UNPARSEABLE)
        )

    @property
    def error_count(self) -> int:
        return sum(1 for s in self.servers if s.status == CheckStatus.ERROR)

    def render(self) -> str:
        """Concatenate server fragments in fleet order."""
        return "".join(s.render() for s in self.servers)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "summary": {
                "total": len(self.servers),
                "warning": self.warning_count,
                "error": self.error_count,
            },
            "servers": [s.to_dict() for s in self.servers],
        }
