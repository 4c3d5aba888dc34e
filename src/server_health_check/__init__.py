"""
Server Health Check - Sequential fleet health checks with chat-ops reports.

Runs diagnostic commands on each configured server (locally or over SSH),
classifies CPU, memory and disk output against thresholds, verifies expected
processes and builds a plain text report that can be posted to a webhook.
"""

__version__ = "1.0.0"

from server_health_check.checker import HealthCheck, run_check
from server_health_check.config import CheckConfig, HostKeyPolicy, ServerTarget
from server_health_check.models import CheckResult, CheckStatus, FleetReport, ServerReport

__all__ = [
    "CheckConfig",
    "CheckResult",
    "CheckStatus",
    "FleetReport",
    "HealthCheck",
    "HostKeyPolicy",
    "ServerReport",
    "ServerTarget",
    "run_check",
]
