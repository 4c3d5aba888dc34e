"""Command runners for local and remote servers."""

from server_health_check.config import CheckConfig, ServerTarget
from server_health_check.runners.base import (
    BaseRunner,
    CommandExecutionError,
    ExecutionError,
    SSHConnectionError,
)
from server_health_check.runners.local import LocalRunner
from server_health_check.runners.ssh import SSHRunner

__all__ = [
    "BaseRunner",
    "CommandExecutionError",
    "ExecutionError",
    "LocalRunner",
    "SSHConnectionError",
    "SSHRunner",
    "create_runner",
]


def create_runner(server: ServerTarget, config: CheckConfig) -> BaseRunner:
    """Pick the runner for a server: local for loopback addresses, else SSH."""
    if server.is_local:
        return LocalRunner(server, timeout=config.command_timeout)
    return SSHRunner(
        server,
        timeout=config.command_timeout,
        connect_timeout=config.connect_timeout,
        host_key_policy=config.host_key_policy,
        known_hosts_file=config.known_hosts_file,
    )
