"""Core health check logic."""

import logging
import shlex
import time
from datetime import datetime
from enum import Enum
from typing import Callable

from server_health_check.classifier import classify
from server_health_check.config import CheckConfig, ServerTarget
from server_health_check.models import CheckStatus, FleetReport, ServerReport
from server_health_check.notifiers import BaseNotifier, create_notifier
from server_health_check.runners import (
    BaseRunner,
    CommandExecutionError,
    SSHConnectionError,
    create_runner,
)

logger = logging.getLogger(__name__)

PROCESS_LABEL = "Process Check"
CONNECTION_LABEL = "SSH Connection"
DEADLINE_LABEL = "Deadline"
CHECK_LABEL = "Check"

RunnerFactory = Callable[[ServerTarget, CheckConfig], BaseRunner]


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class Deadline:
    """Wall-clock budget for a whole run."""

    def __init__(
        self,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self.expires_at = clock() + timeout if timeout is not None else None

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and self._clock() >= self.expires_at

    def limit(self, timeout: float | None) -> float | None:
        """Clamp a per-command timeout to the time left."""
        if self.expires_at is None:
            return timeout
        remaining = max(self.expires_at - self._clock(), 0.0)
        return remaining if timeout is None else min(timeout, remaining)


def process_lookup_command(process: str) -> str:
    """Shell command whose output is non-empty while ``process`` runs."""
    return f"ps aux | grep -v grep | grep {shlex.quote(process)}"


def check_processes(
    runner: BaseRunner,
    processes: list[str],
    report: ServerReport,
    timeout: float | None = None,
    deadline: Deadline | None = None,
) -> None:
    """Append one presence result per process to ``report``.

    Each lookup is bounded by ``timeout`` clamped to what is left of
    ``deadline``. Processes not looked up before the deadline passes are
    reported as deadline errors, never as absent.
    """
    if not processes:
        report.add(PROCESS_LABEL, CheckStatus.INFO, "No processes specified for monitoring")
        return

    deadline = deadline or Deadline()
    for process in processes:
        if deadline.expired:
            report.add(
                DEADLINE_LABEL,
                CheckStatus.ERROR,
                f"run deadline exceeded, {process} not checked",
            )
            continue
        try:
            output = runner.run(
                process_lookup_command(process), timeout=deadline.limit(timeout)
            )
        except CommandExecutionError as e:
            logger.debug(f"Process lookup for {process} on {report.address} failed: {e}")
            if deadline.expired:
                report.add(
                    DEADLINE_LABEL,
                    CheckStatus.ERROR,
                    f"run deadline exceeded, {process} not checked",
                )
                continue
            output = ""

        if output:
            report.add(PROCESS_LABEL, CheckStatus.OK, f"{process} is running")
        else:
            report.add(PROCESS_LABEL, CheckStatus.ERROR, f"{process} is NOT running")


class HealthCheck:
    """Run the configured checks over the fleet, one server at a time."""

    def __init__(
        self,
        config: CheckConfig,
        notifier: BaseNotifier | None = None,
        runner_factory: RunnerFactory = create_runner,
    ) -> None:
        """Initialize health check.

        Args:
            config: Configuration, treated as read-only during a run.
            notifier: Report notifier; built from ``config.webhook_url`` if omitted.
            runner_factory: Builds the command runner for a server.
        """
        self.config = config
        self.notifier = notifier if notifier is not None else create_notifier(config)
        self.runner_factory = runner_factory
        self.state = RunState.IDLE
        self._last_report: FleetReport | None = None

    def check_server(
        self,
        server: ServerTarget,
        deadline: Deadline | None = None,
    ) -> ServerReport:
        """Check a single server.

        Args:
            server: Target server.
            deadline: Optional budget shared with the rest of the run.

        Returns:
            ServerReport with one result per command and per process.
        """
        deadline = deadline or Deadline()
        report = ServerReport(address=server.address)
        logger.info(report.banner)

        if deadline.expired:
            report.add(DEADLINE_LABEL, CheckStatus.ERROR, "run deadline exceeded, check skipped")
            return report

        processes = self.config.processes_for(server)
        runner = self.runner_factory(server, self.config)
        try:
            try:
                runner.connect()
            except SSHConnectionError as e:
                logger.warning(f"Cannot connect to {server.address}: {e}")
                report.reachable = False
                report.add(CONNECTION_LABEL, CheckStatus.ERROR, str(e))
                return report

            self._run_commands(runner, report, deadline)
            check_processes(
                runner,
                processes,
                report,
                timeout=self.config.command_timeout,
                deadline=deadline,
            )
        finally:
            runner.close()

        return report

    def _run_commands(
        self,
        runner: BaseRunner,
        report: ServerReport,
        deadline: Deadline,
    ) -> None:
        """Run and classify every catalog command, in catalog order."""
        address = report.address
        for label, command in self.config.commands.items():
            if deadline.expired:
                report.add(label, CheckStatus.ERROR, "run deadline exceeded")
                continue
            try:
                output = runner.run(
                    command, timeout=deadline.limit(self.config.command_timeout)
                )
            except CommandExecutionError as e:
                logger.warning(f"{label} failed on {address}: {e}")
                report.add(
                    label,
                    CheckStatus.ERROR,
                    f"Error executing command on {address} - {e}",
                )
                continue

            report.results.append(
                classify(
                    label,
                    output,
                    self.config.thresholds,
                    server=address,
                    strict=self.config.strict_parsing,
                )
            )

    def run(self, timeout: float | None = None, notify: bool = True) -> FleetReport:
        """Check every server in fleet order.

        Args:
            timeout: Optional budget in seconds for the whole run.
            notify: Hand the report to the notifier when one is configured.

        Returns:
            FleetReport with one ServerReport per configured server.
        """
        self.state = RunState.RUNNING
        deadline = Deadline(timeout)
        fleet = FleetReport(timestamp=datetime.now())

        if not self.config.servers:
            logger.warning("No servers configured")

        try:
            for server in self.config.servers:
                try:
                    server_report = self.check_server(server, deadline)
                except Exception as e:
                    logger.exception(f"Failed to check server {server.address}")
                    server_report = ServerReport(address=server.address, reachable=False)
                    server_report.add(CHECK_LABEL, CheckStatus.ERROR, str(e))
                fleet.servers.append(server_report)
        finally:
            self.state = RunState.COMPLETED

        self._last_report = fleet

        if notify and self.notifier is not None:
            self.notifier.send_report(fleet)

        return fleet

    def run_check(self, timeout: float | None = None) -> str:
        """Run the fleet check and return the rendered report text."""
        return self.run(timeout=timeout).render()

    def get_last_report(self) -> FleetReport | None:
        """Get the report of the last completed run."""
        return self._last_report


def run_check(config: CheckConfig, timeout: float | None = None) -> str:
    """Check every server in ``config`` and return the report text."""
    return HealthCheck(config).run_check(timeout=timeout)
