"""Shared test fixtures."""

import pytest

from server_health_check.checker import process_lookup_command
from server_health_check.config import DEFAULT_COMMANDS, CheckConfig, ServerTarget
from server_health_check.runners.base import (
    BaseRunner,
    CommandExecutionError,
    SSHConnectionError,
)

HEALTHY_OUTPUTS = {
    DEFAULT_COMMANDS["CPU Usage"]: "5.0% user, 3.0% system, 92.0% idle",
    DEFAULT_COMMANDS["Memory Usage"]: "16Gi total, 4Gi used, 12Gi free",
    DEFAULT_COMMANDS["Disk Usage"]: "100G total, 40G used, 40% used",
    DEFAULT_COMMANDS["Network Check"]: "Network is OK",
}


class FakeRunner(BaseRunner):
    """Runner answering from a command -> output table."""

    def __init__(
        self,
        server: ServerTarget,
        outputs: dict[str, str | Exception],
        running: set[str] | None = None,
        fail_connect: bool = False,
        connect_error: Exception | None = None,
    ) -> None:
        super().__init__(server)
        self.outputs = outputs
        self.running = running or set()
        self.fail_connect = fail_connect
        self.connect_error = connect_error
        self.commands: list[str] = []
        self.timeouts: list[float | None] = []
        self.connected = False
        self.closed = False

    def connect(self) -> None:
        if self.fail_connect:
            raise SSHConnectionError("failed to connect via SSH: connection refused")
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    def close(self) -> None:
        self.closed = True

    def run(self, command: str, timeout: float | None = None) -> str:
        self.commands.append(command)
        self.timeouts.append(timeout)
        for process in self.running:
            if command == process_lookup_command(process):
                return f"root  1234  0.0  0.1 ? Ss 10:00 0:00 {process}"
        if command in self.outputs:
            output = self.outputs[command]
            if isinstance(output, Exception):
                raise output
            return output
        if command.startswith("ps aux"):
            # grep exits 1 when nothing matches
            raise CommandExecutionError("exit status 1")
        raise CommandExecutionError("exit status 127")


class FakeRunnerFactory:
    """Runner factory for HealthCheck with per-address behaviour."""

    def __init__(self, outputs: dict[str, str | Exception]) -> None:
        self.outputs = dict(outputs)
        self.overrides: dict[str, dict[str, str | Exception]] = {}
        self.running: dict[str, set[str]] = {}
        self.unreachable: set[str] = set()
        self.connect_errors: dict[str, Exception] = {}
        self.runners: list[FakeRunner] = []

    def __call__(self, server: ServerTarget, config: CheckConfig) -> FakeRunner:
        outputs = {**self.outputs, **self.overrides.get(server.address, {})}
        runner = FakeRunner(
            server,
            outputs,
            running=self.running.get(server.address),
            fail_connect=server.address in self.unreachable,
            connect_error=self.connect_errors.get(server.address),
        )
        self.runners.append(runner)
        return runner


@pytest.fixture
def runner_factory() -> FakeRunnerFactory:
    return FakeRunnerFactory(HEALTHY_OUTPUTS)


@pytest.fixture
def config() -> CheckConfig:
    return CheckConfig()
