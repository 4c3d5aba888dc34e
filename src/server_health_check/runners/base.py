"""Base command runner interface."""

from abc import ABC, abstractmethod

from server_health_check.config import ServerTarget


class ExecutionError(Exception):
    """A command could not be executed on a server."""


class SSHConnectionError(ExecutionError):
    """The session to a server could not be established."""


class CommandExecutionError(ExecutionError):
    """A single command failed or exited non-zero."""


class BaseRunner(ABC):
    """Abstract base class for command runners.

    Callers pair :meth:`connect` with :meth:`close` on every exit path.
    """

    def __init__(self, server: ServerTarget, timeout: float | None = None) -> None:
        """Initialize runner for a server.

        Args:
            server: Target server.
            timeout: Default per-command timeout in seconds, None for no limit.
        """
        self.server = server
        self.timeout = timeout

    def connect(self) -> None:
        """Establish the session. Raises SSHConnectionError on failure."""

    def close(self) -> None:
        """Release the session."""

    @abstractmethod
    def run(self, command: str, timeout: float | None = None) -> str:
        """Execute a command on the server.

        Args:
            command: Shell command line.
            timeout: Overrides the runner's default timeout for this call.

        Returns:
            Command output with surrounding whitespace removed.

        Raises:
            CommandExecutionError: If the command fails or exits non-zero.
        """
        ...

    def _effective_timeout(self, timeout: float | None) -> float | None:
        return timeout if timeout is not None else self.timeout
