"""Local command runner using subprocess."""

import logging
import subprocess

from server_health_check.runners.base import BaseRunner, CommandExecutionError

logger = logging.getLogger(__name__)


class LocalRunner(BaseRunner):
    """Run commands on this machine through ``sh -c``."""

    def run(self, command: str, timeout: float | None = None) -> str:
        """Execute a local command, stdout and stderr combined."""
        timeout = self._effective_timeout(timeout)
        logger.debug(f"Running locally: {command}")
        try:
            result = subprocess.run(
                ["sh", "-c", command],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandExecutionError(f"command timed out after {timeout}s") from e
        except OSError as e:
            raise CommandExecutionError(str(e)) from e

        if result.returncode != 0:
            raise CommandExecutionError(f"exit status {result.returncode}")
        return result.stdout.strip()
