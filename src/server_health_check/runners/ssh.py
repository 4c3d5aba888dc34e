"""SSH command runner."""

import logging
import socket
from pathlib import Path

import paramiko

from server_health_check.config import HostKeyPolicy, ServerTarget
from server_health_check.runners.base import (
    BaseRunner,
    CommandExecutionError,
    SSHConnectionError,
)

logger = logging.getLogger(__name__)


class SSHRunner(BaseRunner):
    """Run commands on a remote server over one SSH connection."""

    def __init__(
        self,
        server: ServerTarget,
        timeout: float | None = None,
        connect_timeout: float = 5.0,
        host_key_policy: HostKeyPolicy = HostKeyPolicy.VERIFY,
        known_hosts_file: str | None = None,
    ) -> None:
        super().__init__(server, timeout)
        self.connect_timeout = connect_timeout
        self.host_key_policy = HostKeyPolicy(host_key_policy)
        self.known_hosts_path = (
            Path(known_hosts_file).expanduser() if known_hosts_file else None
        )
        self._client: paramiko.SSHClient | None = None

    def _create_client(self) -> paramiko.SSHClient:
        """Create a client with host keys loaded according to the policy."""
        client = paramiko.SSHClient()

        if self.host_key_policy == HostKeyPolicy.IGNORE:
            # Nothing is loaded, so every key is "missing" and accepted
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            return client

        client.load_system_host_keys()
        if self.known_hosts_path and self.known_hosts_path.exists():
            client.load_host_keys(str(self.known_hosts_path))

        if self.host_key_policy == HostKeyPolicy.TRUST_ON_FIRST_USE:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        return client

    def connect(self) -> None:
        """Open the SSH connection."""
        if self._client is not None:
            return

        server = self.server
        client = self._create_client()

        connect_kwargs = {
            "hostname": server.address,
            "port": server.port,
            "username": server.username,
            "timeout": self.connect_timeout,
            "banner_timeout": self.connect_timeout,
            "auth_timeout": self.connect_timeout,
            "allow_agent": False,
            "look_for_keys": False,
        }
        if server.key_file:
            connect_kwargs["key_filename"] = str(Path(server.key_file).expanduser())
        else:
            connect_kwargs["password"] = server.password

        try:
            client.connect(**connect_kwargs)
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise SSHConnectionError(f"failed to connect via SSH: {e}") from e

        if (
            self.host_key_policy == HostKeyPolicy.TRUST_ON_FIRST_USE
            and self.known_hosts_path
        ):
            self._save_host_keys(client)

        self._client = client

    def _save_host_keys(self, client: paramiko.SSHClient) -> None:
        try:
            self.known_hosts_path.parent.mkdir(parents=True, exist_ok=True)
            client.save_host_keys(str(self.known_hosts_path))
        except OSError as e:
            logger.warning(f"Could not save host keys to {self.known_hosts_path}: {e}")

    def close(self) -> None:
        """Close SSH connection."""
        if self._client:
            self._client.close()
            self._client = None

    def run(self, command: str, timeout: float | None = None) -> str:
        """Execute command on remote server and return its stdout."""
        if self._client is None:
            raise CommandExecutionError(f"not connected to {self.server.address}")

        timeout = self._effective_timeout(timeout)
        logger.debug(f"Running on {self.server.address}: {command}")
        try:
            _, stdout, stderr = self._client.exec_command(command, timeout=timeout)
            output = stdout.read().decode(errors="replace")
            errors = stderr.read().decode(errors="replace")
            exit_code = stdout.channel.recv_exit_status()
        except socket.timeout as e:
            raise CommandExecutionError(f"command timed out after {timeout}s") from e
        except (paramiko.SSHException, OSError) as e:
            raise CommandExecutionError(str(e)) from e

        if exit_code != 0:
            message = f"exit status {exit_code}"
            if errors.strip():
                message += f": {errors.strip()}"
            raise CommandExecutionError(message)
        return output.strip()
