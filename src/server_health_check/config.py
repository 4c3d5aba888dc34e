"""Configuration management for Server Health Check."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

DEFAULT_COMMANDS: dict[str, str] = {
    "CPU Usage": (
        "top -bn1 | grep 'Cpu(s)' | "
        "awk '{print $2 \"% user, \" $4 \"% system, \" $8 \"% idle\"}'"
    ),
    "Memory Usage": (
        "free -h | awk 'NR==2{print $2 \" total, \" $3 \" used, \" $4 \" free\"}'"
    ),
    "Disk Usage": (
        "df -h | awk '$NF==\"/\"{print $2 \" total, \" $3 \" used, \" $5 \" used\"}'"
    ),
    "Network Check": (
        "ping -c 1 8.8.8.8 > /dev/null && echo 'Network is OK' || echo 'Network Issue'"
    ),
}

DEFAULT_THRESHOLDS: dict[str, float] = {
    "CPU Idle": 20.0,
    "Memory Used": 80.0,
    "Disk Used": 90.0,
}

DEFAULT_PROCESS_TYPE = "default"

LOCAL_ADDRESSES = ("localhost", "127.0.0.1", "::1")


class HostKeyPolicy(str, Enum):
    """How SSH host keys are verified."""

    VERIFY = "verify"  # known_hosts only, unknown keys rejected
    TRUST_ON_FIRST_USE = "tofu"  # unknown keys accepted and remembered
    IGNORE = "ignore"  # any key accepted, nothing stored


@dataclass(frozen=True)
class ServerTarget:
    """A monitored server."""

    address: str
    username: str
    password: str = ""
    processes: tuple[str, ...] = ()
    type: str | None = None
    port: int = 22
    key_file: str | None = None

    @property
    def is_local(self) -> bool:
        return self.address in LOCAL_ADDRESSES

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServerTarget":
        return cls(
            address=data["address"],
            username=data.get("username", ""),
            password=data.get("password", ""),
            processes=tuple(data.get("processes") or ()),
            type=data.get("type") or None,
            port=data.get("port", 22),
            key_file=data.get("key_file"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "address": self.address,
            "username": self.username,
        }
        if self.password:
            data["password"] = self.password
        if self.processes:
            data["processes"] = list(self.processes)
        if self.type:
            data["type"] = self.type
        if self.port != 22:
            data["port"] = self.port
        if self.key_file:
            data["key_file"] = self.key_file
        return data


@dataclass
class CheckConfig:
    """Fleet, commands and thresholds for a health check run.

    Built with defaults, adjusted through the ``add_*``/``set_*`` methods and
    then handed read-only to :class:`~server_health_check.checker.HealthCheck`.
    None of the mutators validate their input.
    """

    servers: list[ServerTarget] = field(default_factory=list)
    process_types: dict[str, list[str]] = field(
        default_factory=lambda: {DEFAULT_PROCESS_TYPE: []}
    )
    commands: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COMMANDS))
    thresholds: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_THRESHOLDS))
    webhook_url: str = ""
    webhook_format: str = "slack"  # "slack" or "json"
    connect_timeout: float = 5.0
    command_timeout: float | None = None  # seconds, None = unbounded
    host_key_policy: HostKeyPolicy = HostKeyPolicy.VERIFY
    known_hosts_file: str | None = None
    strict_parsing: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.process_types.setdefault(DEFAULT_PROCESS_TYPE, [])
        self.host_key_policy = HostKeyPolicy(self.host_key_policy)

    def add_server(
        self,
        address: str,
        username: str,
        password: str,
        processes: list[str] | tuple[str, ...] = (),
        type: str | None = None,
        **options: Any,
    ) -> ServerTarget:
        """Append a server to the fleet."""
        server = ServerTarget(
            address=address,
            username=username,
            password=password,
            processes=tuple(processes or ()),
            type=type or None,
            **options,
        )
        self.servers.append(server)
        return server

    def add_process_type(self, name: str, processes: list[str]) -> None:
        """Set the default process list for a server type."""
        self.process_types[name] = list(processes)

    def add_command(self, label: str, command: str) -> None:
        """Add a command or replace an existing one (built-ins included)."""
        self.commands[label] = command

    def remove_command(self, label: str) -> None:
        self.commands.pop(label, None)

    def set_threshold(self, name: str, value: float) -> None:
        self.thresholds[name] = value

    def processes_for(self, server: ServerTarget) -> list[str]:
        """Resolve the processes to monitor on a server.

        Explicit processes win, then the list for the server's type, then
        the ``default`` list.
        """
        if server.processes:
            return list(server.processes)
        if server.type and server.type in self.process_types:
            return list(self.process_types[server.type])
        return list(self.process_types.get(DEFAULT_PROCESS_TYPE, []))

    def get_server(self, address: str) -> ServerTarget | None:
        """Get the first server with the given address."""
        for server in self.servers:
            if server.address == address:
                return server
        return None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CheckConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CheckConfig":
        """Create configuration from dictionary.

        ``commands`` and ``thresholds`` are merged over the built-in defaults;
        a command mapped to null removes it.
        """
        config = cls(
            webhook_url=data.get("webhook_url", ""),
            webhook_format=data.get("webhook_format", "slack"),
            connect_timeout=data.get("connect_timeout", 5.0),
            command_timeout=data.get("command_timeout"),
            host_key_policy=HostKeyPolicy(data.get("host_key_policy", "verify")),
            known_hosts_file=data.get("known_hosts_file"),
            strict_parsing=data.get("strict_parsing", False),
            log_level=data.get("log_level", "INFO"),
        )

        for name, processes in (data.get("process_types") or {}).items():
            config.add_process_type(name, processes or [])
        for label, command in (data.get("commands") or {}).items():
            if command is None:
                config.remove_command(label)
            else:
                config.add_command(label, command)
        for name, value in (data.get("thresholds") or {}).items():
            config.set_threshold(name, float(value))
        for server_data in data.get("servers") or []:
            config.servers.append(ServerTarget.from_dict(server_data))

        return config

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(
                self._to_dict(),
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    def _to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "servers": [s.to_dict() for s in self.servers],
            "process_types": {k: list(v) for k, v in self.process_types.items()},
            "thresholds": dict(self.thresholds),
            "webhook_url": self.webhook_url,
            "webhook_format": self.webhook_format,
            "connect_timeout": self.connect_timeout,
            "host_key_policy": self.host_key_policy.value,
            "strict_parsing": self.strict_parsing,
            "log_level": self.log_level,
        }
        # Only store commands that differ from the built-ins
        extra_commands: dict[str, str | None] = {
            label: command
            for label, command in self.commands.items()
            if DEFAULT_COMMANDS.get(label) != command
        }
        for label in DEFAULT_COMMANDS:
            if label not in self.commands:
                extra_commands[label] = None
        if extra_commands:
            data["commands"] = extra_commands
        if self.command_timeout is not None:
            data["command_timeout"] = self.command_timeout
        if self.known_hosts_file:
            data["known_hosts_file"] = self.known_hosts_file
        return data


def create_example_config() -> CheckConfig:
    """Create an example configuration for documentation."""
    config = CheckConfig(
        webhook_url="https://hooks.slack.com/services/XXX/YYY/ZZZ",
        host_key_policy=HostKeyPolicy.TRUST_ON_FIRST_USE,
        known_hosts_file="~/.config/healthcheck/known_hosts",
    )
    config.add_process_type(
        "localhost", ["fluentd", "prometheus", "nginx", "fluent-bit"]
    )
    config.add_process_type("server", ["fluentd", "prometheus", "nginx"])
    config.add_process_type("client", ["fluent-bit"])

    config.add_server("localhost", "admin", "", type="localhost")
    config.add_server("10.1.0.170", "admin", "changeme", type="server")
    config.add_server("10.1.0.172", "admin", "changeme", type="client")
    config.add_server("10.1.0.174", "admin", "changeme", processes=["sshd"])
    return config
