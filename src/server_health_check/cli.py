"""Command-line interface for Server Health Check."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from server_health_check import __version__
from server_health_check.checker import HealthCheck
from server_health_check.config import CheckConfig, create_example_config
from server_health_check.models import STATUS_GLYPHS, CheckStatus, FleetReport

console = Console()

DEFAULT_CONFIG_PATHS = [
    "healthcheck.yaml",
    "healthcheck.yml",
    "~/.config/healthcheck/config.yaml",
]


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def status_color(status: CheckStatus) -> str:
    """Get Rich color for a check status."""
    colors = {
        CheckStatus.OK: "green",
        CheckStatus.WARN: "yellow",
        CheckStatus.ERROR: "red",
        CheckStatus.INFO: "cyan",
        CheckStatus.UNPARSEABLE: "magenta",
    }
    return colors.get(status, "white")


def load_config(config: Optional[str]) -> CheckConfig:
    """Load the given config file or the first one found in default locations."""
    if config:
        return CheckConfig.from_yaml(config)

    for default_path in DEFAULT_CONFIG_PATHS:
        path = Path(default_path).expanduser()
        if path.exists():
            return CheckConfig.from_yaml(path)

    console.print("[red]No configuration file found.[/]")
    console.print("Create one with: [cyan]healthcheck init[/]")
    sys.exit(1)


def print_report(report: FleetReport) -> None:
    """Print the report text with colored lines."""
    for server in report.servers:
        console.print()
        console.print(Text(server.banner, style="bold cyan"))
        for result in server.results:
            line = Text(f"{result.glyph} ")
            line.append(f"{result.label}: ", style="bold")
            line.append(result.detail, style=status_color(result.status))
            console.print(line)

    status = report.status
    console.print()
    console.print(
        f"[bold]Overall:[/] [{status_color(status)}]{status.value.upper()}[/] "
        f"({len(report.servers)} servers, "
        f"[yellow]{report.warning_count}[/] warning, "
        f"[red]{report.error_count}[/] error)"
    )


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Server Health Check - fleet health checks with chat-ops reports."""
    pass


@main.command()
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--json", "output_json",
    is_flag=True,
    help="Output in JSON format",
)
@click.option(
    "--no-notify",
    is_flag=True,
    help="Do not send the report to the configured webhook",
)
@click.option(
    "--timeout", "-t",
    type=float,
    default=None,
    help="Deadline in seconds for the whole run",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (default: from config)",
)
def check(
    config: Optional[str],
    output_json: bool,
    no_notify: bool,
    timeout: Optional[float],
    log_level: Optional[str],
) -> None:
    """Check all configured servers and print the report."""
    cfg = load_config(config)
    setup_logging(log_level or cfg.log_level)

    report = HealthCheck(cfg).run(timeout=timeout, notify=not no_notify)

    if output_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_report(report)

    # Exit with error code if anything failed or warned
    if report.status == CheckStatus.ERROR:
        sys.exit(1)
    elif report.status in (CheckStatus.WARN, CheckStatus.UNPARSEABLE):
        sys.exit(2)


@main.command()
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
def servers(config: Optional[str]) -> None:
    """List configured servers and the processes monitored on each."""
    cfg = load_config(config)

    table = Table(title="Configured Servers", show_header=True, header_style="bold")
    table.add_column("Address", style="cyan", no_wrap=True)
    table.add_column("User")
    table.add_column("Transport", justify="center")
    table.add_column("Type", justify="center")
    table.add_column("Processes")

    for server in cfg.servers:
        processes = cfg.processes_for(server)
        table.add_row(
            server.address,
            server.username,
            "local" if server.is_local else f"ssh:{server.port}",
            server.type or "-",
            ", ".join(processes) if processes else Text("none", style="dim"),
        )

    console.print(table)
    console.print(
        f"[dim]Commands: {', '.join(cfg.commands)} | "
        f"Legend: {' '.join(f'{g} {s.value}' for s, g in STATUS_GLYPHS.items())}[/]"
    )


@main.command()
@click.option(
    "-o", "--output",
    default="healthcheck.yaml",
    help="Output file path",
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing file",
)
def init(output: str, force: bool) -> None:
    """Create an example configuration file."""
    path = Path(output)

    if path.exists() and not force:
        console.print(f"[red]File already exists: {path}[/]")
        console.print("Use --force to overwrite")
        sys.exit(1)

    example = create_example_config()
    example.to_yaml(path)

    console.print(f"[green]Created example configuration: {path}[/]")
    console.print("Edit this file to add your servers and webhook.")


if __name__ == "__main__":
    main()
