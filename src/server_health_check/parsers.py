"""Parsers for the metric commands' output.

Each parser turns one command's output into a single percentage. The expected
shapes are the ones produced by the built-in commands:

    CPU Usage     "5.0% user, 3.0% system, 92.0% idle"
    Memory Usage  "15Gi total, 3.2Gi used, 11Gi free"
    Disk Usage    "100G total, 42G used, 45% used"
"""

import re
from abc import ABC, abstractmethod


class ParseError(ValueError):
    """Command output does not have the expected shape."""


# Multipliers relative to GiB for `free -h` style sizes
_SIZE_UNITS = {
    "B": 1 / 1024**3,
    "K": 1 / 1024**2,
    "Ki": 1 / 1024**2,
    "M": 1 / 1024,
    "Mi": 1 / 1024,
    "G": 1.0,
    "Gi": 1.0,
    "T": 1024.0,
    "Ti": 1024.0,
    "P": 1024.0**2,
    "Pi": 1024.0**2,
}

_SIZE_RE = re.compile(r"^([0-9]*[.,]?[0-9]+)([A-Za-z]*)$")


def parse_percent(token: str) -> float:
    """Parse ``"92.0%"`` or ``"92.0"`` into a float."""
    try:
        return float(token.removesuffix("%").replace(",", "."))
    except ValueError:
        raise ParseError(f"not a percentage: {token!r}") from None


def parse_size_gib(token: str) -> float:
    """Parse a human readable size (``"15Gi"``, ``"512Mi"``) into GiB.

    A bare number is read as GiB, matching the ``Gi`` suffix ``free -h``
    prints for typical servers.
    """
    match = _SIZE_RE.match(token)
    if not match:
        raise ParseError(f"not a size: {token!r}")
    number, unit = match.groups()
    if not unit:
        return float(number.replace(",", "."))
    if unit not in _SIZE_UNITS:
        raise ParseError(f"unknown size unit in {token!r}")
    return float(number.replace(",", ".")) * _SIZE_UNITS[unit]


def _segment(output: str, index: int) -> str:
    """Return the first whitespace token of the ``", "``-separated segment."""
    segments = output.split(", ")
    if len(segments) <= index:
        raise ParseError(f"expected at least {index + 1} segments in {output!r}")
    tokens = segments[index].split()
    if not tokens:
        raise ParseError(f"segment {index + 1} is empty in {output!r}")
    return tokens[0]


class MetricParser(ABC):
    """Parse one metric out of a command's output."""

    #: Threshold table key this metric is compared against
    metric: str = ""
    #: True when low values are bad (warn at or below the threshold)
    warn_below: bool = False

    @abstractmethod
    def parse(self, output: str) -> float:
        """Return the metric value. Raises ParseError on malformed output."""
        ...

    def is_warning(self, value: float, threshold: float) -> bool:
        if self.warn_below:
            return value <= threshold
        return value >= threshold


class CpuIdleParser(MetricParser):
    """Idle percentage from ``"<u>% user, <s>% system, <i>% idle"``."""

    metric = "CPU Idle"
    warn_below = True

    def parse(self, output: str) -> float:
        return parse_percent(_segment(output, 2))


class MemoryUsedParser(MetricParser):
    """Used percentage from ``"<T>Gi total, <U>Gi used, <F>Gi free"``."""

    metric = "Memory Used"

    def parse(self, output: str) -> float:
        fields = output.split()
        if len(fields) < 3:
            raise ParseError(f"expected total and used fields in {output!r}")
        total = parse_size_gib(fields[0])
        used = parse_size_gib(fields[2])
        if total <= 0:
            raise ParseError(f"total memory is zero in {output!r}")
        return used / total * 100


class DiskUsedParser(MetricParser):
    """Used percentage from ``"<T> total, <U> used, <P>% used"``."""

    metric = "Disk Used"

    def parse(self, output: str) -> float:
        return parse_percent(_segment(output, 2))


PARSERS: dict[str, MetricParser] = {
    "CPU Usage": CpuIdleParser(),
    "Memory Usage": MemoryUsedParser(),
    "Disk Usage": DiskUsedParser(),
}


def get_parser(label: str) -> MetricParser | None:
    """Get the parser for a command label, None for pass-through commands."""
    return PARSERS.get(label)
