"""Classify command output against thresholds."""

import logging

from server_health_check.models import CheckResult, CheckStatus
from server_health_check.parsers import MemoryUsedParser, ParseError, get_parser

logger = logging.getLogger(__name__)


def classify(
    label: str,
    output: str,
    thresholds: dict[str, float],
    server: str = "",
    strict: bool = False,
) -> CheckResult:
    """Classify one command's output.

    Metric commands (CPU, memory, disk) are parsed and compared against
    ``thresholds``; any other label is passed through verbatim as OK.

    Args:
        label: Command label from the command catalog.
        output: Trimmed command output.
        thresholds: Threshold table; missing entries count as 0.0.
        server: Server address recorded on the result.
        strict: Report unparseable output as such instead of reading it as 0.

    Returns:
        CheckResult for the command.
    """
    parser = get_parser(label)
    if parser is None:
        return CheckResult(server, label, CheckStatus.OK, output)

    try:
        value = parser.parse(output)
    except ParseError as e:
        if strict:
            return CheckResult(
                server, label, CheckStatus.UNPARSEABLE, f"{output} (unparseable: {e})"
            )
        logger.warning(f"Could not parse {label} on {server or 'server'}, using 0: {e}")
        value = 0.0

    threshold = thresholds.get(parser.metric, 0.0)
    status = CheckStatus.WARN if parser.is_warning(value, threshold) else CheckStatus.OK

    detail = output
    if isinstance(parser, MemoryUsedParser):
        detail = f"{output} ({value:.1f}% used)"

    return CheckResult(server, label, status, detail, metric=value)
