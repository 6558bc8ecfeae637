"""Plain-text summary of a calculation result, shared by copy and export."""

import re
from datetime import datetime, timezone
from typing import List, Optional

from src.shared.formatting import format_currency, format_integer, format_plain_number
from .models import SessionResult

SUMMARY_TITLE = "LYZR CREDIT CALCULATOR - COST ESTIMATION SUMMARY"
TITLE_RULE = "=" * 50
SECTION_RULE = "-" * 30

_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def to_utc_iso(timestamp: str) -> str:
    """
    Normalize an ISO-8601 timestamp to UTC with millisecond precision.

    Naive timestamps are taken as UTC. Unparseable values are returned as-is.

    Example:
        ``2026-01-07T12:00:00+02:00`` -> ``2026-01-07T10:00:00.000Z``
    """
    text = timestamp.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return timestamp

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return f"{parsed:%Y-%m-%dT%H:%M:%S}.{parsed.microsecond // 1000:03d}Z"


def _section(title: str) -> List[Optional[str]]:
    return ["", title, SECTION_RULE]


def generate_summary(result: SessionResult) -> str:
    """
    Build the plain-text cost estimation summary.

    Section order is fixed: title, architecture overview, cost breakdown,
    projections, recommendations, generation timestamp. Blank separator lines
    are kept; the knowledge base size line is left out entirely when no
    knowledge base is required.

    Args:
        result: Stored calculation result

    Returns:
        Newline-joined summary text without a trailing newline
    """
    report = result.unifiedReport
    overview = report.architectureOverview
    costs = report.costBreakdown
    projections = report.projections

    lines: List[Optional[str]] = [SUMMARY_TITLE, TITLE_RULE]

    lines += _section("ARCHITECTURE OVERVIEW")
    lines += [
        f"Agents: {format_plain_number(overview.agentCount)}",
        f"Agent Types: {', '.join(overview.agentTypes)}",
        f"Orchestration: {overview.orchestrationPattern}",
        f"Complexity Score: {format_plain_number(overview.complexityScore)}/10",
        f"Knowledge Base Required: {'Yes' if overview.kbRequired else 'No'}",
        f"KB Size: {format_plain_number(overview.kbEstimatedSizeMB)}MB" if overview.kbRequired else None,
        f"API Calls per Session: {format_plain_number(overview.apiCallsPerSession)}",
        f"Recommended Model: {', '.join(overview.recommendedModels)}",
    ]

    lines += _section("COST BREAKDOWN")
    lines += [
        f"Monthly Total: {format_currency(costs.monthlyTotalCost)}",
        f"Annual Total: {format_currency(costs.annualTotalCost)}",
        f"Cost per Session: {format_currency(costs.costPerSession)}",
        f"Cost per Query: {format_currency(costs.costPerQuery)}",
    ]

    lines += _section("PROJECTIONS")
    lines += [
        f"Monthly Queries: {format_integer(projections.estimatedMonthlyQueries)}",
        f"Annual Queries: {format_integer(projections.estimatedAnnualQueries)}",
    ]

    lines += _section("RECOMMENDATIONS")
    lines += [f"{idx}. {rec}" for idx, rec in enumerate(report.recommendations, start=1)]

    lines += ["", f"Generated: {to_utc_iso(result.metadata.timestamp)}"]

    return "\n".join(line for line in lines if line is not None)


def generate_export_content(result: SessionResult) -> str:
    """Return the text written to exported files (identical to the copy text)."""
    return generate_summary(result)
