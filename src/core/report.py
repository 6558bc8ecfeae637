"""Validation of agent replies into report models."""

import logging
from typing import Any, List

from src.shared.errors import InvalidResponseFormatError, ServerReportedFailureError
from .models import SessionResult, UnifiedReport

logger = logging.getLogger(__name__)

INVALID_RESPONSE_MESSAGE = "Invalid response format from agent. Please try again."
SERVER_FAILURE_MESSAGE = "Failed to calculate credits"

# Totals arrive as currency; differences below half a cent are rounding noise.
TOTAL_TOLERANCE = 0.005


def interpret_reply(reply: Any) -> SessionResult:
    """
    Classify a relay reply as a result or a failure.

    Args:
        reply: Decoded JSON body, ``{"success": bool, "response"?: ..., "error"?: str}``

    Returns:
        SessionResult when the reply reports success and carries a report

    Raises:
        ServerReportedFailureError: If the reply does not report success
        InvalidResponseFormatError: If a successful reply has no report object
    """
    if not isinstance(reply, dict) or not reply.get("success"):
        error_text = reply.get("error") if isinstance(reply, dict) else None
        raise ServerReportedFailureError(
            str(error_text) if error_text else SERVER_FAILURE_MESSAGE
        )
    return parse_session_result(reply.get("response"))


def parse_session_result(raw: Any) -> SessionResult:
    """
    Turn the ``response`` branch of a relay reply into a SessionResult.

    The only hard requirement is that ``raw`` is an object holding a nested
    ``unifiedReport`` object. Everything below it is read permissively with
    defaults.

    Args:
        raw: Parsed JSON value from the reply's ``response`` field

    Returns:
        SessionResult built from the reply

    Raises:
        InvalidResponseFormatError: If the report object is missing or not an object
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("unifiedReport"), dict):
        raise InvalidResponseFormatError(INVALID_RESPONSE_MESSAGE)

    result = SessionResult.from_dict(raw)
    for mismatch in find_total_mismatches(result.unifiedReport):
        logger.warning(f"Agent report totals disagree: {mismatch}")
    return result


def find_total_mismatches(report: UnifiedReport) -> List[str]:
    """
    Compare the duplicated totals carried by projections and cost breakdown.

    The two branches are independent fields in the reply. A mismatch is
    reported for logging only; the server values are kept as sent.
    """
    mismatches: List[str] = []
    pairs = (
        ("monthlyTotalCost", report.projections.monthlyTotalCost, report.costBreakdown.monthlyTotalCost),
        ("annualTotalCost", report.projections.annualTotalCost, report.costBreakdown.annualTotalCost),
    )
    for name, projected, breakdown in pairs:
        if abs(projected - breakdown) > TOTAL_TOLERANCE:
            mismatches.append(
                f"{name}: projections={projected} costBreakdown={breakdown}"
            )
    return mismatches
