"""Shared exception definitions for the application."""

from typing import Optional


class ErrorKind:
    """Labels stored in the session error slot and used as metric attributes."""

    EMPTY_INPUT = "empty_input"
    INVALID_RESPONSE_FORMAT = "invalid_response_format"
    SERVER_REPORTED_FAILURE = "server_reported_failure"
    TRANSPORT_FAILURE = "transport_failure"


class CalculatorError(Exception):
    """Base exception for Credit Calculator errors."""

    kind: Optional[str] = None


class ConfigurationError(CalculatorError):
    """Raised when configuration is missing or invalid."""

    pass


class ValidationError(CalculatorError):
    """Raised when user-entered parameters are invalid."""

    pass


class EmptyInputError(ValidationError):
    """Raised when the problem statement is blank after trimming."""

    kind = ErrorKind.EMPTY_INPUT


class ReportError(CalculatorError):
    """Raised when the agent reply cannot be turned into a report."""

    pass


class InvalidResponseFormatError(ReportError):
    """Raised when a successful reply is missing the unified report."""

    kind = ErrorKind.INVALID_RESPONSE_FORMAT


class ServerReportedFailureError(ReportError):
    """Raised when the relay reply explicitly signals failure."""

    kind = ErrorKind.SERVER_REPORTED_FAILURE


class TransportFailureError(CalculatorError):
    """Raised when the relay call fails at the network or decoding level."""

    kind = ErrorKind.TRANSPORT_FAILURE


class ExportError(CalculatorError):
    """Raised when a copy or file export cannot be completed."""

    pass
