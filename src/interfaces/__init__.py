"""Interface abstraction layer for the web application."""

from .base import CalculatorInterface
from .context import InterfaceContext
from .handlers import WorkflowHandler
from .relay import AgentRelayClient

__all__ = ["CalculatorInterface", "InterfaceContext", "WorkflowHandler", "AgentRelayClient"]
