"""Shared workflow handlers for interface implementations."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from opentelemetry.trace import SpanKind

from src.core.calculator import CalculatorSession, SessionState
from src.core.export import copy_to_clipboard, export_as_file
from src.core.models import SessionResult
from src.core.request_builder import AgentRequest
from src.shared.tracing import get_tracer
from src.web.session_tracing import end_session_span
from .context import InterfaceContext

# Get logger (setup handled by application entry point)
logger = logging.getLogger(__name__)


def _handler_span(operation: str, *, session_id: Optional[str] = None, **attrs: Any):
    """Create a span for handler operations with session and operation context.

    Args:
        operation: Name of the handler operation (e.g., "calculate", "export")
        session_id: Optional session identifier for correlation
        **attrs: Additional span attributes

    Returns:
        Context manager for the span
    """
    tracer = get_tracer(instrumenting_module_name="credit_calculator.handlers")
    attributes: Dict[str, Any] = {
        "handler.operation": operation,
        **attrs,
    }
    if session_id:
        attributes["session.id"] = session_id
    return tracer.start_as_current_span(
        name=f"handler.{operation}",
        kind=SpanKind.INTERNAL,
        attributes=attributes,
    )


class WorkflowHandler:
    """
    Centralized handler for calculator operations used by all interfaces.

    Every operation resolves the session's single CalculatorSession from the
    store; summary and export only read its stored result.
    """

    def get_session(self, context: InterfaceContext, session_id: str) -> CalculatorSession:
        """Return the session's state machine, wiring result listeners on first use."""
        return context.session_store.get_or_create(
            session_id,
            on_create=lambda session: session.add_result_listener(
                lambda result: self._on_result_ready(session_id, result)
            ),
        )

    def get_snapshot(self, context: InterfaceContext, session_id: str) -> Dict[str, Any]:
        """Return the JSON view of a session."""
        return self.get_session(context, session_id).snapshot()

    def update_parameters(
        self,
        context: InterfaceContext,
        session_id: str,
        fields: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Apply form edits.

        Raises:
            ValidationError: For unknown fields or an unknown model tier
        """
        session = self.get_session(context, session_id)
        if not session.update_parameters(**fields):
            logger.debug(f"Parameter edit ignored for session {session_id} ({session.state.value})")
        return session.snapshot()

    def load_sample(self, context: InterfaceContext, session_id: str) -> Dict[str, Any]:
        """Fill the problem statement with the sample use case."""
        session = self.get_session(context, session_id)
        session.load_sample()
        return session.snapshot()

    async def handle_calculation(
        self,
        context: InterfaceContext,
        session_id: str,
        fields: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Apply optional edits, then submit the session's parameters.

        Args:
            context: InterfaceContext with session store and relay settings
            session_id: Unique identifier for the user session
            fields: Optional form edits applied before submitting

        Returns:
            Session snapshot plus 'submitted' (whether a request was issued)
        """
        with _handler_span("calculate", session_id=session_id):
            session = self.get_session(context, session_id)
            if fields:
                session.update_parameters(**fields)

            async with context.relay_client() as relay:

                async def compute(request: AgentRequest) -> Any:
                    logger.info(f"Calling agent relay for session {session_id}")
                    return await relay.compute_report(request)

                submitted = await session.submit(compute)

            if session.state is SessionState.ERROR:
                logger.warning(
                    f"Calculation failed for session {session_id} "
                    f"({session.error_kind}): {session.error}"
                )

            return {**session.snapshot(), "submitted": submitted}

    def handle_new_calculation(self, context: InterfaceContext, session_id: str) -> Dict[str, Any]:
        """Reset the session for a new calculation."""
        with _handler_span("new_calculation", session_id=session_id):
            session = self.get_session(context, session_id)
            session.new_calculation()
            return session.snapshot()

    def copy_summary(self, context: InterfaceContext, session_id: str) -> Optional[str]:
        """
        Produce the clipboard text for a session.

        The browser owns the clipboard, so the writer collects the text that
        the page then places on it.
        """
        with _handler_span("copy_summary", session_id=session_id):
            copied: List[str] = []
            session = self.get_session(context, session_id)
            return copy_to_clipboard(session.result, copied.append)

    def export_summary(
        self,
        context: InterfaceContext,
        session_id: str,
        directory: Path,
    ) -> Optional[Path]:
        """
        Write the session's summary file into ``directory``.

        Raises:
            ExportError: If the file cannot be written
        """
        with _handler_span("export_summary", session_id=session_id):
            session = self.get_session(context, session_id)
            return export_as_file(session.result, directory)

    def _on_result_ready(self, session_id: str, result: SessionResult) -> None:
        logger.info(
            f"Results ready for session {session_id}: "
            f"{result.unifiedReport.architectureOverview.agentCount} agents, "
            f"generated by {result.metadata.managerAgent or 'unknown agent'}"
        )
        end_session_span(session_id)
