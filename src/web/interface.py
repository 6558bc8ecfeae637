"""Web interface implementation for Credit Calculator."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from src.interfaces.base import CalculatorInterface
from src.interfaces.context import InterfaceContext
from src.interfaces.handlers import WorkflowHandler

# Get logger (setup handled by application entry point)
logger = logging.getLogger(__name__)


class WebInterface(CalculatorInterface):
    """Web interface implementation for Flask application."""

    def __init__(self, session_store=None, **context_options: Any):
        """
        Initialize Web interface.

        Args:
            session_store: Optional custom session store (defaults to InMemorySessionStore)
            **context_options: relay_url, relay_timeout or transport for InterfaceContext
        """
        self.context = InterfaceContext(session_store, **context_options)
        self.handler = WorkflowHandler()

    async def get_state(self, session_id: str) -> Dict[str, Any]:
        return self.handler.get_snapshot(self.context, session_id)

    async def update_parameters(self, session_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self.handler.update_parameters(self.context, session_id, fields)

    async def load_sample(self, session_id: str) -> Dict[str, Any]:
        """Fill the problem statement with the sample use case."""
        return self.handler.load_sample(self.context, session_id)

    async def calculate(
        self, session_id: str, fields: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Submit a calculation for Web API.

        Args:
            session_id: Unique identifier for the user session
            fields: Optional form edits applied before submitting

        Returns:
            JSON-compatible session snapshot plus 'submitted'
        """
        result = await self.handler.handle_calculation(self.context, session_id, fields)
        logger.debug(f"Session {session_id}: calculate -> {result['state']}")
        return result

    async def new_calculation(self, session_id: str) -> Dict[str, Any]:
        return self.handler.handle_new_calculation(self.context, session_id)

    async def copy_summary(self, session_id: str) -> Optional[str]:
        return self.handler.copy_summary(self.context, session_id)

    async def export_summary(self, session_id: str, directory: Path) -> Optional[Path]:
        return self.handler.export_summary(self.context, session_id, directory)
