"""HTTP route handlers for Web API."""

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from src.shared.errors import ExportError, ValidationError
from src.shared.metrics import (
    increment_calculations_completed,
    increment_calculations_submitted,
    increment_errors,
    increment_exports,
)
from src.web.interface import WebInterface
from src.web.models import ParametersRequest, SummaryResponse

# Get logger (setup handled by application entry point)
logger = logging.getLogger(__name__)


class WebHandlers:
    """Handlers for Web API endpoints."""

    def __init__(self, web_interface: WebInterface):
        """
        Initialize handlers.

        Args:
            web_interface: WebInterface instance for handling requests
        """
        self.interface = web_interface

    async def handle_state(self, session_id: str) -> Dict[str, Any]:
        """Return the session snapshot."""
        return await self.interface.get_state(session_id)

    async def handle_parameters(self, session_id: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Handle form edits.

        Args:
            session_id: Unique session identifier
            data: JSON body with any of the form fields

        Returns:
            Session snapshot

        Raises:
            ValidationError: For an unknown model tier
        """
        request = ParametersRequest.from_json(data)
        try:
            return await self.interface.update_parameters(session_id, request.fields)
        except ValidationError:
            increment_errors("validation_error", session_id)
            raise

    async def handle_sample(self, session_id: str) -> Dict[str, Any]:
        """Load the sample problem statement."""
        return await self.interface.load_sample(session_id)

    async def handle_calculate(self, session_id: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Handle calculation endpoint.

        Args:
            session_id: Unique session identifier
            data: Optional JSON body with form fields to apply first

        Returns:
            Session snapshot plus 'submitted'
        """
        request = ParametersRequest.from_json(data)
        logger.debug(f"Processing calculation for session {session_id}, fields: {sorted(request.fields)}")

        try:
            result = await self.interface.calculate(session_id, request.fields or None)
        except ValidationError:
            increment_errors("validation_error", session_id)
            raise
        except Exception as e:
            logger.error(f"Error in calculate handler: {e}")
            increment_errors("calculate_error", session_id)
            raise

        if result.get("submitted"):
            increment_calculations_submitted(session_id)
            increment_calculations_completed(session_id, success=result.get("state") == "result")

        if result.get("error_kind"):
            increment_errors(result["error_kind"], session_id)

        return result

    async def handle_new_calculation(self, session_id: str) -> Dict[str, Any]:
        """Reset the session for a new calculation."""
        return await self.interface.new_calculation(session_id)

    async def handle_copy_summary(self, session_id: str) -> Optional[Dict[str, Any]]:
        """
        Handle copy-summary endpoint.

        Returns:
            Dictionary with the summary text, or None when there is no result

        Raises:
            ExportError: If the summary could not be produced
        """
        try:
            summary = await self.interface.copy_summary(session_id)
        except ExportError:
            increment_errors("export_error", session_id)
            raise

        if summary is None:
            return None

        increment_exports("clipboard", session_id)
        return SummaryResponse(summary=summary).to_dict()

    async def handle_export(self, session_id: str) -> Optional[Tuple[str, bytes]]:
        """
        Handle file export endpoint.

        Returns:
            (file name, UTF-8 content) for download, or None when there is no result

        Raises:
            ExportError: If the file could not be written
        """
        try:
            with tempfile.TemporaryDirectory() as tmp:
                path = await self.interface.export_summary(session_id, Path(tmp))
                if path is None:
                    return None
                content = path.read_bytes()
        except ExportError:
            increment_errors("export_error", session_id)
            raise

        increment_exports("file", session_id)
        return path.name, content
