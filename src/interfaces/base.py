"""Abstract base class for interface implementations."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional


class CalculatorInterface(ABC):
    """Abstract base for interface implementations driving a calculator session."""

    @abstractmethod
    async def get_state(self, session_id: str) -> Dict[str, Any]:
        """
        Return the session snapshot.

        Args:
            session_id: Unique identifier for the user session

        Returns:
            Dictionary with keys:
                - 'state': 'editing', 'submitting', 'result' or 'error'
                - 'pending': True while a request is in flight
                - 'parameters': Current form values
                - 'error': Error message or None
                - 'result': Result envelope or None
        """
        pass

    @abstractmethod
    async def update_parameters(self, session_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply form edits and return the session snapshot.

        Args:
            session_id: Unique identifier for the user session
            fields: Subset of problemStatement, monthlySessions, queriesPerSession, modelTier
        """
        pass

    @abstractmethod
    async def calculate(
        self, session_id: str, fields: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Submit the session's parameters to the agent and wait for the outcome.

        Args:
            session_id: Unique identifier for the user session
            fields: Optional form edits applied before submitting

        Returns:
            Session snapshot plus 'submitted' (whether a request was issued)
        """
        pass

    @abstractmethod
    async def new_calculation(self, session_id: str) -> Dict[str, Any]:
        """
        Clear the result and error and reset the form.

        Args:
            session_id: Unique identifier for the user session
        """
        pass

    @abstractmethod
    async def copy_summary(self, session_id: str) -> Optional[str]:
        """Return the summary text handed to the clipboard, or None without a result."""
        pass

    @abstractmethod
    async def export_summary(self, session_id: str, directory: Path) -> Optional[Path]:
        """Write the summary file into ``directory``; None without a result."""
        pass
