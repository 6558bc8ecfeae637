"""Session storage for calculator sessions."""

import threading
from typing import Callable, Dict, Optional

from .calculator import DEFAULT_RESULT_HOOK_DELAY, CalculatorSession


class InMemorySessionStore:
    """Lightweight in-memory session store (dev use only)."""

    def __init__(
        self, agent_id: str, result_hook_delay: float = DEFAULT_RESULT_HOOK_DELAY
    ) -> None:
        """
        Initialize the in-memory session dictionary.

        Args:
            agent_id: Routing identifier given to every new session
            result_hook_delay: Delay passed to new sessions for result listeners
        """
        self.agent_id = agent_id
        self.result_hook_delay = result_hook_delay
        self._sessions: Dict[str, CalculatorSession] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[CalculatorSession]:
        """Return the calculator session for a session id, if present."""
        return self._sessions.get(session_id)

    def get_or_create(
        self,
        session_id: str,
        on_create: Optional[Callable[[CalculatorSession], None]] = None,
    ) -> CalculatorSession:
        """
        Return the session for ``session_id``, creating a fresh one if needed.

        Args:
            session_id: Browser session identifier
            on_create: Called with a newly created session before any other
                request can see it
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = CalculatorSession(self.agent_id, self.result_hook_delay)
                if on_create:
                    on_create(session)
                self._sessions[session_id] = session
            return session

    def delete(self, session_id: str) -> None:
        """Remove a session if it exists in the store."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def clear(self) -> None:
        """Remove all sessions from the store."""
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
