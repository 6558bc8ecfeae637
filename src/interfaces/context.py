"""Execution context for interface operations."""

from typing import Optional

import httpx

from src.core.config import get_agent_id, get_relay_timeout, get_relay_url
from src.core.session import InMemorySessionStore
from .relay import AgentRelayClient


class InterfaceContext:
    """
    Holds the session store and relay settings shared by interface operations.

    Relay clients are created per operation with ``relay_client()`` because an
    ``httpx.AsyncClient`` is bound to the event loop that opened it, and each
    web request runs on its own loop.
    """

    def __init__(
        self,
        session_store: Optional[InMemorySessionStore] = None,
        relay_url: Optional[str] = None,
        relay_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the context.

        Args:
            session_store: Optional session store. If not provided, InMemorySessionStore is created.
            relay_url: Relay endpoint; defaults to AGENT_RELAY_URL
            relay_timeout: Relay timeout in seconds; defaults to AGENT_RELAY_TIMEOUT
            transport: Optional httpx transport override (used by tests)
        """
        self.session_store = session_store or InMemorySessionStore(get_agent_id())
        self.relay_url = relay_url or get_relay_url()
        self.relay_timeout = relay_timeout if relay_timeout is not None else get_relay_timeout()
        self._transport = transport

    def relay_client(self) -> AgentRelayClient:
        """Return a new, unopened relay client (use with ``async with``)."""
        return AgentRelayClient(
            self.relay_url, timeout=self.relay_timeout, transport=self._transport
        )
