"""HTTP client for the agent relay endpoint."""

import logging
from typing import Any, Dict, Optional

import httpx
from opentelemetry.trace import SpanKind

from src.core.request_builder import AgentRequest
from src.shared.errors import TransportFailureError
from src.shared.tracing import get_tracer

logger = logging.getLogger(__name__)


class AgentRelayClient:
    """
    Posts calculation requests to the relay and returns its decoded JSON reply.

    Use as an async context manager; the underlying ``httpx.AsyncClient`` is
    bound to the event loop it was opened on.
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the relay client.

        Args:
            url: Relay endpoint (``POST``)
            timeout: Seconds before the request is abandoned; httpx defaults when None
            transport: Optional transport override (used by tests)
        """
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "AgentRelayClient":
        kwargs: Dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = httpx.Timeout(self.timeout)
        if self._transport is not None:
            kwargs["transport"] = self._transport
        self._client = httpx.AsyncClient(**kwargs)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def compute_report(self, request: AgentRequest) -> Any:
        """
        Send a request to the agent through the relay.

        The HTTP status is not inspected: the relay reports agent failures in
        the JSON body (``{"success": false, "error": ...}``).

        Args:
            request: Envelope built by ``build_agent_request``

        Returns:
            Decoded JSON reply

        Raises:
            TransportFailureError: On network errors or a non-JSON body
        """
        if self._client is None:
            raise TransportFailureError("Relay client is not open")

        tracer = get_tracer(instrumenting_module_name="credit_calculator.relay")
        with tracer.start_as_current_span(
            name="relay.compute_report",
            kind=SpanKind.CLIENT,
            attributes={"relay.url": self.url, "agent.id": request.agent_id},
        ) as span:
            try:
                response = await self._client.post(self.url, json=request.to_dict())
            except httpx.HTTPError as e:
                logger.error(f"Relay request to {self.url} failed: {e!r}")
                raise TransportFailureError(str(e)) from e

            span.set_attribute("http.status_code", response.status_code)
            logger.debug(f"Relay replied with HTTP {response.status_code}")

            try:
                return response.json()
            except ValueError as e:
                raise TransportFailureError(
                    f"Relay returned a non-JSON response (HTTP {response.status_code})"
                ) from e
