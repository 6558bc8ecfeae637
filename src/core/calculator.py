"""Calculation lifecycle for a single user session.

A ``CalculatorSession`` moves through::

    EDITING --submit--> SUBMITTING --success--> RESULT --new_calculation--> EDITING
                                   \\--failure--> ERROR  --submit--> SUBMITTING

It is the only owner of the session's parameters, result and error slot;
summary and export code read the stored result without modifying it.
"""

import asyncio
import enum
import logging
import threading
from typing import Any, Awaitable, Callable, Dict, List, Optional

from src.shared.errors import EmptyInputError, ErrorKind, ReportError
from .models import MODEL_TIERS, SAMPLE_PROBLEM, SessionResult, UsageParameters
from .report import interpret_reply
from .request_builder import AgentRequest, build_agent_request

logger = logging.getLogger(__name__)

TRANSPORT_FAILURE_MESSAGE = "An error occurred"

# Delay before result listeners run, giving the results view time to render.
DEFAULT_RESULT_HOOK_DELAY = 0.1

ComputeReport = Callable[[AgentRequest], Awaitable[Any]]
ResultListener = Callable[[SessionResult], None]


class SessionState(str, enum.Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    RESULT = "result"
    ERROR = "error"


class CalculatorSession:
    """State machine governing form, pending, error and result views."""

    def __init__(
        self,
        agent_id: str,
        result_hook_delay: float = DEFAULT_RESULT_HOOK_DELAY,
    ) -> None:
        """
        Initialize a session in the editing state with default parameters.

        Args:
            agent_id: Routing identifier sent with every request
            result_hook_delay: Seconds to wait after a result is committed
                before result listeners run
        """
        self.agent_id = agent_id
        self.result_hook_delay = result_hook_delay
        self.parameters = UsageParameters()
        self.state = SessionState.EDITING
        self.result: Optional[SessionResult] = None
        self.error: Optional[str] = None
        self.error_kind: Optional[str] = None
        self._listeners: List[ResultListener] = []
        # Flask serves requests on worker threads; only the transition into
        # SUBMITTING needs to be atomic.
        self._guard = threading.Lock()

    @property
    def is_pending(self) -> bool:
        return self.state is SessionState.SUBMITTING

    @property
    def is_editable(self) -> bool:
        return self.state in (SessionState.EDITING, SessionState.ERROR)

    def add_result_listener(self, listener: ResultListener) -> None:
        """Register a callback run once per committed result (e.g. scroll to results)."""
        self._listeners.append(listener)

    def update_parameters(self, **fields: Any) -> bool:
        """
        Apply form edits.

        Edits are ignored while a submission is pending or results are shown.

        Returns:
            True if the edits were applied

        Raises:
            ValidationError: For unknown fields or an unknown model tier
        """
        if not self.is_editable:
            logger.debug(f"Ignoring parameter edit while session is {self.state.value}")
            return False
        self.parameters = self.parameters.updated(**fields)
        return True

    def load_sample(self) -> bool:
        """Fill the problem statement with the sample use case."""
        return self.update_parameters(problemStatement=SAMPLE_PROBLEM)

    async def submit(self, compute: ComputeReport) -> bool:
        """
        Submit the current parameters to the agent.

        Args:
            compute: Coroutine function posting an AgentRequest and returning
                the decoded relay reply

        Returns:
            True if a request was issued, False if the submission was ignored
            (already pending, results showing) or rejected (empty input)
        """
        with self._guard:
            if not self.is_editable:
                logger.info(f"Ignoring submit while session is {self.state.value}")
                return False

            self._clear_error()
            self.state = SessionState.EDITING
            try:
                request = build_agent_request(self.parameters, self.agent_id)
            except EmptyInputError as e:
                self.error = str(e)
                self.error_kind = e.kind
                return False

            self.state = SessionState.SUBMITTING

        logger.info(
            f"Submitting calculation: sessions={self.parameters.monthlySessions}, "
            f"queries={self.parameters.queriesPerSession}, tier={self.parameters.modelTier}"
        )

        try:
            reply = await compute(request)
            result = interpret_reply(reply)
        except ReportError as e:
            logger.warning(f"Agent reply rejected ({e.kind}): {e}")
            self._fail(e.kind, str(e))
            return True
        except Exception as e:
            logger.error(f"Calculation request failed: {e}")
            self._fail(ErrorKind.TRANSPORT_FAILURE, str(e) or TRANSPORT_FAILURE_MESSAGE)
            return True

        self.result = result
        self.state = SessionState.RESULT
        logger.info(f"Calculation complete: status={result.status!r}")

        await self._notify_result(result)
        return True

    def new_calculation(self) -> bool:
        """
        Discard the result and error and reset the form to its defaults.

        Returns:
            True if the session was reset, False while a submission is pending
        """
        with self._guard:
            if self.is_pending:
                logger.info("Ignoring new calculation while a submission is pending")
                return False
            self.result = None
            self._clear_error()
            self.parameters = UsageParameters()
            self.state = SessionState.EDITING
            return True

    def snapshot(self) -> Dict[str, Any]:
        """Return a JSON-compatible view of the session for the browser."""
        return {
            "state": self.state.value,
            "pending": self.is_pending,
            "parameters": self.parameters.to_dict(),
            "model_tiers": list(MODEL_TIERS),
            "error": self.error,
            "error_kind": self.error_kind,
            "result": self.result.to_dict() if self.result else None,
        }

    def _clear_error(self) -> None:
        self.error = None
        self.error_kind = None

    def _fail(self, kind: Optional[str], message: str) -> None:
        self.error = message
        self.error_kind = kind
        self.state = SessionState.ERROR

    async def _notify_result(self, result: SessionResult) -> None:
        if not self._listeners:
            return

        await asyncio.sleep(self.result_hook_delay)

        # A reset during the delay makes the hook stale.
        if self.result is not result:
            return

        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception as e:
                logger.warning(f"Result listener failed: {e}")
