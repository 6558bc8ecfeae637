"""Tests for the calculation state machine."""

import asyncio
import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.core.calculator import CalculatorSession, SessionState
from src.core.models import SAMPLE_PROBLEM, UsageParameters
from src.core.summary import generate_summary
from src.shared.errors import ErrorKind, TransportFailureError

AGENT_ID = "695bb57dc2dad05ba69ad552"


@pytest.fixture
def session():
    return CalculatorSession(AGENT_ID, result_hook_delay=0)


def _fill(session, statement="Build a support bot"):
    session.update_parameters(
        problemStatement=statement,
        monthlySessions=1000,
        queriesPerSession=5,
        modelTier="GPT-5",
    )


class TestSubmitOutcomes:
    """Transitions out of SUBMITTING."""

    @pytest.mark.asyncio
    async def test_success_reaches_result(self, session, success_reply):
        _fill(session)
        compute = AsyncMock(return_value=success_reply)

        submitted = await session.submit(compute)

        assert submitted is True
        assert session.state is SessionState.RESULT
        assert session.error is None
        overview = session.result.unifiedReport.architectureOverview
        assert f"Agents: {overview.agentCount}" in generate_summary(session.result).split("\n")

        request = compute.await_args.args[0]
        assert request.agent_id == AGENT_ID
        assert json.loads(request.message) == {
            "problemStatement": "Build a support bot",
            "monthlySessions": 1000,
            "queriesPerSession": 5,
            "modelTier": "GPT-5",
        }

    @pytest.mark.asyncio
    async def test_server_failure_message_kept(self, session):
        _fill(session)

        await session.submit(AsyncMock(return_value={"success": False, "error": "quota exceeded"}))

        assert session.state is SessionState.ERROR
        assert session.error == "quota exceeded"
        assert session.error_kind == ErrorKind.SERVER_REPORTED_FAILURE
        assert session.result is None

    @pytest.mark.asyncio
    async def test_server_failure_without_message(self, session):
        _fill(session)

        await session.submit(AsyncMock(return_value={"success": False}))

        assert session.error == "Failed to calculate credits"

    @pytest.mark.asyncio
    async def test_success_without_report_is_invalid_format(self, session):
        _fill(session)

        await session.submit(AsyncMock(return_value={"success": True, "response": {}}))

        assert session.state is SessionState.ERROR
        assert session.error.startswith("Invalid response format")
        assert session.error_kind == ErrorKind.INVALID_RESPONSE_FORMAT
        assert session.result is None

    @pytest.mark.asyncio
    async def test_transport_failure_uses_exception_message(self, session):
        _fill(session)

        await session.submit(AsyncMock(side_effect=TransportFailureError("connection refused")))

        assert session.state is SessionState.ERROR
        assert session.error == "connection refused"
        assert session.error_kind == ErrorKind.TRANSPORT_FAILURE

    @pytest.mark.asyncio
    async def test_unexpected_exception_without_message_uses_fallback(self, session):
        _fill(session)

        await session.submit(AsyncMock(side_effect=RuntimeError()))

        assert session.state is SessionState.ERROR
        assert session.error == "An error occurred"
        assert session.error_kind == ErrorKind.TRANSPORT_FAILURE


class TestEmptyInput:
    """Blank statements never reach the network."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("statement", ["", "    ", "\n\t"])
    async def test_blank_statement_rejected_without_call(self, session, statement):
        _fill(session, statement)
        compute = AsyncMock()

        submitted = await session.submit(compute)

        assert submitted is False
        compute.assert_not_awaited()
        assert session.state is SessionState.EDITING
        assert session.error == "Please enter a problem statement"
        assert session.error_kind == ErrorKind.EMPTY_INPUT

    @pytest.mark.asyncio
    async def test_empty_input_error_cleared_by_next_valid_submit(self, session, success_reply):
        await session.submit(AsyncMock())
        assert session.error is not None

        _fill(session)
        await session.submit(AsyncMock(return_value=success_reply))

        assert session.error is None
        assert session.state is SessionState.RESULT


class TestReentrancy:
    """Only one submission may be in flight."""

    @pytest.mark.asyncio
    async def test_submit_while_submitting_is_ignored(self, session, success_reply):
        _fill(session)
        release = asyncio.Event()
        calls = []

        async def slow_compute(request):
            calls.append(request)
            await release.wait()
            return success_reply

        first = asyncio.ensure_future(session.submit(slow_compute))
        await asyncio.sleep(0)
        assert session.state is SessionState.SUBMITTING
        assert session.snapshot()["pending"] is True

        second = await session.submit(slow_compute)

        assert second is False
        assert len(calls) == 1

        release.set()
        assert await first is True
        assert session.state is SessionState.RESULT
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_edits_ignored_while_submitting(self, session, success_reply):
        _fill(session)
        release = asyncio.Event()

        async def slow_compute(request):
            await release.wait()
            return success_reply

        pending = asyncio.ensure_future(session.submit(slow_compute))
        await asyncio.sleep(0)

        assert session.update_parameters(problemStatement="changed") is False
        assert session.new_calculation() is False
        assert session.parameters.problemStatement == "Build a support bot"

        release.set()
        await pending

    @pytest.mark.asyncio
    async def test_submit_ignored_while_result_shown(self, session, success_reply):
        _fill(session)
        await session.submit(AsyncMock(return_value=success_reply))
        compute = AsyncMock(return_value=success_reply)

        assert await session.submit(compute) is False
        compute.assert_not_awaited()


class TestErrorRecovery:
    """ERROR returns to the submission path on the next attempt."""

    @pytest.mark.asyncio
    async def test_error_kept_while_editing_then_cleared_on_submit(self, session, success_reply):
        _fill(session)
        await session.submit(AsyncMock(return_value={"success": False, "error": "quota exceeded"}))

        assert session.update_parameters(monthlySessions=2000) is True
        assert session.error == "quota exceeded"

        seen_errors = []

        async def compute(request):
            seen_errors.append((session.state, session.error))
            return success_reply

        await session.submit(compute)

        assert seen_errors == [(SessionState.SUBMITTING, None)]
        assert session.state is SessionState.RESULT
        assert session.error is None


class TestNewCalculation:
    """RESULT --new_calculation--> EDITING with defaults."""

    @pytest.mark.asyncio
    async def test_resets_everything(self, session, success_reply):
        _fill(session)
        session.update_parameters(monthlySessions=5000, modelTier="GPT-5 Mini")
        await session.submit(AsyncMock(return_value=success_reply))

        assert session.new_calculation() is True

        assert session.state is SessionState.EDITING
        assert session.parameters == UsageParameters()
        assert session.parameters.problemStatement == ""
        assert session.result is None
        assert session.error is None
        assert session.error_kind is None

    @pytest.mark.asyncio
    async def test_new_result_replaces_old_one(self, session, success_reply, agent_response):
        _fill(session)
        await session.submit(AsyncMock(return_value=success_reply))
        first = session.result

        session.new_calculation()
        _fill(session)
        agent_response["unifiedReport"]["architectureOverview"]["agentCount"] = 9
        await session.submit(AsyncMock(return_value={"success": True, "response": agent_response}))

        assert session.result is not first
        assert first.unifiedReport.architectureOverview.agentCount == 3
        assert session.result.unifiedReport.architectureOverview.agentCount == 9


class TestResultListeners:
    """Deferred one-shot hook after the RESULT commit."""

    @pytest.mark.asyncio
    async def test_listener_runs_after_commit(self, session, success_reply):
        observed = []
        session.add_result_listener(lambda result: observed.append((session.state, result)))
        _fill(session)

        await session.submit(AsyncMock(return_value=success_reply))

        assert len(observed) == 1
        state, result = observed[0]
        assert state is SessionState.RESULT
        assert result is session.result

    @pytest.mark.asyncio
    async def test_listener_not_run_on_failure(self, session):
        listener = MagicMock()
        session.add_result_listener(listener)
        _fill(session)

        await session.submit(AsyncMock(return_value={"success": False}))

        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_state_committed_before_delay_elapses(self, success_reply):
        session = CalculatorSession(AGENT_ID, result_hook_delay=0.05)
        listener = MagicMock()
        session.add_result_listener(listener)
        _fill(session)

        task = asyncio.ensure_future(session.submit(AsyncMock(return_value=success_reply)))
        await asyncio.sleep(0.01)

        assert session.state is SessionState.RESULT
        listener.assert_not_called()

        await task
        listener.assert_called_once_with(session.result)

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_submit(self, session, success_reply):
        session.add_result_listener(MagicMock(side_effect=RuntimeError("scroll failed")))
        _fill(session)

        assert await session.submit(AsyncMock(return_value=success_reply)) is True
        assert session.state is SessionState.RESULT


class TestParametersAndSnapshot:
    """Form edits and the JSON view."""

    def test_load_sample(self, session):
        assert session.load_sample() is True
        assert session.parameters.problemStatement == SAMPLE_PROBLEM

    def test_snapshot_initial(self, session):
        snapshot = session.snapshot()

        assert snapshot["state"] == "editing"
        assert snapshot["pending"] is False
        assert snapshot["parameters"] == {
            "problemStatement": "",
            "monthlySessions": 1000,
            "queriesPerSession": 5,
            "modelTier": "GPT-5",
        }
        assert snapshot["model_tiers"] == ["GPT-5", "GPT-5 Mini", "GPT-5 Nano"]
        assert snapshot["error"] is None
        assert snapshot["result"] is None

    @pytest.mark.asyncio
    async def test_snapshot_with_result(self, session, success_reply, agent_response):
        _fill(session)
        await session.submit(AsyncMock(return_value=success_reply))

        snapshot = session.snapshot()

        assert snapshot["state"] == "result"
        assert snapshot["result"]["unifiedReport"]["recommendations"] == agent_response["unifiedReport"]["recommendations"]
