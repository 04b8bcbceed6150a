"""Tests for the generation workflow state machine."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from macrosmith.generation import (
    GenerationError,
    GenerationResult,
    GenerationWorkflow,
    WorkflowStatus,
)
from macrosmith.llm import LLMResponse
from macrosmith.mapping import MacroConfig, MappingSet, default_mappings


class ControlledClient:
    """Generation client whose calls finish only when the test releases them."""

    def __init__(self):
        self.calls: list[tuple[asyncio.Event, dict]] = []

    async def generate(self, request):
        gate = asyncio.Event()
        outcome = {}
        self.calls.append((gate, outcome))
        await gate.wait()
        if "error" in outcome:
            raise outcome["error"]
        return outcome["result"]

    def finish(self, index: int, result=None, error=None):
        gate, outcome = self.calls[index]
        if error is not None:
            outcome["error"] = error
        else:
            outcome["result"] = result
        gate.set()


async def _wait_for_calls(client: ControlledClient, count: int):
    while len(client.calls) < count:
        await asyncio.sleep(0)


class TestWorkflowTransitions:
    """Test idle -> requesting -> succeeded/failed."""

    def test_initial_state_is_idle(self, generation_client):
        workflow = GenerationWorkflow(generation_client)

        assert workflow.state.status == WorkflowStatus.IDLE
        assert workflow.state.result is None
        assert workflow.state.error is None

    @pytest.mark.asyncio
    async def test_success_scenario(self, generation_client):
        workflow = GenerationWorkflow(generation_client)

        state = await workflow.generate(MacroConfig(), default_mappings())

        assert state.status == WorkflowStatus.SUCCEEDED
        assert state.result == GenerationResult(code="Sub X()\nEnd Sub", explanation="Run it.")
        assert workflow.state == state

    @pytest.mark.asyncio
    async def test_not_json_scenario_fails(self, generation_client, mock_llm_client):
        mock_llm_client.complete.return_value = LLMResponse(text="not json")
        workflow = GenerationWorkflow(generation_client)

        state = await workflow.generate(MacroConfig(), default_mappings())

        assert state.status == WorkflowStatus.FAILED
        assert state.result is None
        assert "Failed to generate VBA code" in state.error

    @pytest.mark.asyncio
    async def test_failure_is_recoverable(self, generation_client, mock_llm_client, generation_payload):
        mock_llm_client.complete.return_value = LLMResponse(text="")
        workflow = GenerationWorkflow(generation_client)
        assert (await workflow.generate(MacroConfig(), MappingSet())).status == WorkflowStatus.FAILED

        mock_llm_client.complete.return_value = LLMResponse(text=generation_payload)
        state = await workflow.generate(MacroConfig(), MappingSet())

        assert state.status == WorkflowStatus.SUCCEEDED
        assert state.error is None

    @pytest.mark.asyncio
    async def test_previous_result_cleared_when_request_starts(self, generation_client):
        workflow = GenerationWorkflow(generation_client)
        await workflow.generate(MacroConfig(), default_mappings())
        assert workflow.state.result is not None

        client = ControlledClient()
        workflow.client = client
        task = asyncio.create_task(workflow.generate(MacroConfig(), default_mappings()))
        await _wait_for_calls(client, 1)

        assert workflow.state.status == WorkflowStatus.REQUESTING
        assert workflow.state.is_loading
        assert workflow.state.result is None

        client.finish(0, error=GenerationError("boom"))
        state = await task
        assert state.status == WorkflowStatus.FAILED

    @pytest.mark.asyncio
    async def test_request_built_from_config_and_mappings(self):
        client = AsyncMock()
        client.generate = AsyncMock(return_value=GenerationResult(code="c", explanation="e"))
        workflow = GenerationWorkflow(client)

        await workflow.generate(MacroConfig(start_row=9), default_mappings())

        request = client.generate.call_args[0][0]
        assert "Data Start Row: 9" in request.prompt
        assert 'Copy Column "B" from Source to Cell "C5" on Template' in request.prompt


class TestStaleResponseSuppression:
    """Test that the most recently started generation wins."""

    @pytest.mark.asyncio
    async def test_slower_earlier_call_does_not_overwrite_later_result(self):
        client = ControlledClient()
        workflow = GenerationWorkflow(client)

        first = asyncio.create_task(workflow.generate(MacroConfig(), default_mappings()))
        await _wait_for_calls(client, 1)
        second = asyncio.create_task(workflow.generate(MacroConfig(), default_mappings()))
        await _wait_for_calls(client, 2)

        client.finish(1, result=GenerationResult(code="new", explanation="second"))
        await second
        client.finish(0, result=GenerationResult(code="old", explanation="first"))
        await first

        assert workflow.state.status == WorkflowStatus.SUCCEEDED
        assert workflow.state.result.code == "new"
        assert workflow.state.sequence == 2

    @pytest.mark.asyncio
    async def test_earlier_failure_does_not_overwrite_pending_request(self):
        client = ControlledClient()
        workflow = GenerationWorkflow(client)

        first = asyncio.create_task(workflow.generate(MacroConfig(), MappingSet()))
        await _wait_for_calls(client, 1)
        second = asyncio.create_task(workflow.generate(MacroConfig(), MappingSet()))
        await _wait_for_calls(client, 2)

        client.finish(0, error=GenerationError("late failure"))
        await first
        assert workflow.state.status == WorkflowStatus.REQUESTING

        client.finish(1, result=GenerationResult(code="ok", explanation="ok"))
        await second
        assert workflow.state.status == WorkflowStatus.SUCCEEDED

    @pytest.mark.asyncio
    async def test_reset_discards_in_flight_result(self):
        client = ControlledClient()
        workflow = GenerationWorkflow(client)

        task = asyncio.create_task(workflow.generate(MacroConfig(), MappingSet()))
        await _wait_for_calls(client, 1)
        workflow.reset()

        client.finish(0, result=GenerationResult(code="late", explanation="late"))
        await task

        assert workflow.state.status == WorkflowStatus.IDLE
        assert workflow.state.result is None


class TestCancellation:
    """Test that a cancelled request does not leave the workflow loading."""

    @pytest.mark.asyncio
    async def test_cancelled_request_settles_failed(self):
        client = ControlledClient()
        workflow = GenerationWorkflow(client)

        task = asyncio.create_task(workflow.generate(MacroConfig(), MappingSet()))
        await _wait_for_calls(client, 1)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert workflow.state.status == WorkflowStatus.FAILED
        assert not workflow.state.is_loading
        assert "cancelled" in workflow.state.error

    @pytest.mark.asyncio
    async def test_cancelling_stale_request_keeps_newer_state(self):
        client = ControlledClient()
        workflow = GenerationWorkflow(client)

        first = asyncio.create_task(workflow.generate(MacroConfig(), MappingSet()))
        await _wait_for_calls(client, 1)
        second = asyncio.create_task(workflow.generate(MacroConfig(), MappingSet()))
        await _wait_for_calls(client, 2)

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first
        assert workflow.state.status == WorkflowStatus.REQUESTING

        client.finish(1, result=GenerationResult(code="ok", explanation="ok"))
        await second
        assert workflow.state.status == WorkflowStatus.SUCCEEDED
