"""State machine driving a generation from request to result."""

import asyncio
import logging

from ..mapping import MacroConfig, MappingSet
from .client import GenerationClient, GenerationError
from .models import WorkflowState, WorkflowStatus
from .prompts import build_generation_request

logger = logging.getLogger(__name__)

GENERATION_CANCELLED_MESSAGE = "Generation was cancelled. Please try again."


class GenerationWorkflow:
    """
    Owns the single WorkflowState of a session.

    Each call to generate() takes a new sequence number. A call only writes its
    outcome if no newer generate() or reset() happened while it was waiting,
    so the state always reflects the most recently started generation.
    """

    def __init__(self, client: GenerationClient):
        self.client = client
        self._sequence = 0
        self._state = WorkflowState()

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def sequence(self) -> int:
        return self._sequence

    def _settle(self, sequence: int, state: WorkflowState) -> bool:
        if sequence != self._sequence:
            logger.info(
                f"Discarding stale generation {sequence} (current is {self._sequence})"
            )
            return False
        self._state = state
        return True

    async def generate(self, config: MacroConfig, mappings: MappingSet) -> WorkflowState:
        """
        Run one generation.

        The previous result is cleared as soon as the request starts.

        Returns:
            The workflow state after this call settles; if a newer generation
            superseded it, that newer state is returned instead
        """
        self._sequence += 1
        sequence = self._sequence
        self._state = WorkflowState(status=WorkflowStatus.REQUESTING, sequence=sequence)
        logger.info(f"Starting generation {sequence} with {len(mappings)} mapping(s)")

        request = build_generation_request(config, mappings)
        try:
            result = await self.client.generate(request)
        except asyncio.CancelledError:
            if self._settle(
                sequence,
                WorkflowState(
                    status=WorkflowStatus.FAILED,
                    error=GENERATION_CANCELLED_MESSAGE,
                    sequence=sequence,
                ),
            ):
                logger.warning(f"Generation {sequence} was cancelled")
            raise
        except GenerationError as e:
            if self._settle(
                sequence,
                WorkflowState(status=WorkflowStatus.FAILED, error=str(e), sequence=sequence),
            ):
                logger.warning(f"Generation {sequence} failed: {e.detail}")
        else:
            if self._settle(
                sequence,
                WorkflowState(status=WorkflowStatus.SUCCEEDED, result=result, sequence=sequence),
            ):
                logger.info(f"Generation {sequence} succeeded")

        return self._state

    def reset(self) -> WorkflowState:
        """Return to idle; any generation still in flight will be discarded."""
        self._sequence += 1
        self._state = WorkflowState(sequence=self._sequence)
        return self._state
