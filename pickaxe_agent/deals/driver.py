"""
Deal Request Driver - runs one deal request through its stage progression.

Every stage is persisted as the request's ``agentState`` on entry, before any
of that stage's work begins. The final stage is persisted once the loop
reaches a terminal stage, followed by exactly one result field: ``deal`` on
success or ``errorMsg`` on failure.

Stages without a dedicated handler (``ack``) wait for the settle delay and
advance on ``next``. There are no timeouts: a driver whose worker never
reports ``started``/``success``/``fail`` waits indefinitely.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable

import orjson

from pickaxe_agent.events import JobEventChannel
from pickaxe_agent.logging import Logger
from pickaxe_agent.worker.protocol import FAIL, STARTED, SUCCESS

from .context import DealContext
from .errors import StoreWriteError, WorkerCallError
from .logging_models import (
    DealRequestDebug,
    DealRequestError,
    DealRequestInfo,
)
from .models import (
    AGENT_STATE_FIELD,
    DEAL_FIELD,
    ERROR_MSG_FIELD,
    AgentState,
    DealOutcome,
    DealRequest,
    DealSignal,
    DealStage,
    StageTransition,
)
from .state_machine import INITIAL_STAGE, is_terminal, next_stage


StageHandler = Callable[[], Awaitable[DealSignal]]


class DealRequestDriver:

    def __init__(
        self,
        deal_request_id: str,
        deal_request: DealRequest,
        context: DealContext,
        logger: Logger | None = None,
    ) -> None:
        self.deal_request_id = deal_request_id
        self._deal_request = deal_request
        self._context = context
        self._logger = logger or Logger()

        # Created per driver, never shared or reused.
        self._channel = JobEventChannel(
            name=f"job-{deal_request_id}",
            max_buffered=context.channel_buffer,
        )

        self._stage = INITIAL_STAGE
        self._history: list[StageTransition] = []
        self._outcome: DealOutcome | None = None

        self._handlers: dict[DealStage, StageHandler] = {
            DealStage.QUEUING: self._queue_proposal,
            DealStage.QUEUED: self._wait_for_started,
            DealStage.PROPOSING: self._wait_for_outcome,
        }

    @property
    def stage(self) -> DealStage:
        return self._stage

    @property
    def history(self) -> list[StageTransition]:
        return list(self._history)

    @property
    def outcome(self) -> DealOutcome | None:
        return self._outcome

    @property
    def channel(self) -> JobEventChannel:
        return self._channel

    @property
    def finished(self) -> bool:
        return is_terminal(self._stage)

    async def run(self) -> DealStage:
        await self._log_info(f"New deal request {self.deal_request_id}")

        while not is_terminal(self._stage):
            await self._log_info(f"Entered: {self._stage.value} {self.deal_request_id}")
            self._persist_stage()

            handler = self._handlers.get(self._stage, self._settle)
            signal = await handler()

            self._advance(signal)

        await self._log_info(f"Done {self.deal_request_id}")
        self._persist_stage()
        self._persist_outcome()

        return self._stage

    # =========================================================================
    # Stage Handlers
    # =========================================================================

    async def _settle(self) -> DealSignal:
        await asyncio.sleep(self._context.settle_delay)
        return DealSignal.NEXT

    async def _queue_proposal(self) -> DealSignal:
        try:
            await self._context.worker.queue_propose_deal(
                self._channel,
                self.deal_request_id,
                self._deal_request.payload,
            )

        except Exception as err:
            await self._log_error(
                f"Worker failed to queue proposal for {self.deal_request_id}: {err!r}"
            )

            raise WorkerCallError(
                self.deal_request_id,
                self._stage,
                f"Worker failed to queue proposal for {self.deal_request_id}",
            ) from err

        return DealSignal.NEXT

    async def _wait_for_started(self) -> DealSignal:
        await self._channel.wait_for(STARTED)
        return DealSignal.NEXT

    async def _wait_for_outcome(self) -> DealSignal:
        event, data = await self._channel.wait_for_any(SUCCESS, FAIL)

        signal = DealSignal(event)
        self._outcome = DealOutcome(signal=signal, data=data)

        await self._log_debug(
            f"Proposal for {self.deal_request_id} finished with {signal.value}"
        )

        return signal

    # =========================================================================
    # Transitions and Persistence
    # =========================================================================

    def _advance(self, signal: DealSignal) -> None:
        from_stage = self._stage
        self._stage = next_stage(from_stage, signal)

        self._history.append(
            StageTransition(
                from_stage=from_stage,
                to_stage=self._stage,
                signal=signal,
                timestamp=time.monotonic(),
            )
        )

    def _persist_stage(self) -> None:
        self._write_field(
            AGENT_STATE_FIELD,
            AgentState(state=self._stage.value).to_dict(),
        )

    def _persist_outcome(self) -> None:
        if self._outcome is None:
            return

        if self._outcome.signal == DealSignal.SUCCESS:
            self._write_field(DEAL_FIELD, self._outcome.data)

        elif self._outcome.signal == DealSignal.FAIL:
            self._write_field(ERROR_MSG_FIELD, self._outcome.data)

    def _write_field(self, field_name: str, value: Any) -> None:
        try:
            serialized = orjson.dumps(value).decode()

            self._context.deal_requests.apply_sub(
                self.deal_request_id, 'ormap', 'applySub',
                field_name, 'mvreg', 'write',
                serialized,
            )

        except Exception as err:
            raise StoreWriteError(
                self.deal_request_id,
                self._stage,
                f"Failed to write {field_name} for {self.deal_request_id}: {err!r}",
            ) from err

    # =========================================================================
    # Logging Helpers
    # =========================================================================

    def _get_log_context(self) -> dict:
        return {
            "agent_name": self._context.agent_name,
            "deal_request_id": self.deal_request_id,
            "stage": self._stage.value,
        }

    async def _log_debug(self, message: str) -> None:
        await self._logger.log(DealRequestDebug(message=message, **self._get_log_context()))

    async def _log_info(self, message: str) -> None:
        await self._logger.log(DealRequestInfo(message=message, **self._get_log_context()))

    async def _log_error(self, message: str) -> None:
        await self._logger.log(DealRequestError(message=message, **self._get_log_context()))
