"""
Proposal Queue - bounded asyncio job queue driving deal proposals.

Jobs are consumed by a fixed number of runner tasks. For each job the queue
emits ``started`` on the job's channel, awaits the proposer, and emits
``success`` with the proposer's result or ``fail`` with ``{"reason": ...}``.
A proposer raising ``ProposalRejected`` is a declined deal; any other
exception is logged and reported as a failed proposal so the waiting driver
always reaches a terminal stage.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from pickaxe_agent.events import EventBus
from pickaxe_agent.logging import Logger

from .errors import ProposalRejected, WorkerStoppedError
from .logging_models import (
    ProposalQueueDebug,
    ProposalQueueError,
    ProposalQueueInfo,
    ProposalQueueWarning,
)
from .protocol import FAIL, STARTED, SUCCESS, Proposer


@dataclass(slots=True)
class ProposalJob:
    deal_request_id: str
    payload: Any
    channel: EventBus
    queued_at: float = field(default_factory=time.monotonic)


class ProposalQueue:

    def __init__(
        self,
        proposer: Proposer,
        concurrency: int = 4,
        max_queue_size: int = 1024,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")

        self._proposer = proposer
        self._concurrency = concurrency
        self._max_queue_size = max_queue_size
        self._queue: asyncio.Queue[ProposalJob] | None = None
        self._runners: list[asyncio.Task] = []
        self._running_jobs: dict[str, ProposalJob] = {}
        self._running = False
        self._logger = Logger()

        self.completed = 0
        self.failed = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def queued(self) -> int:
        return self._queue.qsize() if self._queue else 0

    async def start(self) -> None:
        if self._running:
            return

        self._queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._runners = [
            asyncio.create_task(self._run_jobs())
            for _ in range(self._concurrency)
        ]
        self._running = True

    async def stop(self) -> None:
        if not self._running:
            return

        self._running = False

        for runner in self._runners:
            runner.cancel()

        await asyncio.gather(*self._runners, return_exceptions=True)
        self._runners.clear()

    async def join(self) -> None:
        """Wait until every queued job has been processed."""
        if self._queue is not None:
            await self._queue.join()

    async def queue_propose_deal(
        self,
        channel: EventBus,
        deal_request_id: str,
        payload: Any,
    ) -> None:
        if not self._running or self._queue is None:
            raise WorkerStoppedError(
                f"Cannot queue proposal for {deal_request_id}: proposal queue is not running"
            )

        await self._queue.put(
            ProposalJob(
                deal_request_id=deal_request_id,
                payload=payload,
                channel=channel,
            )
        )

        await self._log_info(
            deal_request_id,
            f"Queued proposal for deal request {deal_request_id}",
        )

    async def _run_jobs(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self._run_job(job)

            except Exception as err:
                # The runner outlives the job; its driver still gets a terminal event.
                self.failed += 1
                job.channel.emit(FAIL, {"reason": str(err)})
                await self._log_error(
                    job.deal_request_id,
                    f"Proposal runner failed on deal request {job.deal_request_id}: {err!r}",
                )

            finally:
                self._queue.task_done()

    async def _run_job(self, job: ProposalJob) -> None:
        self._running_jobs[job.deal_request_id] = job

        try:
            job.channel.emit(STARTED)
            await self._log_debug(
                job.deal_request_id,
                f"Started proposal for deal request {job.deal_request_id} "
                f"after {time.monotonic() - job.queued_at:.3f}s in queue",
            )

            try:
                result = await self._proposer(job.deal_request_id, job.payload)

            except ProposalRejected as err:
                self.failed += 1
                await self._log_warning(
                    job.deal_request_id,
                    f"Proposal for deal request {job.deal_request_id} rejected: {err.reason}",
                )
                job.channel.emit(FAIL, {"reason": err.reason})

            except Exception as err:
                self.failed += 1
                await self._log_error(
                    job.deal_request_id,
                    f"Proposal for deal request {job.deal_request_id} failed: {err!r}",
                )
                job.channel.emit(FAIL, {"reason": str(err)})

            else:
                self.completed += 1
                job.channel.emit(SUCCESS, result)

        finally:
            self._running_jobs.pop(job.deal_request_id, None)

    # =========================================================================
    # Logging Helpers
    # =========================================================================

    def _get_log_context(self, deal_request_id: str) -> dict:
        return {
            "deal_request_id": deal_request_id,
            "queued": self.queued,
            "running": len(self._running_jobs),
        }

    async def _log_debug(self, deal_request_id: str, message: str) -> None:
        await self._logger.log(
            ProposalQueueDebug(message=message, **self._get_log_context(deal_request_id))
        )

    async def _log_info(self, deal_request_id: str, message: str) -> None:
        await self._logger.log(
            ProposalQueueInfo(message=message, **self._get_log_context(deal_request_id))
        )

    async def _log_warning(self, deal_request_id: str, message: str) -> None:
        await self._logger.log(
            ProposalQueueWarning(message=message, **self._get_log_context(deal_request_id))
        )

    async def _log_error(self, deal_request_id: str, message: str) -> None:
        await self._logger.log(
            ProposalQueueError(message=message, **self._get_log_context(deal_request_id))
        )
