"""
Deal Agent - watches the replicated deal requests and owns their drivers.

Flow for every ``state changed`` notification of the store::

    store.value() -> project_snapshot() -> bus "new_state"
        -> ChangeDetector.detect() -> bus "new_deal_request"
        -> DealRequestDriver.run() in its own task

Snapshot handling is synchronous end to end, so all claims made for one
snapshot happen before any driver work starts. Drivers run independently;
a failure in one is logged and never reaches other drivers or the snapshot
pipeline.
"""

from __future__ import annotations

import asyncio
from typing import Mapping

from pickaxe_agent.env import Env
from pickaxe_agent.events import EventBus
from pickaxe_agent.logging import Logger
from pickaxe_agent.store.protocol import ReplicatedStore
from pickaxe_agent.store.replicated_map import STATE_CHANGED
from pickaxe_agent.worker.protocol import DealWorker

from .active_set import ActiveSet
from .change_detector import NEW_DEAL_REQUEST, ChangeDetector
from .context import DealContext
from .driver import DealRequestDriver
from .errors import DealRequestDecodeError, DriverError
from .logging_models import AgentError, AgentInfo
from .models import DealRequest, DealStage
from .projector import SnapshotProjection, project_snapshot


NEW_STATE = "new_state"


class DealAgent:

    def __init__(
        self,
        deal_requests: ReplicatedStore,
        worker: DealWorker,
        env: Env | None = None,
        logger: Logger | None = None,
    ) -> None:
        if env is None:
            env = Env()

        self._env = env
        self.name = env.PICKAXE_AGENT_NAME
        self._store = deal_requests
        self._logger = logger or Logger()

        self.active_set = ActiveSet()
        self.bus = EventBus(name=f"{self.name}.global")
        self.detector = ChangeDetector(self.active_set, self.bus)
        self.context = DealContext(
            agent_name=self.name,
            deal_requests=deal_requests,
            worker=worker,
            settle_delay=env.PICKAXE_ACK_SETTLE_DELAY,
            channel_buffer=env.PICKAXE_JOB_CHANNEL_BUFFER,
        )

        self.state = SnapshotProjection()
        self._drivers: dict[str, DealRequestDriver] = {}
        self._tasks: dict[str, asyncio.Task[DealStage | None]] = {}
        self._reported_errors: set[tuple[str, str]] = set()
        self._running = False

        self.bus.on(NEW_STATE, self._detect)
        self.bus.on(NEW_DEAL_REQUEST, self._start_driver)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def drivers(self) -> Mapping[str, DealRequestDriver]:
        return dict(self._drivers)

    @property
    def tasks(self) -> Mapping[str, asyncio.Task[DealStage | None]]:
        return dict(self._tasks)

    async def start(self) -> None:
        if self._running:
            return

        self._running = True
        self._store.on(STATE_CHANGED, self.handle_state_changed)

        await self._logger.log(
            AgentInfo(
                message=f"Started deal agent {self.name}",
                **self._get_log_context(),
            )
        )

        self.handle_state_changed()

    async def stop(self, cancel_drivers: bool = False) -> None:
        if not self._running:
            return

        self._running = False
        self._store.off(STATE_CHANGED, self.handle_state_changed)

        if cancel_drivers:
            pending = [task for task in self._tasks.values() if not task.done()]
            for task in pending:
                task.cancel()

            await asyncio.gather(*pending, return_exceptions=True)

        await self._logger.log(
            AgentInfo(
                message=f"Stopped deal agent {self.name}",
                **self._get_log_context(),
            )
        )

    def handle_state_changed(self) -> SnapshotProjection:
        projection = project_snapshot(self._store.value())
        self.state = projection

        for err in projection.errors:
            self._report_decode_error(err)

        self.bus.emit(NEW_STATE, projection, self.context)

        return projection

    async def wait_for_drivers(self) -> dict[str, DealStage | None]:
        """Wait for every driver task started so far and return its final stage."""
        tasks = dict(self._tasks)
        results = await asyncio.gather(*tasks.values(), return_exceptions=True)

        return {
            deal_request_id: result if isinstance(result, DealStage) else None
            for deal_request_id, result in zip(tasks.keys(), results)
        }

    def get_stage_counts(self) -> dict[DealStage, int]:
        counts: dict[DealStage, int] = {stage: 0 for stage in DealStage}
        for driver in self._drivers.values():
            counts[driver.stage] += 1

        return counts

    def _detect(
        self,
        projection: SnapshotProjection,
        context: DealContext,
    ) -> None:
        self.detector.detect(projection.requests, context)

    def _start_driver(
        self,
        deal_request_id: str,
        deal_request: DealRequest,
        context: DealContext,
    ) -> None:
        driver = DealRequestDriver(
            deal_request_id,
            deal_request,
            context,
            logger=self._logger,
        )

        self._drivers[deal_request_id] = driver
        self._tasks[deal_request_id] = asyncio.create_task(
            self._run_driver(driver),
            name=f"deal-request-{deal_request_id}",
        )

    async def _run_driver(self, driver: DealRequestDriver) -> DealStage | None:
        try:
            return await driver.run()

        except DriverError as err:
            await self._logger.log(
                AgentError(
                    message=f"Driver for {driver.deal_request_id} stopped at stage "
                            f"{err.stage.value}: {err}",
                    **self._get_log_context(),
                )
            )

        except Exception as err:
            await self._logger.log(
                AgentError(
                    message=f"Driver for {driver.deal_request_id} failed at stage "
                            f"{driver.stage.value}: {err!r}",
                    **self._get_log_context(),
                )
            )

        return None

    def _report_decode_error(self, err: DealRequestDecodeError) -> None:
        key = (err.deal_request_id, err.field)
        if key in self._reported_errors:
            return

        self._reported_errors.add(key)
        self._logger.schedule(
            AgentError(
                message=str(err),
                **self._get_log_context(),
            )
        )

    def _get_log_context(self) -> dict:
        return {
            "agent_name": self.name,
            "active_count": len(self.active_set),
        }
