"""
Storage subsystem bootstrap.

Owns the replicated collections the agent reads and writes. Only the
``dealRequests`` collection is consumed by the deal agent. When
``PICKAXE_STORE_PATH`` is set the collection is loaded from, and persisted
back to, a JSON file so persisted ``agentState`` survives restarts.
"""

from __future__ import annotations

import asyncio
import os
import pathlib

import orjson

from pickaxe_agent.env import Env
from pickaxe_agent.logging import Logger

from .errors import StoreNotStartedError
from .logging_models import StoreDebug, StoreInfo
from .replicated_map import ReplicatedMap


DEAL_REQUESTS = "dealRequests"


class StorageSubsystem:

    def __init__(
        self,
        name: str,
        config_path: str | None = None,
        env: Env | None = None,
    ) -> None:
        if env is None:
            env = Env()

        self.name = name
        self.config_path = config_path
        self._env = env
        self._store_path = env.PICKAXE_STORE_PATH
        self._collections: dict[str, ReplicatedMap] = {}
        self._logger = Logger()
        self._running = False
        self._stop_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> StorageSubsystem:
        if self._running:
            return self

        deal_requests = ReplicatedMap(DEAL_REQUESTS)

        if self._store_path:
            data = await asyncio.to_thread(self._read_store, self._store_path)
            if data:
                deal_requests.load(data.get(DEAL_REQUESTS, {}))

        self._collections[DEAL_REQUESTS] = deal_requests
        self._running = True

        await self._logger.log(
            StoreInfo(
                message=f"Started storage subsystem {self.name}",
                **self._get_log_context(),
            )
        )

        return self

    def deal_requests(self) -> ReplicatedMap:
        if not self._running:
            raise StoreNotStartedError(
                f"Storage subsystem {self.name} has not been started"
            )

        return self._collections[DEAL_REQUESTS]

    async def stop(self) -> None:
        async with self._stop_lock:
            if not self._running:
                return

            if self._store_path:
                data = {
                    name: collection.dump()
                    for name, collection in self._collections.items()
                }

                await asyncio.to_thread(self._write_store, self._store_path, data)

                await self._logger.log(
                    StoreDebug(
                        message=f"Persisted storage subsystem {self.name}",
                        **self._get_log_context(),
                    )
                )

            self._running = False

            await self._logger.log(
                StoreInfo(
                    message=f"Stopped storage subsystem {self.name}",
                    **self._get_log_context(),
                )
            )

    def _get_log_context(self) -> dict:
        collection = self._collections.get(DEAL_REQUESTS)
        return {
            "agent_name": self.name,
            "store_path": self._store_path,
            "entries": len(collection.keys()) if collection else 0,
        }

    @staticmethod
    def _read_store(store_path: str) -> dict | None:
        if not os.path.exists(store_path):
            return None

        with open(store_path, "rb") as store_file:
            raw = store_file.read()

        if len(raw) == 0:
            return None

        return orjson.loads(raw)

    @staticmethod
    def _write_store(store_path: str, data: dict) -> None:
        path = pathlib.Path(store_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = path.with_suffix(path.suffix + ".tmp")
        with open(temp_path, "wb") as store_file:
            store_file.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))

        os.replace(temp_path, path)
