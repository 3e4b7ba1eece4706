"""
In-process publish/subscribe dispatch.

Handlers run synchronously inside ``emit()`` in subscription order. Waiting
on events is built from ``once`` subscriptions that resolve a shared future,
so ``wait_for_any`` returns exactly the first delivery among the requested
names and removes every remaining subscription when it returns or is
cancelled.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Callable


Handler = Callable[..., Any]
Unsubscribe = Callable[[], bool]


class _Listener:
    __slots__ = ("handler", "once")

    def __init__(self, handler: Handler, once: bool) -> None:
        self.handler = handler
        self.once = once


class EventBus:

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._listeners: dict[str, list[_Listener]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> Unsubscribe:
        return self._subscribe(event, handler, once=False)

    def once(self, event: str, handler: Handler) -> Unsubscribe:
        return self._subscribe(event, handler, once=True)

    def off(self, event: str, handler: Handler) -> bool:
        listeners = self._listeners.get(event)
        if not listeners:
            return False

        for idx, listener in enumerate(listeners):
            if listener.handler == handler:
                del listeners[idx]
                if not listeners:
                    del self._listeners[event]
                return True

        return False

    def emit(self, event: str, *args: Any) -> int:
        listeners = self._listeners.get(event)
        if not listeners:
            return 0

        # Snapshot so handlers may subscribe/unsubscribe while dispatching.
        dispatched = list(listeners)
        for listener in dispatched:
            if listener.once:
                self._remove_listener(event, listener)

        for listener in dispatched:
            listener.handler(*args)

        return len(dispatched)

    def listener_count(self, event: str | None = None) -> int:
        if event is None:
            return sum(len(listeners) for listeners in self._listeners.values())

        return len(self._listeners.get(event, ()))

    def clear(self) -> None:
        self._listeners.clear()

    async def wait_for(self, event: str) -> Any:
        _, data = await self.wait_for_any(event)
        return data

    async def wait_for_any(self, *events: str) -> tuple[str, Any]:
        if len(events) == 0:
            raise ValueError("wait_for_any() requires at least one event name")

        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[tuple[str, Any]] = loop.create_future()

        unsubscribes = [
            self.once(event, self._resolver(waiter, event))
            for event in events
        ]

        try:
            return await waiter

        finally:
            for unsubscribe in unsubscribes:
                unsubscribe()

    def _resolver(
        self,
        waiter: asyncio.Future[tuple[str, Any]],
        event: str,
    ) -> Handler:

        def resolve(data: Any = None, *_: Any) -> None:
            if not waiter.done():
                waiter.set_result((event, data))

        return resolve

    def _subscribe(self, event: str, handler: Handler, once: bool) -> Unsubscribe:
        listener = _Listener(handler, once)
        self._listeners[event].append(listener)

        def unsubscribe() -> bool:
            return self._remove_listener(event, listener)

        return unsubscribe

    def _remove_listener(self, event: str, listener: _Listener) -> bool:
        listeners = self._listeners.get(event)
        if not listeners:
            return False

        try:
            listeners.remove(listener)

        except ValueError:
            return False

        if not listeners:
            del self._listeners[event]

        return True
