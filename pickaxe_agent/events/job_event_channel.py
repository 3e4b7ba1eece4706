from __future__ import annotations

from collections import deque
from typing import Any

from .event_bus import EventBus


DEFAULT_BUFFER_SIZE = 64


class JobEventChannel(EventBus):
    """
    Per-request event bus handed to the worker.

    Events emitted while no handler listens for them are held in a bounded
    buffer (oldest dropped first) and consumed, in emission order, by the
    next ``wait_for``/``wait_for_any`` naming them.
    """

    def __init__(
        self,
        name: str = "job",
        max_buffered: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        super().__init__(name=name)
        self._buffered: deque[tuple[str, Any]] = deque(maxlen=max_buffered)
        self.dropped = 0

    @property
    def buffered(self) -> list[tuple[str, Any]]:
        return list(self._buffered)

    def emit(self, event: str, *args: Any) -> int:
        delivered = super().emit(event, *args)

        if delivered == 0:
            if len(self._buffered) == self._buffered.maxlen:
                self.dropped += 1

            self._buffered.append((event, args[0] if args else None))

        return delivered

    async def wait_for_any(self, *events: str) -> tuple[str, Any]:
        if len(events) == 0:
            raise ValueError("wait_for_any() requires at least one event name")

        for idx, (event, data) in enumerate(self._buffered):
            if event in events:
                del self._buffered[idx]
                return event, data

        return await super().wait_for_any(*events)
