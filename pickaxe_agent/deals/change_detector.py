from __future__ import annotations

from typing import Any, Mapping

from pickaxe_agent.events import EventBus

from .active_set import ActiveSet
from .models import DealRequest


NEW_DEAL_REQUEST = "new_deal_request"


class ChangeDetector:
    """
    Emits ``new_deal_request`` for each unprocessed, unclaimed request.

    ``detect`` is synchronous: every claim for a snapshot is made before any
    handler work that yields to the event loop can run.
    """

    def __init__(self, active_set: ActiveSet, bus: EventBus) -> None:
        self._active_set = active_set
        self._bus = bus

    def detect(
        self,
        requests: Mapping[str, DealRequest],
        context: Any = None,
    ) -> list[str]:
        emitted: list[str] = []

        for deal_request_id, deal_request in requests.items():
            if deal_request.is_unprocessed and self._active_set.claim(deal_request_id):
                emitted.append(deal_request_id)
                self._bus.emit(
                    NEW_DEAL_REQUEST,
                    deal_request_id,
                    deal_request,
                    context,
                )

        return emitted
