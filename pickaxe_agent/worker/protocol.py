from typing import Any, Awaitable, Callable, Protocol

from pickaxe_agent.events import EventBus


STARTED = "started"
SUCCESS = "success"
FAIL = "fail"


Proposer = Callable[[str, Any], Awaitable[dict[str, Any]]]


class DealWorker(Protocol):
    """
    Performs deal proposals on behalf of the deal agent.

    ``queue_propose_deal`` returns once the proposal is queued. The worker
    later emits ``started`` and then exactly one of ``success`` or ``fail``
    (each with a JSON-serializable payload) on the given channel.
    """

    async def queue_propose_deal(
        self,
        channel: EventBus,
        deal_request_id: str,
        payload: Any,
    ) -> None:
        ...
