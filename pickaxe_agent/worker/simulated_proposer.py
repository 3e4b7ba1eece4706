import asyncio
import uuid
from typing import Any

from .errors import ProposalRejected


class SimulatedProposer:
    """
    Stand-in for a marketplace client.

    Waits ``delay`` seconds and accepts the proposal, returning a generated
    deal id. Payloads carrying a ``reject`` key are declined with that value
    as the reason.
    """

    def __init__(self, delay: float = 2.0) -> None:
        self.delay = delay
        self.proposed: list[str] = []

    async def __call__(self, deal_request_id: str, payload: Any) -> dict[str, Any]:
        await asyncio.sleep(self.delay)
        self.proposed.append(deal_request_id)

        if isinstance(payload, dict) and (reason := payload.get("reject")):
            raise ProposalRejected(str(reason))

        return {
            "dealId": f"deal-{uuid.uuid4().hex[:12]}",
            "dealRequestId": deal_request_id,
        }
