from dataclasses import dataclass

from pickaxe_agent.store.protocol import ReplicatedStore
from pickaxe_agent.worker.protocol import DealWorker


@dataclass(slots=True)
class DealContext:
    """Shared handles passed from the agent into every driver loop."""

    agent_name: str
    deal_requests: ReplicatedStore
    worker: DealWorker
    settle_delay: float = 1.0
    channel_buffer: int = 64
