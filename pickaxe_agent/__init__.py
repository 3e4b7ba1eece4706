from importlib.metadata import version

from .deals import (
    ActiveSet,
    AgentState,
    ChangeDetector,
    DealAgent,
    DealContext,
    DealOutcome,
    DealRequest,
    DealRequestDecodeError,
    DealRequestDriver,
    DealSignal,
    DealStage,
    InvalidTransitionError,
    SnapshotProjection,
    StoreWriteError,
    WorkerCallError,
    next_stage,
    project_snapshot,
)
from .env import Env, load_env
from .events import EventBus, JobEventChannel
from .store import MVRegister, ReplicatedMap, ReplicatedStore, StorageSubsystem
from .worker import DealWorker, ProposalQueue, ProposalRejected, SimulatedProposer


def get_version() -> str:
    try:
        return version("pickaxe-agent")
    except Exception:
        return "0.0.0"


__all__ = [
    "ActiveSet",
    "AgentState",
    "ChangeDetector",
    "DealAgent",
    "DealContext",
    "DealOutcome",
    "DealRequest",
    "DealRequestDecodeError",
    "DealRequestDriver",
    "DealSignal",
    "DealStage",
    "DealWorker",
    "Env",
    "EventBus",
    "InvalidTransitionError",
    "JobEventChannel",
    "MVRegister",
    "ProposalQueue",
    "ProposalRejected",
    "ReplicatedMap",
    "ReplicatedStore",
    "SimulatedProposer",
    "SnapshotProjection",
    "StorageSubsystem",
    "StoreWriteError",
    "WorkerCallError",
    "get_version",
    "load_env",
    "next_stage",
    "project_snapshot",
]
