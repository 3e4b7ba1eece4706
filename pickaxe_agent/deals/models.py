from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# Register field names inside a deal request entry of the replicated store.
PAYLOAD_FIELD = "dealRequest"
AGENT_STATE_FIELD = "agentState"
ERROR_MSG_FIELD = "errorMsg"
DEAL_FIELD = "deal"


class DealStage(str, Enum):
    ACK = "ack"
    QUEUING = "queuing"
    QUEUED = "queued"
    PROPOSING = "proposing"
    DEAL_SUCCESS = "dealSuccess"
    DEAL_FAILED = "dealFailed"


class DealSignal(str, Enum):
    NEXT = "next"
    SUCCESS = "success"
    FAIL = "fail"


@dataclass(slots=True, frozen=True)
class AgentState:
    """Last stage record persisted by a driver loop."""

    state: str | None

    @property
    def stage(self) -> DealStage | None:
        try:
            return DealStage(self.state)

        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        return {"state": self.state}

    @classmethod
    def from_value(cls, value: Any) -> AgentState | None:
        # Only falsy scalars (null, false, 0, "") count as "never touched";
        # empty containers are a recorded state.
        if value is None or (not isinstance(value, (dict, list)) and not value):
            return None

        if isinstance(value, dict):
            state = value.get("state")
            return cls(state=str(state) if state is not None else None)

        return cls(state=None)


@dataclass(slots=True)
class DealRequest:
    deal_request_id: str
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def payload(self) -> Any:
        return self.fields.get(PAYLOAD_FIELD)

    @property
    def agent_state(self) -> AgentState | None:
        return AgentState.from_value(self.fields.get(AGENT_STATE_FIELD))

    @property
    def error_msg(self) -> Any:
        return self.fields.get(ERROR_MSG_FIELD)

    @property
    def deal(self) -> Any:
        return self.fields.get(DEAL_FIELD)

    @property
    def is_unprocessed(self) -> bool:
        return self.agent_state is None


@dataclass(slots=True)
class StageTransition:
    """Record of a driver stage transition, kept for observability."""

    from_stage: DealStage
    to_stage: DealStage
    signal: DealSignal
    timestamp: float


@dataclass(slots=True, frozen=True)
class DealOutcome:
    """Terminal event delivered by the worker while proposing."""

    signal: DealSignal
    data: Any = None
