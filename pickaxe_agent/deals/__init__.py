from .active_set import ActiveSet as ActiveSet
from .agent import NEW_STATE as NEW_STATE, DealAgent as DealAgent
from .change_detector import NEW_DEAL_REQUEST as NEW_DEAL_REQUEST, ChangeDetector as ChangeDetector
from .context import DealContext as DealContext
from .driver import DealRequestDriver as DealRequestDriver
from .errors import (
    DealRequestDecodeError as DealRequestDecodeError,
    DriverError as DriverError,
    InvalidTransitionError as InvalidTransitionError,
    StoreWriteError as StoreWriteError,
    WorkerCallError as WorkerCallError,
)
from .models import (
    AGENT_STATE_FIELD as AGENT_STATE_FIELD,
    DEAL_FIELD as DEAL_FIELD,
    ERROR_MSG_FIELD as ERROR_MSG_FIELD,
    PAYLOAD_FIELD as PAYLOAD_FIELD,
    AgentState as AgentState,
    DealOutcome as DealOutcome,
    DealRequest as DealRequest,
    DealSignal as DealSignal,
    DealStage as DealStage,
    StageTransition as StageTransition,
)
from .projector import (
    SnapshotProjection as SnapshotProjection,
    project_deal_request as project_deal_request,
    project_snapshot as project_snapshot,
)
from .state_machine import (
    TERMINAL_STAGES as TERMINAL_STAGES,
    VALID_TRANSITIONS as VALID_TRANSITIONS,
    is_terminal as is_terminal,
    next_stage as next_stage,
)
