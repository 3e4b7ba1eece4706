"""
Deal request stage progression.

Stages form a directed acyclic progression::

    ack -> queuing -> queued -> proposing -> {dealSuccess | dealFailed}

``next_stage`` is total over ``DealStage x DealSignal``: every pair either has
an entry in ``VALID_TRANSITIONS`` or raises ``InvalidTransitionError``.
"""

from .errors import InvalidTransitionError
from .models import DealSignal, DealStage


INITIAL_STAGE = DealStage.ACK


VALID_TRANSITIONS: dict[DealStage, dict[DealSignal, DealStage]] = {
    DealStage.ACK: {
        DealSignal.NEXT: DealStage.QUEUING,       # Settle delay elapsed
    },

    DealStage.QUEUING: {
        DealSignal.NEXT: DealStage.QUEUED,        # Worker accepted the job
    },

    DealStage.QUEUED: {
        DealSignal.NEXT: DealStage.PROPOSING,     # Worker reported "started"
    },

    DealStage.PROPOSING: {
        DealSignal.SUCCESS: DealStage.DEAL_SUCCESS,
        DealSignal.FAIL: DealStage.DEAL_FAILED,
    },

    # Terminal stages - no outbound transitions
    DealStage.DEAL_SUCCESS: {},
    DealStage.DEAL_FAILED: {},
}


TERMINAL_STAGES: frozenset[DealStage] = frozenset(
    stage for stage, transitions in VALID_TRANSITIONS.items() if not transitions
)


def is_terminal(stage: DealStage) -> bool:
    return stage in TERMINAL_STAGES


def next_stage(stage: DealStage, signal: DealSignal) -> DealStage:
    """Return the stage reached from ``stage`` on ``signal``."""
    transitions = VALID_TRANSITIONS[stage]
    if signal not in transitions:
        raise InvalidTransitionError(stage, signal)

    return transitions[signal]
