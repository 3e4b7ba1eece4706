from .errors import ProposalRejected as ProposalRejected, WorkerStoppedError as WorkerStoppedError
from .proposal_queue import ProposalJob as ProposalJob, ProposalQueue as ProposalQueue
from .protocol import (
    FAIL as FAIL,
    STARTED as STARTED,
    SUCCESS as SUCCESS,
    DealWorker as DealWorker,
    Proposer as Proposer,
)
from .simulated_proposer import SimulatedProposer as SimulatedProposer
