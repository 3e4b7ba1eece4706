class ProposalRejected(Exception):
    """Raised by a proposer when the marketplace declines a deal."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class WorkerStoppedError(RuntimeError):
    pass
