from pickaxe_agent.logging.models import Entry, LogLevel


class ProposalQueueDebug(Entry, kw_only=True):
    """Debug-level logging for ProposalQueue operations."""
    deal_request_id: str
    queued: int
    running: int
    level: LogLevel = LogLevel.DEBUG


class ProposalQueueInfo(Entry, kw_only=True):
    """Info-level logging for ProposalQueue operations."""
    deal_request_id: str
    queued: int
    running: int
    level: LogLevel = LogLevel.INFO


class ProposalQueueWarning(Entry, kw_only=True):
    """Warning-level logging for ProposalQueue operations."""
    deal_request_id: str
    queued: int
    running: int
    level: LogLevel = LogLevel.WARN


class ProposalQueueError(Entry, kw_only=True):
    """Error-level logging for ProposalQueue operations."""
    deal_request_id: str
    queued: int
    running: int
    level: LogLevel = LogLevel.ERROR
