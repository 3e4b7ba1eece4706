from pickaxe_agent.logging.models import Entry, LogLevel


class StoreDebug(Entry, kw_only=True):
    """Debug-level logging for storage subsystem operations."""
    agent_name: str
    store_path: str | None
    entries: int
    level: LogLevel = LogLevel.DEBUG


class StoreInfo(Entry, kw_only=True):
    """Info-level logging for storage subsystem operations."""
    agent_name: str
    store_path: str | None
    entries: int
    level: LogLevel = LogLevel.INFO
