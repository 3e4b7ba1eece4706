"""
Logging models for the deals module.

Driver models identify the agent, the deal request and the stage the driver
was in. Agent models identify the agent and how many requests it has claimed.
"""

from pickaxe_agent.logging.models import Entry, LogLevel


# =============================================================================
# DealRequestDriver Logging Models
# =============================================================================

class DealRequestDebug(Entry, kw_only=True):
    """Debug-level logging for DealRequestDriver operations."""
    agent_name: str
    deal_request_id: str
    stage: str
    level: LogLevel = LogLevel.DEBUG


class DealRequestInfo(Entry, kw_only=True):
    """Info-level logging for DealRequestDriver operations."""
    agent_name: str
    deal_request_id: str
    stage: str
    level: LogLevel = LogLevel.INFO


class DealRequestError(Entry, kw_only=True):
    """Error-level logging for DealRequestDriver operations."""
    agent_name: str
    deal_request_id: str
    stage: str
    level: LogLevel = LogLevel.ERROR


# =============================================================================
# DealAgent Logging Models
# =============================================================================

class AgentInfo(Entry, kw_only=True):
    """Info-level logging for DealAgent operations."""
    agent_name: str
    active_count: int
    level: LogLevel = LogLevel.INFO


class AgentError(Entry, kw_only=True):
    """Error-level logging for DealAgent operations."""
    agent_name: str
    active_count: int
    level: LogLevel = LogLevel.ERROR
