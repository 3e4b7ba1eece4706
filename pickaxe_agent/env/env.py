from __future__ import annotations
from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr, field_validator

from pickaxe_agent.logging import LogLevel

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    PICKAXE_AGENT_NAME: StrictStr = "filecoin-pickaxe-agent"
    PICKAXE_STORE_PATH: StrictStr | None = None
    PICKAXE_ACK_SETTLE_DELAY: StrictFloat = 1.0
    PICKAXE_JOB_CHANNEL_BUFFER: StrictInt = 64

    # Proposal worker settings
    PICKAXE_WORKER_CONCURRENCY: StrictInt = 4
    PICKAXE_WORKER_QUEUE_SIZE: StrictInt = 1024
    PICKAXE_SIMULATED_PROPOSAL_DELAY: StrictFloat = 2.0

    # Logging settings
    PICKAXE_LOG_LEVEL: StrictStr = "info"
    PICKAXE_LOG_OUTPUT: Literal["stdout", "stderr"] = "stdout"
    PICKAXE_LOGS_DIRECTORY: StrictStr | None = None

    @field_validator(
        "PICKAXE_ACK_SETTLE_DELAY",
        "PICKAXE_SIMULATED_PROPOSAL_DELAY",
    )
    @classmethod
    def validate_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("delays must be >= 0")
        return value

    @field_validator(
        "PICKAXE_JOB_CHANNEL_BUFFER",
        "PICKAXE_WORKER_CONCURRENCY",
        "PICKAXE_WORKER_QUEUE_SIZE",
    )
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be >= 1")
        return value

    @field_validator("PICKAXE_LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        LogLevel.parse(value)
        return value.lower()

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "PICKAXE_AGENT_NAME": str,
            "PICKAXE_STORE_PATH": str,
            "PICKAXE_ACK_SETTLE_DELAY": float,
            "PICKAXE_JOB_CHANNEL_BUFFER": int,
            "PICKAXE_WORKER_CONCURRENCY": int,
            "PICKAXE_WORKER_QUEUE_SIZE": int,
            "PICKAXE_SIMULATED_PROPOSAL_DELAY": float,
            "PICKAXE_LOG_LEVEL": str,
            "PICKAXE_LOG_OUTPUT": str,
            "PICKAXE_LOGS_DIRECTORY": str,
        }

    def get_worker_config(self) -> dict:
        """Get proposal queue configuration from environment settings."""
        return {
            'concurrency': self.PICKAXE_WORKER_CONCURRENCY,
            'max_queue_size': self.PICKAXE_WORKER_QUEUE_SIZE,
        }

    def get_logging_config(self) -> dict:
        return {
            'log_level': self.PICKAXE_LOG_LEVEL,
            'log_output': self.PICKAXE_LOG_OUTPUT,
            'log_directory': self.PICKAXE_LOGS_DIRECTORY,
        }
