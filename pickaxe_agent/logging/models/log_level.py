from __future__ import annotations

from enum import Enum
from typing import Literal

LogLevelName = Literal[
    'trace',
    'debug',
    'info',
    'warn',
    'error',
    'critical',
    'fatal',
]


class LogLevel(Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    FATAL = "FATAL"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def parse(cls, name: LogLevelName | str | LogLevel) -> LogLevel:
        if isinstance(name, LogLevel):
            return name

        try:
            return cls[name.upper()]

        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}") from None


# Declaration order is severity order.
_SEVERITY: dict[LogLevel, int] = {
    level: severity for severity, level in enumerate(LogLevel)
}
