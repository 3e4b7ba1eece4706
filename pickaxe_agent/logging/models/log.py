from __future__ import annotations

import datetime
import sys
from typing import Any, Generic, TypeVar

import msgspec

from .entry import Entry


T = TypeVar('T', bound=Entry)


class Log(msgspec.Struct, Generic[T], kw_only=True):
    """An entry stamped with the logger name and the call site that emitted it."""

    entry: T
    logger: str
    filename: str
    function_name: str
    line_number: int
    timestamp: str

    @classmethod
    def capture(cls, entry: T, logger: str, depth: int = 0) -> Log[T]:
        # depth 0 is the direct caller of capture().
        frame = sys._getframe(depth + 1)

        return cls(
            entry=entry,
            logger=logger,
            filename=frame.f_code.co_filename,
            function_name=frame.f_code.co_name,
            line_number=frame.f_lineno,
            timestamp=datetime.datetime.now(datetime.UTC).isoformat(),
        )

    def context(self) -> dict[str, Any]:
        return {
            "logger": self.logger,
            "filename": self.filename,
            "function_name": self.function_name,
            "line_number": self.line_number,
            "timestamp": self.timestamp,
        }
