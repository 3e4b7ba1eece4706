from typing import Any

import msgspec

from .log_level import LogLevel


class Entry(msgspec.Struct, kw_only=True):
    """
    Base log entry.

    Subclasses add the context fields of their component and pin a default
    ``level``; every field is available to line templates by name.
    """

    message: str = ""
    level: LogLevel

    def fields(self) -> dict[str, Any]:
        values = msgspec.structs.asdict(self)
        values["level"] = self.level.value

        return values

    def render(self, template: str, **context: Any) -> str:
        return template.format(**{**self.fields(), **context})
