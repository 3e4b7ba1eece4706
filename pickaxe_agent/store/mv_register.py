from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(slots=True)
class MVRegister:
    """
    Multi-Value Register (MV-Register).

    A local write replaces the whole value set. Values merged in from
    concurrent writers are unioned, so the register may transiently hold
    several values until the next local write supersedes them.

    Example:
        reg = MVRegister()
        reg.write('"a"')
        reg.merge(['"b"'])
        assert reg.values() == frozenset({'"a"', '"b"'})
    """

    _values: set[str] = field(default_factory=set)

    def write(self, value: str) -> None:
        self._values = {value}

    def merge(self, values: Iterable[str]) -> None:
        self._values.update(values)

    def values(self) -> frozenset[str]:
        return frozenset(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def to_list(self) -> list[str]:
        """Serialize to a sorted list."""
        return sorted(self._values)

    @classmethod
    def from_list(cls, data: Iterable[str]) -> MVRegister:
        """Deserialize from a list of values."""
        return cls(_values=set(data))
