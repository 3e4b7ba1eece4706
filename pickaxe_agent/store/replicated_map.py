"""
Local replica of an observed-remove map of multi-value registers.

Holds ``key -> field -> MVRegister`` and exposes the path-addressed write used
by the deal agent::

    apply_sub(key, "ormap", "applySub", field, "mvreg", "write", value)

Every mutation emits ``"state changed"`` on the map's event bus. Network
synchronisation with other replicas is not handled here; remote values are
folded in through ``merge_register``.
"""

from __future__ import annotations

from typing import Any, Iterable

from pickaxe_agent.events import EventBus

from .errors import UnsupportedStoreOperation
from .mv_register import MVRegister


STATE_CHANGED = "state changed"

Snapshot = dict[str, dict[str, frozenset[str]]]


class ReplicatedMap:

    def __init__(self, name: str) -> None:
        self.name = name
        self.shared = EventBus(name=name)
        self._entries: dict[str, dict[str, MVRegister]] = {}
        self.version = 0

    def value(self) -> Snapshot:
        return {
            key: {
                field_name: register.values()
                for field_name, register in fields.items()
            }
            for key, fields in self._entries.items()
        }

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def get_register(self, key: str, field_name: str) -> frozenset[str] | None:
        if (fields := self._entries.get(key)) and (register := fields.get(field_name)):
            return register.values()

        return None

    def on(self, event: str, handler):
        return self.shared.on(event, handler)

    def off(self, event: str, handler) -> bool:
        return self.shared.off(event, handler)

    def apply_sub(
        self,
        key: str,
        container_type: str,
        container_op: str,
        field_name: str,
        register_type: str,
        register_op: str,
        value: str,
    ) -> None:
        operation = (container_type, container_op, register_type, register_op)
        if operation != ("ormap", "applySub", "mvreg", "write"):
            raise UnsupportedStoreOperation(operation)

        if not isinstance(value, str):
            raise TypeError(
                f"Register values must be serialized strings, got: {type(value).__name__}"
            )

        fields = self._entries.setdefault(key, {})
        fields.setdefault(field_name, MVRegister()).write(value)

        self._changed()

    def merge_register(
        self,
        key: str,
        field_name: str,
        values: Iterable[str],
    ) -> None:
        fields = self._entries.setdefault(key, {})
        fields.setdefault(field_name, MVRegister()).merge(values)

        self._changed()

    def remove(self, key: str) -> bool:
        if self._entries.pop(key, None) is None:
            return False

        self._changed()
        return True

    def dump(self) -> dict[str, dict[str, list[str]]]:
        return {
            key: {
                field_name: register.to_list()
                for field_name, register in fields.items()
            }
            for key, fields in self._entries.items()
        }

    def load(self, data: dict[str, dict[str, Any]]) -> None:
        self._entries = {
            key: {
                field_name: MVRegister.from_list(values)
                for field_name, values in fields.items()
            }
            for key, fields in data.items()
        }

        self._changed()

    def _changed(self) -> None:
        self.version += 1
        self.shared.emit(STATE_CHANGED)
