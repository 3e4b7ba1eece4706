from typing import Any, Callable, Mapping, Protocol


class ReplicatedStore(Protocol):
    """The slice of a replicated collection the deal agent depends on."""

    def value(self) -> Mapping[str, Mapping[str, Any]]:
        ...

    def on(self, event: str, handler: Callable[..., Any]) -> Callable[[], bool]:
        ...

    def off(self, event: str, handler: Callable[..., Any]) -> bool:
        ...

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
        ...
