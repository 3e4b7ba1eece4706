from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import DealSignal, DealStage


class DealRequestDecodeError(ValueError):

    def __init__(
        self,
        deal_request_id: str,
        field: str,
        reason: str,
    ) -> None:
        self.deal_request_id = deal_request_id
        self.field = field
        self.reason = reason
        super().__init__(
            f"Could not decode field {field!r} of deal request {deal_request_id}: {reason}"
        )


class InvalidTransitionError(ValueError):

    def __init__(self, stage: DealStage, signal: DealSignal) -> None:
        self.stage = stage
        self.signal = signal
        super().__init__(
            f"No transition from stage {stage.value!r} on signal {signal.value!r}"
        )


class DriverError(RuntimeError):

    def __init__(self, deal_request_id: str, stage: DealStage, message: str) -> None:
        self.deal_request_id = deal_request_id
        self.stage = stage
        super().__init__(message)


class WorkerCallError(DriverError):
    """The worker rejected the queue-proposal call; the driver loop stopped."""


class StoreWriteError(DriverError):
    """Persisting a stage transition failed; the driver loop stopped."""
