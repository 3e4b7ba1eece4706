from .errors import (
    StoreError as StoreError,
    StoreNotStartedError as StoreNotStartedError,
    UnsupportedStoreOperation as UnsupportedStoreOperation,
)
from .mv_register import MVRegister as MVRegister
from .protocol import ReplicatedStore as ReplicatedStore
from .replicated_map import (
    STATE_CHANGED as STATE_CHANGED,
    ReplicatedMap as ReplicatedMap,
    Snapshot as Snapshot,
)
from .storage_subsystem import DEAL_REQUESTS as DEAL_REQUESTS, StorageSubsystem as StorageSubsystem
