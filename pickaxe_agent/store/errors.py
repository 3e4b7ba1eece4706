class StoreError(Exception):
    pass


class UnsupportedStoreOperation(StoreError, ValueError):

    def __init__(self, operation: tuple[str, ...]) -> None:
        self.operation = operation
        super().__init__(
            f"Unsupported replicated store operation: {'/'.join(operation)}"
        )


class StoreNotStartedError(StoreError, RuntimeError):
    pass
