"""Application errors."""


class StoreError(Exception):
    """Shared cache store unreachable or failing."""

    def __init__(self, operation: str, cause: BaseException | str):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Cache store {operation} failed: {cause}")


class UnknownSourceError(Exception):
    """Source name not present in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Service not found: {name}")
