"""Shared exceptions for service layer operations."""


class BookmarkValidationError(Exception):
    """
    Raised when a request is invalid before it reaches the store.

    Covers missing or empty required content fields at creation, malformed
    identifiers, and out-of-range pagination arguments. Never retried.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class BookmarkNotFoundError(Exception):
    """Raised when a lookup or update targets a bookmark that does not exist (or is deleted)."""

    def __init__(self, identifier: int | str, entity_name: str = "Bookmark") -> None:
        self.identifier = identifier
        self.entity_name = entity_name
        super().__init__(f"{entity_name} not found: {identifier}")


class StoreError(Exception):
    """
    Raised when the underlying database fails (connectivity, constraints, I/O).

    The original exception is chained as __cause__ for logging; callers decide
    whether to retry.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Store operation failed: {operation}")
