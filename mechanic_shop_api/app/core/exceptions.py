"""
Error taxonomy for the shop's business logic.

Every failure raised by the service layer derives from ``ShopError`` so
that callers (the HTTP endpoints, scripts, tests) can render or retry
it.  Services never swallow these errors and never retry internally.
"""

from typing import Any, List


class ShopError(Exception):
    """Base class for all errors raised by the service layer."""


class ValidationError(ShopError, ValueError):
    """A field value is malformed or out of range.  No write was performed."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class NotFound(ShopError, LookupError):
    """A referenced row does not exist."""

    def __init__(self, entity_class: str, key: Any) -> None:
        self.entity_class = entity_class
        self.key = key
        super().__init__(f"{entity_class} {key} not found")


class ResolutionAmbiguous(ShopError):
    """Several rows match and the caller has to pick one of ``candidates``."""

    def __init__(self, field: str, candidates: List[Any]) -> None:
        self.field = field
        self.candidates = list(candidates)
        super().__init__(
            f"{field} matches {len(self.candidates)} records; select one of {self.candidates}"
        )


class PersistenceFailure(ShopError):
    """The store could not be reached or the transaction was aborted."""


class AllocationReadFailure(PersistenceFailure):
    """The identifier allocator could not read the current maximum key."""
