"""
Integer key allocation for customers, mechanics and service requests.

Keys are ``MAX(key) + 1`` (or ``1`` for an empty table).  The read is
only safe when it runs inside the same ``transaction`` as the insert
that consumes the key: ``BEGIN IMMEDIATE`` holds the write lock, so no
other session can allocate or insert in between.
"""

import sqlite3
from enum import Enum

from ..core.exceptions import AllocationReadFailure, PersistenceFailure, ValidationError
from ..core.validation import SQLITE_INTEGER_MAX


class EntityClass(str, Enum):
    CUSTOMER = "Customer"
    MECHANIC = "Mechanic"
    SERVICE_REQUEST = "ServiceRequest"


# Closed requests keep their rid, so service request keys are drawn from
# both tables and a closed rid is never handed out again.
_MAX_QUERIES = {
    EntityClass.CUSTOMER: "SELECT MAX(id) FROM Customer",
    EntityClass.MECHANIC: "SELECT MAX(id) FROM Mechanic",
    EntityClass.SERVICE_REQUEST: (
        "SELECT MAX(rid) FROM ("
        "SELECT rid FROM Service_Request UNION ALL SELECT rid FROM Closed_Request"
        ")"
    ),
}


class IdAllocator:
    """Compute the next free key for an entity class."""

    @classmethod
    def next_id(cls, cursor: sqlite3.Cursor, entity_class: EntityClass) -> int:
        try:
            query = _MAX_QUERIES[EntityClass(entity_class)]
        except (KeyError, ValueError):
            raise ValidationError("entity_class", f"unknown entity class {entity_class!r}") from None
        try:
            row = cursor.execute(query).fetchone()
        except sqlite3.Error as e:
            raise AllocationReadFailure(f"Could not read max key for {entity_class}: {e}") from e
        current = row[0] if row else None
        if current is None:
            return 1
        try:
            next_key = int(current) + 1
        except (TypeError, ValueError) as e:
            raise AllocationReadFailure(
                f"Malformed key {current!r} in {EntityClass(entity_class).value}"
            ) from e
        if next_key > SQLITE_INTEGER_MAX:
            raise PersistenceFailure(f"No keys left for {EntityClass(entity_class).value}")
        return next_key
