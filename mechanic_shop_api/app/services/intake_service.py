"""
Business logic for opening service requests.

Opening a request resolves (or creates) the customer, resolves (or
creates) the car and its ownership tie, allocates a ``rid`` and inserts
the open request.  All of it runs in one transaction: if any step
fails, no customer, car, ownership or request row is left behind.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from ..core import validation
from ..core.db import read_guard, transaction
from ..core.exceptions import NotFound, ResolutionAmbiguous, ValidationError
from ..schemas.service_request import ServiceRequestCreate, ServiceRequestRead
from .car_service import find_car, insert_car, validate_car
from .customer_service import fetch_customer, insert_customer, link_owner, validate_customer
from .id_allocator import EntityClass, IdAllocator

logger = logging.getLogger(__name__)

_SELECT_OPEN = (
    "SELECT rid, customer_id, car_vin, date AS opened_at, odometer, complain AS complaint "
    "FROM Service_Request"
)


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string with second precision."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _resolve_customer(cursor: sqlite3.Cursor, data: ServiceRequestCreate) -> int:
    if data.customer_id is not None:
        return fetch_customer(cursor, data.customer_id).id
    if data.new_customer is not None:
        return insert_customer(cursor, data.new_customer).id
    if data.last_name is None:
        raise ValidationError("customer", "one of customer_id, new_customer or last_name is required")

    last_name = validation.validate_name("last_name", data.last_name)
    rows = cursor.execute(
        "SELECT id FROM Customer WHERE lname = ? ORDER BY id ASC",
        (last_name,),
    ).fetchall()
    if not rows:
        raise ValidationError("new_customer", f"no customer named {last_name}; customer details are required")
    if len(rows) > 1:
        raise ResolutionAmbiguous("customer_id", [row["id"] for row in rows])
    return rows[0]["id"]


def _resolve_car(cursor: sqlite3.Cursor, customer_id: int, data: ServiceRequestCreate) -> str:
    if data.car_vin is not None:
        vin = validation.validate_vin(data.car_vin)
        if find_car(cursor, vin) is None:
            raise NotFound("Car", vin)
        link_owner(cursor, customer_id, vin)
        return vin
    if data.new_car is not None:
        car, _ = insert_car(cursor, data.new_car)
        link_owner(cursor, customer_id, car.vin)
        return car.vin

    rows = cursor.execute(
        "SELECT car_vin FROM Owns WHERE customer_id = ? ORDER BY car_vin ASC",
        (customer_id,),
    ).fetchall()
    if not rows:
        raise ValidationError("new_car", f"customer {customer_id} owns no cars; car details are required")
    if len(rows) > 1:
        raise ResolutionAmbiguous("car_vin", [row["car_vin"] for row in rows])
    return rows[0]["car_vin"]


class IntakeService:
    """Service for opening and listing open service requests."""

    @classmethod
    async def open_request(cls, conn: sqlite3.Connection, data: ServiceRequestCreate) -> ServiceRequestRead:
        """Open a service request for a customer's car.

        The customer is taken from ``customer_id``, created from
        ``new_customer`` or looked up by ``last_name``; a single match
        is used and several raise :class:`ResolutionAmbiguous`.  The car
        is taken from ``car_vin`` (which must be registered), created
        from ``new_car`` or chosen from the customer's cars in the same
        way.  Missing ownership ties are recorded.
        """
        odometer = validation.validate_odometer(data.odometer)
        complaint = validation.validate_complaint(data.complaint)
        # Reject bad nested payloads before anything is written.
        if data.customer_id is None and data.new_customer is not None:
            validate_customer(data.new_customer)
        if data.car_vin is None and data.new_car is not None:
            validate_car(data.new_car)

        opened_at = utc_now()
        with transaction(conn) as cursor:
            customer_id = _resolve_customer(cursor, data)
            vin = _resolve_car(cursor, customer_id, data)
            rid = IdAllocator.next_id(cursor, EntityClass.SERVICE_REQUEST)
            cursor.execute(
                """
                INSERT INTO Service_Request (rid, customer_id, car_vin, date, odometer, complain)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (rid, customer_id, vin, opened_at, odometer, complaint),
            )
        logger.info("Opened service request %s for customer %s, car %s", rid, customer_id, vin)
        return ServiceRequestRead(
            rid=rid,
            customer_id=customer_id,
            car_vin=vin,
            opened_at=opened_at,
            odometer=odometer,
            complaint=complaint,
        )

    @classmethod
    async def get_open_request(cls, conn: sqlite3.Connection, rid: int) -> ServiceRequestRead:
        if not validation.fits_integer(rid):
            raise NotFound("ServiceRequest", rid)
        with read_guard():
            row = conn.execute(f"{_SELECT_OPEN} WHERE rid = ?", (rid,)).fetchone()
        if not row:
            raise NotFound("ServiceRequest", rid)
        return ServiceRequestRead(**dict(row))

    @classmethod
    async def list_open_requests(
        cls,
        conn: sqlite3.Connection,
        customer_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ServiceRequestRead]:
        """List open requests ordered by rid, optionally for one customer."""
        if customer_id is not None and not validation.fits_integer(customer_id):
            return []
        query = _SELECT_OPEN
        params: list = []
        if customer_id is not None:
            query += " WHERE customer_id = ?"
            params.append(customer_id)
        query += " ORDER BY rid ASC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        with read_guard():
            rows = conn.execute(query, tuple(params)).fetchall()
        return [ServiceRequestRead(**dict(row)) for row in rows]
