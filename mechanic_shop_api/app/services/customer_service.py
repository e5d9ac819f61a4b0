"""
Business logic for customers.

Customers are created once and never updated.  ``insert_customer``
performs validation, key allocation and the insert on a cursor that is
already inside a transaction, so the request intake can register a
customer as part of its own atomic unit.
"""

import logging
import sqlite3
from typing import List, Optional

from ..core import validation
from ..core.db import read_guard, transaction
from ..core.exceptions import NotFound
from ..schemas.car import CarRead
from ..schemas.customer import CustomerCreate, CustomerRead
from .id_allocator import EntityClass, IdAllocator

logger = logging.getLogger(__name__)

_COLUMNS = "id, fname, lname, phone, address"


def validate_customer(data: CustomerCreate) -> CustomerCreate:
    """Return a copy of ``data`` with every field validated and trimmed."""
    return CustomerCreate(
        fname=validation.validate_name("fname", data.fname),
        lname=validation.validate_name("lname", data.lname),
        phone=validation.validate_phone(data.phone),
        address=validation.validate_address(data.address),
    )


def insert_customer(cursor: sqlite3.Cursor, data: CustomerCreate) -> CustomerRead:
    """Validate, allocate an id and insert a customer within the caller's transaction."""
    data = validate_customer(data)
    customer_id = IdAllocator.next_id(cursor, EntityClass.CUSTOMER)
    cursor.execute(
        "INSERT INTO Customer (id, fname, lname, phone, address) VALUES (?, ?, ?, ?, ?)",
        (customer_id, data.fname, data.lname, data.phone, data.address),
    )
    return CustomerRead(id=customer_id, **data.model_dump())


def fetch_customer(cursor: sqlite3.Cursor, customer_id: int) -> CustomerRead:
    if not validation.fits_integer(customer_id):
        raise NotFound("Customer", customer_id)
    row = cursor.execute(
        f"SELECT {_COLUMNS} FROM Customer WHERE id = ?",
        (customer_id,),
    ).fetchone()
    if not row:
        raise NotFound("Customer", customer_id)
    return CustomerRead(**dict(row))


def link_owner(cursor: sqlite3.Cursor, customer_id: int, vin: str) -> bool:
    """Record that ``customer_id`` owns ``vin``.  Returns False if the tie already existed."""
    cursor.execute(
        "INSERT OR IGNORE INTO Owns (customer_id, car_vin) VALUES (?, ?)",
        (customer_id, vin),
    )
    return cursor.rowcount == 1


class CustomerService:
    """Service for registering and looking up customers."""

    @classmethod
    async def register_customer(cls, conn: sqlite3.Connection, data: CustomerCreate) -> CustomerRead:
        """Create a new customer and return it.

        All fields are validated before an id is allocated.  The id is
        one more than the current maximum; allocation and insert happen
        in a single transaction.
        """
        data = validate_customer(data)
        with transaction(conn) as cursor:
            customer = insert_customer(cursor, data)
        logger.info("Registered customer %s (%s %s)", customer.id, customer.fname, customer.lname)
        return customer

    @classmethod
    async def get_customer(cls, conn: sqlite3.Connection, customer_id: int) -> CustomerRead:
        with read_guard():
            return fetch_customer(conn.cursor(), customer_id)

    @classmethod
    async def list_customers(
        cls,
        conn: sqlite3.Connection,
        last_name: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[CustomerRead]:
        """List customers ordered by id, optionally filtered by exact last name."""
        query = f"SELECT {_COLUMNS} FROM Customer"
        params: list = []
        if last_name is not None:
            query += " WHERE lname = ?"
            params.append(last_name.strip())
        query += " ORDER BY id ASC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        with read_guard():
            rows = conn.execute(query, tuple(params)).fetchall()
        return [CustomerRead(**dict(row)) for row in rows]

    @classmethod
    async def list_customer_cars(cls, conn: sqlite3.Connection, customer_id: int) -> List[CarRead]:
        """Return the cars tied to a customer through ``Owns``, ordered by VIN."""
        with read_guard():
            cursor = conn.cursor()
            fetch_customer(cursor, customer_id)
            rows = cursor.execute(
                """
                SELECT c.vin, c.make, c.model, c.year
                FROM Owns o JOIN Car c ON c.vin = o.car_vin
                WHERE o.customer_id = ?
                ORDER BY c.vin ASC
                """,
                (customer_id,),
            ).fetchall()
        return [CarRead(**dict(row)) for row in rows]

    @classmethod
    async def add_car_owner(cls, conn: sqlite3.Connection, customer_id: int, vin: str) -> CarRead:
        """Tie an existing car to a customer.  Repeating the call is harmless."""
        vin = validation.validate_vin(vin)
        with transaction(conn) as cursor:
            fetch_customer(cursor, customer_id)
            row = cursor.execute(
                "SELECT vin, make, model, year FROM Car WHERE vin = ?",
                (vin,),
            ).fetchone()
            if not row:
                raise NotFound("Car", vin)
            created = link_owner(cursor, customer_id, vin)
        if created:
            logger.info("Customer %s now owns car %s", customer_id, vin)
        return CarRead(**dict(row))
