"""
Business logic for cars.

A car is keyed by its VIN.  Registering a VIN that already exists is a
successful no-op: the stored car is returned and nothing is written.
"""

import logging
import sqlite3
from typing import Optional, Tuple

from ..core import validation
from ..core.db import read_guard, transaction
from ..core.exceptions import NotFound
from ..schemas.car import CarCreate, CarRead

logger = logging.getLogger(__name__)


def validate_car(data: CarCreate) -> CarCreate:
    return CarCreate(
        vin=validation.validate_vin(data.vin),
        make=validation.validate_name("make", data.make),
        model=validation.validate_name("model", data.model),
        year=validation.validate_year(data.year),
    )


def find_car(cursor: sqlite3.Cursor, vin: str) -> Optional[CarRead]:
    row = cursor.execute(
        "SELECT vin, make, model, year FROM Car WHERE vin = ?",
        (vin,),
    ).fetchone()
    return CarRead(**dict(row)) if row else None


def insert_car(cursor: sqlite3.Cursor, data: CarCreate) -> Tuple[CarRead, bool]:
    """Insert the car unless its VIN is already registered.

    Runs within the caller's transaction.  Returns the stored car and
    whether a new row was written.
    """
    data = validate_car(data)
    existing = find_car(cursor, data.vin)
    if existing:
        return existing, False
    cursor.execute(
        "INSERT INTO Car (vin, make, model, year) VALUES (?, ?, ?, ?)",
        (data.vin, data.make, data.model, data.year),
    )
    return CarRead(**data.model_dump()), True


class CarService:
    """Service for registering and looking up cars."""

    @classmethod
    async def register_car(cls, conn: sqlite3.Connection, data: CarCreate) -> Tuple[CarRead, bool]:
        """Register a car, idempotently on VIN.

        Returns ``(car, created)``.  When the VIN exists already the
        stored row is returned unchanged with ``created`` set to False.
        """
        data = validate_car(data)
        with transaction(conn) as cursor:
            car, created = insert_car(cursor, data)
        if created:
            logger.info("Registered car %s (%s %s %s)", car.vin, car.year, car.make, car.model)
        else:
            logger.info("Car %s already registered", car.vin)
        return car, created

    @classmethod
    async def get_car(cls, conn: sqlite3.Connection, vin: str) -> CarRead:
        vin = validation.validate_vin(vin)
        with read_guard():
            car = find_car(conn.cursor(), vin)
        if car is None:
            raise NotFound("Car", vin)
        return car
