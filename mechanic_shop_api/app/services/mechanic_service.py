"""Business logic for mechanics."""

import logging
import sqlite3
from typing import List

from ..core import validation
from ..core.db import read_guard, transaction
from ..core.exceptions import NotFound
from ..schemas.mechanic import MechanicCreate, MechanicRead
from .id_allocator import EntityClass, IdAllocator

logger = logging.getLogger(__name__)


def fetch_mechanic(cursor: sqlite3.Cursor, mechanic_id: int) -> MechanicRead:
    if not validation.fits_integer(mechanic_id):
        raise NotFound("Mechanic", mechanic_id)
    row = cursor.execute(
        "SELECT id, fname, lname, experience FROM Mechanic WHERE id = ?",
        (mechanic_id,),
    ).fetchone()
    if not row:
        raise NotFound("Mechanic", mechanic_id)
    return MechanicRead(**dict(row))


class MechanicService:
    """Service for registering and looking up mechanics."""

    @classmethod
    async def register_mechanic(cls, conn: sqlite3.Connection, data: MechanicCreate) -> MechanicRead:
        """Validate the fields, allocate an id and insert the mechanic atomically."""
        fname = validation.validate_name("fname", data.fname)
        lname = validation.validate_name("lname", data.lname)
        experience = validation.validate_experience(data.experience)
        with transaction(conn) as cursor:
            mechanic_id = IdAllocator.next_id(cursor, EntityClass.MECHANIC)
            cursor.execute(
                "INSERT INTO Mechanic (id, fname, lname, experience) VALUES (?, ?, ?, ?)",
                (mechanic_id, fname, lname, experience),
            )
        logger.info("Registered mechanic %s (%s %s)", mechanic_id, fname, lname)
        return MechanicRead(id=mechanic_id, fname=fname, lname=lname, experience=experience)

    @classmethod
    async def get_mechanic(cls, conn: sqlite3.Connection, mechanic_id: int) -> MechanicRead:
        with read_guard():
            return fetch_mechanic(conn.cursor(), mechanic_id)

    @classmethod
    async def list_mechanics(cls, conn: sqlite3.Connection, limit: int = 100, offset: int = 0) -> List[MechanicRead]:
        with read_guard():
            rows = conn.execute(
                "SELECT id, fname, lname, experience FROM Mechanic ORDER BY id ASC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [MechanicRead(**dict(row)) for row in rows]
