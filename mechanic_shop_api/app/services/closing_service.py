"""
Business logic for closing service requests.

Closing moves a request from ``Service_Request`` to ``Closed_Request``
under the same ``rid``.  The insert of the closed row and the delete
of the open row are one transaction, so a reader sees the request in
exactly one of the two tables, and a closed request never reopens.
"""

import logging
import sqlite3
from typing import List, Optional

from ..core import validation
from ..core.db import read_guard, transaction
from ..core.exceptions import NotFound, PersistenceFailure
from ..schemas.service_request import ClosedRequestCreate, ClosedRequestRead
from .intake_service import utc_now
from .mechanic_service import fetch_mechanic

logger = logging.getLogger(__name__)

_SELECT_CLOSED = (
    "SELECT rid, mid AS mechanic_id, date AS closed_at, comment, bill, "
    "customer_id, car_vin, odometer, complain AS complaint, opened_at "
    "FROM Closed_Request"
)


class ClosingService:
    """Service for closing requests and reading closed requests."""

    @classmethod
    async def close_request(
        cls,
        conn: sqlite3.Connection,
        rid: int,
        data: ClosedRequestCreate,
    ) -> ClosedRequestRead:
        """Close the open request ``rid``, billed by ``data.mechanic_id``.

        Raises :class:`NotFound` when the request is not open (never
        opened or already closed) or the mechanic does not exist; in
        both cases nothing is written.
        """
        comment = validation.validate_comment(data.comment)
        bill = validation.validate_bill(data.bill)
        if not validation.fits_integer(rid):
            raise NotFound("ServiceRequest", rid)
        closed_at = utc_now()
        with transaction(conn) as cursor:
            request = cursor.execute(
                "SELECT rid, customer_id, car_vin, date, odometer, complain FROM Service_Request WHERE rid = ?",
                (rid,),
            ).fetchone()
            if not request:
                raise NotFound("ServiceRequest", rid)
            fetch_mechanic(cursor, data.mechanic_id)
            cursor.execute(
                """
                INSERT INTO Closed_Request
                    (wid, rid, mid, date, comment, bill, customer_id, car_vin, odometer, complain, opened_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    rid,
                    rid,
                    data.mechanic_id,
                    closed_at,
                    comment,
                    bill,
                    request["customer_id"],
                    request["car_vin"],
                    request["odometer"],
                    request["complain"],
                    request["date"],
                ),
            )
            cursor.execute("DELETE FROM Service_Request WHERE rid = ?", (rid,))
            if cursor.rowcount != 1:
                raise PersistenceFailure(f"Service request {rid} changed while closing")
        logger.info("Closed service request %s by mechanic %s, bill %s", rid, data.mechanic_id, bill)
        return ClosedRequestRead(
            rid=rid,
            mechanic_id=data.mechanic_id,
            closed_at=closed_at,
            comment=comment,
            bill=bill,
            customer_id=request["customer_id"],
            car_vin=request["car_vin"],
            odometer=request["odometer"],
            complaint=request["complain"],
            opened_at=request["date"],
        )

    @classmethod
    async def get_closed_request(cls, conn: sqlite3.Connection, rid: int) -> ClosedRequestRead:
        if not validation.fits_integer(rid):
            raise NotFound("ClosedRequest", rid)
        with read_guard():
            row = conn.execute(f"{_SELECT_CLOSED} WHERE rid = ?", (rid,)).fetchone()
        if not row:
            raise NotFound("ClosedRequest", rid)
        return ClosedRequestRead(**dict(row))

    @classmethod
    async def list_closed_requests(
        cls,
        conn: sqlite3.Connection,
        mechanic_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ClosedRequestRead]:
        if mechanic_id is not None and not validation.fits_integer(mechanic_id):
            return []
        query = _SELECT_CLOSED
        params: list = []
        if mechanic_id is not None:
            query += " WHERE mid = ?"
            params.append(mechanic_id)
        query += " ORDER BY rid ASC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        with read_guard():
            rows = conn.execute(query, tuple(params)).fetchall()
        return [ClosedRequestRead(**dict(row)) for row in rows]
