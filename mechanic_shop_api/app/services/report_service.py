"""
Service layer for the fixed shop reports.

All queries are read‑only and parameterized.  "Service history" means
every request ever opened: the open rows in ``Service_Request`` plus
the closed rows in ``Closed_Request``, which keep the car, customer and
odometer of the request they closed.  Every ordering is total so that
repeated calls return rows in the same order.
"""

import sqlite3

from ..core import validation
from ..core.db import read_guard
from ..schemas.report import (
    BillRow,
    BillsBelowReport,
    CarRow,
    CustomerBillRow,
    CustomerCarCountRow,
    CustomersByTotalBillReport,
    CustomersWithManyCarsReport,
    OldLowMileageCarsReport,
    ServicedCarRow,
    TopServicedCarsReport,
)

_SERVICE_HISTORY = (
    "SELECT rid, customer_id, car_vin, odometer FROM Service_Request "
    "UNION ALL "
    "SELECT rid, customer_id, car_vin, odometer FROM Closed_Request"
)


class ReportService:
    """Read-only aggregate queries over customers, cars and requests."""

    @classmethod
    async def bills_below(cls, conn: sqlite3.Connection, threshold: int = 100) -> BillsBelowReport:
        """Closed requests billed strictly less than ``threshold``, ordered by rid."""
        threshold = validation.validate_integer("threshold", threshold)
        with read_guard():
            rows = conn.execute(
                """
                SELECT rid, date AS closed_at, comment, bill
                FROM Closed_Request
                WHERE bill < ?
                ORDER BY rid ASC
                """,
                (threshold,),
            ).fetchall()
        items = [BillRow(**dict(row)) for row in rows]
        return BillsBelowReport(rows=items, count=len(items))

    @classmethod
    async def customers_with_many_cars(cls, conn: sqlite3.Connection, min_cars: int = 20) -> CustomersWithManyCarsReport:
        """Customers owning more than ``min_cars`` cars, ordered by id."""
        min_cars = validation.validate_integer("min_cars", min_cars)
        with read_guard():
            rows = conn.execute(
                """
                SELECT c.id AS customer_id, c.fname, c.lname, COUNT(o.car_vin) AS car_count
                FROM Customer c JOIN Owns o ON o.customer_id = c.id
                GROUP BY c.id, c.fname, c.lname
                HAVING COUNT(o.car_vin) > ?
                ORDER BY c.id ASC
                """,
                (min_cars,),
            ).fetchall()
        items = [CustomerCarCountRow(**dict(row)) for row in rows]
        return CustomersWithManyCarsReport(rows=items, count=len(items))

    @classmethod
    async def old_low_mileage_cars(
        cls,
        conn: sqlite3.Connection,
        year_before: int = 1995,
        odometer_below: int = 50000,
    ) -> OldLowMileageCarsReport:
        """Cars built before ``year_before`` serviced with fewer than ``odometer_below`` miles."""
        year_before = validation.validate_integer("year_before", year_before)
        odometer_below = validation.validate_integer("odometer_below", odometer_below)
        with read_guard():
            rows = conn.execute(
                f"""
                SELECT DISTINCT c.vin, c.make, c.model, c.year
                FROM Car c JOIN ({_SERVICE_HISTORY}) h ON h.car_vin = c.vin
                WHERE c.year < ? AND h.odometer < ?
                ORDER BY c.vin ASC
                """,
                (year_before, odometer_below),
            ).fetchall()
        items = [CarRow(**dict(row)) for row in rows]
        return OldLowMileageCarsReport(rows=items, count=len(items))

    @classmethod
    async def top_serviced_cars(cls, conn: sqlite3.Connection, k: int) -> TopServicedCarsReport:
        """The ``k`` cars with the most service requests; ties go to the lower VIN."""
        k = validation.validate_positive("k", k)
        with read_guard():
            rows = conn.execute(
                f"""
                SELECT c.vin, c.make, c.model, COUNT(h.rid) AS service_count
                FROM Car c JOIN ({_SERVICE_HISTORY}) h ON h.car_vin = c.vin
                GROUP BY c.vin, c.make, c.model
                ORDER BY service_count DESC, c.vin ASC
                LIMIT ?
                """,
                (k,),
            ).fetchall()
        items = [ServicedCarRow(**dict(row)) for row in rows]
        return TopServicedCarsReport(rows=items, count=len(items))

    @classmethod
    async def customers_by_total_bill(cls, conn: sqlite3.Connection) -> CustomersByTotalBillReport:
        """Customers with closed requests, highest total bill first, ties by id."""
        with read_guard():
            rows = conn.execute(
                """
                SELECT c.id AS customer_id, c.fname, c.lname, SUM(r.bill) AS total
                FROM Customer c JOIN Closed_Request r ON r.customer_id = c.id
                GROUP BY c.id, c.fname, c.lname
                ORDER BY total DESC, c.id ASC
                """
            ).fetchall()
        items = [CustomerBillRow(**dict(row)) for row in rows]
        return CustomersByTotalBillReport(rows=items, count=len(items))
