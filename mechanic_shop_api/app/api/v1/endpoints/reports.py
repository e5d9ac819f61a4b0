"""
Report endpoints for API v1.

Each endpoint runs one fixed read-only query.  The defaults reproduce
the shop's standard reports (bills under 100, customers with more than
20 cars, cars older than 1995 with under 50,000 miles).
"""

import sqlite3

from fastapi import APIRouter, Depends, Query

from mechanic_shop_api.app.api.errors import http_error
from mechanic_shop_api.app.core.db import get_db
from mechanic_shop_api.app.core.exceptions import ShopError
from mechanic_shop_api.app.schemas.report import (
    BillsBelowReport,
    CustomersByTotalBillReport,
    CustomersWithManyCarsReport,
    OldLowMileageCarsReport,
    TopServicedCarsReport,
)
from mechanic_shop_api.app.services.report_service import ReportService

router = APIRouter()


@router.get("/bills-below", response_model=BillsBelowReport)
async def bills_below(
    threshold: int = Query(100, description="Include closed requests billed below this amount"),
    conn: sqlite3.Connection = Depends(get_db),
) -> BillsBelowReport:
    try:
        return await ReportService.bills_below(conn, threshold=threshold)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/customers-with-many-cars", response_model=CustomersWithManyCarsReport)
async def customers_with_many_cars(
    min_cars: int = Query(20, ge=0, description="Include customers owning more than this many cars"),
    conn: sqlite3.Connection = Depends(get_db),
) -> CustomersWithManyCarsReport:
    try:
        return await ReportService.customers_with_many_cars(conn, min_cars=min_cars)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/old-low-mileage-cars", response_model=OldLowMileageCarsReport)
async def old_low_mileage_cars(
    year_before: int = Query(1995),
    odometer_below: int = Query(50000),
    conn: sqlite3.Connection = Depends(get_db),
) -> OldLowMileageCarsReport:
    try:
        return await ReportService.old_low_mileage_cars(conn, year_before=year_before, odometer_below=odometer_below)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/top-serviced-cars", response_model=TopServicedCarsReport)
async def top_serviced_cars(
    k: int = Query(..., description="Number of cars to return; must be positive"),
    conn: sqlite3.Connection = Depends(get_db),
) -> TopServicedCarsReport:
    try:
        return await ReportService.top_serviced_cars(conn, k)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/customers-by-total-bill", response_model=CustomersByTotalBillReport)
async def customers_by_total_bill(conn: sqlite3.Connection = Depends(get_db)) -> CustomersByTotalBillReport:
    try:
        return await ReportService.customers_by_total_bill(conn)
    except ShopError as e:
        raise http_error(e) from e
