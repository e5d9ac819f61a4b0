"""
Service request endpoints for API v1.

A request is opened with ``POST /service-requests/`` and closed with
``POST /service-requests/{rid}/close``.  Closing removes the request
from this collection and creates it under ``/closed-requests/`` with
the same ``rid``.

When the customer or car cannot be resolved without a choice from the
client, the response is ``409 Conflict`` listing the candidates; the
client repeats the request with ``customer_id`` or ``car_vin`` set.
"""

import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from mechanic_shop_api.app.api.errors import http_error
from mechanic_shop_api.app.core import validation
from mechanic_shop_api.app.core.db import get_db
from mechanic_shop_api.app.core.exceptions import ShopError
from mechanic_shop_api.app.schemas.service_request import (
    ClosedRequestCreate,
    ClosedRequestRead,
    ServiceRequestCreate,
    ServiceRequestRead,
)
from mechanic_shop_api.app.services.closing_service import ClosingService
from mechanic_shop_api.app.services.intake_service import IntakeService

router = APIRouter()


@router.post(
    "/",
    response_model=ServiceRequestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Open a service request",
)
async def open_request(
    data: ServiceRequestCreate,
    conn: sqlite3.Connection = Depends(get_db),
) -> ServiceRequestRead:
    try:
        return await IntakeService.open_request(conn, data)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/", response_model=List[ServiceRequestRead], summary="List open service requests")
async def list_open_requests(
    customer_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0, le=validation.SQLITE_INTEGER_MAX),
    conn: sqlite3.Connection = Depends(get_db),
) -> List[ServiceRequestRead]:
    try:
        return await IntakeService.list_open_requests(conn, customer_id=customer_id, limit=limit, offset=offset)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/{rid}", response_model=ServiceRequestRead, summary="Get an open service request")
async def get_open_request(rid: int, conn: sqlite3.Connection = Depends(get_db)) -> ServiceRequestRead:
    try:
        return await IntakeService.get_open_request(conn, rid)
    except ShopError as e:
        raise http_error(e) from e


@router.post(
    "/{rid}/close",
    response_model=ClosedRequestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Close a service request",
)
async def close_request(
    rid: int,
    data: ClosedRequestCreate,
    conn: sqlite3.Connection = Depends(get_db),
) -> ClosedRequestRead:
    """Close an open request with the mechanic, a comment and the bill.

    Returns 404 if the request is not open (including already closed
    requests) or the mechanic does not exist.
    """
    try:
        return await ClosingService.close_request(conn, rid, data)
    except ShopError as e:
        raise http_error(e) from e
