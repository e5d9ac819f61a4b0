"""Read-only endpoints for closed service requests."""

import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from mechanic_shop_api.app.api.errors import http_error
from mechanic_shop_api.app.core import validation
from mechanic_shop_api.app.core.db import get_db
from mechanic_shop_api.app.core.exceptions import ShopError
from mechanic_shop_api.app.schemas.service_request import ClosedRequestRead
from mechanic_shop_api.app.services.closing_service import ClosingService

router = APIRouter()


@router.get("/", response_model=List[ClosedRequestRead])
async def list_closed_requests(
    mechanic_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0, le=validation.SQLITE_INTEGER_MAX),
    conn: sqlite3.Connection = Depends(get_db),
) -> List[ClosedRequestRead]:
    try:
        return await ClosingService.list_closed_requests(conn, mechanic_id=mechanic_id, limit=limit, offset=offset)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/{rid}", response_model=ClosedRequestRead)
async def get_closed_request(rid: int, conn: sqlite3.Connection = Depends(get_db)) -> ClosedRequestRead:
    try:
        return await ClosingService.get_closed_request(conn, rid)
    except ShopError as e:
        raise http_error(e) from e
