"""Mechanic endpoints for API v1."""

import sqlite3
from typing import List

from fastapi import APIRouter, Depends, Query, status

from mechanic_shop_api.app.api.errors import http_error
from mechanic_shop_api.app.core import validation
from mechanic_shop_api.app.core.db import get_db
from mechanic_shop_api.app.core.exceptions import ShopError
from mechanic_shop_api.app.schemas.mechanic import MechanicCreate, MechanicRead
from mechanic_shop_api.app.services.mechanic_service import MechanicService

router = APIRouter()


@router.post("/", response_model=MechanicRead, status_code=status.HTTP_201_CREATED)
async def register_mechanic(
    data: MechanicCreate,
    conn: sqlite3.Connection = Depends(get_db),
) -> MechanicRead:
    try:
        return await MechanicService.register_mechanic(conn, data)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/", response_model=List[MechanicRead])
async def list_mechanics(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0, le=validation.SQLITE_INTEGER_MAX),
    conn: sqlite3.Connection = Depends(get_db),
) -> List[MechanicRead]:
    try:
        return await MechanicService.list_mechanics(conn, limit=limit, offset=offset)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/{mechanic_id}", response_model=MechanicRead)
async def get_mechanic(mechanic_id: int, conn: sqlite3.Connection = Depends(get_db)) -> MechanicRead:
    try:
        return await MechanicService.get_mechanic(conn, mechanic_id)
    except ShopError as e:
        raise http_error(e) from e
