"""
Car endpoints for API v1.

Registering a car is idempotent on its VIN: the first call answers
``201 Created``, repeated calls answer ``200 OK`` with the stored car.
"""

import sqlite3

from fastapi import APIRouter, Depends, Response, status

from mechanic_shop_api.app.api.errors import http_error
from mechanic_shop_api.app.core.db import get_db
from mechanic_shop_api.app.core.exceptions import ShopError
from mechanic_shop_api.app.schemas.car import CarCreate, CarRead
from mechanic_shop_api.app.services.car_service import CarService

router = APIRouter()


@router.post("/", response_model=CarRead, status_code=status.HTTP_201_CREATED)
async def register_car(
    data: CarCreate,
    response: Response,
    conn: sqlite3.Connection = Depends(get_db),
) -> CarRead:
    try:
        car, created = await CarService.register_car(conn, data)
    except ShopError as e:
        raise http_error(e) from e
    if not created:
        response.status_code = status.HTTP_200_OK
    return car


@router.get("/{vin}", response_model=CarRead)
async def get_car(vin: str, conn: sqlite3.Connection = Depends(get_db)) -> CarRead:
    try:
        return await CarService.get_car(conn, vin)
    except ShopError as e:
        raise http_error(e) from e
