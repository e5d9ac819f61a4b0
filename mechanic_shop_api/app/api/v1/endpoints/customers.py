"""
Customer endpoints for API v1.

Customers are registered once and then looked up by id or last name.
The cars a customer owns are exposed as a sub-collection; posting to it
records ownership of an already registered car.
"""

import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from mechanic_shop_api.app.api.errors import http_error
from mechanic_shop_api.app.core import validation
from mechanic_shop_api.app.core.db import get_db
from mechanic_shop_api.app.core.exceptions import ShopError
from mechanic_shop_api.app.schemas.car import CarRead
from mechanic_shop_api.app.schemas.customer import CustomerCreate, CustomerRead, OwnershipCreate
from mechanic_shop_api.app.services.customer_service import CustomerService

router = APIRouter()


@router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def register_customer(
    data: CustomerCreate,
    conn: sqlite3.Connection = Depends(get_db),
) -> CustomerRead:
    """Register a customer.  The id is allocated by the service."""
    try:
        return await CustomerService.register_customer(conn, data)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/", response_model=List[CustomerRead])
async def list_customers(
    last_name: Optional[str] = Query(None, description="Exact last name to match"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0, le=validation.SQLITE_INTEGER_MAX),
    conn: sqlite3.Connection = Depends(get_db),
) -> List[CustomerRead]:
    """List customers ordered by id.

    Use ``last_name`` to find the candidates when opening a request
    for a returning customer.
    """
    try:
        return await CustomerService.list_customers(conn, last_name=last_name, limit=limit, offset=offset)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: int, conn: sqlite3.Connection = Depends(get_db)) -> CustomerRead:
    try:
        return await CustomerService.get_customer(conn, customer_id)
    except ShopError as e:
        raise http_error(e) from e


@router.get("/{customer_id}/cars", response_model=List[CarRead])
async def list_customer_cars(customer_id: int, conn: sqlite3.Connection = Depends(get_db)) -> List[CarRead]:
    try:
        return await CustomerService.list_customer_cars(conn, customer_id)
    except ShopError as e:
        raise http_error(e) from e


@router.post("/{customer_id}/cars", response_model=CarRead, status_code=status.HTTP_201_CREATED)
async def add_car_owner(
    customer_id: int,
    data: OwnershipCreate,
    conn: sqlite3.Connection = Depends(get_db),
) -> CarRead:
    """Record that the customer owns a registered car."""
    try:
        return await CustomerService.add_car_owner(conn, customer_id, data.vin)
    except ShopError as e:
        raise http_error(e) from e
