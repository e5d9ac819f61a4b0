"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers (customers, mechanics,
cars, requests, reports) under a unified prefix.  When new domains are
introduced, update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import (
    cars,
    closed_requests,
    customers,
    info,
    mechanics,
    reports,
    service_requests,
)

router = APIRouter()

router.include_router(customers.router, prefix="/customers", tags=["customers"])
router.include_router(mechanics.router, prefix="/mechanics", tags=["mechanics"])
router.include_router(cars.router, prefix="/cars", tags=["cars"])
router.include_router(service_requests.router, prefix="/service-requests", tags=["service requests"])
router.include_router(closed_requests.router, prefix="/closed-requests", tags=["service requests"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(info.router, prefix="/info", tags=["info"])
