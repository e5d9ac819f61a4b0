"""
Information endpoint for API v1.

Returns the service name and version together with the limits the
service validates against, so that clients can check input before
submitting it.
"""

from typing import Any, Dict

from fastapi import APIRouter

from mechanic_shop_api.app.core import validation
from mechanic_shop_api.app.core.config import settings

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_info() -> Dict[str, Any]:
    return {
        "name": settings.project_name,
        "version": settings.api_version,
        "limits": {
            "name_max_length": validation.NAME_MAX_LENGTH,
            "address_max_length": validation.ADDRESS_MAX_LENGTH,
            "vin_length": validation.VIN_LENGTH,
            "strict_vin": settings.strict_vin,
            "max_car_year": settings.max_car_year,
            "odometer_max": validation.ODOMETER_MAX,
            "experience_max": validation.EXPERIENCE_MAX,
        },
    }
