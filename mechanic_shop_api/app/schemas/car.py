"""
Pydantic schemas for cars.

Cars are keyed by their VIN, which is supplied by the client rather
than allocated by the service.
"""

from pydantic import BaseModel, Field


class CarCreate(BaseModel):
    vin: str = Field(..., description="16 character vehicle identification number", examples=["1HGCM82633A12345"])
    make: str = Field(..., description="Manufacturer, 1 to 32 characters")
    model: str = Field(..., description="Model name, 1 to 32 characters")
    year: int = Field(..., description="Model year")


class CarRead(BaseModel):
    vin: str
    make: str
    model: str
    year: int

    model_config = {
        "from_attributes": True,
    }
