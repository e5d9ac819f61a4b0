"""
Pydantic schemas for customers.

A customer is identified by an integer ``id`` allocated by the
service.  Customers own cars through the ``Owns`` association.
"""

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    """Schema for registering a customer."""

    fname: str = Field(..., description="First name, 1 to 32 characters", examples=["Jane"])
    lname: str = Field(..., description="Last name, 1 to 32 characters", examples=["Doe"])
    phone: str = Field(..., description="Phone number such as (555)123-4567", examples=["555-123-4567"])
    address: str = Field(..., description="Postal address, 1 to 256 characters", examples=["1 Elm St"])


class CustomerRead(BaseModel):
    id: int
    fname: str
    lname: str
    phone: str
    address: str

    model_config = {
        "from_attributes": True,
    }


class OwnershipCreate(BaseModel):
    """Schema for recording that a customer owns an existing car."""

    vin: str = Field(..., description="VIN of a registered car")
