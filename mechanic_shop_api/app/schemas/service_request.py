"""
Pydantic schemas for service requests.

A request is opened against a customer's car (``ServiceRequestCreate``)
and later closed by a mechanic with a bill (``ClosedRequestCreate``).
The open and closed forms share the same ``rid``.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .car import CarCreate
from .customer import CustomerCreate


class ServiceRequestCreate(BaseModel):
    """Schema for opening a service request.

    The customer is chosen by ``customer_id``, created from
    ``new_customer``, or looked up by ``last_name`` (in that order of
    precedence).  The car is chosen by ``car_vin``, created from
    ``new_car``, or taken from the cars the customer already owns.
    """

    customer_id: Optional[int] = Field(None, description="Existing customer to open the request for")
    last_name: Optional[str] = Field(None, description="Look the customer up by last name")
    new_customer: Optional[CustomerCreate] = Field(None, description="Register a new customer for this request")
    car_vin: Optional[str] = Field(None, description="Existing car to service")
    new_car: Optional[CarCreate] = Field(None, description="Register a new car for this customer")
    odometer: int = Field(..., description="Odometer reading, 0 to 9,999,999")
    complaint: str = Field("", description="Customer's description of the problem")


class ServiceRequestRead(BaseModel):
    rid: int
    customer_id: int
    car_vin: str
    opened_at: str
    odometer: int
    complaint: str

    model_config = {
        "from_attributes": True,
    }


class ClosedRequestCreate(BaseModel):
    """Schema for closing an open service request."""

    mechanic_id: int = Field(..., description="Mechanic who did the work")
    comment: str = Field(..., description="Work summary; must not be empty")
    bill: int = Field(..., description="Amount billed, zero or more")


class ClosedRequestRead(BaseModel):
    rid: int
    mechanic_id: int
    closed_at: str
    comment: str
    bill: int
    customer_id: int
    car_vin: str
    odometer: int
    complaint: str
    opened_at: str

    model_config = {
        "from_attributes": True,
    }
