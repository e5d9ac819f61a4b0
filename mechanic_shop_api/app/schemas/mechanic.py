"""Pydantic schemas for mechanics."""

from pydantic import BaseModel, Field


class MechanicCreate(BaseModel):
    fname: str = Field(..., description="First name, 1 to 32 characters")
    lname: str = Field(..., description="Last name, 1 to 32 characters")
    experience: int = Field(..., description="Years of experience, 1 to 99")


class MechanicRead(BaseModel):
    id: int
    fname: str
    lname: str
    experience: int

    model_config = {
        "from_attributes": True,
    }
