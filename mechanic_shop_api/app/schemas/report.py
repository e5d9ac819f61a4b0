"""
Pydantic schemas for the fixed reports.

Every report returns its rows in a defined order together with the
number of rows.
"""

from typing import List

from pydantic import BaseModel


class BillRow(BaseModel):
    rid: int
    closed_at: str
    comment: str
    bill: int


class CustomerCarCountRow(BaseModel):
    customer_id: int
    fname: str
    lname: str
    car_count: int


class CarRow(BaseModel):
    vin: str
    make: str
    model: str
    year: int


class ServicedCarRow(BaseModel):
    vin: str
    make: str
    model: str
    service_count: int


class CustomerBillRow(BaseModel):
    customer_id: int
    fname: str
    lname: str
    total: int


class BillsBelowReport(BaseModel):
    rows: List[BillRow]
    count: int


class CustomersWithManyCarsReport(BaseModel):
    rows: List[CustomerCarCountRow]
    count: int


class OldLowMileageCarsReport(BaseModel):
    rows: List[CarRow]
    count: int


class TopServicedCarsReport(BaseModel):
    rows: List[ServicedCarRow]
    count: int


class CustomersByTotalBillReport(BaseModel):
    rows: List[CustomerBillRow]
    count: int
