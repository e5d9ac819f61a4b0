import pytest
from fastapi.testclient import TestClient

from mechanic_shop_api.app.core.config import settings
from mechanic_shop_api.app.core.db import get_connection, init_db
from mechanic_shop_api.app.main import app
from mechanic_shop_api.app.schemas.car import CarCreate
from mechanic_shop_api.app.schemas.customer import CustomerCreate
from mechanic_shop_api.app.schemas.mechanic import MechanicCreate
from mechanic_shop_api.app.schemas.service_request import ServiceRequestCreate
from mechanic_shop_api.app.services.car_service import CarService
from mechanic_shop_api.app.services.customer_service import CustomerService
from mechanic_shop_api.app.services.intake_service import IntakeService
from mechanic_shop_api.app.services.mechanic_service import MechanicService


@pytest.fixture(autouse=True)
def db_path(tmp_path, monkeypatch):
    """Point every test at its own freshly migrated database file."""
    path = str(tmp_path / "shop.db")
    monkeypatch.setattr(settings, "database_url", path)
    monkeypatch.setattr(settings, "strict_vin", False)
    monkeypatch.setattr(settings, "max_car_year", 2021)
    init_db()
    return path


@pytest.fixture
def conn(db_path):
    connection = get_connection()
    yield connection
    connection.close()


@pytest.fixture
def client(db_path):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def add_customer(conn):
    async def _add(lname="Doe", fname="Jane", phone="555-123-4567", address="1 Elm St"):
        return await CustomerService.register_customer(
            conn, CustomerCreate(fname=fname, lname=lname, phone=phone, address=address)
        )

    return _add


@pytest.fixture
def add_mechanic(conn):
    async def _add(fname="Sam", lname="Wrench", experience=10):
        return await MechanicService.register_mechanic(
            conn, MechanicCreate(fname=fname, lname=lname, experience=experience)
        )

    return _add


@pytest.fixture
def add_car(conn):
    async def _add(vin="1HGCM82633A12345", make="Honda", model="Accord", year=2003, owner_id=None):
        car, _ = await CarService.register_car(conn, CarCreate(vin=vin, make=make, model=model, year=year))
        if owner_id is not None:
            await CustomerService.add_car_owner(conn, owner_id, car.vin)
        return car

    return _add


@pytest.fixture
def open_request(conn):
    async def _open(customer_id, vin, odometer=12000, complaint="brake noise"):
        return await IntakeService.open_request(
            conn,
            ServiceRequestCreate(customer_id=customer_id, car_vin=vin, odometer=odometer, complaint=complaint),
        )

    return _open


@pytest.fixture
def count_rows(conn):
    def _count(table):
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    return _count
