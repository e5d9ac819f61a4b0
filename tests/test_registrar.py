import pytest

from mechanic_shop_api.app.core.exceptions import NotFound, PersistenceFailure, ValidationError
from mechanic_shop_api.app.schemas.car import CarCreate
from mechanic_shop_api.app.schemas.customer import CustomerCreate
from mechanic_shop_api.app.schemas.mechanic import MechanicCreate
from mechanic_shop_api.app.services.car_service import CarService
from mechanic_shop_api.app.services.customer_service import CustomerService
from mechanic_shop_api.app.services.mechanic_service import MechanicService


async def test_register_customer_assigns_first_id(conn):
    customer = await CustomerService.register_customer(
        conn, CustomerCreate(fname="Jane", lname="Doe", phone="555-123-4567", address="1 Elm St")
    )
    assert customer.id == 1
    stored = await CustomerService.get_customer(conn, 1)
    assert stored == customer


async def test_register_customer_validation_writes_nothing(conn, count_rows):
    with pytest.raises(ValidationError) as exc_info:
        await CustomerService.register_customer(
            conn, CustomerCreate(fname="Jane", lname="Doe", phone="5551234567", address="1 Elm St")
        )
    assert exc_info.value.field == "phone"
    assert count_rows("Customer") == 0


async def test_list_customers_by_last_name(add_customer, conn):
    await add_customer(lname="Doe", fname="Jane")
    await add_customer(lname="Roe", fname="Rick")
    await add_customer(lname="Doe", fname="John")
    does = await CustomerService.list_customers(conn, last_name="Doe")
    assert [(c.id, c.fname) for c in does] == [(1, "Jane"), (3, "John")]
    assert len(await CustomerService.list_customers(conn)) == 3


async def test_get_missing_customer(conn):
    with pytest.raises(NotFound) as exc_info:
        await CustomerService.get_customer(conn, 7)
    assert exc_info.value.entity_class == "Customer"
    assert exc_info.value.key == 7


async def test_register_mechanic(conn):
    first = await MechanicService.register_mechanic(conn, MechanicCreate(fname="Sam", lname="Wrench", experience=12))
    second = await MechanicService.register_mechanic(conn, MechanicCreate(fname="Ana", lname="Bolt", experience=3))
    assert (first.id, second.id) == (1, 2)
    assert [m.id for m in await MechanicService.list_mechanics(conn)] == [1, 2]


async def test_register_mechanic_rejects_experience(conn, count_rows):
    with pytest.raises(ValidationError) as exc_info:
        await MechanicService.register_mechanic(conn, MechanicCreate(fname="Sam", lname="Wrench", experience=100))
    assert exc_info.value.field == "experience"
    assert count_rows("Mechanic") == 0


async def test_register_car_is_idempotent(conn, count_rows):
    data = CarCreate(vin="1HGCM82633A12345", make="Honda", model="Accord", year=2003)
    car, created = await CarService.register_car(conn, data)
    assert created is True
    again, created_again = await CarService.register_car(
        conn, CarCreate(vin="1hgcm82633a12345", make="Other", model="Name", year=1999)
    )
    assert created_again is False
    assert again == car
    assert count_rows("Car") == 1


async def test_register_car_rejects_future_year(conn, count_rows):
    with pytest.raises(ValidationError) as exc_info:
        await CarService.register_car(conn, CarCreate(vin="1HGCM82633A12345", make="Honda", model="Accord", year=2050))
    assert exc_info.value.field == "year"
    assert count_rows("Car") == 0


async def test_get_missing_car(conn):
    with pytest.raises(NotFound):
        await CarService.get_car(conn, "ABCDEF1234567890")


async def test_add_car_owner(add_customer, add_car, conn, count_rows):
    customer = await add_customer()
    car = await add_car()
    await CustomerService.add_car_owner(conn, customer.id, car.vin)
    await CustomerService.add_car_owner(conn, customer.id, car.vin)
    assert count_rows("Owns") == 1
    assert await CustomerService.list_customer_cars(conn, customer.id) == [car]


async def test_add_car_owner_requires_registered_car(add_customer, conn, count_rows):
    customer = await add_customer()
    with pytest.raises(NotFound) as exc_info:
        await CustomerService.add_car_owner(conn, customer.id, "ABCDEF1234567890")
    assert exc_info.value.entity_class == "Car"
    assert count_rows("Owns") == 0


@pytest.mark.parametrize("key", [2**63, 99999999999999999999, -(2**63) - 1])
async def test_out_of_range_keys_are_not_found(conn, key):
    with pytest.raises(NotFound) as exc_info:
        await CustomerService.get_customer(conn, key)
    assert (exc_info.value.entity_class, exc_info.value.key) == ("Customer", key)
    with pytest.raises(NotFound):
        await CustomerService.list_customer_cars(conn, key)
    with pytest.raises(NotFound):
        await MechanicService.get_mechanic(conn, key)


async def test_add_car_owner_with_out_of_range_customer(add_car, conn, count_rows):
    car = await add_car()
    with pytest.raises(NotFound) as exc_info:
        await CustomerService.add_car_owner(conn, 2**63, car.vin)
    assert exc_info.value.entity_class == "Customer"
    assert count_rows("Owns") == 0


async def test_lookups_report_store_errors(conn):
    conn.execute("DROP TABLE Owns")
    conn.execute("DROP TABLE Customer")
    with pytest.raises(PersistenceFailure):
        await CustomerService.list_customers(conn)
    with pytest.raises(PersistenceFailure):
        await CustomerService.get_customer(conn, 1)

    conn.execute("DROP TABLE Mechanic")
    with pytest.raises(PersistenceFailure):
        await MechanicService.list_mechanics(conn)
    with pytest.raises(PersistenceFailure):
        await MechanicService.get_mechanic(conn, 1)
