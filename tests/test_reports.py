import pytest

from mechanic_shop_api.app.core.exceptions import PersistenceFailure, ValidationError
from mechanic_shop_api.app.schemas.service_request import ClosedRequestCreate
from mechanic_shop_api.app.services.closing_service import ClosingService
from mechanic_shop_api.app.services.report_service import ReportService


async def _close(conn, rid, bill, mechanic_id=1):
    return await ClosingService.close_request(
        conn, rid, ClosedRequestCreate(mechanic_id=mechanic_id, comment="done", bill=bill)
    )


async def test_bills_below_threshold(conn, add_customer, add_car, add_mechanic, open_request):
    customer = await add_customer()
    car = await add_car(owner_id=customer.id)
    await add_mechanic()
    for bill in (150, 75, 99, 100):
        request = await open_request(customer.id, car.vin)
        await _close(conn, request.rid, bill)
    await open_request(customer.id, car.vin)

    report = await ReportService.bills_below(conn)
    assert [(row.rid, row.bill) for row in report.rows] == [(2, 75), (3, 99)]
    assert report.count == 2
    assert (await ReportService.bills_below(conn, threshold=1000)).count == 4


async def test_customers_with_many_cars(conn, add_customer, add_car):
    busy = await add_customer(lname="Fleet")
    quiet = await add_customer(lname="Single")
    for n in range(3):
        await add_car(vin=f"FLEETX000000000{n}", owner_id=busy.id)
    await add_car(vin="SINGLE0000000000", owner_id=quiet.id)

    report = await ReportService.customers_with_many_cars(conn, min_cars=2)
    assert [(row.customer_id, row.car_count) for row in report.rows] == [(busy.id, 3)]
    assert (await ReportService.customers_with_many_cars(conn)).count == 0


async def test_old_low_mileage_cars_use_whole_history(conn, add_customer, add_car, add_mechanic, open_request):
    customer = await add_customer()
    await add_mechanic()
    old_closed = await add_car(vin="OLDAAA0000000001", year=1990, owner_id=customer.id)
    old_open = await add_car(vin="OLDBBB0000000002", year=1985, owner_id=customer.id)
    old_high = await add_car(vin="OLDCCC0000000003", year=1980, owner_id=customer.id)
    new_low = await add_car(vin="NEWAAA0000000004", year=2010, owner_id=customer.id)

    request = await open_request(customer.id, old_closed.vin, odometer=30000)
    await _close(conn, request.rid, 10)
    await open_request(customer.id, old_open.vin, odometer=40000)
    await open_request(customer.id, old_open.vin, odometer=45000)
    await open_request(customer.id, old_high.vin, odometer=90000)
    await open_request(customer.id, new_low.vin, odometer=100)

    report = await ReportService.old_low_mileage_cars(conn)
    assert [row.vin for row in report.rows] == [old_closed.vin, old_open.vin]
    assert report.count == 2


async def test_top_serviced_cars(conn, add_customer, add_car, add_mechanic, open_request):
    customer = await add_customer()
    await add_mechanic()
    busiest = await add_car(vin="CCCCCC0000000003", owner_id=customer.id)
    middle = await add_car(vin="BBBBBB0000000002", owner_id=customer.id)
    least = await add_car(vin="AAAAAA0000000001", owner_id=customer.id)
    for car, times in ((busiest, 5), (middle, 3), (least, 1)):
        for _ in range(times):
            await open_request(customer.id, car.vin)
    # Closed requests still count towards a car's history.
    await _close(conn, 1, 50)

    report = await ReportService.top_serviced_cars(conn, 2)
    assert [(row.vin, row.service_count) for row in report.rows] == [(busiest.vin, 5), (middle.vin, 3)]
    assert report.count == 2


async def test_top_serviced_cars_break_ties_by_vin(conn, add_customer, add_car, open_request):
    customer = await add_customer()
    later = await add_car(vin="ZZZZZZ0000000009", owner_id=customer.id)
    earlier = await add_car(vin="AAAAAA0000000001", owner_id=customer.id)
    for car in (later, earlier, later, earlier):
        await open_request(customer.id, car.vin)

    report = await ReportService.top_serviced_cars(conn, 1)
    assert [row.vin for row in report.rows] == [earlier.vin]


async def test_top_serviced_cars_requires_positive_k(conn):
    with pytest.raises(ValidationError) as exc_info:
        await ReportService.top_serviced_cars(conn, 0)
    assert exc_info.value.field == "k"


async def test_customers_by_total_bill(conn, add_customer, add_car, add_mechanic, open_request):
    await add_mechanic()
    jane = await add_customer(lname="Doe")
    rick = await add_customer(lname="Roe", fname="Rick")
    ann = await add_customer(lname="Poe", fname="Ann")
    car = await add_car()
    for customer, bill in ((jane, 100), (rick, 300), (jane, 150), (ann, 250)):
        request = await open_request(customer.id, car.vin)
        await _close(conn, request.rid, bill)
    await open_request(ann.id, car.vin)

    report = await ReportService.customers_by_total_bill(conn)
    assert [(row.customer_id, row.total) for row in report.rows] == [
        (rick.id, 300),
        (jane.id, 250),
        (ann.id, 250),
    ]


@pytest.mark.parametrize(
    "call, field",
    [
        (lambda conn: ReportService.bills_below(conn, threshold=2**63), "threshold"),
        (lambda conn: ReportService.customers_with_many_cars(conn, min_cars=-(2**63) - 1), "min_cars"),
        (lambda conn: ReportService.old_low_mileage_cars(conn, odometer_below=2**64), "odometer_below"),
        (lambda conn: ReportService.top_serviced_cars(conn, 2**63), "k"),
    ],
)
async def test_report_parameters_must_fit_integer_column(conn, call, field):
    with pytest.raises(ValidationError) as exc_info:
        await call(conn)
    assert exc_info.value.field == field


async def test_reports_surface_store_errors(conn):
    conn.execute("DROP TABLE Closed_Request")
    with pytest.raises(PersistenceFailure):
        await ReportService.bills_below(conn)
    with pytest.raises(PersistenceFailure):
        await ReportService.customers_by_total_bill(conn)
    with pytest.raises(PersistenceFailure):
        await ReportService.top_serviced_cars(conn, 3)
