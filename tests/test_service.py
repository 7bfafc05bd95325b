import pytest

from employee_api.employees.models import CreateEmployeeRequest, Employee
from employee_api.employees.service import EmployeeService
from employee_api.exceptions import (
    ConflictError,
    NotFoundError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from employee_api.services.errors import CircuitOpenError, UpstreamApplicationError
from tests.conftest import Upstream, employee_payload
from tests.fakes import FakeEmployeeClient

BILL = Employee(
    id="id-123",
    name="Bill Bob",
    salary=89750,
    age=24,
    title="Documentation Engineer",
    email="billBob@company.com",
)

REQUEST = CreateEmployeeRequest(name="Jane Roe", salary=5000, age=30, title="Analyst")


@pytest.mark.asyncio
async def test_search_returns_matches():
    client = FakeEmployeeClient(
        employees=[
            Employee(id="1", name="Landon Barrows", salary=100),
            Employee(id="2", name="Bob", salary=120),
        ]
    )
    service = EmployeeService(client)

    result = await service.search_by_name("Landon")

    assert [e.name for e in result] == ["Landon Barrows"]


@pytest.mark.asyncio
async def test_highest_salary():
    client = FakeEmployeeClient(
        employees=[
            Employee(id="1", name="A", salary=100),
            Employee(id="2", name="B", salary=320800),
        ]
    )

    assert await EmployeeService(client).get_highest_salary() == 320800


@pytest.mark.asyncio
async def test_top_ten_names():
    client = FakeEmployeeClient(
        employees=[
            Employee(id="1", name="X", salary=10),
            Employee(id="2", name="Y", salary=30),
            Employee(id="3", name="Z", salary=20),
        ]
    )

    assert await EmployeeService(client).get_top_ten_names() == ["Y", "Z", "X"]


@pytest.mark.asyncio
async def test_reads_degrade_to_empty_results():
    service = EmployeeService(FakeEmployeeClient())

    assert await service.get_all_employees() == []
    assert await service.search_by_name("any") == []
    assert await service.get_highest_salary() == 0
    assert await service.get_top_ten_names() == []
    assert await service.get_by_id("missing") is None


@pytest.mark.asyncio
async def test_delete_by_id_resolves_name_then_deletes():
    client = FakeEmployeeClient(by_id={"id-123": BILL}, delete_result=True)
    service = EmployeeService(client)

    assert await service.delete_by_id("id-123") == "Bill Bob"
    assert client.calls == [("get_by_id", "id-123"), ("delete_by_name", "Bill Bob")]


@pytest.mark.asyncio
async def test_delete_by_id_not_found():
    client = FakeEmployeeClient()
    service = EmployeeService(client)

    with pytest.raises(NotFoundError) as exc_info:
        await service.delete_by_id("zzz")

    assert exc_info.value.employee_id == "zzz"
    assert exc_info.value.status_code == 404
    assert client.calls == [("get_by_id", "zzz")]


@pytest.mark.asyncio
async def test_delete_by_id_nameless_employee_is_not_found():
    client = FakeEmployeeClient(by_id={"id-1": Employee(id="id-1")})

    with pytest.raises(NotFoundError):
        await EmployeeService(client).delete_by_id("id-1")


@pytest.mark.asyncio
async def test_delete_by_id_conflict_when_upstream_refuses():
    client = FakeEmployeeClient(by_id={"id-123": BILL}, delete_result=False)

    with pytest.raises(ConflictError) as exc_info:
        await EmployeeService(client).delete_by_id("id-123")

    assert exc_info.value.name == "Bill Bob"
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_create_returns_upstream_employee():
    created = Employee(id="new-1", name="Jane Roe", salary=5000)
    client = FakeEmployeeClient(create_result=created)

    assert await EmployeeService(client).create(REQUEST) == created


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        CircuitOpenError("employee_api", 10.0),
        UpstreamApplicationError("employee_api", 500, "boom"),
    ],
)
async def test_create_failure_is_upstream_unavailable(error):
    client = FakeEmployeeClient(create_result=error)

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await EmployeeService(client).create(REQUEST)

    assert exc_info.value.status_code == 503
    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 409, 422])
async def test_create_upstream_rejection_is_not_an_outage(status):
    client = FakeEmployeeClient(
        create_result=UpstreamApplicationError("employee_api", status, "invalid")
    )

    with pytest.raises(UpstreamRejectedError) as exc_info:
        await EmployeeService(client).create(REQUEST)

    assert exc_info.value.status_code == 422
    assert exc_info.value.upstream_status == status


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [408, 429, 503])
async def test_create_transient_upstream_status_is_unavailable(status):
    client = FakeEmployeeClient(
        create_result=UpstreamApplicationError("employee_api", status, "busy")
    )

    with pytest.raises(UpstreamUnavailableError):
        await EmployeeService(client).create(REQUEST)


# Service over the real client and a scripted upstream


@pytest.mark.asyncio
async def test_delete_by_id_upstream_404_is_not_found(make_client):
    upstream = Upstream(404)
    service = EmployeeService(make_client(upstream))

    with pytest.raises(NotFoundError):
        await service.delete_by_id("zzz")

    assert [r.method for r in upstream.requests] == ["GET"]


@pytest.mark.asyncio
async def test_delete_by_id_upstream_refusal_is_conflict(make_client):
    upstream = Upstream(
        {"data": employee_payload("id-123", "Bill Bob", 89750)},
        {"data": False},
    )
    service = EmployeeService(make_client(upstream))

    with pytest.raises(ConflictError) as exc_info:
        await service.delete_by_id("id-123")

    assert exc_info.value.name == "Bill Bob"
    assert [r.method for r in upstream.requests] == ["GET", "DELETE"]


@pytest.mark.asyncio
async def test_delete_by_id_end_to_end(make_client):
    upstream = Upstream(
        {"data": employee_payload("id-123", "Bill Bob", 89750)},
        {"data": True},
    )
    service = EmployeeService(make_client(upstream))

    assert await service.delete_by_id("id-123") == "Bill Bob"
    assert upstream.requests[1].url.path == "/api/v1/employee/Bill Bob"
