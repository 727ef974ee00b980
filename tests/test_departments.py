import pytest
from sqlalchemy.exc import IntegrityError

from civic_reporter.database import models
from civic_reporter.departments import is_valid_department, list_departments


@pytest.mark.parametrize("name", ["MCD", "PWD", "Traffic", "Water Supply", "Electricity"])
def test_known_departments_are_valid(name):
    assert is_valid_department(name)


@pytest.mark.parametrize(
    "name",
    ["mcd", "pwd", "Water supply", " PWD", "Traffic ", "", "Police", None, 42],
)
def test_anything_else_is_invalid(name):
    assert not is_valid_department(name)


def test_list_departments_is_stable_and_a_copy():
    departments = list_departments()
    assert departments == ["MCD", "PWD", "Traffic", "Water Supply", "Electricity"]

    departments.append("Police")
    assert list_departments() == ["MCD", "PWD", "Traffic", "Water Supply", "Electricity"]


async def test_departments_endpoint(client):
    response = await client.get("/api/v1/departments")

    assert response.status_code == 200
    assert response.json() == {
        "departments": ["MCD", "PWD", "Traffic", "Water Supply", "Electricity"]
    }


async def test_responses_carry_process_time(client):
    response = await client.get("/api/v1/departments")

    assert float(response.headers["X-Process-Time"]) >= 0


async def test_department_table_accepts_known_names(db):
    db.add(models.Department(name="Traffic", access_code="TRF00001"))
    await db.commit()


@pytest.mark.parametrize(
    "name, access_code",
    [("Police", "POL00001"), ("PWD", "SHORT")],
)
async def test_department_table_enforces_constraints(db, name, access_code):
    db.add(models.Department(name=name, access_code=access_code))

    with pytest.raises(IntegrityError):
        await db.commit()
