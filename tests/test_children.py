"""
Tests for child registration, health issue normalization and the children API.
"""
from datetime import date

import pytest

from app.db.vaccine_catalog import catalog_rows
from app.services import child_service
from app.services.child_service import InvalidChildError, normalize_health_issues
from app.utils.dates import describe_age, months_between


# =============================================================================
# Service
# =============================================================================

def test_normalize_health_issues():
    assert normalize_health_issues(None) is None
    assert normalize_health_issues([]) is None
    assert normalize_health_issues(["None"]) is None
    assert normalize_health_issues(["  ", "none"]) is None
    assert normalize_health_issues(
        [" Jaundice ", "jaundice", "Low birth weight", "None", "Custom issue"]
    ) == ["Jaundice", "Low birth weight", "Custom issue"]


def test_create_child_rejects_future_birth_date(db, parent_user):
    with pytest.raises(InvalidChildError):
        child_service.create_child(
            db=db,
            parent_id=parent_user.id,
            name="Future",
            date_of_birth=date(2025, 5, 11),
            gender="Female",
            today=date(2025, 5, 10),
        )


def test_create_child_rejects_blank_name(db, parent_user):
    with pytest.raises(InvalidChildError):
        child_service.create_child(
            db=db,
            parent_id=parent_user.id,
            name="   ",
            date_of_birth=date(2025, 1, 1),
            gender="Female",
            today=date(2025, 5, 10),
        )


def test_create_child_born_today(db, parent_user):
    created = child_service.create_child(
        db=db,
        parent_id=parent_user.id,
        name="Newborn",
        date_of_birth=date(2025, 5, 10),
        gender="Other",
        today=date(2025, 5, 10),
        place_of_birth="  ",
    )
    db.commit()
    assert created.place_of_birth is None
    assert created.birth_health_issues is None
    assert len(created.vaccination_records) == len(catalog_rows())


def test_children_scoped_to_parent(db, parent_user, other_parent, child):
    assert [c.id for c in child_service.list_children(db, parent_user.id)] == [child.id]
    assert child_service.list_children(db, other_parent.id) == []
    assert child_service.get_child(db, other_parent.id, child.id) is None
    with pytest.raises(child_service.ChildNotFoundError):
        child_service.require_child(db, other_parent.id, child.id)


@pytest.mark.parametrize(
    "dob,today,expected",
    [
        (date(2025, 1, 1), date(2025, 1, 20), "0 months old"),
        (date(2024, 8, 15), date(2025, 5, 10), "9 months old"),
        (date(2024, 5, 10), date(2025, 5, 10), "1 years old"),
        (date(2023, 2, 1), date(2025, 5, 10), "2 years 3 months old"),
    ],
)
def test_describe_age(dob, today, expected):
    assert describe_age(dob, today) == expected


def test_months_between_ignores_day_of_month():
    assert months_between(date(2025, 1, 31), date(2025, 2, 1)) == 1


# =============================================================================
# API
# =============================================================================

@pytest.mark.asyncio
async def test_create_and_list_children(parent_client):
    response = await parent_client.post(
        "/children",
        json={
            "name": "Meera",
            "date_of_birth": "2024-03-15",
            "gender": "Female",
            "place_of_birth": "Pune",
            "birth_health_issues": ["Premature birth", "None"],
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["name"] == "Meera"
    assert body["birth_health_issues"] == ["Premature birth"]
    assert body["age_description"].endswith("old")

    listed = await parent_client.get("/children")
    assert listed.status_code == 200
    assert [c["id"] for c in listed.json()] == [body["id"]]

    schedule = await parent_client.get(f"/children/{body['id']}/vaccinations")
    assert schedule.status_code == 200
    assert schedule.json()["summary"]["total"] == len(catalog_rows())


@pytest.mark.asyncio
async def test_create_child_future_dob_rejected(parent_client):
    response = await parent_client.post(
        "/children",
        json={"name": "Later", "date_of_birth": "2999-01-01", "gender": "Male"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_child_invalid_gender_rejected(parent_client):
    response = await parent_client.post(
        "/children",
        json={"name": "X", "date_of_birth": "2024-01-01", "gender": "Unknown"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_other_parent_cannot_read_child(client, child, other_parent_auth):
    response = await client.get(f"/children/{child.id}", headers=other_parent_auth.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_doctor_cannot_use_children_api(client, doctor_auth):
    response = await client.get("/children", headers=doctor_auth.headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_health_issue_options(client):
    response = await client.get("/children/health-issues")
    assert response.status_code == 200
    assert "Jaundice" in response.json()["options"]
