"""
Tests for the vaccination schedule and toggle endpoints.
"""
import uuid

import pytest

from app.db.models import VaccinationRecord
from app.db.vaccine_catalog import catalog_rows
from app.services import vaccination_service


def _record_id(db, child, code: str):
    for record in vaccination_service.fetch_records(db, child.id):
        if record.schedule.vaccine_code == code:
            return record.id
    raise AssertionError(code)


@pytest.mark.asyncio
async def test_get_schedule(parent_client, child):
    response = await parent_client.get(f"/children/{child.id}/vaccinations")
    assert response.status_code == 200, response.text
    body = response.json()

    summary = body["summary"]
    assert summary["total"] == len(catalog_rows())
    assert summary["completed"] + summary["due"] + summary["upcoming"] == summary["total"]
    assert body["records"][0]["vaccine_code"] == "BCG"
    assert body["records"][0]["age_label"] == "At birth"
    assert body["records"][0]["status"] == "due"

    labels = [g["age_label"] for g in body["groups"]]
    assert labels[:4] == ["At birth", "6 weeks", "10 weeks", "14 weeks"]
    assert len(labels) == len(set(labels))


@pytest.mark.asyncio
async def test_toggle_returns_recomputed_schedule(parent_client, db, child):
    record_id = _record_id(db, child, "BCG")
    before = (await parent_client.get(f"/children/{child.id}/vaccinations")).json()

    response = await parent_client.post(
        f"/vaccinations/{record_id}/toggle",
        json={"current_completion_flag": False},
    )
    assert response.status_code == 200, response.text
    after = response.json()

    assert after["summary"]["completed"] == before["summary"]["completed"] + 1
    assert after["summary"]["due"] == before["summary"]["due"] - 1
    bcg = next(r for r in after["records"] if r["id"] == str(record_id))
    assert bcg["is_completed"] is True
    assert bcg["status"] == "completed"
    assert bcg["administered_date"] == after["evaluated_on"]

    reverted = await parent_client.post(
        f"/vaccinations/{record_id}/toggle",
        json={"current_completion_flag": True},
    )
    bcg = next(r for r in reverted.json()["records"] if r["id"] == str(record_id))
    assert bcg["is_completed"] is False
    assert bcg["administered_date"] is None
    assert reverted.json()["summary"] == before["summary"]


@pytest.mark.asyncio
async def test_schedule_views(parent_client, db, child):
    record_id = _record_id(db, child, "OPV0")
    await parent_client.post(
        f"/vaccinations/{record_id}/toggle",
        json={"current_completion_flag": False},
    )

    completed = (await parent_client.get(
        f"/children/{child.id}/vaccinations", params={"view": "completed"}
    )).json()
    assert [r["vaccine_code"] for r in completed["records"]] == ["OPV0"]
    assert completed["summary"]["total"] == len(catalog_rows())

    due = (await parent_client.get(
        f"/children/{child.id}/vaccinations", params={"view": "due"}
    )).json()
    assert all(r["is_due"] for r in due["records"])
    assert len(due["records"]) == due["summary"]["due"]


@pytest.mark.asyncio
async def test_invalid_view_rejected(parent_client, child):
    response = await parent_client.get(
        f"/children/{child.id}/vaccinations", params={"view": "overdue"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_toggle_other_parents_record_is_not_found(client, db, child, other_parent_auth):
    record_id = _record_id(db, child, "BCG")
    response = await client.post(
        f"/vaccinations/{record_id}/toggle",
        json={"current_completion_flag": False},
        headers=other_parent_auth.headers,
    )
    assert response.status_code == 404

    db.expire_all()
    record = db.get(VaccinationRecord, record_id)
    assert record.is_completed is False


@pytest.mark.asyncio
async def test_toggle_unknown_record(parent_client):
    response = await parent_client.post(
        f"/vaccinations/{uuid.uuid4()}/toggle",
        json={"current_completion_flag": False},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_requires_flag(parent_client, db, child):
    record_id = _record_id(db, child, "BCG")
    response = await parent_client.post(f"/vaccinations/{record_id}/toggle", json={})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_catalog_endpoint(client, doctor_auth):
    response = await client.get("/vaccinations/catalog", headers=doctor_auth.headers)
    assert response.status_code == 200
    body = response.json()
    assert len(body) == len(catalog_rows())
    assert body[0]["age_label"] == "At birth"
    assert [e["sort_order"] for e in body] == sorted(e["sort_order"] for e in body)


@pytest.mark.asyncio
async def test_schedule_with_zone_directory_tz_falls_back(parent_client, child):
    response = await parent_client.get(
        f"/children/{child.id}/vaccinations", params={"tz": "America"}
    )
    assert response.status_code == 200, response.text
    assert response.json()["summary"]["total"] == len(catalog_rows())
