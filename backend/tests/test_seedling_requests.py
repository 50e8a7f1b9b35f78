"""Tests for seedling request intake and review."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.models import Beneficiary, RequestSpecies, SeedlingRequest
from smartseed.utils.numbering import utc_today


@pytest.mark.api
@pytest.mark.asyncio
class TestSubmitRequest:

    async def test_total_is_sum_of_species(self, client: AsyncClient, request_payload: dict):
        response = await client.post("/api/seedling-requests", json=request_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        req = data["request"]
        assert req["total_quantity"] == 150
        assert req["status"] == "pending"
        assert req["beneficiary_name"] == "Maria Santos"
        assert {s["species_name"]: s["quantity"] for s in req["species"]} == {
            "Narra": 100,
            "Mahogany": 50,
        }

    async def test_request_code_is_generated(self, client: AsyncClient, request_payload: dict):
        first = (await client.post("/api/seedling-requests", json=request_payload)).json()
        second = (await client.post("/api/seedling-requests", json=request_payload)).json()

        assert first["request"]["request_code"].startswith("REQ-")
        assert first["request"]["request_code"].endswith("-001")
        assert second["request"]["request_code"].endswith("-002")

    async def test_empty_species_gives_zero_total(self, client: AsyncClient, request_payload: dict):
        request_payload["species"] = []
        response = await client.post("/api/seedling-requests", json=request_payload)

        assert response.status_code == 201
        assert response.json()["request"]["total_quantity"] == 0
        assert response.json()["request"]["species"] == []

    async def test_null_species_is_treated_as_empty(self, client: AsyncClient, request_payload: dict):
        request_payload["species"] = None
        response = await client.post("/api/seedling-requests", json=request_payload)

        assert response.status_code == 201
        assert response.json()["request"]["total_quantity"] == 0
        assert response.json()["request"]["species"] == []

    async def test_taken_code_is_skipped(
        self, client: AsyncClient, db_session: AsyncSession, request_payload: dict,
    ):
        today = utc_today().strftime("%Y%m%d")
        beneficiary = Beneficiary(full_name="Imported")
        db_session.add(beneficiary)
        await db_session.flush()
        # The only code today is -002, so counting alone would hand out -002 again
        db_session.add(SeedlingRequest(
            request_code=f"REQ-{today}-002", beneficiary_id=beneficiary.id,
            planting_site_address="Old lot", hectarage=1.0,
        ))
        await db_session.commit()

        response = await client.post("/api/seedling-requests", json=request_payload)

        assert response.status_code == 201
        req = response.json()["request"]
        assert req["request_code"] == f"REQ-{today}-003"
        assert req["beneficiary_name"] == "Maria Santos"
        assert len(req["species"]) == 2
        assert await db_session.scalar(select(func.count(RequestSpecies.id))) == 2

    async def test_every_submission_creates_a_beneficiary(
        self, client: AsyncClient, db_session: AsyncSession, request_payload: dict,
    ):
        await client.post("/api/seedling-requests", json=request_payload)
        await client.post("/api/seedling-requests", json=request_payload)

        count = await db_session.scalar(select(func.count(Beneficiary.id)))
        assert count == 2

    async def test_missing_beneficiary_is_rejected(
        self, client: AsyncClient, db_session: AsyncSession, request_payload: dict,
    ):
        del request_payload["beneficiary"]
        response = await client.post("/api/seedling-requests", json=request_payload)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["code"] == "VALIDATION_ERROR"
        assert "beneficiary" in data["error"]
        assert await db_session.scalar(select(func.count(SeedlingRequest.id))) == 0

    async def test_missing_hectarage_is_rejected(self, client: AsyncClient, request_payload: dict):
        del request_payload["hectarage"]
        response = await client.post("/api/seedling-requests", json=request_payload)
        assert response.status_code == 400

    async def test_invalid_species_writes_nothing(
        self, client: AsyncClient, db_session: AsyncSession, request_payload: dict,
    ):
        request_payload["species"].append({"species_name": "Acacia"})
        response = await client.post("/api/seedling-requests", json=request_payload)

        assert response.status_code == 400
        assert await db_session.scalar(select(func.count(Beneficiary.id))) == 0
        assert await db_session.scalar(select(func.count(RequestSpecies.id))) == 0


@pytest.mark.api
@pytest.mark.asyncio
class TestReadRequests:

    async def test_list_newest_first(self, client: AsyncClient, request_payload: dict):
        first = (await client.post("/api/seedling-requests", json=request_payload)).json()["request"]
        request_payload["beneficiary"]["full_name"] = "Pedro Reyes"
        second = (await client.post("/api/seedling-requests", json=request_payload)).json()["request"]

        response = await client.get("/api/seedling-requests")

        assert response.status_code == 200
        ids = [r["id"] for r in response.json()["requests"]]
        assert ids == [second["id"], first["id"]]

    async def test_get_single_request(self, client: AsyncClient, pending_request: dict):
        response = await client.get(f"/api/seedling-requests/{pending_request['id']}")

        assert response.status_code == 200
        assert response.json()["request"]["request_code"] == pending_request["request_code"]
        assert len(response.json()["request"]["species"]) == 2

    async def test_get_unknown_request_is_404(self, client: AsyncClient):
        response = await client.get("/api/seedling-requests/does-not-exist")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.api
@pytest.mark.asyncio
class TestReviewRequest:

    async def test_approve_sets_status_and_release_date(
        self, client: AsyncClient, pending_request: dict,
    ):
        response = await client.patch(
            f"/api/seedling-requests/{pending_request['id']}",
            json={
                "action": "approve",
                "review_notes": "Site verified",
                "scheduled_release_date": "2024-06-01",
            },
        )

        assert response.status_code == 200
        req = response.json()["request"]
        assert req["status"] == "approved"
        assert req["review_notes"] == "Site verified"
        assert req["scheduled_release_date"] == "2024-06-01"

    async def test_reject_keeps_release_date_unset(
        self, client: AsyncClient, pending_request: dict,
    ):
        response = await client.patch(
            f"/api/seedling-requests/{pending_request['id']}",
            json={
                "action": "reject",
                "review_notes": "Outside coverage",
                "scheduled_release_date": "2024-06-01",
            },
        )

        assert response.status_code == 200
        req = response.json()["request"]
        assert req["status"] == "rejected"
        assert req["review_notes"] == "Outside coverage"
        assert req["scheduled_release_date"] is None

    async def test_unknown_action_is_rejected(self, client: AsyncClient, pending_request: dict):
        response = await client.patch(
            f"/api/seedling-requests/{pending_request['id']}",
            json={"action": "archive"},
        )

        assert response.status_code == 400
        detail = await client.get(f"/api/seedling-requests/{pending_request['id']}")
        assert detail.json()["request"]["status"] == "pending"

    async def test_missing_action_is_rejected(self, client: AsyncClient, pending_request: dict):
        response = await client.patch(
            f"/api/seedling-requests/{pending_request['id']}",
            json={"review_notes": "no decision"},
        )
        assert response.status_code == 400

    async def test_review_unknown_request_is_404(self, client: AsyncClient):
        response = await client.patch(
            "/api/seedling-requests/missing",
            json={"action": "approve"},
        )
        assert response.status_code == 404

    async def test_rereview_overwrites_previous_decision(
        self, client: AsyncClient, approved_request: dict,
    ):
        response = await client.patch(
            f"/api/seedling-requests/{approved_request['id']}",
            json={"action": "reject", "review_notes": "Changed mind"},
        )

        assert response.status_code == 200
        assert response.json()["request"]["status"] == "rejected"
