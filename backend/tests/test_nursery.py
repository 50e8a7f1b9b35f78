"""Tests for locations, batches, beds and QR tags."""

import base64

import pytest
from httpx import AsyncClient

from smartseed.models import Bed, BedTask, Location, User


@pytest.mark.api
@pytest.mark.asyncio
class TestLocations:

    async def test_create_and_list(self, client: AsyncClient):
        response = await client.post(
            "/api/locations", json={"location_name": "Greenhouse B", "description": "Shade house"},
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Location created successfully"

        listed = (await client.get("/api/locations")).json()["locations"]
        assert [loc["location_name"] for loc in listed] == ["Greenhouse B"]

    async def test_duplicate_name_is_rejected(self, client: AsyncClient, location: Location):
        response = await client.post("/api/locations", json={"location_name": "Greenhouse A"})

        assert response.status_code == 400
        assert response.json()["error"] == "Location name already exists"

    async def test_missing_name_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/locations", json={"description": "no name"})
        assert response.status_code == 400


@pytest.mark.api
@pytest.mark.asyncio
class TestBatches:

    async def test_create_batch_generates_code(self, client: AsyncClient, field_worker: User):
        response = await client.post(
            "/api/batches",
            json={
                "source_location": "Mt. Banahaw",
                "wildlings_count": 120,
                "person_in_charge": field_worker.id,
            },
        )

        assert response.status_code == 201
        batch = response.json()["batch"]
        assert batch["batch_code"].startswith("BATCH-")
        assert batch["batch_code"].endswith("-001")
        assert batch["status"] == "received"

    async def test_zero_wildlings_is_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/batches", json={"source_location": "Mt. Banahaw", "wildlings_count": 0},
        )
        assert response.status_code == 400

    async def test_list_batches(self, client: AsyncClient, batch):
        response = await client.get("/api/batches")

        assert response.status_code == 200
        assert [b["batch_code"] for b in response.json()["batches"]] == [batch.batch_code]


@pytest.mark.api
@pytest.mark.asyncio
class TestBeds:

    async def test_create_bed_generates_qr_code(self, client: AsyncClient, location: Location):
        response = await client.post(
            "/api/beds",
            json={
                "bed_name": "C1",
                "location_id": location.id,
                "species_category": "Fruit Tree",
                "capacity": 80,
            },
        )

        assert response.status_code == 201
        bed = response.json()["bed"]
        assert bed["qr_code"].startswith("BED-")
        assert bed["location_name"] == "Greenhouse A"
        assert bed["current_occupancy"] == 0
        assert bed["occupancy_percentage"] == 0.0

    async def test_invalid_category_is_rejected(self, client: AsyncClient, location: Location):
        response = await client.post(
            "/api/beds",
            json={"bed_name": "C1", "location_id": location.id, "species_category": "Vegetable"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid species category"

    async def test_duplicate_name_in_location_is_rejected(
        self, client: AsyncClient, bed: Bed, location: Location,
    ):
        response = await client.post(
            "/api/beds",
            json={"bed_name": "A1", "location_id": location.id, "species_category": "Forestry"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "A bed with this name already exists in this location"

    async def test_unknown_location_is_404(self, client: AsyncClient):
        response = await client.post(
            "/api/beds",
            json={"bed_name": "C1", "location_id": "missing", "species_category": "Forestry"},
        )
        assert response.status_code == 404

    async def test_list_beds_with_completion_flag(
        self,
        client: AsyncClient,
        bed: Bed,
        default_tasks: list[BedTask],
        field_worker: User,
    ):
        before = (await client.get("/api/beds")).json()["beds"]
        assert before[0]["tasks_completed_today"] is False
        assert before[0]["occupancy_percentage"] == 75.0
        assert before[0]["person_in_charge_name"] == "Juan Dela Cruz"

        for task in default_tasks:
            await client.post(
                "/api/tasks/complete",
                json={"bed_id": bed.id, "task_id": task.id, "completed_by": field_worker.id},
            )

        after = (await client.get("/api/beds")).json()["beds"]
        assert after[0]["tasks_completed_today"] is True

    async def test_filter_by_assignee_and_qr(
        self, client: AsyncClient, bed: Bed, location: Location, field_worker: User,
    ):
        await client.post(
            "/api/beds",
            json={"bed_name": "Other", "location_id": location.id, "species_category": "Forestry"},
        )

        assigned = (await client.get("/api/beds", params={"assignedTo": field_worker.id})).json()
        assert [b["bed_name"] for b in assigned["beds"]] == ["A1"]

        by_qr = (await client.get("/api/beds", params={"qrCode": "BED-A1-QR2024"})).json()
        assert [b["id"] for b in by_qr["beds"]] == [bed.id]

    async def test_bed_qr_svg(self, client: AsyncClient, bed: Bed):
        response = await client.get(f"/api/beds/{bed.id}/qr")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert b"<svg" in response.content

    async def test_bed_qr_unknown_bed_is_404(self, client: AsyncClient):
        response = await client.get("/api/beds/missing/qr")
        assert response.status_code == 404


@pytest.mark.api
@pytest.mark.asyncio
class TestQRGenerate:

    async def test_generate_uses_forwarded_proto_and_host(self, client: AsyncClient):
        response = await client.post(
            "/api/qr/generate",
            json={"qrCode": "BED-A1-QR2024", "bedName": "A1"},
            headers={"x-forwarded-proto": "https", "host": "nursery.example.org"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["targetUrl"] == "https://nursery.example.org/task?qr=BED-A1-QR2024"
        assert data["qrCode"] == "BED-A1-QR2024"
        prefix = "data:image/png;base64,"
        assert data["qrCodeImage"].startswith(prefix)
        png = base64.b64decode(data["qrCodeImage"][len(prefix):])
        assert png.startswith(b"\x89PNG")

    async def test_defaults_to_http(self, client: AsyncClient):
        response = await client.post("/api/qr/generate", json={"qrCode": "BED-X"})
        assert response.json()["targetUrl"] == "http://test/task?qr=BED-X"

    async def test_missing_code_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/qr/generate", json={"bedName": "A1"})
        assert response.status_code == 400
