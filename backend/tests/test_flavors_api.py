"""
Acme Ice Cream API: Flavor Endpoint Tests
==========================================

What:  End-to-end tests of /api/flavors and / through the ASGI app.
How:   Each test gets a freshly reset and seeded SQLite database via the
       real lifespan, and talks to the app with an HTTPX AsyncClient.
"""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from icecream_api.exceptions import DatabaseError

SEEDED = ["Coconut", "Mint", "Honeyberry", "Choco"]


async def _list(client):
    response = await client.get("/api/flavors")
    assert response.status_code == 200
    return response.json()


class TestListFlavors:

    @pytest.mark.asyncio
    async def test_returns_seeded_flavors_in_id_order(self, test_client):
        flavors = await _list(test_client)

        assert [f["name"] for f in flavors] == SEEDED
        assert [f["id"] for f in flavors] == [1, 2, 3, 4]
        assert all(f["updated_at"] for f in flavors)

    @pytest.mark.asyncio
    async def test_empty_table_returns_empty_array(self, test_app, test_client):
        async with test_app.state.engine.begin() as conn:
            await conn.execute(text("DELETE FROM flavors"))

        assert await _list(test_client) == []

    @pytest.mark.asyncio
    async def test_database_failure_returns_generic_500(self, test_app, test_client):
        async with test_app.state.engine.begin() as conn:
            await conn.execute(text("DROP TABLE flavors"))

        response = await test_client.get("/api/flavors")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}


class TestCreateFlavor:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_new_row(self, test_client):
        response = await test_client.post("/api/flavors", json={"name": "Vanilla"})

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Vanilla"
        assert body["id"] == 5
        assert "updated_at" in body

        names = [f["name"] for f in await _list(test_client)]
        assert names.count("Vanilla") == 1
        assert len(names) == 5

    @pytest.mark.asyncio
    async def test_created_ids_are_unique(self, test_client):
        first = (await test_client.post("/api/flavors", json={"name": "Pistachio"})).json()
        second = (await test_client.post("/api/flavors", json={"name": "Pistachio"})).json()

        assert first["id"] != second["id"]
        ids = [f["id"] for f in await _list(test_client)]
        assert len(ids) == len(set(ids))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": None}])
    async def test_missing_name_returns_400_and_leaves_table(self, test_client, body):
        response = await test_client.post("/api/flavors", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}
        assert [f["name"] for f in await _list(test_client)] == SEEDED

    @pytest.mark.asyncio
    async def test_no_body_returns_400(self, test_client):
        response = await test_client.post("/api/flavors")

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}

    @pytest.mark.asyncio
    async def test_non_string_name_is_rejected(self, test_client):
        response = await test_client.post("/api/flavors", json={"name": 42})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}

    @pytest.mark.asyncio
    async def test_service_database_error_returns_500(self, test_client):
        with patch(
            "icecream_api.routes.flavors.flavor_service.create_flavor",
            new=AsyncMock(side_effect=DatabaseError(context={"operation": "create"})),
        ):
            response = await test_client.post("/api/flavors", json={"name": "Vanilla"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}


class TestUpdateFlavor:

    @pytest.mark.asyncio
    async def test_rename_changes_only_that_row(self, test_client):
        before = await _list(test_client)

        response = await test_client.put("/api/flavors/1", json={"name": "Toasted Coconut"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 1
        assert body["name"] == "Toasted Coconut"

        after = await _list(test_client)
        assert after[0]["name"] == "Toasted Coconut"
        assert after[1:] == before[1:]

    @pytest.mark.asyncio
    async def test_rename_keeps_updated_at(self, test_client):
        before = (await _list(test_client))[0]

        body = (await test_client.put("/api/flavors/1", json={"name": "Lime"})).json()

        assert body["updated_at"] == before["updated_at"]

    @pytest.mark.asyncio
    async def test_unknown_id_returns_404_and_leaves_table(self, test_client):
        response = await test_client.put("/api/flavors/999", json={"name": "X"})

        assert response.status_code == 404
        assert response.json() == {"error": "Flavor not found"}
        assert [f["name"] for f in await _list(test_client)] == SEEDED

    @pytest.mark.asyncio
    async def test_missing_name_returns_400(self, test_client):
        response = await test_client.put("/api/flavors/1", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}
        assert [f["name"] for f in await _list(test_client)] == SEEDED

    @pytest.mark.asyncio
    async def test_missing_name_checked_before_lookup(self, test_client):
        response = await test_client.put("/api/flavors/999", json={"name": ""})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_integer_id_returns_400(self, test_client):
        response = await test_client.put("/api/flavors/abc", json={"name": "X"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}


class TestDeleteFlavor:

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, test_client):
        response = await test_client.delete("/api/flavors/2")

        assert response.status_code == 204
        assert response.content == b""
        assert [f["name"] for f in await _list(test_client)] == ["Coconut", "Honeyberry", "Choco"]

        again = await test_client.delete("/api/flavors/2")
        assert again.status_code == 404
        assert again.json() == {"error": "Flavor not found"}

    @pytest.mark.asyncio
    async def test_unknown_id_returns_404_and_leaves_table(self, test_client):
        response = await test_client.delete("/api/flavors/999")

        assert response.status_code == 404
        assert [f["name"] for f in await _list(test_client)] == SEEDED


class TestLandingAndMiddleware:

    @pytest.mark.asyncio
    async def test_root_serves_html(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Acme Ice Cream" in response.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/flavors", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/api/flavors")

        assert len(response.headers["X-Request-ID"]) == 8


class TestNonJsonBodies:

    @pytest.mark.asyncio
    async def test_form_body_on_create_counts_as_missing_name(self, test_client):
        response = await test_client.post("/api/flavors", data={"name": "Vanilla"})

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}
        assert [f["name"] for f in await _list(test_client)] == SEEDED

    @pytest.mark.asyncio
    async def test_plain_text_body_on_update_counts_as_missing_name(self, test_client):
        response = await test_client.put(
            "/api/flavors/1",
            content=b"Toasted Coconut",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}
        assert [f["name"] for f in await _list(test_client)] == SEEDED

    @pytest.mark.asyncio
    async def test_invalid_json_is_still_invalid_request(self, test_client):
        response = await test_client.post(
            "/api/flavors",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}


class TestFlavorIdRange:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flavor_id", ["99999999999999999999", "2147483648", "-2147483649"])
    async def test_update_out_of_range_id_returns_400(self, test_client, flavor_id):
        response = await test_client.put(f"/api/flavors/{flavor_id}", json={"name": "X"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}

    @pytest.mark.asyncio
    async def test_delete_out_of_range_id_returns_400(self, test_client):
        response = await test_client.delete("/api/flavors/99999999999999999999")

        assert response.status_code == 400
        assert [f["name"] for f in await _list(test_client)] == SEEDED

    @pytest.mark.asyncio
    async def test_largest_valid_id_is_not_found(self, test_client):
        response = await test_client.delete("/api/flavors/2147483647")

        assert response.status_code == 404


class TestUnexpectedErrors:
    """Unhandled exceptions still produce the generic 500 with a request ID."""

    @pytest_asyncio.fixture
    async def lenient_client(self, test_app):
        transport = ASGITransport(app=test_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    @pytest.mark.asyncio
    async def test_runtime_error_keeps_request_id(self, lenient_client):
        with patch(
            "icecream_api.routes.flavors.flavor_service.list_flavors",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            response = await lenient_client.get(
                "/api/flavors", headers={"X-Request-ID": "req12345"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert response.headers["X-Request-ID"] == "req12345"

    @pytest.mark.asyncio
    async def test_missing_landing_file_returns_generic_500(self, lenient_client, tmp_path):
        with patch("icecream_api.routes.landing.INDEX_HTML", tmp_path / "missing.html"):
            response = await lenient_client.get("/")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert len(response.headers["X-Request-ID"]) == 8
