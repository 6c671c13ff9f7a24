"""HTTP tests for the attribute routers — auth, envelopes and status codes."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

from src.config import settings
from src.database.session import get_db
from src.middleware.rate_limit import limiter

PREFIX = "/api/v1"


def _token(user_id: str) -> str:
    return jwt.encode(
        {"sub": user_id, "email": f"{user_id}@example.com"},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest_asyncio.fixture
async def client(async_test_session):
    from src.app import create_app

    app = create_app()

    async def _override_get_db():
        yield async_test_session
        if async_test_session.in_transaction():
            await async_test_session.commit()

    app.dependency_overrides[get_db] = _override_get_db
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True


@pytest.fixture
def owner_headers(seeded) -> dict[str, str]:
    return {"Authorization": f"Bearer {_token(seeded.owner.id)}"}


@pytest.fixture
def stranger_headers(seeded) -> dict[str, str]:
    return {"Authorization": f"Bearer {_token(seeded.stranger.id)}"}


SIZE_PAYLOAD = {
    "attribute_key": "size",
    "attribute_label": "Size",
    "attribute_type": "select",
    "options": [
        {"value": "S", "label": "Small"},
        {"value": "M", "label": "Medium"},
    ],
    "sort_order": 0,
}

COLOR_PAYLOAD = {
    "attribute_key": "color",
    "attribute_label": "Color",
    "attribute_type": "color",
    "options": [
        {"value": "#ff0000", "label": "Red"},
        {"value": "#0000ff", "label": "Blue"},
    ],
    "sort_order": 1,
}


async def _create(client, product_id, headers, payload=SIZE_PAYLOAD) -> int:
    resp = await client.post(f"{PREFIX}/products/{product_id}/attributes", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_health_needs_no_token(self, client) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_missing_token_rejected(self, client, seeded) -> None:
        resp = await client.get(f"{PREFIX}/products/{seeded.product_id}/attributes")
        assert resp.status_code == 401
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Authentication required"
        assert body["detail"]["code"] == "UNAUTHORIZED"
        assert body["detail"]["requestId"]

    @pytest.mark.asyncio
    async def test_garbage_token_rejected(self, client, seeded) -> None:
        resp = await client.get(
            f"{PREFIX}/products/{seeded.product_id}/attributes",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client, owner_headers, seeded) -> None:
        resp = await client.get(
            f"{PREFIX}/products/{seeded.product_id}/attributes",
            headers={**owner_headers, "X-Request-ID": "req-123"},
        )
        assert resp.headers.get("X-Request-ID") == "req-123"


class TestAttributeRoutes:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, owner_headers, seeded) -> None:
        resp = await client.post(
            f"{PREFIX}/products/{seeded.product_id}/attributes", json=SIZE_PAYLOAD, headers=owner_headers
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert "error" not in body
        assert body["data"]["attribute_key"] == "size"
        assert body["data"]["product_id"] == seeded.product_id

        resp = await client.get(f"{PREFIX}/products/{seeded.product_id}/attributes", headers=owner_headers)
        assert resp.status_code == 200
        assert [a["attribute_key"] for a in resp.json()["data"]] == ["size"]

    @pytest.mark.asyncio
    async def test_duplicate_key_is_conflict(self, client, owner_headers, seeded) -> None:
        await _create(client, seeded.product_id, owner_headers)
        resp = await client.post(
            f"{PREFIX}/products/{seeded.product_id}/attributes", json=SIZE_PAYLOAD, headers=owner_headers
        )
        assert resp.status_code == 409
        assert resp.json() == {"success": False, "error": "Attribute key already exists for this product"}

    @pytest.mark.asyncio
    async def test_foreign_product_denied(self, client, stranger_headers, seeded) -> None:
        resp = await client.post(
            f"{PREFIX}/products/{seeded.product_id}/attributes", json=SIZE_PAYLOAD, headers=stranger_headers
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "Product not found or access denied"

    @pytest.mark.asyncio
    async def test_malformed_key_rejected_before_service(self, client, owner_headers, seeded) -> None:
        payload = {**SIZE_PAYLOAD, "attribute_key": "bad key!"}
        resp = await client.post(
            f"{PREFIX}/products/{seeded.product_id}/attributes", json=payload, headers=owner_headers
        )
        assert resp.status_code == 422
        body = resp.json()
        assert body["detail"]["code"] == "VALIDATION_ERROR"
        assert any("attribute_key" in d["field"] for d in body["detail"]["details"])

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, client, owner_headers, seeded) -> None:
        payload = {**SIZE_PAYLOAD, "attribute_type": "date"}
        resp = await client.post(
            f"{PREFIX}/products/{seeded.product_id}/attributes", json=payload, headers=owner_headers
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_get_update_delete(self, client, owner_headers, seeded) -> None:
        attribute_id = await _create(client, seeded.product_id, owner_headers)

        resp = await client.get(f"{PREFIX}/attributes/{attribute_id}", headers=owner_headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["attribute_label"] == "Size"

        resp = await client.patch(
            f"{PREFIX}/attributes/{attribute_id}",
            json={"attribute_label": "Garment size", "help_text": "See the size chart"},
            headers=owner_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["attribute_label"] == "Garment size"

        resp = await client.delete(f"{PREFIX}/attributes/{attribute_id}", headers=owner_headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        resp = await client.get(f"{PREFIX}/attributes/{attribute_id}", headers=owner_headers)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Attribute not found"}

    @pytest.mark.asyncio
    async def test_delete_blocked_by_variant(self, client, owner_headers, seeded, make_variant) -> None:
        attribute_id = await _create(client, seeded.product_id, owner_headers)
        await make_variant(seeded.product_id, {"size": "S"})

        resp = await client.delete(f"{PREFIX}/attributes/{attribute_id}", headers=owner_headers)
        assert resp.status_code == 409
        assert resp.json()["error"] == "Cannot delete attribute that is used by variants"

    @pytest.mark.asyncio
    async def test_stranger_cannot_patch(self, client, owner_headers, stranger_headers, seeded) -> None:
        attribute_id = await _create(client, seeded.product_id, owner_headers)
        resp = await client.patch(
            f"{PREFIX}/attributes/{attribute_id}", json={"attribute_label": "Mine"}, headers=stranger_headers
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "Attribute not found or access denied"


class TestOptionRoutes:
    @pytest.mark.asyncio
    async def test_add_and_remove_option(self, client, owner_headers, seeded) -> None:
        attribute_id = await _create(client, seeded.product_id, owner_headers)

        resp = await client.post(
            f"{PREFIX}/attributes/{attribute_id}/options",
            json={"value": "L", "label": "Large"},
            headers=owner_headers,
        )
        assert resp.status_code == 200
        assert [o["value"] for o in resp.json()["data"]["options"]] == ["S", "M", "L"]

        resp = await client.delete(f"{PREFIX}/attributes/{attribute_id}/options/S", headers=owner_headers)
        assert resp.status_code == 200
        assert [o["value"] for o in resp.json()["data"]["options"]] == ["M", "L"]

    @pytest.mark.asyncio
    async def test_duplicate_option_conflict(self, client, owner_headers, seeded) -> None:
        attribute_id = await _create(client, seeded.product_id, owner_headers)
        resp = await client.post(
            f"{PREFIX}/attributes/{attribute_id}/options",
            json={"value": "M", "label": "Medium"},
            headers=owner_headers,
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "Option value already exists"

    @pytest.mark.asyncio
    async def test_remove_used_option_conflict(self, client, owner_headers, seeded, make_variant) -> None:
        attribute_id = await _create(client, seeded.product_id, owner_headers)
        await make_variant(seeded.product_id, {"size": "M"})

        resp = await client.delete(f"{PREFIX}/attributes/{attribute_id}/options/M", headers=owner_headers)
        assert resp.status_code == 409
        assert resp.json()["error"] == "Cannot remove option that is used by variants"

    @pytest.mark.asyncio
    async def test_remove_missing_option(self, client, owner_headers, seeded) -> None:
        attribute_id = await _create(client, seeded.product_id, owner_headers)
        resp = await client.delete(f"{PREFIX}/attributes/{attribute_id}/options/XXL", headers=owner_headers)
        assert resp.status_code == 404
        assert resp.json()["error"] == "Option not found"

    @pytest.mark.asyncio
    async def test_remove_option_with_slash_in_value(self, client, owner_headers, seeded) -> None:
        payload = {
            **SIZE_PAYLOAD,
            "attribute_key": "ratio",
            "options": [{"value": "1/2", "label": "Half"}, {"value": "1/4", "label": "Quarter"}],
        }
        attribute_id = await _create(client, seeded.product_id, owner_headers, payload)

        resp = await client.delete(f"{PREFIX}/attributes/{attribute_id}/options/1/2", headers=owner_headers)
        assert resp.status_code == 200
        assert [o["value"] for o in resp.json()["data"]["options"]] == ["1/4"]


class TestOrderingAndCombinations:
    @pytest.mark.asyncio
    async def test_reorder_then_list(self, client, owner_headers, seeded) -> None:
        size_id = await _create(client, seeded.product_id, owner_headers)
        color_id = await _create(client, seeded.product_id, owner_headers, COLOR_PAYLOAD)

        resp = await client.put(
            f"{PREFIX}/products/{seeded.product_id}/attributes/order",
            json={"items": [{"id": size_id, "sort_order": 2}, {"id": color_id, "sort_order": 0}]},
            headers=owner_headers,
        )
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        resp = await client.get(f"{PREFIX}/products/{seeded.product_id}/attributes", headers=owner_headers)
        assert [a["attribute_key"] for a in resp.json()["data"]] == ["color", "size"]

    @pytest.mark.asyncio
    async def test_reorder_requires_items(self, client, owner_headers, seeded) -> None:
        resp = await client.put(
            f"{PREFIX}/products/{seeded.product_id}/attributes/order", json={"items": []}, headers=owner_headers
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_options_and_product_combinations(self, client, owner_headers, seeded) -> None:
        await _create(client, seeded.product_id, owner_headers)
        await _create(client, seeded.product_id, owner_headers, COLOR_PAYLOAD)

        resp = await client.get(
            f"{PREFIX}/products/{seeded.product_id}/attributes/options",
            params={"variant_defining_only": "true"},
            headers=owner_headers,
        )
        assert resp.json()["data"] == {"size": ["S", "M"], "color": ["#ff0000", "#0000ff"]}

        resp = await client.get(
            f"{PREFIX}/products/{seeded.product_id}/attributes/combinations", headers=owner_headers
        )
        data = resp.json()["data"]
        assert data["total"] == 4
        assert data["combinations"][0] == {"size": "S", "color": "#ff0000"}
        assert data["combinations"][1] == {"size": "S", "color": "#0000ff"}

    @pytest.mark.asyncio
    async def test_adhoc_combinations(self, client, owner_headers) -> None:
        resp = await client.post(
            f"{PREFIX}/combinations",
            json={"attributes": {"size": ["S", "M", "L"], "fit": ["slim", "regular"]}},
            headers=owner_headers,
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["total"] == 6
        assert data["combinations"][:2] == [{"size": "S", "fit": "slim"}, {"size": "S", "fit": "regular"}]

    @pytest.mark.asyncio
    async def test_adhoc_combinations_capped(self, client, owner_headers, monkeypatch) -> None:
        monkeypatch.setattr(settings, "max_variant_combinations", 5)
        resp = await client.post(
            f"{PREFIX}/combinations",
            json={"attributes": {"size": ["S", "M", "L"], "fit": ["slim", "regular"]}},
            headers=owner_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["success"] is False

    @pytest.mark.asyncio
    async def test_adhoc_combinations_need_token(self, client) -> None:
        resp = await client.post(f"{PREFIX}/combinations", json={"attributes": {"size": ["S"]}})
        assert resp.status_code == 401


class TestStoreFunctionRoutes:
    """SQLite has no catalog functions, so these exercise the failure paths."""

    @pytest.mark.asyncio
    async def test_schema_document_degrades_to_empty(self, client, owner_headers, seeded) -> None:
        resp = await client.get(f"{PREFIX}/products/{seeded.product_id}/attributes/schema", headers=owner_headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": {}}

    @pytest.mark.asyncio
    async def test_validate_reports_store_failure(self, client, owner_headers, seeded) -> None:
        resp = await client.post(
            f"{PREFIX}/products/{seeded.product_id}/attributes/validate",
            json={"values": {"size": "S"}},
            headers=owner_headers,
        )
        assert resp.status_code == 503
        body = resp.json()
        assert body["success"] is False
        assert "validate_attribute_values" in body["error"]
