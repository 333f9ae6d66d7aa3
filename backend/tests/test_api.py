"""
Portfolio API — Endpoint Tests
===============================

What:  HTTP-level behavior of every route through HTTPX over ASGI, against
       a real SQLite database and a temporary file store.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.services.piece_service import PieceService


async def _add(client, name):
    response = await client.post("/api/pieces/add-piece", json={"name": name})
    assert response.status_code == 200
    return response.json()


async def _delete(client, url, **kwargs):
    # httpx's delete() helper does not take a body
    return await client.request("DELETE", url, **kwargs)


class TestPieceReads:

    @pytest.mark.asyncio
    async def test_add_then_get_by_name(self, test_client):
        created = await _add(test_client, "X")

        response = await test_client.get("/api/piece/X")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "X"
        assert body["id"] == created["id"]
        for key in ("title", "images", "alt", "shortDescription", "longDescription",
                    "features", "featured", "category"):
            assert body[key] is None

    @pytest.mark.asyncio
    async def test_every_piece_found_by_its_name(self, test_client):
        for name in ("Table", "Chair", "Lamp"):
            await _add(test_client, name)

        pieces = (await test_client.get("/api/pieces")).json()
        assert len(pieces) == 3
        for piece in pieces:
            found = (await test_client.get(f"/api/piece/{piece['name']}")).json()
            assert found["name"] == piece["name"]

    @pytest.mark.asyncio
    async def test_unknown_name_returns_null(self, test_client):
        response = await test_client.get("/api/piece/Nobody")
        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client):
        created = await _add(test_client, "Lamp")
        response = await test_client.get(f"/api/piece/id/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Lamp"

    @pytest.mark.asyncio
    async def test_malformed_id_is_bad_request(self, test_client):
        response = await test_client.get("/api/piece/id/12345")
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "message" in body

    @pytest.mark.asyncio
    async def test_piece_keys(self, test_client):
        response = await test_client.get("/api/piece-keys")
        assert response.status_code == 200
        assert response.json() == [
            "id", "name", "title", "images", "alt", "shortDescription",
            "longDescription", "features", "featured", "category",
        ]

    @pytest.mark.asyncio
    async def test_category_filter(self, test_client):
        rug = await _add(test_client, "Rug")
        bulb = await _add(test_client, "Bulb")
        await test_client.post(
            f"/api/pieces/{rug['id']}/category/update-piece", json={"value": "Home Decor"}
        )
        await test_client.post(
            f"/api/pieces/{bulb['id']}/category/update-piece", json={"value": "Lighting"}
        )

        response = await test_client.get("/api/pieces/category/homeDecor")
        assert response.status_code == 200
        result = response.json()
        assert [p["name"] for p in result] == ["Rug"]
        assert all(p["category"] == "Home Decor" for p in result)


class TestPieceWrites:

    @pytest.mark.asyncio
    async def test_single_field_featured_update(self, test_client):
        pieces = [await _add(test_client, name) for name in ("A", "B", "C")]
        target = pieces[1]

        response = await test_client.post(
            f"/api/pieces/{target['id']}/featured/update-piece", json={"value": True}
        )
        assert response.status_code == 200
        assert response.json()["featured"] is True

        listed = {p["id"]: p for p in (await test_client.get("/api/pieces")).json()}
        assert [pid for pid, p in listed.items() if p["featured"] is True] == [target["id"]]
        for piece in pieces:
            expected = dict(piece, featured=True) if piece["id"] == target["id"] else piece
            assert listed[piece["id"]] == expected

        featured = (await test_client.get("/api/featured-pieces")).json()
        assert [p["id"] for p in featured] == [target["id"]]

    @pytest.mark.asyncio
    async def test_unknown_update_key_rejected(self, test_client):
        piece = await _add(test_client, "A")
        response = await test_client.post(
            f"/api/pieces/{piece['id']}/_id/update-piece", json={"value": "hijack"}
        )
        assert response.status_code == 400
        assert "allowed" in response.json()["details"]

        unchanged = (await test_client.get("/api/piece/A")).json()
        assert unchanged["id"] == piece["id"]

    @pytest.mark.asyncio
    async def test_wrong_value_type_rejected(self, test_client):
        piece = await _add(test_client, "A")
        response = await test_client.post(
            f"/api/pieces/{piece['id']}/featured/update-piece", json={"value": "sometimes"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing_piece_not_found(self, test_client):
        response = await test_client.post(
            f"/api/pieces/{uuid.uuid4()}/title/update-piece", json={"value": "x"}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_featured_route(self, test_client):
        await _add(test_client, "Chair")
        response = await test_client.post("/api/pieces/Chair/featured", json={"text": True})
        assert response.status_code == 200
        assert response.json()["featured"] is True

        response = await test_client.post("/api/pieces/Ghost/featured", json={"text": True})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_replace_piece_by_title(self, test_client):
        piece = await _add(test_client, "Desk")
        await test_client.post(
            f"/api/pieces/{piece['id']}/title/update-piece", json={"value": "Walnut Desk"}
        )
        await test_client.post(
            f"/api/pieces/{piece['id']}/alt/update-piece", json={"value": "old"}
        )

        response = await test_client.post(
            "/api/pieces/Walnut Desk/update-piece",
            json={
                "name": "Desk",
                "title": "Walnut Desk",
                "images": ["desk-1.jpg"],
                "shortDescription": "Solid walnut",
                "features": ["Dovetail joints"],
                "featured": True,
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == piece["id"]
        assert body["shortDescription"] == "Solid walnut"
        assert body["images"] == ["desk-1.jpg"]
        assert body["alt"] is None

    @pytest.mark.asyncio
    async def test_add_piece_requires_name(self, test_client):
        response = await test_client.post("/api/pieces/add-piece", json={})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"]
        assert [e["field"] for e in body["details"]["errors"]] == ["name"]

    @pytest.mark.asyncio
    async def test_featured_flag_must_be_boolean(self, test_client):
        await _add(test_client, "A")
        response = await test_client.post("/api/pieces/A/featured", json={"text": "maybe"})
        assert response.status_code == 400
        body = response.json()
        assert "message" in body
        assert body["details"]["errors"][0]["field"] == "text"

    @pytest.mark.asyncio
    async def test_malformed_json_body(self, test_client):
        response = await test_client.post(
            "/api/pieces/add-piece",
            content=b"{name: ",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "message" in response.json()

    @pytest.mark.asyncio
    async def test_delete_piece_removes_all_with_name(self, test_client):
        await _add(test_client, "X")
        await _add(test_client, "X")

        response = await _delete(test_client, "/api/pieces/delete-piece", json={"name": "X"})
        assert response.status_code == 200
        assert response.json() == "X has been deleted"

        assert (await test_client.get("/api/piece/X")).json() is None
        assert (await test_client.get("/api/pieces")).json() == []

        again = await _delete(test_client, "/api/pieces/delete-piece", json={"name": "X"})
        assert again.status_code == 404


class TestInfoRoutes:

    @pytest.mark.asyncio
    async def test_add_update_list(self, test_client):
        info = (await test_client.post("/api/info/add-info")).json()

        response = await test_client.post(
            f"/api/info/{info['id']}/email/update-piece", json={"value": "studio@example.com"}
        )
        assert response.status_code == 200
        assert response.json()["email"] == "studio@example.com"

        listed = (await test_client.get("/api/info")).json()
        assert listed == [dict(info, email="studio@example.com")]

    @pytest.mark.asyncio
    async def test_unknown_info_key_rejected(self, test_client):
        info = (await test_client.post("/api/info/add-info")).json()
        response = await test_client.post(
            f"/api/info/{info['id']}/isAdmin/update-piece", json={"value": True}
        )
        assert response.status_code == 400


class TestImageRoutes:

    @pytest.mark.asyncio
    async def test_same_original_name_stored_twice(self, test_client, sample_image_bytes, clean_storage):
        response = await test_client.post(
            "/api/upload",
            files=[
                ("file", ("same.jpg", sample_image_bytes, "image/jpeg")),
                ("file", ("same.jpg", sample_image_bytes, "image/jpeg")),
            ],
        )
        assert response.status_code == 200
        names = response.json()
        assert len(names) == 2
        assert names[0] != names[1]
        for name in names:
            assert (clean_storage / name).read_bytes() == sample_image_bytes

        served = await test_client.get(f"/images/{names[0]}")
        assert served.status_code == 200
        assert served.content == sample_image_bytes

        photos = (await test_client.get("/api/photos")).json()
        assert sorted(p["filename"] for p in photos) == sorted(names)
        assert all(p["originalName"] == "same.jpg" for p in photos)
        assert all(p["url"] == f"/images/{p['filename']}" for p in photos)

    @pytest.mark.asyncio
    async def test_unsupported_file_rejected_and_batch_discarded(
        self, test_client, sample_image_bytes, clean_storage
    ):
        response = await test_client.post(
            "/api/upload",
            files=[
                ("file", ("ok.jpg", sample_image_bytes, "image/jpeg")),
                ("file", ("notes.txt", b"hello", "text/plain")),
            ],
        )
        assert response.status_code == 400
        assert "message" in response.json()
        assert list(clean_storage.iterdir()) == []
        assert (await test_client.get("/api/photos")).json() == []

    @pytest.mark.asyncio
    async def test_non_image_bytes_with_image_name_rejected(self, test_client, clean_storage):
        response = await test_client.post(
            "/api/upload",
            files=[("file", ("evil.jpg", b"#!/bin/sh\necho not an image\n", "image/jpeg"))],
        )
        assert response.status_code == 400
        assert not response.json()["details"]["detected_mime"].startswith("image/")
        assert list(clean_storage.iterdir()) == []

    @pytest.mark.asyncio
    async def test_delete_image(self, test_client, sample_png_bytes, clean_storage):
        names = (
            await test_client.post(
                "/api/upload", files=[("file", ("lamp.png", sample_png_bytes, "image/png"))]
            )
        ).json()

        response = await _delete(test_client, f"/api/images/{names[0]}/delete-image")
        assert response.status_code == 200
        assert not (clean_storage / names[0]).exists()
        assert (await test_client.get("/api/photos")).json() == []
        assert (await test_client.get(f"/images/{names[0]}")).status_code == 404

        again = await _delete(test_client, f"/api/images/{names[0]}/delete-image")
        assert again.status_code == 404


class TestErrorsAndHealth:

    @pytest.mark.asyncio
    async def test_store_failure_returns_500_with_message(self, test_client):
        failure = OperationalError("SELECT", {}, Exception("connection refused"))
        with patch.object(PieceService, "_list", AsyncMock(side_effect=failure)):
            response = await test_client.get("/api/pieces")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "database_error"
        assert body["message"]
        assert "connection refused" not in body["message"]

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/api/pieces", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self, db_tables):
        from app.main import app

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        with patch.object(PieceService, "_list", AsyncMock(side_effect=RuntimeError("boom"))):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/api/pieces", headers={"X-Request-ID": "req500"})

        assert response.status_code == 500
        assert response.json()["message"] == "Something has gone tragically wrong :("
        assert response.headers["X-Request-ID"] == "req500"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
