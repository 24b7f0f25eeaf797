"""
Integration tests for project endpoints and base image uploads.
"""

from uuid import UUID, uuid4

from sqlalchemy import select

from database.models import Image, Project
from tests.conftest import make_png


class TestProjectCrud:
    async def test_create_and_list(self, async_client, auth_headers):
        response = await async_client.post(
            "/api/projects",
            json={"name": "  Depto Centro ", "description": "Dos ambientes"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        project = response.json()["project"]
        assert project["name"] == "Depto Centro"
        assert project["status"] == "active"
        assert project["total_transformations"] == 0

        listed = await async_client.get("/api/projects", headers=auth_headers)
        assert [p["id"] for p in listed.json()["projects"]] == [project["id"]]

    async def test_name_required(self, async_client, auth_headers):
        response = await async_client.post("/api/projects", json={"name": " "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "El nombre del proyecto es requerido"

    async def test_name_too_long(self, async_client, auth_headers):
        response = await async_client.post("/api/projects", json={"name": "x" * 101}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "El nombre del proyecto no puede exceder 100 caracteres"

    async def test_list_filters_by_status(self, async_client, auth_headers, project):
        archived = await async_client.get("/api/projects?status=archived", headers=auth_headers)
        active = await async_client.get("/api/projects?status=active", headers=auth_headers)

        assert archived.json()["projects"] == []
        assert [p["id"] for p in active.json()["projects"]] == [str(project.id)]

    async def test_list_only_own_projects(self, async_client, other_headers, project):
        response = await async_client.get("/api/projects", headers=other_headers)
        assert response.json()["projects"] == []

    async def test_get_with_images(self, async_client, auth_headers, project, base_image):
        response = await async_client.get(f"/api/projects/{project.id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["project"]["name"] == "Casa Playa"
        assert [i["id"] for i in data["images"]] == [str(base_image.id)]

    async def test_get_missing_is_404(self, async_client, auth_headers):
        response = await async_client.get(f"/api/projects/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Proyecto no encontrado"

    async def test_get_foreign_is_403(self, async_client, other_headers, project):
        response = await async_client.get(f"/api/projects/{project.id}", headers=other_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "No autorizado para este proyecto"

    async def test_malformed_id_is_400(self, async_client, auth_headers):
        response = await async_client.get("/api/projects/not-a-uuid", headers=auth_headers)
        assert response.status_code == 400

    async def test_partial_update(self, async_client, auth_headers, project):
        response = await async_client.put(
            f"/api/projects/{project.id}",
            json={"status": "completed"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["project"]
        assert data["status"] == "completed"
        assert data["name"] == "Casa Playa"
        assert data["description"] == "Sala y comedor"

    async def test_update_invalid_status(self, async_client, auth_headers, project):
        response = await async_client.put(
            f"/api/projects/{project.id}",
            json={"status": "deleted"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_update_foreign_changes_nothing(self, async_client, other_headers, project, session_factory):
        response = await async_client.put(
            f"/api/projects/{project.id}",
            json={"name": "Robado"},
            headers=other_headers,
        )

        assert response.status_code == 403
        async with session_factory() as session:
            assert (await session.get(Project, project.id)).name == "Casa Playa"

    async def test_delete(self, async_client, auth_headers, project, session_factory):
        response = await async_client.delete(f"/api/projects/{project.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True
        async with session_factory() as session:
            assert await session.get(Project, project.id) is None

    async def test_delete_foreign(self, async_client, other_headers, project):
        response = await async_client.delete(f"/api/projects/{project.id}", headers=other_headers)
        assert response.status_code == 403


class TestUploadImage:
    async def test_first_upload_is_primary_and_cover(self, async_client, auth_headers, project, storage, session_factory):
        response = await async_client.post(
            f"/api/projects/{project.id}/upload-image",
            files={"file": ("living.png", make_png(320, 240), "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 200
        image = response.json()["image"]
        assert image["is_primary"] is True
        assert image["upload_order"] == 1
        assert image["name"] == "living"
        assert (image["width"], image["height"]) == (320, 240)

        async with session_factory() as session:
            row = await session.get(Image, UUID(image["id"]))
            refreshed = await session.get(Project, project.id)
        assert await storage.exists(row.storage_key)
        assert row.storage_key.startswith(f"users/{project.user_id}/projects/{project.id}/")
        assert refreshed.cover_image_url == image["url"]

    async def test_second_upload(self, async_client, auth_headers, project):
        for _ in range(2):
            response = await async_client.post(
                f"/api/projects/{project.id}/upload-image",
                files={"file": ("room.png", make_png(), "image/png")},
                data={"name": "Cocina"},
                headers=auth_headers,
            )

        image = response.json()["image"]
        assert image["is_primary"] is False
        assert image["upload_order"] == 2
        assert image["name"] == "Cocina"

        images = await async_client.get(f"/api/projects/{project.id}/images", headers=auth_headers)
        assert [i["upload_order"] for i in images.json()["images"]] == [1, 2]

    async def test_unsupported_type(self, async_client, auth_headers, project):
        response = await async_client.post(
            f"/api/projects/{project.id}/upload-image",
            files={"file": ("doc.pdf", b"%PDF-1.4", "application/pdf")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert "JPG, PNG, WebP o GIF" in response.json()["error"]

    async def test_upload_to_foreign_project(self, async_client, other_headers, project, session_factory):
        response = await async_client.post(
            f"/api/projects/{project.id}/upload-image",
            files={"file": ("room.png", make_png(), "image/png")},
            headers=other_headers,
        )

        assert response.status_code == 403
        async with session_factory() as session:
            images = (await session.execute(select(Image))).scalars().all()
        assert images == []


class TestProjectVariantsByIds:
    async def test_missing_ids_parameter(self, async_client, auth_headers, project):
        response = await async_client.get(f"/api/projects/{project.id}/variants", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing ids parameter"

    async def test_empty_ids(self, async_client, auth_headers, project):
        response = await async_client.get(f"/api/projects/{project.id}/variants?ids=", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"variants": []}

    async def test_invalid_id(self, async_client, auth_headers, project):
        response = await async_client.get(
            f"/api/projects/{project.id}/variants?ids=abc",
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestUploadLimits:
    async def test_oversized_upload_is_rejected(
        self, async_client, auth_headers, project, session_factory, monkeypatch
    ):
        from core.config import get_settings

        monkeypatch.setattr(get_settings(), "max_upload_size_mb", 0)

        response = await async_client.post(
            f"/api/projects/{project.id}/upload-image",
            files={"file": ("room.png", make_png(), "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "El archivo es demasiado grande. El tamaño máximo es 10MB."
        async with session_factory() as session:
            assert (await session.execute(select(Image))).scalars().all() == []

    async def test_read_stops_past_the_limit(self, monkeypatch):
        from io import BytesIO

        from fastapi import UploadFile
        from starlette.datastructures import Headers

        from api.routers.projects import read_upload
        from core.config import get_settings

        monkeypatch.setattr(get_settings(), "max_upload_size_mb", 1)
        limit = 1024 * 1024
        upload = UploadFile(
            BytesIO(b"\0" * (3 * limit)),
            filename="big.png",
            headers=Headers({"content-type": "image/png"}),
        )

        data = await read_upload(upload)

        assert len(data) == limit + 1
