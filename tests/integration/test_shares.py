"""
Integration tests for share links and the public share view.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from database.models import ProjectShare


async def _create_share(async_client, headers, project, **config) -> dict:
    response = await async_client.post(
        "/api/shares",
        json={"projectId": str(project.id), **config},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


class TestManageShares:
    async def test_create_returns_links(self, async_client, auth_headers, project):
        data = await _create_share(async_client, auth_headers, project)

        token = data["shareToken"]
        assert data["shareUrl"] == f"https://decollage.test/share/{token}"
        assert data["ogImageUrl"] == f"/api/og?token={token}"
        assert data["embedCode"].startswith("<iframe")

    async def test_create_defaults(self, async_client, auth_headers, project):
        token = (await _create_share(async_client, auth_headers, project))["shareToken"]

        response = await async_client.get(f"/api/shares/{token}", headers=auth_headers)

        share = response.json()["share"]
        assert share["visibility"] == "unlisted"
        assert share["title"] == "Casa Playa"
        assert share["has_password"] is False
        assert share["current_views"] == 0

    async def test_create_for_foreign_project(self, async_client, other_headers, project):
        response = await async_client.post(
            "/api/shares",
            json={"projectId": str(project.id)},
            headers=other_headers,
        )
        assert response.status_code == 403

    async def test_invalid_visibility(self, async_client, auth_headers, project):
        response = await async_client.post(
            "/api/shares",
            json={"projectId": str(project.id), "visibility": "secret"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_list_only_own(self, async_client, auth_headers, other_headers, project):
        await _create_share(async_client, auth_headers, project)

        mine = await async_client.get("/api/shares", headers=auth_headers)
        theirs = await async_client.get("/api/shares", headers=other_headers)

        assert len(mine.json()["shares"]) == 1
        assert theirs.json()["shares"] == []

    async def test_other_user_cannot_read(self, async_client, auth_headers, other_headers, project):
        token = (await _create_share(async_client, auth_headers, project))["shareToken"]

        response = await async_client.get(f"/api/shares/{token}", headers=other_headers)

        assert response.status_code == 404

    async def test_update_is_idempotent(self, async_client, auth_headers, project):
        token = (await _create_share(async_client, auth_headers, project))["shareToken"]
        body = {"title": "Nuevo título", "maxViews": 10, "password": "secreto"}

        first = await async_client.put(f"/api/shares/{token}", json=body, headers=auth_headers)
        second = await async_client.put(f"/api/shares/{token}", json=body, headers=auth_headers)

        assert first.status_code == 200
        expected = {**first.json()["share"], "created_at": None}
        assert {**second.json()["share"], "created_at": None} == expected
        assert expected["title"] == "Nuevo título"
        assert expected["max_views"] == 10
        assert expected["has_password"] is True

    async def test_update_clears_password(self, async_client, auth_headers, project):
        token = (await _create_share(async_client, auth_headers, project, password="secreto"))["shareToken"]

        response = await async_client.put(
            f"/api/shares/{token}",
            json={"password": None},
            headers=auth_headers,
        )

        assert response.json()["share"]["has_password"] is False

    async def test_update_null_visibility_keeps_value(self, async_client, auth_headers, project):
        token = (await _create_share(async_client, auth_headers, project, visibility="public"))["shareToken"]

        response = await async_client.put(
            f"/api/shares/{token}",
            json={"visibility": None, "featured": None},
            headers=auth_headers,
        )

        assert response.status_code == 200
        share = response.json()["share"]
        assert share["visibility"] == "public"
        assert share["featured_items"] == []

    async def test_update_by_other_user(self, async_client, auth_headers, other_headers, project, session_factory):
        token = (await _create_share(async_client, auth_headers, project))["shareToken"]

        response = await async_client.put(
            f"/api/shares/{token}",
            json={"title": "Hackeado"},
            headers=other_headers,
        )

        assert response.status_code == 404
        async with session_factory() as session:
            share = (
                await session.execute(select(ProjectShare).where(ProjectShare.share_token == token))
            ).scalar_one()
        assert share.title == "Casa Playa"

    async def test_delete_is_idempotent(self, async_client, auth_headers, project):
        token = (await _create_share(async_client, auth_headers, project))["shareToken"]

        first = await async_client.delete(f"/api/shares/{token}", headers=auth_headers)
        second = await async_client.delete(f"/api/shares/{token}", headers=auth_headers)

        assert first.status_code == 200
        assert second.status_code == 200
        assert (await async_client.get(f"/api/shares/{token}", headers=auth_headers)).status_code == 404

    async def test_delete_by_other_user_keeps_share(self, async_client, auth_headers, other_headers, project):
        token = (await _create_share(async_client, auth_headers, project))["shareToken"]

        await async_client.delete(f"/api/shares/{token}", headers=other_headers)

        assert (await async_client.get(f"/api/shares/{token}", headers=auth_headers)).status_code == 200


class TestPublicShare:
    async def test_view_counts(self, async_client, auth_headers, project):
        token = (await _create_share(async_client, auth_headers, project))["shareToken"]

        first = await async_client.get(f"/api/public/shares/{token}")
        second = await async_client.get(f"/api/public/shares/{token}")

        assert first.status_code == 200
        assert first.json()["project"]["name"] == "Casa Playa"
        assert first.json()["current_views"] == 1
        assert second.json()["current_views"] == 2

    async def test_unknown_token(self, async_client):
        response = await async_client.get("/api/public/shares/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "Share not found"

    async def test_private_share(self, async_client, auth_headers, project):
        token = (await _create_share(async_client, auth_headers, project, visibility="private"))["shareToken"]

        response = await async_client.get(f"/api/public/shares/{token}")

        assert response.status_code == 404

    async def test_expired_share(self, async_client, auth_headers, project):
        past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
        token = (await _create_share(async_client, auth_headers, project, expiresAt=past))["shareToken"]

        response = await async_client.get(f"/api/public/shares/{token}")

        assert response.status_code == 410
        assert response.json()["error"] == "Share has expired"

    async def test_max_views(self, async_client, auth_headers, project, session_factory):
        token = (await _create_share(async_client, auth_headers, project, maxViews=2))["shareToken"]

        statuses = [(await async_client.get(f"/api/public/shares/{token}")).status_code for _ in range(3)]

        assert statuses == [200, 200, 410]
        async with session_factory() as session:
            share = (
                await session.execute(select(ProjectShare).where(ProjectShare.share_token == token))
            ).scalar_one()
        assert share.current_views == 2

    @pytest.mark.parametrize("password,status", [(None, 403), ("otra", 403), ("secreto", 200)])
    async def test_password(self, async_client, auth_headers, project, password, status):
        token = (await _create_share(async_client, auth_headers, project, password="secreto"))["shareToken"]
        headers = {"X-Share-Password": password} if password else {}

        response = await async_client.get(f"/api/public/shares/{token}", headers=headers)

        assert response.status_code == status
        if status == 403:
            assert response.json()["error"] == "Contraseña incorrecta"

    async def test_wrong_password_does_not_count(self, async_client, auth_headers, project, session_factory):
        token = (await _create_share(async_client, auth_headers, project, password="secreto"))["shareToken"]

        await async_client.get(f"/api/public/shares/{token}", headers={"X-Share-Password": "otra"})

        async with session_factory() as session:
            share = (
                await session.execute(select(ProjectShare).where(ProjectShare.share_token == token))
            ).scalar_one()
        assert share.current_views == 0

    async def test_items(self, async_client, auth_headers, project, base_image, catalog, fake_provider):
        generated = []
        for _ in range(2):
            response = await async_client.post(
                f"/api/base-images/{base_image.id}/generate-variant",
                json={"style_id": str(catalog.style.id)},
                headers=auth_headers,
            )
            generated.append(response.json()["transformation"]["id"])

        latest = await _create_share(async_client, auth_headers, project)
        featured = await _create_share(async_client, auth_headers, project, featured=[generated[0]])

        latest_view = await async_client.get(f"/api/public/shares/{latest['shareToken']}")
        featured_view = await async_client.get(f"/api/public/shares/{featured['shareToken']}")

        assert {i["id"] for i in latest_view.json()["items"]} == set(generated)
        assert [i["id"] for i in featured_view.json()["items"]] == [generated[0]]
