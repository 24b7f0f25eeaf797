"""
Integration tests for token ledger endpoints.
"""

from uuid import uuid4

from tests.conftest import session_headers


class TestBalance:
    async def test_balance(self, async_client, auth_headers):
        response = await async_client.get("/api/tokens/balance", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "tokens_available": 5,
            "tokens_total_purchased": 5,
            "tokens_total_used": 0,
        }

    async def test_balance_without_profile(self, async_client):
        response = await async_client.get("/api/tokens/balance", headers=session_headers(uuid4()))

        assert response.status_code == 200
        assert response.json()["tokens_available"] == 0

    async def test_requires_session(self, async_client):
        response = await async_client.get("/api/tokens/balance")
        assert response.status_code == 401


class TestCredit:
    async def test_admin_credit(self, async_client, admin_profile, profile):
        headers = session_headers(admin_profile.id, admin_profile.email)

        response = await async_client.post(
            "/api/tokens/credit",
            json={"user_id": str(profile.id), "amount": 10, "description": "Pack 10"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["balance"]["tokens_available"] == 15
        assert response.json()["balance"]["tokens_total_purchased"] == 15

    async def test_credit_requires_admin(self, async_client, auth_headers, profile):
        response = await async_client.post(
            "/api/tokens/credit",
            json={"user_id": str(profile.id), "amount": 10},
            headers=auth_headers,
        )
        assert response.status_code == 403

    async def test_credit_amount_must_be_positive(self, async_client, admin_profile, profile):
        response = await async_client.post(
            "/api/tokens/credit",
            json={"user_id": str(profile.id), "amount": 0},
            headers=session_headers(admin_profile.id, admin_profile.email),
        )
        assert response.status_code == 400

    async def test_credit_unknown_profile(self, async_client, admin_profile):
        response = await async_client.post(
            "/api/tokens/credit",
            json={"user_id": str(uuid4()), "amount": 1},
            headers=session_headers(admin_profile.id, admin_profile.email),
        )
        assert response.status_code == 404


class TestHistory:
    async def test_history_newest_first(self, async_client, admin_profile, profile, auth_headers):
        admin_headers = session_headers(admin_profile.id, admin_profile.email)
        for description in ("primero", "segundo"):
            await async_client.post(
                "/api/tokens/credit",
                json={"user_id": str(profile.id), "amount": 1, "type": "bonus", "description": description},
                headers=admin_headers,
            )

        response = await async_client.get("/api/tokens", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["balance"]["tokens_available"] == 7
        assert data["balance"]["tokens_total_purchased"] == 5
        assert [t["description"] for t in data["transactions"]] == ["segundo", "primero"]
        assert all(t["type"] == "bonus" for t in data["transactions"])
