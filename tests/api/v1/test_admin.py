"""
Integration tests for Admin API endpoints.
"""
import pytest

from app.core.document_store import FLATS, MESSAGES, USERS


@pytest.mark.asyncio
class TestAdminRemoveUserAPI:
    """Test cases for DELETE /api/v1/admin/users/{user_id}."""

    async def test_remove_user_requires_authentication(self, client, test_user):
        response = await client.delete(f"/api/v1/admin/users/{test_user.id}")

        assert response.status_code == 401

    async def test_remove_user_requires_admin(self, client, test_user, test_user_2, auth_headers_2):
        response = await client.delete(f"/api/v1/admin/users/{test_user.id}", headers=auth_headers_2)

        assert response.status_code == 403

    async def test_remove_user_cascades(
        self,
        client,
        sql_store,
        admin_headers,
        test_user,
        test_user_2,
        test_flat,
        test_message,
        mock_connection_manager,
    ):
        """The owner, their flat and the renter's message about it are gone."""
        own_message = await sql_store.create_document(
            MESSAGES, {"senderId": test_user.id, "flatID": test_flat.id, "content": "Yes it is"}
        )

        response = await client.delete(f"/api/v1/admin/users/{test_user.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "success"
        assert await sql_store.get_document(USERS, test_user.id) is None
        assert await sql_store.get_document(FLATS, test_flat.id) is None
        assert await sql_store.get_document(MESSAGES, test_message.id) is None
        assert await sql_store.get_document(MESSAGES, own_message.id) is None
        assert await sql_store.get_document(USERS, test_user_2.id) is not None
        mock_connection_manager.assert_awaited_once_with(test_user.id)

    async def test_remove_unknown_user_succeeds(self, client, admin_headers):
        response = await client.delete("/api/v1/admin/users/does-not-exist", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "success"

    async def test_admin_cannot_remove_themselves(self, client, admin_user, admin_headers):
        response = await client.delete(f"/api/v1/admin/users/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400

    async def test_partial_failure_returns_conflict(
        self,
        client,
        sql_store,
        admin_headers,
        test_user,
        test_flat,
        test_message,
        mocker,
        mock_connection_manager,
    ):
        """A flat that cannot be deleted keeps its owner and is reported."""
        original_delete = sql_store.delete_document

        async def flaky_delete(collection, document_id):
            if collection == FLATS:
                raise RuntimeError("permission denied")
            return await original_delete(collection, document_id)

        mocker.patch.object(sql_store, "delete_document", side_effect=flaky_delete)

        response = await client.delete(f"/api/v1/admin/users/{test_user.id}", headers=admin_headers)

        assert response.status_code == 409
        data = response.json()
        assert data["status"] == "failure"
        assert data["reason"] == "partial_cascade_failure"
        assert data["failures"] == [
            {"entity_type": "flat", "entity_id": test_flat.id, "cause": "permission denied"}
        ]
        assert await sql_store.get_document(USERS, test_user.id) is not None
        assert await sql_store.get_document(MESSAGES, test_message.id) is None
        mock_connection_manager.assert_not_awaited()

    async def test_query_failure_returns_conflict(self, client, sql_store, admin_headers, test_user, mocker):
        from app.core.document_store import StoreError

        mocker.patch.object(
            sql_store,
            "query_by_field",
            side_effect=StoreError(FLATS, "query", RuntimeError("timeout")),
        )

        response = await client.delete(f"/api/v1/admin/users/{test_user.id}", headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["reason"] == "query_failure"
        assert await sql_store.get_document(USERS, test_user.id) is not None

    async def test_removed_users_token_is_rejected(self, client, admin_headers, test_user, auth_headers):
        await client.delete(f"/api/v1/admin/users/{test_user.id}", headers=admin_headers)

        response = await client.get("/api/v1/users/me", headers=auth_headers)

        assert response.status_code == 401


@pytest.mark.asyncio
class TestAdminListUsersAPI:
    """Test cases for GET /api/v1/admin/users."""

    async def test_list_users(self, client, admin_headers, test_user, test_user_2):
        response = await client.get("/api/v1/admin/users", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert {u["email"] for u in data["items"]} == {
            "owner@example.com",
            "renter@example.com",
            "admin@example.com",
        }
        assert all("password" not in u for u in data["items"])

    async def test_list_users_forbidden_for_members(self, client, auth_headers):
        response = await client.get("/api/v1/admin/users", headers=auth_headers)

        assert response.status_code == 403
