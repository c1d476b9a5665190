"""Tests for /users endpoints."""


class TestRegister:
    async def test_register(self, client) -> None:
        response = await client.post(
            "/users",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret12"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Alice"
        assert body["email"] == "alice@example.com"
        assert "password" not in body
        assert "passwordHash" not in body
        assert {"id", "createdAt", "updatedAt"} <= set(body)

    async def test_duplicate_email(self, client, alice) -> None:
        response = await client.post(
            "/users",
            json={"name": "Other", "email": "alice@example.com", "password": "secret12"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_short_password(self, client) -> None:
        response = await client.post(
            "/users", json={"name": "A", "email": "a@example.com", "password": "short"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"

    async def test_default_workspace_created(self, client, alice) -> None:
        response = await client.get("/workspaces", headers=alice.headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["workspaces"][0]["name"] == "Default"
        assert body["workspaces"][0]["creatorId"] == alice.id


class TestOwnUser:
    async def test_get_self(self, client, alice) -> None:
        response = await client.get(f"/users/{alice.id}", headers=alice.headers)

        assert response.status_code == 200
        assert response.json()["email"] == alice.email

    async def test_get_other_user_denied(self, client, alice, bob) -> None:
        response = await client.get(f"/users/{bob.id}", headers=alice.headers)

        assert response.status_code == 403
        assert response.json() == {
            "code": "ACCESS_DENIED",
            "message": f"Operation not allowed on resource '/users/{bob.id}'.",
        }

    async def test_update_self(self, client, alice) -> None:
        response = await client.patch(
            f"/users/{alice.id}",
            headers=alice.headers,
            json={"name": "Alice Liddell", "email": "liddell@example.com"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Alice Liddell"
        assert response.json()["email"] == "liddell@example.com"

    async def test_update_email_conflict(self, client, alice, bob) -> None:
        response = await client.patch(
            f"/users/{alice.id}", headers=alice.headers, json={"email": bob.email}
        )

        assert response.status_code == 409

    async def test_update_other_user_denied(self, client, alice, bob) -> None:
        response = await client.patch(
            f"/users/{bob.id}", headers=alice.headers, json={"name": "Mallory"}
        )

        assert response.status_code == 403

    async def test_delete_self(self, client, alice) -> None:
        response = await client.delete(f"/users/{alice.id}", headers=alice.headers)
        assert response.status_code == 204

        # Token still decodes, but the user is gone
        me = await client.get("/users/me", headers=alice.headers)
        assert me.status_code == 404
        assert me.json()["code"] == "NOT_FOUND"

        login = await client.post(
            "/auth/login", json={"email": alice.email, "password": "secret12"}
        )
        assert login.status_code == 401
