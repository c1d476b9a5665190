"""Tests for /workspaces/{id}/blinks endpoints and the blink writer guard."""

import pytest


@pytest.fixture
async def team(client, alice, bob) -> dict:
    """Alice's workspace with Bob as a DEFAULT member."""
    workspace = (
        await client.post("/workspaces", headers=alice.headers, json={"name": "Team"})
    ).json()
    await client.post(
        f"/workspaces/{workspace['id']}/members",
        headers=alice.headers,
        json={"userId": bob.id, "role": "DEFAULT"},
    )
    return workspace


async def _create(client, user, workspace_id: str, **fields):
    payload = {"name": "Docs", "url": "https://example.com/docs", **fields}
    return await client.post(
        f"/workspaces/{workspace_id}/blinks", headers=user.headers, json=payload
    )


class TestCreateBlink:
    async def test_generated_redirect_id(self, client, alice, team) -> None:
        response = await _create(client, alice, team["id"])

        assert response.status_code == 201
        body = response.json()
        assert len(body["redirectId"]) == 8
        assert body["creatorId"] == alice.id
        assert body["workspaceId"] == team["id"]
        assert body["url"] == "https://example.com/docs"

    async def test_custom_redirect_id(self, client, alice, team) -> None:
        response = await _create(client, alice, team["id"], redirectId="my-docs")

        assert response.status_code == 201
        assert response.json()["redirectId"] == "my-docs"

    async def test_custom_redirect_id_conflict_across_workspaces(
        self, client, alice, bob, team
    ) -> None:
        await _create(client, alice, team["id"], redirectId="shared")
        bob_default = (await client.get("/workspaces", headers=bob.headers)).json()[
            "workspaces"
        ]
        other_ws = next(w for w in bob_default if w["name"] == "Default")

        response = await _create(client, bob, other_ws["id"], redirectId="shared")

        assert response.status_code == 409
        assert response.json() == {
            "code": "CONFLICT",
            "message": "Blink redirect 'shared' already exists.",
        }

    @pytest.mark.parametrize("url", ["not a url", "ftp://example.com", "javascript:alert(1)"])
    async def test_invalid_url(self, client, alice, team, url: str) -> None:
        response = await _create(client, alice, team["id"], url=url)

        assert response.status_code == 400

    async def test_invalid_redirect_id(self, client, alice, team) -> None:
        response = await _create(client, alice, team["id"], redirectId="has/slash")

        assert response.status_code == 400

    async def test_non_member_denied(self, client, register, team) -> None:
        carol = await register("carol@example.com")

        response = await _create(client, carol, team["id"])

        assert response.status_code == 403


class TestListAndGet:
    async def test_list_with_filter(self, client, alice, bob, team) -> None:
        await _create(client, alice, team["id"], name="Docs")
        await _create(client, bob, team["id"], name="Blog")

        everything = await client.get(f"/workspaces/{team['id']}/blinks", headers=bob.headers)
        docs = await client.get(
            f"/workspaces/{team['id']}/blinks", headers=bob.headers, params={"name": "doc"}
        )

        assert everything.json()["total"] == 2
        assert [b["name"] for b in everything.json()["blinks"]] == ["Blog", "Docs"]
        assert [b["name"] for b in docs.json()["blinks"]] == ["Docs"]

    async def test_get_missing_blink(self, client, alice, team) -> None:
        response = await client.get(
            f"/workspaces/{team['id']}/blinks/nope", headers=alice.headers
        )

        assert response.status_code == 404


class TestBlinkWriter:
    async def test_creator_can_update(self, client, bob, team) -> None:
        blink = (await _create(client, bob, team["id"])).json()

        response = await client.patch(
            f"/workspaces/{team['id']}/blinks/{blink['id']}",
            headers=bob.headers,
            json={"name": "Renamed", "redirectId": "renamed"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["redirectId"] == "renamed"

    async def test_admin_can_update_others(self, client, alice, bob, team) -> None:
        blink = (await _create(client, bob, team["id"])).json()

        response = await client.patch(
            f"/workspaces/{team['id']}/blinks/{blink['id']}",
            headers=alice.headers,
            json={"url": "https://example.com/new"},
        )

        assert response.status_code == 200
        assert response.json()["url"] == "https://example.com/new"

    async def test_default_member_cannot_edit_others(self, client, alice, bob, team) -> None:
        blink = (await _create(client, alice, team["id"])).json()

        update = await client.patch(
            f"/workspaces/{team['id']}/blinks/{blink['id']}",
            headers=bob.headers,
            json={"name": "Hijacked"},
        )
        delete = await client.delete(
            f"/workspaces/{team['id']}/blinks/{blink['id']}", headers=bob.headers
        )

        expected = {
            "code": "ACCESS_DENIED",
            "message": (
                "Operation not allowed on resource "
                f"'/workspaces/{team['id']}/blinks/{blink['id']}'."
            ),
        }
        assert update.status_code == delete.status_code == 403
        assert update.json() == delete.json() == expected

    async def test_writer_guard_missing_blink(self, client, alice, team) -> None:
        response = await client.patch(
            f"/workspaces/{team['id']}/blinks/nope", headers=alice.headers, json={"name": "X"}
        )

        assert response.status_code == 404

    async def test_update_redirect_id_conflict(self, client, alice, team) -> None:
        await _create(client, alice, team["id"], redirectId="first")
        second = (await _create(client, alice, team["id"], redirectId="second")).json()

        response = await client.patch(
            f"/workspaces/{team['id']}/blinks/{second['id']}",
            headers=alice.headers,
            json={"redirectId": "first"},
        )

        assert response.status_code == 409

    async def test_keep_own_redirect_id(self, client, alice, team) -> None:
        blink = (await _create(client, alice, team["id"], redirectId="mine")).json()

        response = await client.patch(
            f"/workspaces/{team['id']}/blinks/{blink['id']}",
            headers=alice.headers,
            json={"redirectId": "mine", "name": "Still mine"},
        )

        assert response.status_code == 200

    async def test_delete(self, client, bob, team) -> None:
        blink = (await _create(client, bob, team["id"], redirectId="gone")).json()

        response = await client.delete(
            f"/workspaces/{team['id']}/blinks/{blink['id']}", headers=bob.headers
        )

        assert response.status_code == 204
        assert (await client.get("/gone")).status_code == 404

    async def test_creator_deleted_keeps_blink(self, client, alice, bob, team) -> None:
        blink = (await _create(client, bob, team["id"], redirectId="orphan")).json()

        await client.delete(f"/users/{bob.id}", headers=bob.headers)

        response = await client.get(
            f"/workspaces/{team['id']}/blinks/{blink['id']}", headers=alice.headers
        )
        assert response.status_code == 200
        assert response.json()["creatorId"] is None
