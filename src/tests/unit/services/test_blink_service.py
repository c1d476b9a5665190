"""Tests for BlinkService lookups, pagination and the redirect cache."""

import pytest

from blink.core.errors import (
    BlinkNotFoundError,
    RedirectIdReservedError,
    RedirectNotFoundError,
)
from blink.infra import redirect_cache


@pytest.fixture
async def owner(db, services):
    user = await services.users.register(db, "Alice", "alice@example.com", "secret12")
    workspace = await services.workspaces.get_default(db, user.id)
    return user, workspace


class TestList:
    async def test_pagination_and_total(self, db, services, owner) -> None:
        user, ws = owner
        for i in range(5):
            await services.blinks.create(
                db, ws.id, user.id, name=f"Link {i}", url="https://example.com"
            )

        page = await services.blinks.list(db, ws.id, page=2, limit=2)

        assert page.total == 5
        assert [b.name for b in page.items] == ["Link 2", "Link 1"]

    async def test_name_filter_escapes_wildcards(self, db, services, owner) -> None:
        user, ws = owner
        await services.blinks.create(db, ws.id, user.id, name="100%", url="https://example.com")
        await services.blinks.create(db, ws.id, user.id, name="1000", url="https://example.com")

        page = await services.blinks.list(db, ws.id, name="0%")

        assert [b.name for b in page.items] == ["100%"]


class TestLookup:
    async def test_get_scoped_to_workspace(self, db, services, owner) -> None:
        user, ws = owner
        other = await services.workspaces.create(db, user.id, "Other")
        blink = await services.blinks.create(
            db, ws.id, user.id, name="Docs", url="https://example.com"
        )

        with pytest.raises(BlinkNotFoundError):
            await services.blinks.get(db, other.id, blink.id)

    async def test_resolve_caches_hits_only(self, db, services, owner) -> None:
        user, ws = owner
        await services.blinks.create(
            db, ws.id, user.id, name="Docs", url="https://example.com", redirect_id="guide"
        )

        assert await services.blinks.resolve_redirect_url(db, "guide") == "https://example.com"
        assert redirect_cache["guide"].result() == "https://example.com"

        with pytest.raises(RedirectNotFoundError):
            await services.blinks.resolve_redirect_url(db, "missing")
        assert "missing" not in redirect_cache

    async def test_delete_evicts(self, db, services, owner) -> None:
        user, ws = owner
        blink = await services.blinks.create(
            db, ws.id, user.id, name="Docs", url="https://example.com", redirect_id="guide"
        )
        await services.blinks.resolve_redirect_url(db, "guide")

        await services.blinks.delete(db, ws.id, blink.id)

        assert "guide" not in redirect_cache
        with pytest.raises(RedirectNotFoundError):
            await services.blinks.resolve_redirect_url(db, "guide")

    async def test_repeated_misses_leave_cache_empty(self, db, services) -> None:
        for i in range(5):
            with pytest.raises(RedirectNotFoundError):
                await services.blinks.resolve_redirect_url(db, f"scan{i}")

        assert len(redirect_cache) == 0

    async def test_reserved_redirect_id_rejected(self, db, services, owner) -> None:
        user, ws = owner

        with pytest.raises(RedirectIdReservedError):
            await services.blinks.create(
                db, ws.id, user.id, name="Health", url="https://example.com", redirect_id="health"
            )
