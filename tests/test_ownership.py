"""
Test Ownership Guard

This module tests the ownership guard and its per-call cache.
"""

import pytest
from bson import ObjectId

from timekeeper.shared.errors import ForbiddenError, NotFoundError
from timekeeper.shared.ownership import EntityKind, OwnershipCache, ensure_owned


@pytest.mark.asyncio
async def test_returns_owned_document(db, seed):
    client_id = await seed.client("user_a", "Acme")

    document = await ensure_owned(db, EntityKind.CLIENT, str(client_id), "user_a")

    assert document["_id"] == client_id
    assert document["name"] == "Acme"


@pytest.mark.asyncio
async def test_accepts_object_ids(db, seed):
    client_id = await seed.client("user_a")
    project_id = await seed.project("user_a", client_id)

    document = await ensure_owned(db, EntityKind.PROJECT, project_id, "user_a")
    assert document["client_id"] == client_id


@pytest.mark.asyncio
async def test_other_users_entity_is_forbidden(db, seed):
    client_id = await seed.client("user_b")
    with pytest.raises(ForbiddenError):
        await ensure_owned(db, EntityKind.CLIENT, str(client_id), "user_a")


@pytest.mark.asyncio
@pytest.mark.parametrize("entity_id", ["", "abc", "zzzzzzzzzzzzzzzzzzzzzzzz", str(ObjectId()), None])
async def test_missing_or_malformed_id_is_not_found(db, entity_id):
    with pytest.raises(NotFoundError):
        await ensure_owned(db, EntityKind.TIME_ENTRY, entity_id, "user_a")


@pytest.mark.asyncio
async def test_kind_is_not_interchangeable(db, seed):
    client_id = await seed.client("user_a")
    with pytest.raises(NotFoundError):
        await ensure_owned(db, EntityKind.PROJECT, str(client_id), "user_a")


@pytest.mark.asyncio
async def test_cache_looks_up_each_id_once(db, seed, monkeypatch):
    client_id = await seed.client("user_a")
    calls = []

    import timekeeper.shared.ownership as ownership
    original = ownership.ensure_owned

    async def counting(*args):
        calls.append(args)
        return await original(*args)

    monkeypatch.setattr(ownership, "ensure_owned", counting)
    owners = OwnershipCache(db, "user_a")

    first = await owners.get(EntityKind.CLIENT, client_id)
    second = await owners.get(EntityKind.CLIENT, str(client_id))

    assert first is second
    assert len(calls) == 1
