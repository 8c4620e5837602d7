"""
Tests for the document-style store adapter and its error translation.
"""

import asyncio

import pytest

from app.core.exceptions import DuplicateValueError, StoreTimeoutError
from app.models.user import User
from app.repositories.store import DocumentStore


@pytest.fixture
def store(db_session):
    return DocumentStore(db_session, User)


@pytest.mark.asyncio
async def test_create_assigns_id_and_timestamps(store):
    record = await store.create({"first_name": "Ana"})
    assert len(record.id) == 32
    assert record.created_at is not None
    assert record.merits == []


@pytest.mark.asyncio
async def test_update_by_id_sets_only_given_keys(store):
    record = await store.create({"first_name": "Ana", "major": "Biology"})
    updated = await store.update_by_id(record.id, {"major": None})
    assert updated.first_name == "Ana"
    assert updated.major is None


@pytest.mark.asyncio
async def test_not_found_is_none_or_false(store):
    assert await store.find_by_id("0" * 32) is None
    assert await store.update_by_id("0" * 32, {"major": "x"}) is None
    assert await store.delete_by_id("0" * 32) is False
    assert await store.push("0" * 32, "merits", "abc") is False


@pytest.mark.asyncio
async def test_find_many_sort_skip_limit(store):
    for name, rate in [("a", 12), ("b", 15), ("c", 13)]:
        await store.create({"first_name": name, "hourly_pay_rate": rate})

    records = await store.find_many(sort=(("hourly_pay_rate", -1),), skip=1, limit=1)
    assert [r.first_name for r in records] == ["c"]
    assert await store.count() == 3
    assert await store.count({"first_name": "a"}) == 1


@pytest.mark.asyncio
async def test_push_appends(store):
    record = await store.create({"first_name": "Ana"})
    assert await store.push(record.id, "merits", "m1")
    assert await store.push(record.id, "merits", "m2")
    assert (await store.find_by_id(record.id)).merits == ["m1", "m2"]


@pytest.mark.asyncio
async def test_duplicate_value(store):
    await store.create({"mav_id": 1001})
    with pytest.raises(DuplicateValueError, match="duplicate value"):
        await store.create({"mav_id": 1001})
    # session is usable again after the rollback
    assert await store.count() == 1


@pytest.mark.asyncio
async def test_upsert(store):
    created = await store.update_one({"mav_id": 7}, {"first_name": "Kai"}, upsert=True)
    updated = await store.update_one({"mav_id": 7}, {"last_name": "N"}, upsert=True)
    assert created.id == updated.id
    assert updated.first_name == "Kai"
    assert await store.update_one({"mav_id": 8}, {"first_name": "x"}) is None


@pytest.mark.asyncio
async def test_timeout(db_session):
    store = DocumentStore(db_session, User, timeout=0.01)
    with pytest.raises(StoreTimeoutError):
        await store._run(asyncio.sleep(1))
