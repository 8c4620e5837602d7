# app/repositories/user_repository.py
"""Store access for users. Every read returns the client representation."""
import math
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.mappers.user_mapper import (
    build_user_write_model, stamp_edit, user_record_to_client, user_record_to_server,
    user_server_to_client,
)
from app.models.user import User
from app.repositories.store import DocumentStore, SortSpec
from app.schemas.user import UserClient, UserPage, UserServer, UserUpsert
from app.utils.ids import is_valid_id

UserPayload = Union[UserUpsert, Mapping[str, Any]]

NEWEST_FIRST: SortSpec = (("created_at", -1),)


def _store(db: AsyncSession) -> DocumentStore:
    return DocumentStore(db, User)


def _check_id(user_id: str) -> None:
    if not is_valid_id(user_id):
        raise ValidationError("Invalid user id")


async def get_by_id(db: AsyncSession, user_id: str) -> Optional[UserClient]:
    server = await get_server_by_id(db, user_id)
    return user_server_to_client(server) if server else None


async def get_server_by_id(db: AsyncSession, user_id: str) -> Optional[UserServer]:
    _check_id(user_id)
    record = await _store(db).find_by_id(user_id)
    return user_record_to_server(record) if record else None


async def get_by_mav_id(db: AsyncSession, mav_id: int) -> Optional[UserClient]:
    record = await _store(db).find_one({"mav_id": mav_id})
    return user_record_to_client(record) if record else None


async def exists(db: AsyncSession, user_id: str) -> bool:
    _check_id(user_id)
    return await _store(db).exists({"id": user_id})


async def list_users(
    db: AsyncSession,
    filter: Optional[Dict[str, Any]] = None,
    sort: Optional[SortSpec] = None,
    page: int = 1,
    limit: int = 20,
) -> UserPage:
    """Paged listing straight from the store (no cache involved)."""
    limit = max(1, limit)
    page = max(1, page)
    store = _store(db)
    records = await store.find_many(filter, sort or NEWEST_FIRST, skip=(page - 1) * limit, limit=limit)
    total = await store.count(filter)
    return UserPage(
        data=[user_record_to_client(r) for r in records],
        total=total,
        page=page,
        pages=max(1, math.ceil(total / limit)),
        limit=limit,
    )


async def list_all_server(db: AsyncSession) -> List[UserServer]:
    records = await _store(db).find_many(sort=NEWEST_FIRST)
    return [user_record_to_server(r) for r in records]


async def create_user_server(
    db: AsyncSession, payload: UserPayload, edited_by: Optional[str] = None
) -> UserServer:
    record = await _store(db).create(stamp_edit(build_user_write_model(payload), edited_by))
    return user_record_to_server(record)


async def create_user(db: AsyncSession, payload: UserPayload) -> UserClient:
    return user_server_to_client(await create_user_server(db, payload))


async def update_user_by_id_server(
    db: AsyncSession, user_id: str, payload: UserPayload, edited_by: Optional[str] = None
) -> Optional[UserServer]:
    _check_id(user_id)
    values = stamp_edit(build_user_write_model(payload), edited_by)
    record = await _store(db).update_by_id(user_id, values)
    return user_record_to_server(record) if record else None


async def update_user_by_id(db: AsyncSession, user_id: str, payload: UserPayload) -> Optional[UserClient]:
    server = await update_user_by_id_server(db, user_id, payload)
    return user_server_to_client(server) if server else None


async def upsert_by_mav_id_server(
    db: AsyncSession, mav_id: int, payload: UserPayload, edited_by: Optional[str] = None
) -> UserServer:
    values = stamp_edit(build_user_write_model(payload), edited_by)
    values.pop("mav_id", None)
    record = await _store(db).update_one({"mav_id": mav_id}, values, upsert=True)
    return user_record_to_server(record)


async def delete_user_by_id(db: AsyncSession, user_id: str) -> bool:
    _check_id(user_id)
    return await _store(db).delete_by_id(user_id)


async def delete_user_by_mav_id(db: AsyncSession, mav_id: int) -> Optional[str]:
    """Delete by mavId; returns the deleted user's id, or None if there was none."""
    store = _store(db)
    record = await store.find_one({"mav_id": mav_id})
    if record is None:
        return None
    user_id = record.id
    return user_id if await store.delete_by_id(user_id) else None


async def push_metric(db: AsyncSession, user_id: str, field: str, metric_id: str) -> bool:
    _check_id(user_id)
    return await _store(db).push(user_id, field, metric_id)
