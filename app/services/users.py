# app/services/users.py
"""User use cases: write to the store first, then patch the cache.

A store call that raises leaves the cache untouched. Reads are served from
the cache and hydrate it from the store on first use.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from pydantic.alias_generators import to_snake
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import NotFoundError
from app.mappers.user_mapper import user_server_to_client
from app.repositories import user_repository
from app.schemas.user import UserClient, UserPage, UserServer
from app.services.cache import StaffCache

logger = logging.getLogger(__name__)


@dataclass
class UserFilters:
    search: str = ""
    roles: List[str] = field(default_factory=list)
    statuses: List[str] = field(default_factory=list)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def matches(user: UserServer, filters: UserFilters) -> bool:
    search = filters.search.strip().lower()
    if search:
        hit = (
            search in _text(user.first_name).lower()
            or search in _text(user.last_name).lower()
            or search in _text(user.student_email).lower()
            or search in _text(user.work_email).lower()
            or _text(user.mav_id).lower() == search
        )
        if not hit:
            return False
    if filters.roles:
        if user.role_position is None or user.role_position.value not in filters.roles:
            return False
    if filters.statuses:
        wanted = {s.strip().lower() for s in filters.statuses}
        if user.status is None or user.status.value.lower() not in wanted:
            return False
    return True


def sort_users(users: List[UserServer], sort: Optional[str]) -> List[UserServer]:
    """``sort`` is a field name, camelCase or snake_case, "-" prefixed for
    descending. Nulls always sort last; unknown fields leave the order alone.
    """
    if not sort:
        return users
    descending = sort.startswith("-")
    key = to_snake(sort.lstrip("-"))
    if key not in UserServer.model_fields and key != "next_raise_eligibility":
        return users

    present = [u for u in users if getattr(u, key) is not None]
    missing = [u for u in users if getattr(u, key) is None]

    def _key(u):
        value = getattr(u, key)
        return value.lower() if isinstance(value, str) else value

    return sorted(present, key=_key, reverse=descending) + missing


async def load_users(db: AsyncSession, cache: StaffCache) -> List[UserServer]:
    users = cache.get_cached_users()
    if users is None:
        users = await user_repository.list_all_server(db)
        cache.set_cached_users(users)
    return users


async def list_users(
    db: AsyncSession,
    cache: StaffCache,
    filters: Optional[UserFilters] = None,
    page: int = 1,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
) -> UserPage:
    limit = max(1, min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE))
    users = await load_users(db, cache)
    filtered = [u for u in users if matches(u, filters or UserFilters())]
    filtered = sort_users(filtered, sort)

    total = len(filtered)
    pages = max(1, math.ceil(total / limit))
    page = min(max(1, page), pages)
    start = (page - 1) * limit
    return UserPage(
        data=[user_server_to_client(u) for u in filtered[start:start + limit]],
        total=total,
        page=page,
        pages=pages,
        limit=limit,
    )


async def get_user(db: AsyncSession, user_id: str) -> UserClient:
    user = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_by_mav_id(db: AsyncSession, mav_id: int) -> UserClient:
    user = await user_repository.get_by_mav_id(db, mav_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def create_user(
    db: AsyncSession, cache: StaffCache, payload: Mapping[str, Any], edited_by: Optional[str] = None
) -> UserClient:
    created = await user_repository.create_user_server(db, payload, edited_by)
    cache.add_user_to_cache(created)
    logger.info("Created user %s", created.id)
    return user_server_to_client(created)


async def update_user(
    db: AsyncSession,
    cache: StaffCache,
    user_id: str,
    payload: Mapping[str, Any],
    edited_by: Optional[str] = None,
) -> UserClient:
    updated = await user_repository.update_user_by_id_server(db, user_id, payload, edited_by)
    if updated is None:
        raise NotFoundError("User not found")
    cache.update_user_in_cache(updated)
    return user_server_to_client(updated)


async def upsert_user_by_mav_id(
    db: AsyncSession,
    cache: StaffCache,
    mav_id: int,
    payload: Mapping[str, Any],
    edited_by: Optional[str] = None,
) -> UserClient:
    user = await user_repository.upsert_by_mav_id_server(db, mav_id, payload, edited_by)
    if any(u.id == user.id for u in cache.get_cached_users() or []):
        cache.update_user_in_cache(user)
    else:
        cache.add_user_to_cache(user)
    return user_server_to_client(user)


async def delete_user(db: AsyncSession, cache: StaffCache, user_id: str) -> None:
    """Evaluations and metrics that point at the user are left in place."""
    deleted = await user_repository.delete_user_by_id(db, user_id)
    if not deleted:
        raise NotFoundError("User not found")
    cache.remove_user_from_cache(user_id)
    logger.info("Deleted user %s", user_id)


async def delete_user_by_mav_id(db: AsyncSession, cache: StaffCache, mav_id: int) -> None:
    user_id = await user_repository.delete_user_by_mav_id(db, mav_id)
    if user_id is None:
        raise NotFoundError("User not found")
    cache.remove_user_from_cache(user_id)
    logger.info("Deleted user %s (mavId %s)", user_id, mav_id)


async def refresh_users_cache(db: AsyncSession, cache: StaffCache) -> int:
    users = await user_repository.list_all_server(db)
    cache.set_cached_users(users)
    return len(users)


async def reload_user_in_cache(db: AsyncSession, cache: StaffCache, user_id: str) -> Optional[UserServer]:
    user = await user_repository.get_server_by_id(db, user_id)
    if user is not None:
        cache.update_user_in_cache(user)
    return user
