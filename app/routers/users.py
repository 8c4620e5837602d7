from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional
from app.database import get_db
from app.core.auth import get_current_identity
from app.core.exceptions import DomainError, to_http_exception
from app.schemas.metric import MetricClient
from app.schemas.user import UserClient, UserPage
from app.services import metrics as metric_service
from app.services import users as user_service
from app.services.cache import StaffCache, get_cache

router = APIRouter(prefix="/users", tags=["users"])


def _split(value: Optional[str]) -> List[str]:
    return [v for v in (value or "").split(",") if v.strip()]


@router.get("", response_model=UserPage)
async def list_users(
    search: str = "",
    position_filter: Optional[str] = Query(None, alias="positionFilter"),
    status_filter: Optional[str] = Query(None, alias="statusFilter"),
    page: int = 1,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    filters = user_service.UserFilters(
        search=search,
        roles=_split(position_filter),
        statuses=_split(status_filter),
    )
    try:
        return await user_service.list_users(db, cache, filters, page=page, limit=limit, sort=sort)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("", response_model=UserClient, status_code=201)
async def create_user(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
    identity: str = Depends(get_current_identity),
):
    try:
        return await user_service.create_user(db, cache, payload, edited_by=identity)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/refresh")
async def refresh_cache(
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    try:
        total = await user_service.refresh_users_cache(db, cache)
    except DomainError as e:
        raise to_http_exception(e)
    return {"message": "Cache refreshed successfully", "total": total}


@router.get("/mav/{mav_id}", response_model=UserClient)
async def get_user_by_mav_id(mav_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await user_service.get_user_by_mav_id(db, mav_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/mav/{mav_id}", response_model=UserClient)
async def upsert_user_by_mav_id(
    mav_id: int,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
    identity: str = Depends(get_current_identity),
):
    try:
        return await user_service.upsert_user_by_mav_id(db, cache, mav_id, payload, edited_by=identity)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/mav/{mav_id}")
async def delete_user_by_mav_id(
    mav_id: int,
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    try:
        await user_service.delete_user_by_mav_id(db, cache, mav_id)
    except DomainError as e:
        raise to_http_exception(e)
    return {"ok": True}


@router.get("/{user_id}", response_model=UserClient)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    try:
        return await user_service.get_user(db, user_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{user_id}", response_model=UserClient)
async def update_user(
    user_id: str,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
    identity: str = Depends(get_current_identity),
):
    try:
        return await user_service.update_user(db, cache, user_id, payload, edited_by=identity)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    try:
        await user_service.delete_user(db, cache, user_id)
    except DomainError as e:
        raise to_http_exception(e)
    return {"ok": True}


@router.get("/{user_id}/metrics", response_model=List[MetricClient])
async def list_metrics(user_id: str, db: AsyncSession = Depends(get_db)):
    try:
        return await metric_service.list_metrics(db, user_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{user_id}/metrics", response_model=MetricClient, status_code=201)
async def add_metric(
    user_id: str,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
    identity: str = Depends(get_current_identity),
):
    try:
        return await metric_service.add_metric(db, cache, user_id, payload, added_by=identity)
    except DomainError as e:
        raise to_http_exception(e)
