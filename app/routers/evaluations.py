from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Optional
from app.database import get_db
from app.core.exceptions import DomainError, to_http_exception
from app.schemas.evaluation import EvaluationClient, EvaluationPage
from app.services import evaluations as evaluation_service
from app.services.cache import StaffCache, get_cache

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.get("", response_model=EvaluationPage)
async def list_evaluations(
    user_id: str = Query("", alias="userId"),
    year: Optional[int] = None,
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    try:
        return await evaluation_service.list_evaluations_by_user(
            db, cache, user_id, year=year, page=page, page_size=page_size
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.post("", response_model=EvaluationClient, status_code=201)
async def create_evaluation(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    try:
        return await evaluation_service.create_evaluation(db, cache, payload)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{evaluation_id}", response_model=EvaluationClient)
async def get_evaluation(evaluation_id: str, db: AsyncSession = Depends(get_db)):
    try:
        return await evaluation_service.get_evaluation(db, evaluation_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{evaluation_id}", response_model=EvaluationClient)
async def update_evaluation(
    evaluation_id: str,
    patch: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    try:
        return await evaluation_service.update_evaluation(db, cache, evaluation_id, patch)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{evaluation_id}")
async def delete_evaluation(
    evaluation_id: str,
    db: AsyncSession = Depends(get_db),
    cache: StaffCache = Depends(get_cache),
):
    try:
        await evaluation_service.delete_evaluation(db, cache, evaluation_id)
    except DomainError as e:
        raise to_http_exception(e)
    return {"message": "Evaluation deleted"}
