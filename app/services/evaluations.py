# app/services/evaluations.py
import logging
import math
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.mappers.evaluation_mapper import build_evaluation_create_model, evaluation_server_to_client
from app.repositories import evaluation_repository, user_repository
from app.schemas.evaluation import EvaluationClient, EvaluationPage
from app.services.cache import StaffCache
from app.utils.ids import is_valid_id

logger = logging.getLogger(__name__)


async def list_evaluations_by_user(
    db: AsyncSession,
    cache: StaffCache,
    user_id: str,
    year: Optional[int] = None,
    page: int = 1,
    page_size: int = 10,
) -> EvaluationPage:
    """Newest first. The user's whole bucket is cached; year and paging apply on top."""
    if not user_id or not is_valid_id(user_id):
        raise ValidationError("Invalid or missing userId")

    page_size = max(1, min(settings.MAX_PAGE_SIZE, page_size))

    bucket = cache.get_cached_evaluations(user_id)
    if bucket is None:
        bucket = await evaluation_repository.list_evaluations_by_user_server(db, user_id)
        cache.set_cached_evaluations(user_id, bucket)
        bucket = cache.get_cached_evaluations(user_id)

    if year is not None:
        bucket = [e for e in bucket if e.effective_year == year]

    total = len(bucket)
    last_page = math.ceil(total / page_size) if total else 1
    page = min(max(1, page), last_page)
    start = (page - 1) * page_size
    return EvaluationPage(
        data=[evaluation_server_to_client(e) for e in bucket[start:start + page_size]],
        total=total,
        page=page,
        page_size=page_size,
    )


async def get_evaluation(db: AsyncSession, evaluation_id: str) -> EvaluationClient:
    evaluation = await evaluation_repository.find_evaluation_by_id(db, evaluation_id)
    if evaluation is None:
        raise NotFoundError("Evaluation not found")
    return evaluation


async def create_evaluation(db: AsyncSession, cache: StaffCache, payload: Mapping[str, Any]) -> EvaluationClient:
    values = build_evaluation_create_model(payload)
    if not await user_repository.exists(db, values["user_id"]):
        raise NotFoundError("User not found")

    created = await evaluation_repository.insert_evaluation_server(db, values)
    cache.add_evaluation_to_cache(created.user_id, created)
    logger.info("Created evaluation %s for user %s", created.id, created.user_id)
    return evaluation_server_to_client(created)


async def update_evaluation(
    db: AsyncSession, cache: StaffCache, evaluation_id: str, patch: Mapping[str, Any]
) -> EvaluationClient:
    updated = await evaluation_repository.update_evaluation_server(db, evaluation_id, patch)
    if updated is None:
        raise NotFoundError("Evaluation not found")
    cache.update_evaluation_in_cache(updated.user_id, updated)
    return evaluation_server_to_client(updated)


async def delete_evaluation(db: AsyncSession, cache: StaffCache, evaluation_id: str) -> None:
    existing = await evaluation_repository.find_evaluation_by_id_server(db, evaluation_id)
    if existing is None:
        raise NotFoundError("Evaluation not found")
    if not await evaluation_repository.delete_evaluation(db, evaluation_id):
        raise NotFoundError("Evaluation not found")
    cache.remove_evaluation_from_cache(existing.user_id, evaluation_id)
    logger.info("Deleted evaluation %s", evaluation_id)
