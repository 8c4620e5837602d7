# app/services/metrics.py
"""Merit/demerit notes.

Adding one takes two store writes: insert the Metric, then append its id to
the user's merits or demerits list. If the second write fails, the Metric is
deleted again so no orphan note is left behind.
"""
import logging
from typing import Any, List, Mapping, Union

import pydantic
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import MetricType, as_enum
from app.core.exceptions import NotFoundError, StoreError, ValidationError, validation_error_from
from app.mappers.metric_mapper import metric_record_to_client
from app.repositories import metric_repository, user_repository
from app.schemas.metric import MetricClient, MetricCreate
from app.services.cache import StaffCache
from app.services.users import reload_user_in_cache

logger = logging.getLogger(__name__)

LIST_FIELD = {
    MetricType.MERIT: "merits",
    MetricType.DEMERIT: "demerits",
}


async def add_metric(
    db: AsyncSession,
    cache: StaffCache,
    user_id: str,
    payload: Union[MetricCreate, Mapping[str, Any]],
    added_by: str,
) -> MetricClient:
    payload = _parse(payload)
    comment = (payload.comment or "").strip()
    if not payload.metric_type or not comment:
        raise ValidationError("metricType and comment are required")
    metric_type = as_enum(payload.metric_type, MetricType)
    if metric_type is None:
        raise ValidationError("Invalid metricType")

    if not await user_repository.exists(db, user_id):
        raise NotFoundError("User not found")

    metric = await metric_repository.create_metric(db, user_id, metric_type, comment, added_by)

    try:
        pushed = await user_repository.push_metric(db, user_id, LIST_FIELD[metric_type], metric.id)
    except StoreError:
        await _compensate(db, metric.id)
        raise
    if not pushed:
        # user deleted between the existence check and the push
        await _compensate(db, metric.id)
        raise NotFoundError("User not found")

    await reload_user_in_cache(db, cache, user_id)
    return metric_record_to_client(metric)


def _parse(payload) -> MetricCreate:
    if isinstance(payload, MetricCreate):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError("Metric payload must be an object")
    try:
        return MetricCreate.model_validate(dict(payload))
    except pydantic.ValidationError as e:
        raise validation_error_from(e) from e


async def _compensate(db: AsyncSession, metric_id: str) -> None:
    logger.warning("Rolling back metric %s after failed user update", metric_id)
    try:
        await metric_repository.delete_metric(db, metric_id)
    except StoreError:
        # the push failure is the one re-raised to the caller
        logger.exception("Could not delete orphaned metric %s", metric_id)


async def list_metrics(db: AsyncSession, user_id: str) -> List[MetricClient]:
    if not await user_repository.exists(db, user_id):
        raise NotFoundError("User not found")
    records = await metric_repository.list_metrics_for_user(db, user_id)
    return [metric_record_to_client(r) for r in records]
