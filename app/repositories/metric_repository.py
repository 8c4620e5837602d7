# app/repositories/metric_repository.py
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import MetricType
from app.models.metric import Metric
from app.repositories.store import DocumentStore


def _store(db: AsyncSession) -> DocumentStore:
    return DocumentStore(db, Metric)


async def create_metric(
    db: AsyncSession, user_id: str, metric_type: MetricType, comment: str, added_by: str
) -> Metric:
    return await _store(db).create({
        "user_id": user_id,
        "metric_type": metric_type.value,
        "comment": comment,
        "added_by": added_by,
    })


async def delete_metric(db: AsyncSession, metric_id: str) -> bool:
    return await _store(db).delete_by_id(metric_id)


async def list_metrics_for_user(db: AsyncSession, user_id: str) -> List[Metric]:
    return await _store(db).find_many({"user_id": user_id}, (("created_at", -1),))
