# app/mappers/metric_mapper.py
from typing import Any

from app.mappers.coerce import to_datetime, to_iso
from app.schemas.metric import MetricClient


def metric_record_to_client(record: Any) -> MetricClient:
    return MetricClient(
        id=record.id,
        metric_type=record.metric_type,
        comment=record.comment,
        added_by=record.added_by,
        user_id=record.user_id,
        created_at=to_iso(to_datetime(record.created_at)),
        updated_at=to_iso(to_datetime(record.updated_at)),
    )
