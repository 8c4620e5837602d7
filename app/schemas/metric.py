from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

from app.core.enums import MetricType


class MetricCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    metric_type: Optional[str] = None
    comment: Optional[str] = None


class MetricClient(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    metric_type: MetricType
    comment: str
    added_by: str
    user_id: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
