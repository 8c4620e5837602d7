from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from app.mappers.coerce import blank_to_none, to_bool, to_datetime, to_int, to_number
from app.services.scoring import compute_overall_score

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class EvaluationItemIn(BaseModel):
    model_config = _CAMEL

    course: Optional[str] = None
    completed: Optional[bool] = None
    category: str = ""
    score: Optional[float] = Field(None, ge=0, le=10)
    self_score: Optional[float] = Field(None, ge=0, le=10)

    @field_validator("course", mode="before")
    @classmethod
    def _course(cls, v):
        return blank_to_none(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        # kept as sent (trimmed), never derived from the course
        return v.strip() if isinstance(v, str) else ""

    @field_validator("completed", mode="before")
    @classmethod
    def _completed(cls, v):
        return to_bool(v)

    @field_validator("score", "self_score", mode="before")
    @classmethod
    def _scores(cls, v):
        return to_number(v)


class EvaluationCreate(BaseModel):
    model_config = _CAMEL

    user_id: Optional[str] = None
    year: Optional[int] = None
    evaluation_date: Optional[datetime] = None

    cycle_label: Optional[str] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None

    evaluator_name: Optional[str] = None
    evaluator_email: Optional[EmailStr] = None
    evaluator_id: Optional[str] = None

    items: List[EvaluationItemIn] = []

    employee_comments: Optional[str] = None
    evaluator_comments: Optional[str] = None

    @field_validator("user_id", "cycle_label", "evaluator_name", "evaluator_email",
                     "evaluator_id", "employee_comments", "evaluator_comments", mode="before")
    @classmethod
    def _blank_text(cls, v):
        return blank_to_none(v)

    @field_validator("evaluation_date", "period_start", "period_end", mode="before")
    @classmethod
    def _dates(cls, v):
        return to_datetime(v)

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, v):
        return to_int(v)


class EvaluationUpdate(EvaluationCreate):
    """Partial patch. The owning user cannot be changed through it."""

    items: Optional[List[EvaluationItemIn]] = None


class EvaluationItem(BaseModel):
    course: Optional[str] = None
    completed: Optional[bool] = None
    category: str = ""
    score: Optional[float] = None
    self_score: Optional[float] = None

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return v if isinstance(v, str) else ""


class EvaluationServer(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    year: Optional[int] = None
    evaluation_date: datetime

    cycle_label: Optional[str] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None

    evaluator_name: Optional[str] = None
    evaluator_email: Optional[str] = None
    evaluator_id: Optional[str] = None

    items: List[EvaluationItem] = []

    employee_comments: Optional[str] = None
    evaluator_comments: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    @field_validator("evaluation_date", "period_start", "period_end",
                     "created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, v):
        return to_datetime(v)

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, v):
        return v or []

    @computed_field
    @property
    def overall_score(self) -> Optional[float]:
        return compute_overall_score(self.items)

    @property
    def effective_year(self) -> int:
        return self.year if self.year is not None else self.evaluation_date.year


class EvaluationItemClient(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    course: str
    completed: Optional[bool]
    category: str
    score: Optional[float]
    self_score: Optional[float]


class EvaluationClient(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    year: Optional[int]
    evaluation_date: str

    cycle_label: Optional[str]
    period_start: Optional[str]
    period_end: Optional[str]

    evaluator_name: str
    evaluator_email: str
    evaluator_id: Optional[str]

    items: List[EvaluationItemClient]

    employee_comments: Optional[str]
    evaluator_comments: Optional[str]

    overall_score: Optional[float]

    created_at: str
    updated_at: str


class EvaluationPage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: List[EvaluationClient]
    total: int
    page: int
    page_size: int
