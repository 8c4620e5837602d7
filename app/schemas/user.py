from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date, datetime

from app.core.enums import RolePosition, ShirtSize, UserStatus, as_enum
from app.mappers.coerce import blank_to_none, to_bool, to_date, to_datetime, to_int, to_number
from app.services.raise_eligibility import compute_next_raise_eligibility

TEXT_FIELDS = (
    "first_name", "last_name", "w2w_employee_id", "teams_id", "phone_number",
    "dietary_restrictions", "favorite_plant", "address", "major", "updated_by",
)
# calendar days, stored without a time or offset
DATE_FIELDS = (
    "date_hired", "graduation_date", "birthday", "most_recent_raise_granted",
)
BOOL_FIELDS = ("has_a_second_job", "has_ssn", "key_request")


class UserUpsert(BaseModel):
    """Create/update payload. Only the keys the caller sends are written."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role_position: Optional[RolePosition] = None

    mav_id: Optional[int] = None
    w2w_employee_id: Optional[str] = None
    teams_id: Optional[str] = None

    status: Optional[UserStatus] = None
    phone_number: Optional[str] = None
    student_email: Optional[EmailStr] = None
    work_email: Optional[EmailStr] = None

    shirt_size: Optional[ShirtSize] = None

    date_hired: Optional[date] = None
    graduation_date: Optional[date] = None
    birthday: Optional[date] = None
    most_recent_raise_granted: Optional[date] = None

    hourly_pay_rate: Optional[float] = Field(None, ge=0)

    dietary_restrictions: Optional[str] = None
    favorite_plant: Optional[str] = None
    address: Optional[str] = None
    major: Optional[str] = None

    last_edited_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    has_a_second_job: Optional[bool] = None
    has_ssn: Optional[bool] = None
    key_request: Optional[bool] = None

    @field_validator(*TEXT_FIELDS, "student_email", "work_email", mode="before")
    @classmethod
    def _blank_text(cls, v):
        return blank_to_none(v)

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def _dates(cls, v):
        return to_date(v)

    @field_validator("last_edited_at", mode="before")
    @classmethod
    def _edited_at(cls, v):
        return to_datetime(v)

    @field_validator(*BOOL_FIELDS, mode="before")
    @classmethod
    def _flags(cls, v):
        return to_bool(v)

    @field_validator("role_position", mode="before")
    @classmethod
    def _role(cls, v):
        return as_enum(v, RolePosition)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return as_enum(v, UserStatus)

    @field_validator("shirt_size", mode="before")
    @classmethod
    def _shirt_size(cls, v):
        return as_enum(v, ShirtSize)

    @field_validator("mav_id", mode="before")
    @classmethod
    def _mav_id(cls, v):
        return to_int(v)

    @field_validator("hourly_pay_rate", mode="before")
    @classmethod
    def _pay_rate(cls, v):
        return to_number(v)


class UserServer(BaseModel):
    """Business-logic view of a user: native datetimes, explicit nulls."""

    model_config = ConfigDict(from_attributes=True)

    id: str

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role_position: Optional[RolePosition] = None

    mav_id: Optional[int] = None
    w2w_employee_id: Optional[str] = None
    teams_id: Optional[str] = None

    status: Optional[UserStatus] = None
    phone_number: Optional[str] = None
    student_email: Optional[str] = None
    work_email: Optional[str] = None

    shirt_size: Optional[ShirtSize] = None

    date_hired: Optional[date] = None
    graduation_date: Optional[date] = None
    birthday: Optional[date] = None
    most_recent_raise_granted: Optional[date] = None

    hourly_pay_rate: Optional[float] = None

    dietary_restrictions: Optional[str] = None
    favorite_plant: Optional[str] = None
    address: Optional[str] = None
    major: Optional[str] = None

    last_edited_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    has_a_second_job: Optional[bool] = None
    has_ssn: Optional[bool] = None
    key_request: Optional[bool] = None

    merits: List[str] = []
    demerits: List[str] = []

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def _dates(cls, v):
        return to_date(v)

    @field_validator("last_edited_at", "created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, v):
        return to_datetime(v)

    @field_validator("role_position", mode="before")
    @classmethod
    def _role(cls, v):
        return as_enum(v, RolePosition)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return as_enum(v, UserStatus)

    @field_validator("shirt_size", mode="before")
    @classmethod
    def _shirt_size(cls, v):
        return as_enum(v, ShirtSize)

    @field_validator("merits", "demerits", mode="before")
    @classmethod
    def _ids(cls, v):
        return [str(i) for i in v] if v else []

    @computed_field
    @property
    def next_raise_eligibility(self) -> Optional[datetime]:
        # Recomputed on every access, never stored
        return compute_next_raise_eligibility(
            self.role_position,
            self.hourly_pay_rate,
            self.date_hired,
            self.most_recent_raise_granted,
        )


class UserClient(BaseModel):
    """JSON transport view: ISO-8601 strings for every date."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str

    first_name: Optional[str]
    last_name: Optional[str]
    role_position: Optional[RolePosition]

    mav_id: Optional[int]
    w2w_employee_id: Optional[str]
    teams_id: Optional[str]

    status: Optional[UserStatus]
    phone_number: Optional[str]
    student_email: Optional[str]
    work_email: Optional[str]

    shirt_size: Optional[ShirtSize]

    date_hired: Optional[str]
    graduation_date: Optional[str]
    birthday: Optional[str]
    most_recent_raise_granted: Optional[str]

    hourly_pay_rate: Optional[float]

    dietary_restrictions: Optional[str]
    favorite_plant: Optional[str]
    address: Optional[str]
    major: Optional[str]

    last_edited_at: Optional[str]
    updated_by: Optional[str]

    has_a_second_job: Optional[bool]
    has_ssn: Optional[bool]
    key_request: Optional[bool]

    merits: List[str]
    demerits: List[str]

    next_raise_eligibility: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]


class UserPage(BaseModel):
    data: List[UserClient]
    total: int
    page: int
    pages: int
    limit: int
