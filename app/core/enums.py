# app/core/enums.py
from enum import Enum
from typing import Any, Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


class RolePosition(str, Enum):
    DEPARTMENT_HEAD = "Department Head"
    TECHNICIAN = "Technician"
    OPERATIONS = "Operations"
    CREW_LEAD = "Crew Lead"
    FRONT_DESK_ASSISTANT = "Front Desk Assistant"
    FRONT_DESK_TRAINER_OR_LEAD = "Front Desk Trainer or Lead"
    MARKETING_WEBSITE_ASSISTANT = "Marketing | Website Assistant"
    BUILDING_MANAGEMENT_ASSOCIATE = "Building Management Associate"
    CAMPUS_INFORMATION_ASSISTANT = "Campus Information Assistant"
    CAMPUS_INFORMATION_ASSISTANT_TRAINER = "Campus Information Assistant Trainer"
    CAMPUS_INFORMATION_ASSISTANT_LEAD = "Campus Information Assistant Lead"
    SETUP_CREW = "Crew Member"
    EVENT_PERSONNEL = "Event Personnel"
    OPERATIONS_ASSISTANT = "Operations Assistant"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ShirtSize(str, Enum):
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "2XL"


class MetricType(str, Enum):
    MERIT = "merit"
    DEMERIT = "demerit"


def as_enum(value: Any, enum_cls: Type[E]) -> Optional[E]:
    """Return the member of ``enum_cls`` whose value is ``value``, else None.

    Unknown values are nulled rather than rejected so a stale form option
    never fails a whole write.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None
