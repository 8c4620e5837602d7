from datetime import date, datetime, timezone
from typing import Optional, Union

from app.core.enums import RolePosition, as_enum

# Maximum payable hourly rate per role. Roles missing here have no raise schedule.
ROLE_PAY_CAPS: dict[RolePosition, float] = {
    RolePosition.FRONT_DESK_ASSISTANT: 13,
    RolePosition.FRONT_DESK_TRAINER_OR_LEAD: 15,
    RolePosition.MARKETING_WEBSITE_ASSISTANT: 14,
    RolePosition.BUILDING_MANAGEMENT_ASSOCIATE: 15,
    RolePosition.CAMPUS_INFORMATION_ASSISTANT: 13,
    RolePosition.CAMPUS_INFORMATION_ASSISTANT_TRAINER: 15,
    RolePosition.CAMPUS_INFORMATION_ASSISTANT_LEAD: 16,
    RolePosition.SETUP_CREW: 12,
    RolePosition.CREW_LEAD: 13,
    RolePosition.EVENT_PERSONNEL: 16,
    RolePosition.OPERATIONS_ASSISTANT: 16,
    RolePosition.DEPARTMENT_HEAD: 15,
    RolePosition.TECHNICIAN: 18,
    RolePosition.OPERATIONS: 20,
}


def get_pay_cap(role) -> Optional[float]:
    member = as_enum(role, RolePosition)
    if member is None:
        return None
    return ROLE_PAY_CAPS.get(member)


def compute_next_raise_eligibility(
    role,
    hourly_pay_rate: Optional[float],
    date_hired: Optional[Union[date, datetime]],
    most_recent_raise_granted: Optional[Union[date, datetime]] = None,
) -> Optional[datetime]:
    """Next date a staff member becomes eligible for a raise, or None.

    None means "not applicable": the role has no cap, the pay rate is unknown
    or already at the cap, or there is no hire date to anchor the schedule.

    The schedule is anchored on the hire month. The anchor year is the year
    after the most recent raise, or the year after hiring when no raise has
    been granted yet. Month and year are read from the dates as given; an
    offset is never applied, so a day on a month boundary keeps its month.
    The result is 00:00 UTC on the first of that month.
    """
    cap = get_pay_cap(role)
    if cap is None or hourly_pay_rate is None:
        return None
    if hourly_pay_rate >= cap:
        return None
    if date_hired is None:
        return None

    if most_recent_raise_granted is not None:
        base_year = most_recent_raise_granted.year + 1
    else:
        base_year = date_hired.year + 1

    return datetime(base_year, date_hired.month, 1, tzinfo=timezone.utc)
