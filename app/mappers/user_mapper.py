# app/mappers/user_mapper.py
"""Store row <-> server model <-> client model for users."""
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

import pydantic

from app.core.exceptions import ValidationError, validation_error_from
from app.mappers.coerce import date_to_iso, to_iso
from app.schemas.user import UserClient, UserServer, UserUpsert
from app.utils.ids import utcnow


def user_record_to_server(record: Any) -> UserServer:
    """Accepts an ORM row or a plain mapping; absent fields become None."""
    if isinstance(record, Mapping):
        return UserServer.model_validate(dict(record))
    return UserServer.model_validate(record, from_attributes=True)


def user_server_to_client(s: UserServer) -> UserClient:
    return UserClient(
        id=s.id,
        first_name=s.first_name,
        last_name=s.last_name,
        role_position=s.role_position,
        mav_id=s.mav_id,
        w2w_employee_id=s.w2w_employee_id,
        teams_id=s.teams_id,
        status=s.status,
        phone_number=s.phone_number,
        student_email=s.student_email,
        work_email=s.work_email,
        shirt_size=s.shirt_size,
        date_hired=date_to_iso(s.date_hired),
        graduation_date=date_to_iso(s.graduation_date),
        birthday=date_to_iso(s.birthday),
        most_recent_raise_granted=date_to_iso(s.most_recent_raise_granted),
        hourly_pay_rate=s.hourly_pay_rate,
        dietary_restrictions=s.dietary_restrictions,
        favorite_plant=s.favorite_plant,
        address=s.address,
        major=s.major,
        last_edited_at=to_iso(s.last_edited_at),
        updated_by=s.updated_by,
        has_a_second_job=s.has_a_second_job,
        has_ssn=s.has_ssn,
        key_request=s.key_request,
        merits=list(s.merits),
        demerits=list(s.demerits),
        next_raise_eligibility=to_iso(s.next_raise_eligibility),
        created_at=to_iso(s.created_at),
        updated_at=to_iso(s.updated_at),
    )


def user_record_to_client(record: Any) -> UserClient:
    return user_server_to_client(user_record_to_server(record))


def parse_user_payload(payload: Union[UserUpsert, Mapping[str, Any]]) -> UserUpsert:
    if isinstance(payload, UserUpsert):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError("User payload must be an object")
    try:
        return UserUpsert.model_validate(dict(payload))
    except pydantic.ValidationError as e:
        raise validation_error_from(e) from e


def build_user_write_model(payload: Union[UserUpsert, Mapping[str, Any]]) -> Dict[str, Any]:
    """Column values for a create or a partial ($set) update.

    Only keys present in the payload are emitted, so omitted fields stay
    untouched and explicit nulls clear. Derived fields, ids, timestamps and
    the merit/demerit lists are never part of the result.
    """
    upsert = parse_user_payload(payload)
    values = upsert.model_dump(exclude_unset=True)
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}


def stamp_edit(values: Dict[str, Any], identity: Optional[str]) -> Dict[str, Any]:
    """Record who made a write and when, unless the caller sent those fields."""
    if identity:
        values.setdefault("updated_by", identity)
        values.setdefault("last_edited_at", utcnow())
    return values
