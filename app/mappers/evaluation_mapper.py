# app/mappers/evaluation_mapper.py
"""Store row <-> server model <-> client model for evaluations."""
from typing import Any, Dict, List, Mapping, Union

import pydantic

from app.core.exceptions import ValidationError, validation_error_from
from app.mappers.coerce import to_iso
from app.schemas.evaluation import (
    EvaluationClient, EvaluationCreate, EvaluationItemClient, EvaluationItemIn,
    EvaluationServer, EvaluationUpdate,
)
from app.utils.ids import is_valid_id


def evaluation_record_to_server(record: Any) -> EvaluationServer:
    if isinstance(record, Mapping):
        return EvaluationServer.model_validate(dict(record))
    return EvaluationServer.model_validate(record, from_attributes=True)


def evaluation_server_to_client(s: EvaluationServer) -> EvaluationClient:
    return EvaluationClient(
        id=s.id,
        user_id=s.user_id,
        year=s.year,
        evaluation_date=to_iso(s.evaluation_date),
        cycle_label=s.cycle_label,
        period_start=to_iso(s.period_start),
        period_end=to_iso(s.period_end),
        # required strings on the client
        evaluator_name=s.evaluator_name or "",
        evaluator_email=s.evaluator_email or "",
        evaluator_id=s.evaluator_id,
        items=[
            EvaluationItemClient(
                course=i.course or "",
                completed=i.completed,
                category=i.category or "",
                score=i.score,
                self_score=i.self_score,
            )
            for i in s.items
        ],
        employee_comments=s.employee_comments,
        evaluator_comments=s.evaluator_comments,
        overall_score=s.overall_score,
        created_at=to_iso(s.created_at),
        updated_at=to_iso(s.updated_at),
    )


def evaluation_record_to_client(record: Any) -> EvaluationClient:
    return evaluation_server_to_client(evaluation_record_to_server(record))


def serialize_items(items: List[EvaluationItemIn]) -> List[Dict[str, Any]]:
    if not items:
        raise ValidationError("At least one item is required")
    serialized = []
    for item in items:
        if not item.course:
            raise ValidationError("Each item must include a non-empty course")
        serialized.append({
            "course": item.course,
            "completed": item.completed,
            "category": item.category,
            "score": item.score,
            "self_score": item.self_score,
        })
    return serialized


def _parse(model, payload):
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError("Evaluation payload must be an object")
    try:
        return model.model_validate(dict(payload))
    except pydantic.ValidationError as e:
        raise validation_error_from(e) from e


def build_evaluation_create_model(
    payload: Union[EvaluationCreate, Mapping[str, Any]]
) -> Dict[str, Any]:
    """Validate a new evaluation and return its column values."""
    data = _parse(EvaluationCreate, payload)

    if not data.user_id or not is_valid_id(data.user_id):
        raise ValidationError("Invalid or missing userId")
    if data.evaluation_date is None:
        raise ValidationError("evaluationDate is required")
    if not data.evaluator_name:
        raise ValidationError("evaluatorName is required")
    if not data.evaluator_email:
        raise ValidationError("evaluatorEmail is required")

    return {
        "user_id": data.user_id,
        "year": data.year,
        "evaluation_date": data.evaluation_date,
        "cycle_label": data.cycle_label,
        "period_start": data.period_start,
        "period_end": data.period_end,
        "evaluator_name": data.evaluator_name,
        "evaluator_email": str(data.evaluator_email),
        "evaluator_id": data.evaluator_id,
        "items": serialize_items(data.items),
        "employee_comments": data.employee_comments,
        "evaluator_comments": data.evaluator_comments,
    }


def build_evaluation_update_model(
    payload: Union[EvaluationUpdate, Mapping[str, Any]]
) -> Dict[str, Any]:
    """Partial patch: only the keys sent are returned; items replace wholesale."""
    data = _parse(EvaluationUpdate, payload)
    sent = data.model_fields_set - {"user_id"}

    update: Dict[str, Any] = {}
    for field in sent:
        value = getattr(data, field)
        if field == "items":
            update["items"] = serialize_items(value)
        elif field in ("evaluation_date", "evaluator_name", "evaluator_email") and value is None:
            raise ValidationError(f"{field} cannot be cleared")
        elif field == "evaluator_email":
            update[field] = str(value)
        else:
            update[field] = value
    return update
