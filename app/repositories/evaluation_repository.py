# app/repositories/evaluation_repository.py
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.mappers.evaluation_mapper import (
    build_evaluation_create_model, build_evaluation_update_model,
    evaluation_record_to_server, evaluation_server_to_client,
)
from app.models.evaluation import Evaluation
from app.repositories.store import DocumentStore, SortSpec
from app.schemas.evaluation import EvaluationClient, EvaluationServer
from app.utils.ids import is_valid_id

NEWEST_FIRST: SortSpec = (("evaluation_date", -1), ("created_at", -1))


def _store(db: AsyncSession) -> DocumentStore:
    return DocumentStore(db, Evaluation)


def _check_id(evaluation_id: str) -> None:
    if not is_valid_id(evaluation_id):
        raise ValidationError("Invalid evaluation id")


async def create_evaluation_server(db: AsyncSession, payload: Mapping[str, Any]) -> EvaluationServer:
    return await insert_evaluation_server(db, build_evaluation_create_model(payload))


async def insert_evaluation_server(db: AsyncSession, values: Dict[str, Any]) -> EvaluationServer:
    """Insert an already validated write model."""
    record = await _store(db).create(values)
    return evaluation_record_to_server(record)


async def update_evaluation_server(
    db: AsyncSession, evaluation_id: str, patch: Mapping[str, Any]
) -> Optional[EvaluationServer]:
    _check_id(evaluation_id)
    values = build_evaluation_update_model(patch)
    record = await _store(db).update_by_id(evaluation_id, values)
    return evaluation_record_to_server(record) if record else None


async def delete_evaluation(db: AsyncSession, evaluation_id: str) -> bool:
    _check_id(evaluation_id)
    return await _store(db).delete_by_id(evaluation_id)


async def find_evaluation_by_id_server(db: AsyncSession, evaluation_id: str) -> Optional[EvaluationServer]:
    _check_id(evaluation_id)
    record = await _store(db).find_by_id(evaluation_id)
    return evaluation_record_to_server(record) if record else None


async def find_evaluation_by_id(db: AsyncSession, evaluation_id: str) -> Optional[EvaluationClient]:
    server = await find_evaluation_by_id_server(db, evaluation_id)
    return evaluation_server_to_client(server) if server else None


async def list_evaluations_by_user_server(
    db: AsyncSession, user_id: str, year: Optional[int] = None
) -> List[EvaluationServer]:
    if not is_valid_id(user_id):
        raise ValidationError("Invalid user id")
    records = await _store(db).find_many({"user_id": user_id}, NEWEST_FIRST)
    evaluations = [evaluation_record_to_server(r) for r in records]
    if year is not None:
        evaluations = [e for e in evaluations if e.effective_year == year]
    return evaluations
