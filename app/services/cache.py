# app/services/cache.py
"""Process-wide read-through cache for users and per-user evaluations.

One StaffCache is built at startup and handed to request handlers; it is
best-effort and never the system of record. Each bucket is tri-state:
never hydrated (reads return None), hydrated and empty, hydrated with rows.
Mutations on a bucket that was never hydrated are no-ops, since the next
read loads from the store anyway.

There is no locking: every method runs to completion without awaiting, so
on a single event loop one mutation is never interleaved with another.
"""
import logging
from typing import Dict, Iterable, List, Optional

from fastapi import Request

from app.schemas.evaluation import EvaluationServer
from app.schemas.user import UserServer

logger = logging.getLogger(__name__)


def _evaluation_sort_key(e: EvaluationServer):
    return (e.evaluation_date, e.created_at)


class StaffCache:
    def __init__(self) -> None:
        self._users: Optional[List[UserServer]] = None
        self._evaluations: Dict[str, List[EvaluationServer]] = {}

    # --- users -----------------------------------------------------------

    def get_cached_users(self) -> Optional[List[UserServer]]:
        if self._users is None:
            return None
        return list(self._users)

    def set_cached_users(self, users: Iterable[UserServer]) -> None:
        self._users = list(users)
        logger.info("User cache hydrated with %d rows", len(self._users))

    def add_user_to_cache(self, user: UserServer) -> None:
        if self._users is None:
            return
        self._users = [user] + [u for u in self._users if u.id != user.id]

    def update_user_in_cache(self, user: UserServer) -> None:
        if self._users is None:
            logger.debug("User cache not hydrated, skipping update of %s", user.id)
            return
        self._users = [user if u.id == user.id else u for u in self._users]

    def remove_user_from_cache(self, user_id: str) -> None:
        self._evaluations.pop(user_id, None)
        if self._users is None:
            return
        self._users = [u for u in self._users if u.id != user_id]

    def users_hydrated(self) -> bool:
        return self._users is not None

    # --- evaluations -----------------------------------------------------

    def get_cached_evaluations(self, user_id: str) -> Optional[List[EvaluationServer]]:
        bucket = self._evaluations.get(user_id)
        if bucket is None:
            return None
        return list(bucket)

    def set_cached_evaluations(self, user_id: str, evaluations: Iterable[EvaluationServer]) -> None:
        self._evaluations[user_id] = sorted(evaluations, key=_evaluation_sort_key, reverse=True)
        logger.info("Evaluation cache for user %s hydrated with %d rows",
                    user_id, len(self._evaluations[user_id]))

    def add_evaluation_to_cache(self, user_id: str, evaluation: EvaluationServer) -> None:
        bucket = self._evaluations.get(user_id)
        if bucket is None:
            return
        rows = [evaluation] + [e for e in bucket if e.id != evaluation.id]
        self._evaluations[user_id] = sorted(rows, key=_evaluation_sort_key, reverse=True)

    def update_evaluation_in_cache(self, user_id: str, evaluation: EvaluationServer) -> None:
        bucket = self._evaluations.get(user_id)
        if bucket is None:
            logger.debug("Evaluation bucket %s not hydrated, skipping update", user_id)
            return
        rows = [evaluation if e.id == evaluation.id else e for e in bucket]
        self._evaluations[user_id] = sorted(rows, key=_evaluation_sort_key, reverse=True)

    def remove_evaluation_from_cache(self, user_id: str, evaluation_id: str) -> None:
        bucket = self._evaluations.get(user_id)
        if bucket is None:
            return
        self._evaluations[user_id] = [e for e in bucket if e.id != evaluation_id]

    def drop_evaluation_bucket(self, user_id: str) -> None:
        self._evaluations.pop(user_id, None)

    def clear(self) -> None:
        self._users = None
        self._evaluations.clear()


def get_cache(request: Request) -> StaffCache:
    return request.app.state.cache
