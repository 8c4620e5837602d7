"""
Tests for merit/demerit notes, including the compensating delete when the
user update fails.
"""

import pytest
from sqlalchemy import func, select

from app.core.exceptions import NotFoundError, StoreError, ValidationError
from app.models.metric import Metric
from app.repositories import user_repository
from app.schemas.metric import MetricCreate
from app.services import metrics as metric_service
from app.services import users as user_service
from app.utils.ids import new_id


@pytest.fixture
def user(client):
    return client.post("/users", json={"firstName": "Merit", "lastName": "Holder"}).json()


class TestMetricsApi:
    def test_add_merit(self, client, user):
        response = client.post(
            f"/users/{user['id']}/metrics",
            json={"metricType": "merit", "comment": "Covered a shift"},
            headers={"X-Staff-Identity": "lead@example.edu"},
        )

        assert response.status_code == 201
        metric = response.json()
        assert metric["metricType"] == "merit"
        assert metric["addedBy"] == "lead@example.edu"
        assert metric["userId"] == user["id"]

        refreshed = client.get(f"/users/{user['id']}").json()
        assert refreshed["merits"] == [metric["id"]]
        assert refreshed["demerits"] == []

    def test_placeholder_identity(self, client, user):
        metric = client.post(
            f"/users/{user['id']}/metrics", json={"metricType": "demerit", "comment": "Late"}
        ).json()
        assert metric["addedBy"] == "system"

    def test_cached_user_sees_new_metric(self, client, user):
        client.get("/users")
        metric = client.post(
            f"/users/{user['id']}/metrics", json={"metricType": "demerit", "comment": "Late"}
        ).json()
        listed = client.get("/users").json()["data"][0]
        assert listed["demerits"] == [metric["id"]]

    def test_list_metrics(self, client, user):
        client.post(f"/users/{user['id']}/metrics", json={"metricType": "merit", "comment": "One"})
        client.post(f"/users/{user['id']}/metrics", json={"metricType": "merit", "comment": "Two"})

        response = client.get(f"/users/{user['id']}/metrics")
        assert response.status_code == 200
        assert {m["comment"] for m in response.json()} == {"One", "Two"}

    @pytest.mark.parametrize("body", [
        {"metricType": "merit"},
        {"metricType": "merit", "comment": "   "},
        {"comment": "No type"},
        {"metricType": "kudos", "comment": "Unknown type"},
        {"metricType": 5, "comment": "Numeric type"},
        {"metricType": "merit", "comment": ["not", "text"]},
    ])
    def test_invalid_metric(self, client, user, body):
        response = client.post(f"/users/{user['id']}/metrics", json=body)
        assert response.status_code == 400
        assert client.get(f"/users/{user['id']}/metrics").json() == []

    def test_unknown_user(self, client):
        response = client.post(f"/users/{new_id()}/metrics", json={"metricType": "merit", "comment": "x"})
        assert response.status_code == 404

    def test_failed_push_deletes_metric(self, client, user, monkeypatch):
        async def failing_push(db, user_id, field, metric_id):
            raise StoreError("The data store request failed")

        monkeypatch.setattr(user_repository, "push_metric", failing_push)

        response = client.post(f"/users/{user['id']}/metrics", json={"metricType": "merit", "comment": "x"})
        assert response.status_code == 500
        assert client.get(f"/users/{user['id']}/metrics").json() == []
        assert client.get(f"/users/{user['id']}").json()["merits"] == []


async def _metric_count(db):
    return (await db.execute(select(func.count()).select_from(Metric))).scalar_one()


class TestAddMetricService:
    @pytest.mark.asyncio
    async def test_push_without_user_is_compensated(self, db_session, cache, monkeypatch):
        created = await user_service.create_user(db_session, cache, {"firstName": "Gone"})

        async def vanished(db, user_id, field, metric_id):
            return False

        monkeypatch.setattr(user_repository, "push_metric", vanished)

        with pytest.raises(NotFoundError):
            await metric_service.add_metric(
                db_session, cache, created.id, MetricCreate(metric_type="merit", comment="x"), "system"
            )
        assert await _metric_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_validation_happens_before_any_write(self, db_session, cache):
        with pytest.raises(ValidationError):
            await metric_service.add_metric(
                db_session, cache, new_id(), MetricCreate(metric_type="merit", comment=""), "system"
            )
        assert await _metric_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_accepts_raw_payload(self, db_session, cache):
        created = await user_service.create_user(db_session, cache, {"firstName": "Raw"})
        metric = await metric_service.add_metric(
            db_session, cache, created.id, {"metricType": "merit", "comment": " Helpful "}, "lead"
        )
        assert metric.comment == "Helpful"

        with pytest.raises(ValidationError, match="metricType"):
            await metric_service.add_metric(db_session, cache, created.id, {"metricType": 1}, "lead")

    @pytest.mark.asyncio
    async def test_success_updates_hydrated_cache(self, db_session, cache):
        created = await user_service.create_user(db_session, cache, {"firstName": "Here"})
        await user_service.load_users(db_session, cache)

        metric = await metric_service.add_metric(
            db_session, cache, created.id, MetricCreate(metric_type="demerit", comment="Late"), "lead"
        )

        cached = cache.get_cached_users()[0]
        assert cached.demerits == [metric.id]
        assert metric.added_by == "lead"
