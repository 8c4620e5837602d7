"""
Tests for the /evaluations endpoints.
"""

import pytest

from app.core.exceptions import StoreError
from app.repositories import evaluation_repository
from app.utils.ids import new_id


@pytest.fixture
def user(client):
    response = client.post("/users", json={"firstName": "Eval", "lastName": "Target"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def evaluation_payload(user, sample_evaluation_data):
    return {**sample_evaluation_data, "userId": user["id"]}


@pytest.fixture
def store_reads(monkeypatch):
    """Count how often the evaluation list goes to the store."""
    calls = []
    original = evaluation_repository.list_evaluations_by_user_server

    async def counting(db, user_id, year=None):
        calls.append(user_id)
        return await original(db, user_id, year)

    monkeypatch.setattr(evaluation_repository, "list_evaluations_by_user_server", counting)
    return calls


class TestCreateEvaluation:
    def test_create_evaluation_success(self, client, evaluation_payload):
        response = client.post("/evaluations", json=evaluation_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["userId"] == evaluation_payload["userId"]
        assert data["evaluationDate"] == "2024-05-01T00:00:00Z"
        assert data["overallScore"] == 7
        assert [i["course"] for i in data["items"]] == ["CIA: Opening", "CIA: Closing", "Safety walk"]
        assert data["items"][0]["selfScore"] == 7

    def test_overall_score_from_two_items(self, client, evaluation_payload):
        evaluation_payload["items"] = [{"course": "A", "score": 8}, {"course": "B", "score": 6}]
        assert client.post("/evaluations", json=evaluation_payload).json()["overallScore"] == 7

    def test_unknown_user(self, client, evaluation_payload):
        evaluation_payload["userId"] = new_id()
        response = client.post("/evaluations", json=evaluation_payload)
        assert response.status_code == 404

    def test_missing_evaluator(self, client, evaluation_payload):
        del evaluation_payload["evaluatorName"]
        response = client.post("/evaluations", json=evaluation_payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "evaluatorName is required"

    def test_empty_items(self, client, evaluation_payload):
        evaluation_payload["items"] = []
        assert client.post("/evaluations", json=evaluation_payload).status_code == 400


class TestListEvaluations:
    def test_requires_user_id(self, client):
        assert client.get("/evaluations").status_code == 400
        assert client.get("/evaluations", params={"userId": "bad"}).status_code == 400

    def test_single_store_read(self, client, evaluation_payload, store_reads):
        client.post("/evaluations", json=evaluation_payload)
        user_id = evaluation_payload["userId"]

        first = client.get("/evaluations", params={"userId": user_id}).json()
        second = client.get("/evaluations", params={"userId": user_id}).json()

        assert first == second
        assert first["total"] == 1
        assert store_reads == [user_id]

    def test_empty_bucket_is_not_reloaded(self, client, user, store_reads):
        for _ in range(3):
            data = client.get("/evaluations", params={"userId": user["id"]}).json()
            assert data["total"] == 0
        assert len(store_reads) == 1

    def test_writes_patch_the_cached_bucket(self, client, evaluation_payload, store_reads):
        user_id = evaluation_payload["userId"]
        client.get("/evaluations", params={"userId": user_id})

        older = client.post("/evaluations", json=evaluation_payload).json()
        newer = client.post(
            "/evaluations", json={**evaluation_payload, "evaluationDate": "2024-11-01T00:00:00Z"}
        ).json()

        data = client.get("/evaluations", params={"userId": user_id}).json()
        assert [e["id"] for e in data["data"]] == [newer["id"], older["id"]]
        assert len(store_reads) == 1

    def test_year_filter_uses_label_then_date(self, client, evaluation_payload):
        client.post("/evaluations", json=evaluation_payload)
        client.post("/evaluations", json={**evaluation_payload, "year": 2023})
        user_id = evaluation_payload["userId"]

        data = client.get("/evaluations", params={"userId": user_id, "year": 2024}).json()
        assert data["total"] == 1
        assert data["data"][0]["year"] is None

        data = client.get("/evaluations", params={"userId": user_id, "year": 2023}).json()
        assert data["total"] == 1
        assert data["data"][0]["year"] == 2023

    def test_paging(self, client, evaluation_payload):
        for month in range(1, 6):
            client.post("/evaluations", json={**evaluation_payload, "evaluationDate": f"2024-0{month}-01"})

        data = client.get(
            "/evaluations", params={"userId": evaluation_payload["userId"], "pageSize": 2, "page": 3}
        ).json()
        assert data["pageSize"] == 2
        assert data["page"] == 3
        assert [e["evaluationDate"] for e in data["data"]] == ["2024-01-01T00:00:00Z"]


class TestGetUpdateDeleteEvaluation:
    def test_get(self, client, evaluation_payload):
        created = client.post("/evaluations", json=evaluation_payload).json()
        response = client.get(f"/evaluations/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_get_not_found(self, client):
        assert client.get(f"/evaluations/{new_id()}").status_code == 404
        assert client.get("/evaluations/xyz").status_code == 400

    def test_partial_update(self, client, evaluation_payload):
        created = client.post("/evaluations", json=evaluation_payload).json()
        response = client.put(f"/evaluations/{created['id']}", json={"cycleLabel": "Fall 2024"})

        assert response.status_code == 200
        data = response.json()
        assert data["cycleLabel"] == "Fall 2024"
        assert data["evaluatorName"] == "Sam Rivera"
        assert data["items"] == created["items"]

    def test_update_items_recomputes_score(self, client, evaluation_payload):
        created = client.post("/evaluations", json=evaluation_payload).json()
        client.get("/evaluations", params={"userId": created["userId"]})

        client.put(f"/evaluations/{created['id']}", json={"items": [{"course": "A", "score": 10}]})

        listed = client.get("/evaluations", params={"userId": created["userId"]}).json()
        assert listed["data"][0]["overallScore"] == 10

    def test_update_cannot_clear_required(self, client, evaluation_payload):
        created = client.post("/evaluations", json=evaluation_payload).json()
        response = client.put(f"/evaluations/{created['id']}", json={"evaluationDate": None})
        assert response.status_code == 400

    def test_failed_update_leaves_cached_bucket_alone(self, client, evaluation_payload, monkeypatch):
        created = client.post("/evaluations", json=evaluation_payload).json()
        before = client.get("/evaluations", params={"userId": created["userId"]}).json()

        async def failing_update(db, evaluation_id, patch):
            raise StoreError("The data store request failed")

        monkeypatch.setattr(evaluation_repository, "update_evaluation_server", failing_update)

        response = client.put(f"/evaluations/{created['id']}", json={"cycleLabel": "Fall 2024"})
        assert response.status_code == 500

        after = client.get("/evaluations", params={"userId": created["userId"]}).json()
        assert after == before
        assert after["data"][0]["cycleLabel"] == "Spring 2024"

    def test_update_not_found(self, client):
        assert client.put(f"/evaluations/{new_id()}", json={"cycleLabel": "x"}).status_code == 404

    def test_delete(self, client, evaluation_payload):
        created = client.post("/evaluations", json=evaluation_payload).json()
        client.get("/evaluations", params={"userId": created["userId"]})

        response = client.delete(f"/evaluations/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Evaluation deleted"}
        assert client.get(f"/evaluations/{created['id']}").status_code == 404
        assert client.get("/evaluations", params={"userId": created["userId"]}).json()["total"] == 0

    def test_delete_not_found(self, client):
        assert client.delete(f"/evaluations/{new_id()}").status_code == 404

    def test_evaluations_survive_user_delete(self, client, evaluation_payload):
        created = client.post("/evaluations", json=evaluation_payload).json()
        client.delete(f"/users/{created['userId']}")
        assert client.get(f"/evaluations/{created['id']}").status_code == 200
