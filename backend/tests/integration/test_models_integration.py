"""
Integration tests for AI model records and simulated training.
"""

import uuid

import pytest

from app.core.config import settings


def _create_model(client, headers, document_ids=(), name="Support Bot"):
    response = client.post(
        "/api/models",
        headers=headers,
        json={"name": name, "baseModel": "mistral", "documentIds": list(document_ids)},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestModelRecords:

    def test_create_model_with_documents(self, client, register, upload):
        headers, user = register()
        document = upload(headers)

        model = _create_model(client, headers, [document["id"]])

        assert model["status"] == "pending"
        assert model["trainingProgress"] == 0
        assert model["baseModel"] == "mistral"
        assert model["userId"] == user["id"]
        assert [d["id"] for d in model["documents"]] == [document["id"]]

        profile = client.get("/api/users/profile", headers=headers).json()["data"]
        assert profile["modelsCreated"] == 1

    def test_foreign_documents_rejected(self, client, register, upload):
        owner_headers, _ = register()
        other_headers, _ = register()
        document = upload(owner_headers)

        response = client.post(
            "/api/models",
            headers=other_headers,
            json={"name": "Thief", "documentIds": [document["id"]]},
        )

        assert response.status_code == 400

    def test_unknown_base_model_rejected(self, client, register):
        headers, _ = register()

        response = client.post("/api/models", headers=headers, json={"name": "X", "baseModel": "hal9000"})

        assert response.status_code == 400

    def test_free_plan_model_limit(self, client, register):
        headers, _ = register()
        _create_model(client, headers, name="One")
        _create_model(client, headers, name="Two")

        response = client.post("/api/models", headers=headers, json={"name": "Three"})

        assert response.status_code == 403
        assert response.json()["error"] == "Model limit reached for your plan. Please upgrade."

    def test_paid_plan_raises_model_limit(self, client, register):
        headers, _ = register()
        client.post("/api/payments/subscribe", headers=headers, json={"plan": "basic"})
        for name in ("One", "Two", "Three"):
            _create_model(client, headers, name=name)

        assert client.get("/api/models", headers=headers).json()["count"] == 3

    def test_stranger_cannot_read_model(self, client, register):
        owner_headers, _ = register()
        stranger_headers, _ = register()
        model = _create_model(client, owner_headers)

        response = client.get(f"/api/models/{model['id']}", headers=stranger_headers)

        assert response.status_code == 403

    def test_update_and_delete(self, client, register):
        headers, _ = register()
        model = _create_model(client, headers)

        updated = client.put(f"/api/models/{model['id']}", headers=headers, json={"name": "Renamed"})
        deleted = client.delete(f"/api/models/{model['id']}", headers=headers)

        assert updated.json()["data"]["name"] == "Renamed"
        assert deleted.status_code == 200
        assert client.get(f"/api/models/{model['id']}", headers=headers).status_code == 404


class TestTraining:

    def test_training_runs_to_ready(self, client, register, upload, drain):
        headers, _ = register()
        model = _create_model(client, headers, [upload(headers)["id"]])

        response = client.post(f"/api/models/{model['id']}/train", headers=headers)

        assert response.status_code == 202
        started = response.json()["data"]
        assert started["status"] == "training"
        assert started["trainingProgress"] == 0
        assert started["trainingStartedAt"] is not None

        drain()

        finished = client.get(f"/api/models/{model['id']}", headers=headers).json()["data"]
        assert finished["status"] == "ready"
        assert finished["trainingProgress"] == 100
        assert finished["trainingCompletedAt"] is not None

    def test_unexpected_failure_marks_model_failed(self, client, register, upload, drain, monkeypatch):
        def broken_clock():
            raise RuntimeError("clock unavailable")

        monkeypatch.setattr("app.workers.simulation.utcnow", broken_clock)
        headers, _ = register()
        model = _create_model(client, headers, [upload(headers)["id"]])

        client.post(f"/api/models/{model['id']}/train", headers=headers)
        drain()

        failed = client.get(f"/api/models/{model['id']}", headers=headers).json()["data"]
        assert failed["status"] == "failed"
        assert failed["trainingError"] == "clock unavailable"

    def test_training_requires_documents(self, client, register):
        headers, _ = register()
        model = _create_model(client, headers)

        response = client.post(f"/api/models/{model['id']}/train", headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Model has no documents to train on"

    def test_training_twice_is_rejected(self, client, register, upload, monkeypatch):
        monkeypatch.setattr(settings.simulation, "training_step_seconds", 30.0)
        headers, _ = register()
        model = _create_model(client, headers, [upload(headers)["id"]])

        first = client.post(f"/api/models/{model['id']}/train", headers=headers)
        second = client.post(f"/api/models/{model['id']}/train", headers=headers)

        assert first.status_code == 202
        assert second.status_code == 400
        assert second.json()["error"] == "Model is already training"

    def test_only_owner_trains(self, client, register, upload):
        owner_headers, _ = register()
        stranger_headers, _ = register()
        model = _create_model(client, owner_headers, [upload(owner_headers)["id"]])

        response = client.post(f"/api/models/{model['id']}/train", headers=stranger_headers)

        assert response.status_code == 403

    def test_train_unknown_model(self, client, register):
        headers, _ = register()

        response = client.post(f"/api/models/{uuid.uuid4()}/train", headers=headers)

        assert response.status_code == 404


@pytest.mark.parametrize("plan, expected", [("free", 2), ("premium", 15)])
def test_plan_model_limits_in_catalogue(client, plan, expected):
    plans = {p["id"]: p for p in client.get("/api/payments/plans").json()["data"]}

    assert plans[plan]["features"]["maxModels"] == expected
