"""Tests for the HTTP API routes."""

import pytest
from starlette.testclient import TestClient

from deepdecision.api.http.app import create_app
from deepdecision.core.models import InitialTreeResponse


@pytest.fixture
def client(app_context):
    return TestClient(create_app(app_context))


class TestFeedbackQuestions:
    def test_returns_default_number_of_questions(self, client):
        response = client.post("/api/feedback-questions", json={"problem": "Move?"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["questions"]) == 3

    def test_num_questions(self, client):
        response = client.post(
            "/api/feedback-questions", json={"problem": "Move?", "numQuestions": 2}
        )
        assert len(response.json()["questions"]) == 2

    def test_missing_problem(self, client):
        response = client.post("/api/feedback-questions", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Decision problem is required"

    def test_invalid_num_questions(self, client):
        response = client.post(
            "/api/feedback-questions", json={"problem": "Move?", "numQuestions": "many"}
        )
        assert response.status_code == 400

    def test_invalid_json(self, client):
        response = client.post(
            "/api/feedback-questions",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400


class TestAnalyzeDecision:
    def test_full_analysis_is_persisted(self, client, app_context):
        response = client.post(
            "/api/analyze-decision", json={"problem": "Move?", "depth": 2, "breadth": 2}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["report"].startswith("# Decision Analysis Report")
        assert body["insights"]
        tree = body["decisionTree"]
        assert tree["parentId"] is None
        assert len(tree["children"]) == 2
        assert all(len(option["children"]) == 2 for option in tree["children"])

        assert app_context.result_store.tree_path.exists()
        assert app_context.result_store.report_path.exists()

        saved_tree = client.get("/api/decision-tree")
        assert saved_tree.status_code == 200
        assert saved_tree.json()["decisionTree"] == tree

        saved_report = client.get("/api/decision-report")
        assert saved_report.status_code == 200
        assert saved_report.json()["report"] == body["report"]

    def test_uses_configured_defaults(self, client):
        response = client.post("/api/analyze-decision", json={"problem": "Move?"})

        tree = response.json()["decisionTree"]
        assert len(tree["children"]) == 2

    def test_missing_problem(self, client):
        response = client.post("/api/analyze-decision", json={"depth": 2})
        assert response.status_code == 400

    @pytest.mark.parametrize("field,value", [("depth", 0), ("breadth", "wide")])
    def test_invalid_limits(self, client, field, value):
        response = client.post(
            "/api/analyze-decision", json={"problem": "Move?", field: value}
        )
        assert response.status_code == 400

    def test_generation_failure(self, client, fake_provider):
        fake_provider.fail_when = lambda schema, prompt: schema is InitialTreeResponse

        response = client.post("/api/analyze-decision", json={"problem": "Move?"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Error during decision analysis"
        assert "Scripted failure" in body["message"]


class TestSavedResults:
    def test_tree_not_found(self, client):
        response = client.get("/api/decision-tree")

        assert response.status_code == 404
        assert response.json()["error"] == "Decision tree not found"

    def test_report_not_found(self, client):
        response = client.get("/api/decision-report")

        assert response.status_code == 404
        assert response.json()["error"] == "Decision report not found"


class TestModelInfo:
    def test_model_info(self, client):
        response = client.get("/api/model-info")

        assert response.status_code == 200
        assert response.json() == {"modelId": "fake-model", "providerType": "fake"}


class TestHealth:
    def test_healthy_provider(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_unreachable_provider(self, client, fake_provider, monkeypatch):
        async def unhealthy():
            return {"status": "unhealthy", "provider": "fake", "error": "timeout"}

        monkeypatch.setattr(fake_provider, "health_check", unhealthy)

        response = client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["error"] == "timeout"
