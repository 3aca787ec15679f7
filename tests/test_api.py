import pytest
from fastapi.testclient import TestClient

from mathcoach.api.app import create_app
from mathcoach.core.errors import ParseError, UpstreamError, ValidationError
from mathcoach.core.orchestrator import ProblemOrchestrator
from mathcoach.core.extractor import ExtractedProblem
from mathcoach.knowledge.history import HistoryStore, InMemoryKeyValueStore
from mathcoach.knowledge.models import AnalysisResult, OverallStats


class FakeOrchestrator:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def generate(self, topic):
        self.calls.append(("generate", topic))
        if self.error:
            raise self.error
        return ExtractedProblem(problem=f"{topic} 문제", solution="해설")

    def generate_similar(self, problem, topic, difficulty):
        self.calls.append(("similar", problem, topic, difficulty))
        if self.error:
            raise self.error
        return ExtractedProblem(problem=f"{difficulty} 문제", solution="해설")

    def analyze(self, log):
        self.calls.append(("analyze", len(log)))
        if self.error:
            raise self.error
        return AnalysisResult(
            strengths=[],
            weaknesses=[],
            recommendations=["꾸준히 풀어보세요."],
            overall_stats=OverallStats(total_problems=len(log), average_correct_rate=50.0),
        )


@pytest.fixture
def store():
    return HistoryStore(InMemoryKeyValueStore())


def _client(store, orchestrator=None):
    return TestClient(create_app(history_store=store, orchestrator=orchestrator or FakeOrchestrator()))


def _record_payload(topic="algebra", correct=True):
    return {"topic": topic, "problemText": "p", "solutionText": "s", "isCorrect": correct}


def test_health(store):
    resp = _client(store).get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_generate_problem(store):
    resp = _client(store).post("/problems/generate", json={"topic": "확률"})

    assert resp.status_code == 200
    assert resp.json() == {"problem": "확률 문제", "solution": "해설"}


def test_generate_problem_does_not_touch_history(store):
    _client(store).post("/problems/generate", json={"topic": "확률"})

    assert store.read_all() == []


def test_generate_requires_topic(store):
    resp = _client(store).post("/problems/generate", json={"topic": ""})

    assert resp.status_code == 422


def test_similar_problem_defaults_to_similar_difficulty(store):
    orchestrator = FakeOrchestrator()

    resp = _client(store, orchestrator).post("/problems/similar", json={"problem": "p", "topic": "t"})

    assert resp.status_code == 200
    assert orchestrator.calls == [("similar", "p", "t", "similar")]


def test_similar_problem_rejects_unknown_difficulty(store):
    resp = _client(store).post(
        "/problems/similar", json={"problem": "p", "topic": "t", "difficulty": "impossible"}
    )

    assert resp.status_code == 422


@pytest.mark.parametrize("error", [UpstreamError("quota exceeded", status_code=429), ParseError("no markers")])
def test_generation_failures_map_to_bad_gateway(store, error):
    resp = _client(store, FakeOrchestrator(error=error)).post("/problems/generate", json={"topic": "확률"})

    assert resp.status_code == 502
    assert str(error) in resp.json()["detail"]


def test_history_append_list_and_clear(store):
    client = _client(store)

    first = client.post("/history", json=_record_payload("algebra", True)).json()
    second = client.post("/history", json=_record_payload("geometry", False)).json()
    listed = client.get("/history").json()

    assert [r["id"] for r in listed] == [second["id"], first["id"]]
    assert listed[0]["isCorrect"] is False
    assert "timestampMillis" in listed[0]
    assert client.get("/history", params={"limit": 1}).json() == [second]

    assert client.delete("/history").status_code == 204
    assert client.delete("/history").status_code == 204
    assert client.get("/history").json() == []


def test_stats_endpoint(store):
    client = _client(store)
    client.post("/history", json=_record_payload("algebra", True))
    client.post("/history", json=_record_payload("algebra", False))
    client.post("/history", json=_record_payload("geometry", True))

    stats = client.get("/stats").json()

    assert stats["totalAttempts"] == 3
    assert stats["correctAttempts"] == 2
    assert stats["overallCorrectRate"] == 66.7
    assert stats["mostFrequentTopics"][0] == "algebra"


def test_analysis_requires_history(store):
    resp = _client(store).post("/analysis")

    assert resp.status_code == 400


def test_analysis_over_stored_history(store):
    client = _client(store)
    client.post("/history", json=_record_payload())

    resp = client.post("/analysis")

    assert resp.status_code == 200
    assert resp.json()["overallStats"]["totalProblems"] == 1
    assert resp.json()["recommendations"] == ["꾸준히 풀어보세요."]


def test_analysis_validation_failure_maps_to_bad_gateway(store):
    client = _client(store, FakeOrchestrator(error=ValidationError("missing overallStats")))
    client.post("/history", json=_record_payload())

    resp = client.post("/analysis")

    assert resp.status_code == 502


@pytest.mark.parametrize("path,payload", [
    ("/problems/generate", {"topic": "확률"}),
    ("/problems/similar", {"problem": "p", "topic": "t"}),
])
def test_missing_api_key_reports_message(store, monkeypatch, path, payload):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    resp = _client(store, ProblemOrchestrator()).post(path, json=payload)

    assert resp.status_code == 500
    assert "GEMINI_API_KEY" in resp.json()["detail"]


def test_analysis_missing_api_key_reports_message(store, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    client = _client(store, ProblemOrchestrator())
    client.post("/history", json=_record_payload())

    resp = client.post("/analysis")

    assert resp.status_code == 500
    assert "GEMINI_API_KEY" in resp.json()["detail"]


@pytest.mark.parametrize("limit", [0, -3])
def test_history_rejects_non_positive_limit(store, limit):
    resp = _client(store).get("/history", params={"limit": limit})

    assert resp.status_code == 422
