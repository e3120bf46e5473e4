import pytest
from fastapi.testclient import TestClient
from book_recommender.main import app, limiter
from book_recommender.config import settings

PAYLOAD = {"genre": "Fantasy", "mood": "Curious", "level": "Beginner"}
LIMIT_EXCEEDED = {"error": "Rate limit exceeded. Please try again later."}

@pytest.fixture(autouse=True)
def enabled_limiter(monkeypatch):
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    yield
    limiter.reset()

@pytest.fixture
def allowed():
    # RATE_LIMIT is bound to the routes at import, e.g. '10/minute'
    return int(settings.RATE_LIMIT.split("/")[0].split()[0])

def test_recommend_rate_limited(gemini, allowed):
    client = TestClient(app)
    codes = [client.post("/recommend", json=PAYLOAD).status_code for _ in range(allowed)]
    assert codes == [200] * allowed

    r = client.post("/recommend", json=PAYLOAD)
    assert r.status_code == 429
    assert r.json() == LIMIT_EXCEEDED
    assert len(gemini.requests) == allowed

def test_session_submit_rate_limited(gemini, allowed):
    client = TestClient(app)
    for _ in range(allowed):
        assert client.post("/session/submit", json={}).status_code == 200

    r = client.post("/session/submit", json={})
    assert r.status_code == 429
    assert r.json() == LIMIT_EXCEEDED

def test_other_routes_not_limited(allowed):
    client = TestClient(app)
    for _ in range(allowed + 2):
        assert client.get("/healthz").status_code == 200
