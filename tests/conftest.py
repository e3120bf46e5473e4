import json

import httpx
import pytest

from book_recommender.config import settings
from book_recommender.gemini_client import GeminiClient
from book_recommender.main import app, get_gemini_client, limiter


def envelope(*texts):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": t} for t in texts]}}]}


class FakeGemini:
    """Stands in for the provider through httpx.MockTransport; records every call."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = envelope("1. The Hobbit")
        self.exc = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.body)

    def sent_prompt(self, index=-1):
        body = json.loads(self.requests[index].content)
        return body["contents"][0]["parts"][0]["text"]

    def client(self, api_key="fake"):
        return GeminiClient(
            api_key=api_key,
            model="gemini-test",
            base_url="https://gemini.test/v1",
            timeout=5,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture(autouse=True)
def force_local_defaults(monkeypatch):
    # Make tests deterministic and offline by default
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "fake", raising=False)
    monkeypatch.setattr(settings, "API_TOKEN", None, raising=False)
    monkeypatch.setattr(limiter, "enabled", False)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def gemini():
    fake = FakeGemini()
    # Read the key per request so tests can blank it out through settings
    app.dependency_overrides[get_gemini_client] = lambda: fake.client(api_key=settings.GEMINI_API_KEY)
    return fake
