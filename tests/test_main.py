from __future__ import annotations

import itertools

from fastapi.testclient import TestClient
import pytest

from app.clients.gemini import GeminiConfigError, GeminiError
from main import app, get_client

_addresses = (f"198.51.100.{n}" for n in itertools.count(1))


class FakeGeminiClient:
    def __init__(self) -> None:
        self.calls = []
        self.answer = '{"name": "Ada"}'
        self.error = None

    def extract(self, prompt, document=None):  # noqa: D401
        """Record the call and return the preset answer."""

        self.calls.append((prompt, document))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture()
def api_client():
    fake = FakeGeminiClient()
    app.dependency_overrides[get_client] = lambda: fake
    client = TestClient(app, headers={"X-Forwarded-For": next(_addresses)})
    try:
        yield client, fake
    finally:
        app.dependency_overrides.pop(get_client, None)


def test_healthz(api_client):
    client, _ = api_client

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_parse_with_file_relays_document(api_client):
    client, fake = api_client

    response = client.post(
        "/api/parse",
        files={"file": ("form.pdf", b"%PDF-1.4 data", "application/pdf")},
        data={"schema": "name"},
    )

    assert response.status_code == 200
    assert response.json() == {"name": "Ada"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    prompt, document = fake.calls[0]
    assert document == b"%PDF-1.4 data"
    assert "Required fields to extract: name" in prompt


def test_parse_with_schema_only(api_client):
    client, fake = api_client

    response = client.post("/api/parse", data={"schema": '{"id": ""}'})

    assert response.status_code == 200
    assert fake.calls[0][1] is None


def test_parse_requires_file_or_schema(api_client):
    client, fake = api_client

    response = client.post("/api/parse", data={"schema": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "either file or schema must be provided"
    assert fake.calls == []


def test_upstream_failure_is_bad_gateway(api_client):
    client, fake = api_client
    fake.error = GeminiError("upstream error")

    response = client.post("/api/parse", data={"schema": "name"})

    assert response.status_code == 502
    assert response.json()["detail"] == "upstream error"


def test_missing_api_key_is_server_error(api_client):
    client, fake = api_client
    fake.error = GeminiConfigError("missing GEMINI_API_KEY")

    response = client.post("/api/parse", data={"schema": "name"})

    assert response.status_code == 500
    assert response.json()["detail"] == "missing GEMINI_API_KEY"


def test_get_on_parse_is_not_allowed(api_client):
    client, _ = api_client

    assert client.get("/api/parse").status_code == 405
