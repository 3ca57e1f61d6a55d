from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from webapp.main import app


@pytest.fixture
def client():
	return TestClient(app)


def test_health(client):
	assert client.get("/health").json() == {"status": "ok"}


def test_index_fallback(client):
	resp = client.get("/")
	assert resp.status_code == 200
	assert "/api/compile" in resp.text


def test_compile_success(client):
	resp = client.post("/api/compile", json={"source": "int x; x = 1 + 2 * 3;"})
	assert resp.status_code == 200
	body = resp.json()
	assert body["ok"] is True
	assert body["tac"] == ["t0 = 2 * 3", "t1 = 1 + t0", "x = t1"]
	assert body["symbols"] == ["x"]
	assert body["diagnostics"] == []
	assert body["token_count"] == len(body["tokens"]) == 11
	assert body["tokens"][0]["kind"] == "KEYWORD"
	assert body["tokens"][0]["span"]["start"]["column"] == 1


def test_compile_failure(client):
	body = client.post("/api/compile", json={"source": "int x; int x;"}).json()
	assert body["ok"] is False
	assert body["tac"] == []
	assert body["symbols"] == []
	assert body["diagnostic_count"] == 1
	diagnostic = body["diagnostics"][0]
	assert set(diagnostic) == {"kind", "message", "hint", "token", "rendered", "span"}
	assert diagnostic["kind"] == "REDECLARATION"
	assert diagnostic["token"]["lexeme"] == "x"
	assert diagnostic["rendered"].startswith("Semantic Error:")


def test_compile_end_of_input_diagnostic(client):
	diagnostic = client.post("/api/compile", json={"source": "int x"}).json()["diagnostics"][0]
	assert diagnostic["token"] is None
	assert diagnostic["span"] is None
	assert diagnostic["rendered"].endswith("at token: EOF")


def test_compile_without_tokens(client):
	body = client.post("/api/compile", json={"source": "int a;", "include_tokens": False}).json()
	assert body["tokens"] == []
	assert body["token_count"] == 3


def test_compile_requires_source(client):
	assert client.post("/api/compile", json={}).status_code == 422


def test_tokenize(client):
	body = client.post("/api/tokenize", json={"source": "x = 1 # 2;"}).json()
	assert [t["lexeme"] for t in body["tokens"]] == ["x", "=", "1", "2", ";"]
	assert body["token_count"] == 5
