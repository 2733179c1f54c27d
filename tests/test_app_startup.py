"""Full-stack test: real lifespan wiring, SQLite store, mocked completion service."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from bizplan.api import main
from bizplan.llm.openrouter import OpenRouterAdapter


@pytest.fixture()
def live_client(monkeypatch):
    replies = ["A plan for a coffee shop...", "A better plan for a coffee shop..."]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "choices": [{"message": {"content": "", "reasoning": replies.pop(0)}}],
        })

    def adapter_factory(settings):
        return OpenRouterAdapter(settings=settings, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(main.settings, "openrouter_api_key", "test-key")
    monkeypatch.setattr(main.settings, "database_url", "sqlite+aiosqlite://")
    monkeypatch.setattr(main, "OpenRouterAdapter", adapter_factory)

    with TestClient(main.app) as client:
        yield client


def test_generate_then_list(live_client):
    body = {"businessName": "Sample Coffee Shop", "industry": "Food and Beverage"}

    first = live_client.post("/generate-plan", json=body)
    assert first.status_code == 200
    assert first.json() == {"plan": "A plan for a coffee shop..."}

    created_at = live_client.get("/plans").json()[0]["createdAt"]

    second = live_client.post("/generate-plan", json=body)
    assert second.json() == {"plan": "A better plan for a coffee shop..."}

    plans = live_client.get("/plans").json()
    assert len(plans) == 1
    assert plans[0]["plan"] == "A better plan for a coffee shop..."
    assert plans[0]["createdAt"] == created_at
    assert plans[0]["updatedAt"] is not None


def test_export_after_generate(live_client):
    live_client.post("/generate-plan", json={"businessName": "X", "industry": "Y"})

    resp = live_client.get("/plans/export", params={"businessName": "X", "industry": "Y", "format": "txt"})

    assert resp.status_code == 200
    assert resp.text == "A plan for a coffee shop..."


def test_starts_without_api_key(monkeypatch):
    monkeypatch.setattr(main.settings, "openrouter_api_key", "")
    monkeypatch.setattr(main.settings, "database_url", "sqlite+aiosqlite://")

    with TestClient(main.app) as client:
        assert client.get("/").status_code == 200

        plans = client.get("/plans")
        assert plans.status_code == 200
        assert plans.json() == []

        resp = client.post("/generate-plan", json={"businessName": "X", "industry": "Y"})
        assert resp.status_code == 500
        assert resp.text == "Error generating or updating business plan"
        assert resp.headers["X-Error-Kind"] == "generation_failed"

        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["completion"] == "unreachable"
