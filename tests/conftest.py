"""
Pytest configuration and common fixtures for testing.

Both upstreams (the OpenAI chat API and NASA's APOD API) are replaced by a
single ``httpx.MockTransport`` that records every outbound request.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from nebulaquery.config import Settings
from nebulaquery.main import build_orchestrator, create_app

LLM_BASE_URL = "https://llm.test/v1"
APOD_URL = "https://apod.test/planetary/apod"

SAMPLE_APOD: Dict[str, Any] = {
    "date": "2026-10-19",
    "title": "The Pillars of Creation",
    "explanation": "Towers of cool gas and dust in the Eagle Nebula.",
    "media_type": "image",
    "url": "https://apod.nasa.gov/apod/image/pillars.jpg",
    "hdurl": "https://apod.nasa.gov/apod/image/pillars_hd.jpg",
    "service_version": "v1",
}


def completion_body(content: Optional[str]) -> Dict[str, Any]:
    """Build a chat.completion payload with a single choice."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1760000000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class FakeUpstreams:
    """Programmable stand-in for the LLM and APOD endpoints."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.completion_status = 200
        self.completion_payload: Dict[str, Any] = completion_body(
            "Black holes warp spacetime."
        )
        self.completion_error: Optional[Exception] = None
        self.apod_status = 200
        self.apod_payload: Any = SAMPLE_APOD
        self.apod_error: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "llm.test":
            if self.completion_error is not None:
                raise self.completion_error
            if self.completion_status != 200:
                return httpx.Response(
                    self.completion_status,
                    json={"error": {"message": "upstream exploded", "type": "server_error"}},
                )
            return httpx.Response(200, json=self.completion_payload)
        if request.url.host == "apod.test":
            if self.apod_error is not None:
                raise self.apod_error
            return httpx.Response(self.apod_status, json=self.apod_payload)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def llm_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == "llm.test"]

    @property
    def apod_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == "apod.test"]

    def llm_body(self, index: int = 0) -> Dict[str, Any]:
        return json.loads(self.llm_requests[index].content)


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "OPENAI_API_KEY": "test-openai-key",
        "OPENAI_BASE_URL": LLM_BASE_URL,
        "OPENAI_MODEL": "gpt-4o-mini",
        "NASA_API_KEY": "test-nasa-key",
        "NASA_APOD_URL": APOD_URL,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def orchestrator(settings, upstreams):
    return build_orchestrator(settings, transport=upstreams.transport)


@pytest.fixture
def make_client(upstreams):
    """Factory for a TestClient bound to the fake upstreams."""
    clients: List[TestClient] = []

    def _make(**overrides: Any) -> TestClient:
        app_settings = make_settings(**overrides)
        app = create_app(
            settings=app_settings,
            orchestrator=build_orchestrator(app_settings, transport=upstreams.transport),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
