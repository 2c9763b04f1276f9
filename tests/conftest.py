"""Test configuration and fixtures"""

import asyncio
import json
from typing import List

import httpx
import pytest
from httpx import AsyncClient, ASGITransport

from calltriage.config import Settings
from calltriage.llm.providers.base import BaseLLMProvider
from calltriage.main import create_app
from calltriage.schemas.llm import LLMMessage, LLMGenerateResponse
from calltriage.services.analyzer import SentimentAnalyzer
from calltriage.services.openmic import OpenMicClient
from calltriage.store import MemoryStore


OPENMIC_URL = "https://openmic.test/api"


class ScriptedLLM(BaseLLMProvider):
    """
    Provider double that answers from a queue.
    With nothing queued it behaves like an unreachable model.
    """

    name = "scripted"

    def __init__(self):
        super().__init__(model="scripted-model")
        self.responses: list = []
        self.delay = 0.0
        self.requests: list = []

    async def generate(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.2,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> LLMGenerateResponse:
        self.requests.append({
            "system_prompt": system_prompt,
            "messages": messages,
            "json_mode": json_mode,
        })

        if self.delay:
            await asyncio.sleep(self.delay)

        if not self.responses:
            raise ConnectionError("LLM unreachable")

        content = self.responses.pop(0)
        if isinstance(content, Exception):
            raise content
        if isinstance(content, dict):
            content = json.dumps(content)

        return LLMGenerateResponse(content=content, provider=self.name, model=self.model)


class FakeOpenMicPlatform:
    """In-memory stand-in for the OpenMic bots API, served through httpx.MockTransport"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.bots: dict = {}
        self.fail_status = None
        self._counter = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.fail_status:
            return httpx.Response(self.fail_status, text="platform unavailable")

        path = request.url.path
        if request.method == "POST" and path == "/api/bots":
            payload = json.loads(request.content)
            self._counter += 1
            bot_id = f"om_{self._counter}"
            self.bots[bot_id] = payload
            return httpx.Response(201, json={"bot_id": bot_id, **payload})

        if request.method == "GET" and path == "/api/bots":
            return httpx.Response(
                200,
                json=[{"id": bot_id, **payload} for bot_id, payload in self.bots.items()],
            )

        bot_id = path.rsplit("/", 1)[-1]
        if bot_id not in self.bots:
            return httpx.Response(404, text="bot not found")

        if request.method == "PATCH":
            self.bots[bot_id].update(json.loads(request.content))
            return httpx.Response(200, json={"id": bot_id, **self.bots[bot_id]})

        if request.method == "DELETE":
            del self.bots[bot_id]
            return httpx.Response(204)

        return httpx.Response(405)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def test_settings():
    """Settings with external services pointed at test doubles"""
    return Settings(
        _env_file=None,
        openai_api_key="",
        openmic_api_url=OPENMIC_URL,
        openmic_api_key="test-openmic-key",
        seed_sample_data=False,
        analyzer_timeout_seconds=1.0,
    )


@pytest.fixture
def store():
    """Fresh in-memory record store"""
    return MemoryStore()


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
def fallback_llm():
    return ScriptedLLM()


@pytest.fixture
def analyzer(llm):
    return SentimentAnalyzer(llm=llm, timeout=1.0)


@pytest.fixture
def openmic_platform():
    return FakeOpenMicPlatform()


@pytest.fixture
def openmic_client(openmic_platform):
    return OpenMicClient(
        base_url=OPENMIC_URL,
        api_key="test-openmic-key",
        transport=openmic_platform.transport,
    )


@pytest.fixture
def unconfigured_openmic():
    """OpenMic client without an API key"""
    return OpenMicClient(base_url=OPENMIC_URL, api_key="")


@pytest.fixture
def test_app(test_settings, store, analyzer, openmic_client):
    return create_app(
        settings=test_settings,
        store=store,
        analyzer=analyzer,
        openmic=openmic_client,
    )


@pytest.fixture
async def client(test_app):
    """Create test client; unhandled errors come back as 500 responses"""
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    test_app.dependency_overrides.clear()


@pytest.fixture
async def test_patient(store):
    """Create a test patient"""
    return await store.create_patient({
        "id": "P123",
        "name": "John Doe",
        "last_appointment": "2025-08-12",
        "last_topic": "anxiety management",
        "risk_level": "high",
    })


@pytest.fixture
async def test_bot(store):
    """Create a test bot registered on OpenMic"""
    return await store.create_bot({
        "name": "Mental Wellness Assistant",
        "external_bot_id": "bot_123456",
        "personality": ["empathetic", "calm"],
        "greeting": "Hello, thank you for calling the wellness line.",
        "crisis_keywords": ["suicidal", "harm", "hopeless", "end it all"],
    })
