"""Tests for the Hugging Face inference adapter."""

import json
from typing import Callable, List

import httpx
import pytest
import pytest_asyncio

from credibility_checker.domain.errors import ExternalServiceError, ServiceUnavailableError
from credibility_checker.infrastructure.ai.huggingface_adapter import HuggingFaceAdapter, HuggingFaceConfig


def make_transport(handler: Callable[[httpx.Request], httpx.Response], seen: List[httpx.Request]) -> httpx.MockTransport:
    """Create a transport recording every request it answers."""
    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)
    return httpx.MockTransport(record)


@pytest_asyncio.fixture
async def adapter_factory():
    """Build initialized adapters answering from a handler."""
    adapters = []

    async def build(handler, seen=None, api_key="hf-test"):
        adapter = HuggingFaceAdapter(
            HuggingFaceConfig(api_key=api_key),
            transport=make_transport(handler, seen if seen is not None else []),
        )
        await adapter.initialize()
        adapters.append(adapter)
        return adapter

    yield build
    for adapter in adapters:
        await adapter.shutdown()


@pytest.mark.asyncio
async def test_classify_list_response(adapter_factory):
    """Test classification with the label/score list format."""
    seen = []
    adapter = await adapter_factory(
        lambda request: httpx.Response(200, json=[
            {"label": "opinion", "score": 0.2},
            {"label": "factual statement", "score": 0.7},
            {"label": "prediction", "score": 0.1},
        ]),
        seen,
    )

    result = await adapter.classify("The sky is blue.", ["factual statement", "opinion", "prediction"])

    assert result.top_label == "factual statement"
    assert result.top_score == pytest.approx(0.7)
    assert result.labels == ["factual statement", "opinion", "prediction"]

    request = seen[0]
    assert request.url.path == "/models/facebook/bart-large-mnli"
    assert request.headers["Authorization"] == "Bearer hf-test"
    body = json.loads(request.content)
    assert body["inputs"] == "The sky is blue."
    assert body["parameters"]["candidate_labels"] == ["factual statement", "opinion", "prediction"]


@pytest.mark.asyncio
async def test_classify_dict_response(adapter_factory):
    """Test classification with the labels/scores object format."""
    adapter = await adapter_factory(
        lambda request: httpx.Response(200, json={"labels": ["false", "factual"], "scores": [0.8, 0.2]}),
    )

    result = await adapter.classify("Claim", ["factual", "false"])

    assert result.top_label == "false"
    assert result.top_score == 0.8


@pytest.mark.asyncio
async def test_model_error_payload_raises(adapter_factory):
    """Test that an error payload such as a loading model is reported."""
    adapter = await adapter_factory(
        lambda request: httpx.Response(200, json={"error": "Model is currently loading"}),
    )

    with pytest.raises(ExternalServiceError, match="currently loading"):
        await adapter.classify("Claim", ["factual"])


@pytest.mark.asyncio
async def test_http_error_raises(adapter_factory):
    """Test that HTTP failures are wrapped."""
    adapter = await adapter_factory(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(ExternalServiceError):
        await adapter.answer("What?", "Context")


@pytest.mark.asyncio
async def test_requires_initialization():
    """Test that calls before initialize fail fast."""
    adapter = HuggingFaceAdapter()

    assert not adapter.is_available
    with pytest.raises(ServiceUnavailableError):
        await adapter.classify("Claim", ["factual"])


@pytest.mark.asyncio
async def test_answer(adapter_factory):
    """Test extractive question answering."""
    seen = []
    adapter = await adapter_factory(
        lambda request: httpx.Response(200, json={"answer": "4.54 billion years", "score": 0.91, "start": 27, "end": 45}),
        seen,
    )

    result = await adapter.answer("How old is the Earth?", "The Earth is approximately 4.54 billion years old.")

    assert result.answer == "4.54 billion years"
    assert result.score == pytest.approx(0.91)
    assert (result.start, result.end) == (27, 45)
    assert seen[0].url.path == "/models/deepset/roberta-base-squad2"
    assert json.loads(seen[0].content)["inputs"]["question"] == "How old is the Earth?"


@pytest.mark.asyncio
async def test_translate_selects_model_by_language(adapter_factory):
    """Test translation model selection and fallback."""
    seen = []
    adapter = await adapter_factory(
        lambda request: httpx.Response(200, json=[{"translation_text": "The government is responsible."}]),
        seen,
    )

    assert await adapter.translate("El gobierno es responsable.", "es") == "The government is responsible."
    await adapter.translate("Il governo è responsabile.", "it")

    assert seen[0].url.path == "/models/Helsinki-NLP/opus-mt-es-en"
    assert seen[1].url.path == "/models/Helsinki-NLP/opus-mt-mul-en"


@pytest.mark.asyncio
async def test_empty_translation_raises(adapter_factory):
    """Test that an empty translation is an error."""
    adapter = await adapter_factory(lambda request: httpx.Response(200, json=[{}]))

    with pytest.raises(ExternalServiceError):
        await adapter.translate("Bonjour le monde.", "fr")


@pytest.mark.asyncio
async def test_no_authorization_without_key(adapter_factory):
    """Test that the public API is used without a token."""
    seen = []
    adapter = await adapter_factory(
        lambda request: httpx.Response(200, json={"labels": ["factual"], "scores": [1.0]}),
        seen,
        api_key="",
    )

    await adapter.classify("Claim", ["factual"])

    assert "Authorization" not in seen[0].headers
    assert adapter.provider_name == "huggingface"
    assert adapter.capabilities["translation"]
