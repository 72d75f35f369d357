"""Tests for the OpenAI reasoning adapter."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from credibility_checker.domain.errors import ExternalServiceError
from credibility_checker.domain.models.source import SourceStance, SourceType
from credibility_checker.domain.models.verification import RiskLevel
from credibility_checker.infrastructure.ai.openai_reasoning_adapter import (
    OpenAIConfig,
    OpenAIReasoningAdapter,
    extract_json_object,
)


def completion(content: str) -> MagicMock:
    """Build a chat completion response carrying content."""
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def mock_openai_client():
    """Create a mock OpenAI client."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def adapter(mock_openai_client):
    """Create an adapter around the mock client."""
    return OpenAIReasoningAdapter(OpenAIConfig(api_key="test-key"), client=mock_openai_client)


def test_extract_json_object():
    """Test JSON extraction from fenced and chatty responses."""
    assert extract_json_object('```json\n{"a": 1}\n```') == {"a": 1}
    assert extract_json_object('Sure! {"a": {"b": 2}} Hope that helps.') == {"a": {"b": 2}}
    with pytest.raises(ValueError):
        extract_json_object("no json here")


@pytest.mark.asyncio
async def test_analyze_claim(adapter, mock_openai_client):
    """Test parsing of a well-formed analysis."""
    mock_openai_client.chat.completions.create.return_value = completion(json.dumps({
        "isFactual": False,
        "credibilityScore": 0.1,
        "riskLevel": "critical",
        "category": "Health",
        "reasoning": "Vaccines do not cause autism.",
        "confidence": 0.95,
        "suggestedSources": ["https://www.cdc.gov/vaccinesafety"],
    }))

    analysis = await adapter.analyze_claim("Vaccines cause autism")

    assert analysis.is_factual is False
    assert analysis.credibility_score == 0.1
    assert analysis.risk_level == RiskLevel.CRITICAL
    assert analysis.category == "health"
    assert analysis.suggested_sources == ["https://www.cdc.gov/vaccinesafety"]

    kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "Vaccines cause autism" in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_analyze_claim_accepts_integer_scores(adapter, mock_openai_client):
    """Test that whole-number scores are accepted and unknown categories mapped to general."""
    mock_openai_client.chat.completions.create.return_value = completion(json.dumps({
        "isFactual": True,
        "credibilityScore": 1,
        "riskLevel": "low",
        "category": "sports",
        "reasoning": "Well documented.",
        "confidence": 1,
    }))

    analysis = await adapter.analyze_claim("The 2018 World Cup was held in Russia")

    assert analysis.credibility_score == 1.0
    assert analysis.category == "general"


@pytest.mark.parametrize("payload", [
    {"isFactual": "yes", "credibilityScore": 0.5, "riskLevel": "low", "confidence": 0.5},
    {"isFactual": True, "credibilityScore": "high", "riskLevel": "low", "confidence": 0.5},
    {"isFactual": True, "credibilityScore": 1.5, "riskLevel": "low", "confidence": 0.5},
    {"isFactual": True, "credibilityScore": 0.5, "riskLevel": "extreme", "confidence": 0.5},
    {"isFactual": True, "credibilityScore": 0.5, "riskLevel": "low"},
])
@pytest.mark.asyncio
async def test_invalid_analysis_falls_back(adapter, mock_openai_client, payload):
    """Test that schema violations produce the neutral fallback."""
    mock_openai_client.chat.completions.create.return_value = completion(json.dumps(payload))

    analysis = await adapter.analyze_claim("Some claim")

    assert analysis.credibility_score == 0.5
    assert analysis.confidence == 0.1
    assert analysis.risk_level == RiskLevel.MEDIUM
    assert analysis.is_factual is False


@pytest.mark.asyncio
async def test_api_failure_falls_back(adapter, mock_openai_client):
    """Test that transport failures produce the neutral fallback."""
    mock_openai_client.chat.completions.create.side_effect = RuntimeError("timeout")

    analysis = await adapter.analyze_claim("Some claim")

    assert analysis.confidence == 0.1


@pytest.mark.asyncio
async def test_extract_topics(adapter, mock_openai_client):
    """Test topic extraction cleanup."""
    mock_openai_client.chat.completions.create.return_value = completion(json.dumps({
        "topics": ["vaccine safety", " ", 42, "autism research "] + [f"topic {i}" for i in range(12)],
    }))

    topics = await adapter.extract_topics("Vaccines cause autism")

    assert topics[:2] == ["vaccine safety", "autism research"]
    assert len(topics) == 10


@pytest.mark.asyncio
async def test_extract_topics_requires_list(adapter, mock_openai_client):
    """Test that a malformed topic response raises."""
    mock_openai_client.chat.completions.create.return_value = completion('{"topics": "vaccines"}')

    with pytest.raises(ExternalServiceError):
        await adapter.extract_topics("Vaccines cause autism")


@pytest.mark.asyncio
async def test_suggest_sources(adapter, mock_openai_client):
    """Test source suggestion parsing and defaults."""
    mock_openai_client.chat.completions.create.return_value = completion(json.dumps({
        "sources": [
            {
                "url": "https://www.cdc.gov/vaccinesafety/concerns/autism.html",
                "title": "Autism and Vaccines",
                "domain": "cdc.gov",
                "reliability": 0.95,
                "relevanceScore": 0.9,
                "factCheckResult": "contradicts",
                "sourceType": "government",
            },
            {"url": "https://example.org/page", "factCheckResult": "maybe", "sourceType": "blog"},
            {"title": "Missing URL"},
        ],
    }))

    suggestions = await adapter.suggest_sources("Vaccines cause autism", 8)

    assert len(suggestions) == 2
    assert suggestions[0].fact_check_result == SourceStance.CONTRADICTS
    assert suggestions[0].source_type == SourceType.GOVERNMENT
    assert suggestions[1].title == "Untitled Source"
    assert suggestions[1].reliability == 0.85
    assert suggestions[1].fact_check_result == SourceStance.NEUTRAL
    assert suggestions[1].source_type == SourceType.REFERENCE
    system_prompt = mock_openai_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert "Suggest 8 real" in system_prompt


@pytest.mark.asyncio
async def test_check_health(adapter, mock_openai_client):
    """Test the health probe."""
    mock_openai_client.chat.completions.create.return_value = completion('{"status": "ok"}')
    assert await adapter.check_health()

    mock_openai_client.chat.completions.create.side_effect = RuntimeError("down")
    assert not await adapter.check_health()


@pytest.mark.asyncio
async def test_disabled_without_key():
    """Test that no client is created without an API key."""
    adapter = OpenAIReasoningAdapter(OpenAIConfig())
    await adapter.initialize()

    assert not adapter.is_available


@pytest.mark.asyncio
async def test_shutdown_closes_client(adapter, mock_openai_client):
    """Test client cleanup."""
    await adapter.shutdown()

    mock_openai_client.close.assert_awaited_once()
    assert not adapter.is_available
