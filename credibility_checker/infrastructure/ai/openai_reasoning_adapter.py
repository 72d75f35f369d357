"""OpenAI implementation of the generative reasoning provider."""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field, StrictBool, ValidationError, field_validator

from ...domain.errors import ExternalServiceError, ServiceUnavailableError
from ...domain.models.reasoning import REASONING_CATEGORIES, ReasoningAnalysis, SuggestedSource
from ...domain.models.source import SourceStance, SourceType
from ...domain.models.verification import RiskLevel
from ...domain.ports.reasoning_provider import ReasoningProvider

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

MAX_TOPICS = 10

ANALYSIS_PROMPT = """
You are a professional fact-checker with expertise in identifying misinformation.
Analyze the claim you are given:
1. Assess factual accuracy based on established knowledge
2. Consider potential harm if the claim is false
3. Evaluate the claim's verifiability
4. Identify the subject domain

Respond in JSON format with:
{
    "isFactual": boolean,
    "credibilityScore": number between 0.0 (completely false) and 1.0 (completely true),
    "riskLevel": "low" | "medium" | "high" | "critical",
    "category": "health" | "science" | "politics" | "conspiracy" | "general",
    "reasoning": "detailed explanation",
    "confidence": number between 0.0 and 1.0,
    "suggestedSources": []
}
Risk levels: critical for dangerous health or safety misinformation, high for harmful
false claims, medium for misleading but not immediately dangerous, low for minor
inaccuracies. Reflect uncertainty in lower confidence scores.
"""

TOPICS_PROMPT = """
Extract 5-10 key search topics from the text you are given. Topics should be short
noun phrases suitable for a fact-checking search engine.
Respond in JSON format with: {"topics": ["topic one", "topic two"]}
"""

SOURCES_PROMPT = """
Suggest {count} real, existing, authoritative web pages that help verify or refute the
text you are given. Prefer fact-checking sites, major news agencies, academic and
government sources. Respond in JSON format with:
{{
    "sources": [
        {{
            "url": "https://...",
            "title": "page title",
            "domain": "example.org",
            "reliability": number between 0.0 and 1.0,
            "relevanceScore": number between 0.0 and 1.0,
            "publishDate": "YYYY-MM-DD",
            "author": "author name",
            "excerpt": "what this source says about the topic",
            "factCheckResult": "supports" | "contradicts" | "neutral" | "insufficient_evidence",
            "sourceType": "fact_check" | "news" | "academic" | "government" | "reference"
        }}
    ]
}}
"""


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI reasoning adapter."""

    api_key: str = Field(default="", description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Chat completion model")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=1000, description="Maximum tokens per response")
    timeout: float = Field(default=30.0, description="API timeout in seconds")


class ReasoningPayload(BaseModel):
    """Wire schema of a claim analysis response."""

    is_factual: StrictBool = Field(..., alias="isFactual")
    credibility_score: float = Field(..., alias="credibilityScore", ge=0.0, le=1.0)
    risk_level: RiskLevel = Field(..., alias="riskLevel")
    category: str = "general"
    reasoning: str = ""
    confidence: float = Field(..., ge=0.0, le=1.0)
    suggested_sources: List[str] = Field(default_factory=list, alias="suggestedSources")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    @field_validator("credibility_score", "confidence", mode="before")
    @classmethod
    def require_number(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("must be a number")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, value: Any) -> str:
        value = str(value).lower() if value is not None else "general"
        return value if value in REASONING_CATEGORIES else "general"

    def to_analysis(self) -> ReasoningAnalysis:
        return ReasoningAnalysis(
            is_factual=self.is_factual,
            credibility_score=self.credibility_score,
            risk_level=self.risk_level,
            category=self.category,
            reasoning=self.reasoning or "No reasoning provided",
            confidence=self.confidence,
            suggested_sources=self.suggested_sources,
        )


class SourcePayload(BaseModel):
    """Wire schema of one suggested source."""

    url: str
    title: Optional[str] = None
    domain: Optional[str] = None
    reliability: Optional[float] = None
    relevance_score: Optional[float] = Field(None, alias="relevanceScore")
    publish_date: Optional[str] = Field(None, alias="publishDate")
    author: Optional[str] = None
    excerpt: Optional[str] = None
    fact_check_result: Optional[str] = Field(None, alias="factCheckResult")
    source_type: Optional[str] = Field(None, alias="sourceType")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    def to_suggestion(self) -> SuggestedSource:
        stances = {stance.value for stance in SourceStance}
        types = {source_type.value for source_type in SourceType}
        return SuggestedSource(
            url=self.url,
            title=self.title or "Untitled Source",
            domain=self.domain,
            reliability=self.reliability if self.reliability is not None else 0.85,
            relevance_score=self.relevance_score if self.relevance_score is not None else 0.9,
            publish_date=self.publish_date,
            author=self.author,
            excerpt=self.excerpt,
            fact_check_result=SourceStance(self.fact_check_result) if self.fact_check_result in stances else SourceStance.NEUTRAL,
            source_type=SourceType(self.source_type) if self.source_type in types else SourceType.REFERENCE,
        )


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the first JSON object in a model response.

    Raises:
        ValueError: If no JSON object can be parsed
    """
    cleaned = _FENCE_RE.sub("", (text or "").strip())
    match = _OBJECT_RE.search(cleaned)
    if not match:
        raise ValueError("No JSON object in response")
    parsed = json.loads(match.group())
    if not isinstance(parsed, dict):
        raise ValueError("Response is not a JSON object")
    return parsed


class OpenAIReasoningAdapter(ReasoningProvider):
    """Claim analysis, topic extraction and source suggestions via chat completions."""

    def __init__(
        self,
        config: Optional[OpenAIConfig] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            client: Preconfigured OpenAI client
        """
        self._config = config or OpenAIConfig()
        self._client = client
        if not self._config.api_key and client is None:
            logger.warning("⚠️ OPENAI_API_KEY not set - generative reasoning disabled")

    async def initialize(self) -> None:
        """Create the OpenAI client when an API key is configured."""
        if self._client is None and self._config.api_key:
            try:
                self._client = AsyncOpenAI(api_key=self._config.api_key, timeout=self._config.timeout)
            except Exception as e:
                self._client = None
                raise ConnectionError(f"Failed to initialize OpenAI provider: {e}")

    async def shutdown(self) -> None:
        """Close the client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def is_available(self) -> bool:
        return self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {
            "claim_analysis": True,
            "topic_extraction": True,
            "source_suggestions": True,
        }

    async def _complete(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        if self._client is None:
            raise ServiceUnavailableError(self.provider_name, "Provider not initialized")
        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                response_format={"type": "json_object"},
            )
            return extract_json_object(response.choices[0].message.content)
        except (ValueError, IndexError, AttributeError) as e:
            raise ExternalServiceError(self.provider_name, f"Invalid model response: {e}") from e
        except Exception as e:
            raise ExternalServiceError(self.provider_name, f"Completion failed: {e}") from e

    async def analyze_claim(self, claim: str) -> ReasoningAnalysis:
        """Analyze a claim; untrustworthy responses yield the fallback analysis."""
        try:
            payload = ReasoningPayload.model_validate(await self._complete(ANALYSIS_PROMPT, f'Claim: "{claim}"'))
        except (ExternalServiceError, ValidationError) as e:
            logger.warning(f"⚠️ Reasoning analysis unusable for claim '{claim[:50]}...': {e}")
            return ReasoningAnalysis.fallback("Unable to analyze claim due to an invalid or failed model response.")

        analysis = payload.to_analysis()
        logger.info(
            f"🤖 Reasoning analysis for '{claim[:50]}...': "
            f"score {analysis.credibility_score:.2f}, risk {analysis.risk_level.value}"
        )
        return analysis

    async def extract_topics(self, text: str) -> List[str]:
        """Extract search topics from text.

        Raises:
            ExternalServiceError: If the response is unusable
        """
        data = await self._complete(TOPICS_PROMPT, text[:4000])
        topics = data.get("topics")
        if not isinstance(topics, list):
            raise ExternalServiceError(self.provider_name, "Response has no topics list")
        return [topic.strip() for topic in topics if isinstance(topic, str) and topic.strip()][:MAX_TOPICS]

    async def suggest_sources(self, text: str, count: int) -> List[SuggestedSource]:
        """Suggest up to count evidence sources for text.

        Raises:
            ExternalServiceError: If the response is unusable
        """
        data = await self._complete(SOURCES_PROMPT.format(count=count), text[:4000])
        raw_sources = data.get("sources")
        if not isinstance(raw_sources, list):
            raise ExternalServiceError(self.provider_name, "Response has no sources list")

        suggestions = []
        for raw in raw_sources[:count]:
            try:
                suggestions.append(SourcePayload.model_validate(raw).to_suggestion())
            except ValidationError as e:
                logger.debug(f"Skipping malformed source suggestion: {e}")
        return suggestions

    async def check_health(self) -> bool:
        """Return whether the model answers a minimal JSON request."""
        try:
            data = await self._complete('Respond in JSON format with {"status": "ok"}.', "Health check")
        except ExternalServiceError as e:
            logger.warning(f"⚠️ OpenAI health check failed: {e}")
            return False
        return data.get("status") == "ok"
