"""Test configuration and common fixtures."""

from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from credibility_checker.domain.models.database import DatabaseReview
from credibility_checker.domain.models.reasoning import ReasoningAnalysis, SuggestedSource
from credibility_checker.domain.models.source import Source, SourceStance, SourceType
from credibility_checker.domain.models.verification import RiskLevel
from credibility_checker.domain.ports.ml_provider import AnswerResult, ClassificationResult
from credibility_checker.domain.ports.search_provider import SearchHit
from credibility_checker.domain.services.rate_limiter import RateLimiter


class ManualClock:
    """Clock that only moves when a test or a fake sleep advances it."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def fast_limiter(clock: Optional[ManualClock] = None) -> RateLimiter:
    """Limiter that throttles against a manual clock, never the wall clock."""
    clock = clock or ManualClock()
    return RateLimiter(1, 0.1, clock=clock, sleep=clock.sleep)


class FakeClassifier:
    """Zero-shot classifier answering from substring rules.

    Rules are checked in order; the first whose key appears in the text
    decides the top label and score.
    """

    def __init__(
        self,
        rules: Sequence[Tuple[str, str, float]] = (),
        default: Tuple[str, float] = ("factual statement", 0.9),
        fail_on: Sequence[str] = (),
    ):
        self.rules = list(rules)
        self.default = default
        self.fail_on = list(fail_on)
        self.calls: List[Tuple[str, List[str]]] = []

    async def classify(self, text: str, labels: List[str]) -> ClassificationResult:
        self.calls.append((text, labels))
        if any(marker in text for marker in self.fail_on):
            raise RuntimeError("classifier exploded")
        label, score = self.default
        for key, rule_label, rule_score in self.rules:
            if key in text:
                label, score = rule_label, rule_score
                break
        others = [other for other in labels if other != label]
        return ClassificationResult(
            labels=[label] + others,
            scores=[score] + [(1 - score) / max(1, len(others))] * len(others),
        )


class FakeQuestionAnswerer:
    """Extractive QA returning canned answers per question."""

    def __init__(self, answers: Optional[Dict[str, AnswerResult]] = None, fail: bool = False):
        self.answers = answers or {}
        self.fail = fail
        self.questions: List[str] = []

    async def answer(self, question: str, context: str) -> AnswerResult:
        self.questions.append(question)
        if self.fail:
            raise RuntimeError("qa unavailable")
        return self.answers.get(question, AnswerResult(answer="", score=0.0))


class FakeTranslator:
    """Translator that tags each chunk with its language pair."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.chunks: List[Tuple[str, str, str]] = []

    async def translate(self, text: str, source_language: str, target_language: str = "en") -> str:
        self.chunks.append((text, source_language, target_language))
        if self.fail:
            raise RuntimeError("translation failed")
        return f"[{source_language}->{target_language}] {text}"


class FakeReasoningProvider:
    """Reasoning provider with canned topics, analyses and suggestions."""

    def __init__(
        self,
        available: bool = True,
        topics: Optional[List[str]] = None,
        analysis: Optional[ReasoningAnalysis] = None,
        suggestions: Optional[List[SuggestedSource]] = None,
        fail: bool = False,
        healthy: bool = True,
    ):
        self.available = available
        self.topics = topics if topics is not None else ["vaccine safety", "clinical trials"]
        self.analysis = analysis or ReasoningAnalysis(
            is_factual=True,
            credibility_score=0.6,
            risk_level=RiskLevel.MEDIUM,
            category="health",
            reasoning="Plausible but unconfirmed",
            confidence=0.7,
        )
        self.suggestions = suggestions or []
        self.fail = fail
        self.healthy = healthy
        self.analyzed: List[str] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def extract_topics(self, text: str) -> List[str]:
        if self.fail:
            raise RuntimeError("reasoning unavailable")
        return list(self.topics)

    async def analyze_claim(self, claim: str) -> ReasoningAnalysis:
        self.analyzed.append(claim)
        if self.fail:
            raise RuntimeError("reasoning unavailable")
        return self.analysis

    async def suggest_sources(self, text: str, count: int) -> List[SuggestedSource]:
        if self.fail:
            raise RuntimeError("reasoning unavailable")
        return list(self.suggestions[:count])

    async def check_health(self) -> bool:
        return self.healthy


class FakeNewsProvider:
    """News search returning the same hits for every topic."""

    def __init__(self, hits: Optional[List[SearchHit]] = None, available: bool = True, fail: bool = False):
        self.hits = hits or []
        self.available = available
        self.fail = fail
        self.queries: List[str] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def search(self, query: str) -> List[SearchHit]:
        self.queries.append(query)
        if self.fail:
            raise RuntimeError("news search failed")
        return list(self.hits)


class FakeLinkProber:
    """Prober answering 200 unless a URL fragment maps to another status."""

    def __init__(self, statuses: Optional[Dict[str, int]] = None, fail_on: Sequence[str] = ()):
        self.statuses = statuses or {}
        self.fail_on = list(fail_on)
        self.probed: List[str] = []

    async def probe(self, url: str) -> int:
        self.probed.append(url)
        if any(marker in url for marker in self.fail_on):
            raise ConnectionError(f"cannot reach {url}")
        for marker, status in self.statuses.items():
            if marker in url:
                return status
        return 200


class FakeDatabaseProvider:
    """Fact-check database returning canned reviews."""

    def __init__(
        self,
        name: str = "FakeDB",
        reviews: Optional[List[DatabaseReview]] = None,
        available: bool = True,
        error: Optional[Exception] = None,
        healthy: bool = True,
    ):
        self.name = name
        self.reviews = reviews or []
        self.available = available
        self.error = error
        self.healthy = healthy
        self.queries: List[str] = []
        self.shut_down = False

    async def initialize(self) -> None:
        pass

    @property
    def provider_name(self) -> str:
        return self.name

    @property
    def reliability(self) -> float:
        return 0.9

    @property
    def is_available(self) -> bool:
        return self.available

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {"claim_search": True}

    async def search(self, query: str) -> List[DatabaseReview]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.reviews)

    async def check_health(self) -> bool:
        return self.healthy

    async def shutdown(self) -> None:
        self.shut_down = True


def make_source(
    domain: str = "reuters.com",
    title: str = "Report",
    reliability: float = 0.9,
    stance: SourceStance = SourceStance.NEUTRAL,
    relevance: float = 0.8,
    publish_date: Optional[str] = None,
    source_type: SourceType = SourceType.NEWS,
) -> Source:
    """Build a source with sensible defaults."""
    return Source(
        url=f"https://{domain}/{title.lower().replace(' ', '-')}",
        title=title,
        domain=domain,
        reliability=reliability,
        relevance_score=relevance,
        fact_check_result=stance,
        publish_date=publish_date,
        source_type=source_type,
    )


class SequentialIds:
    """Deterministic identifier factory."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}_{self.count}"


@pytest.fixture
def clock() -> ManualClock:
    """Provide a manual clock."""
    return ManualClock()


@pytest.fixture
def classifier() -> FakeClassifier:
    """Provide a classifier labeling everything as factual."""
    return FakeClassifier()


@pytest.fixture
def link_prober() -> FakeLinkProber:
    """Provide a prober that reports every URL live."""
    return FakeLinkProber()
