"""Service for gathering and verifying evidence sources."""

import asyncio
import logging
from types import MappingProxyType
from typing import List, Mapping, NamedTuple, Optional
from urllib.parse import quote, urlparse

from ..models.source import (
    Source,
    SourceGenerationOptions,
    SourceStance,
    SourceType,
    SourceVerificationStatus,
)
from ..ports.reasoning_provider import ReasoningProvider
from ..ports.search_provider import LinkProber, NewsSearchProvider
from .rate_limiter import RateLimiter
from .text_analysis import term_frequency_topics

logger = logging.getLogger(__name__)


class DomainTrust(NamedTuple):
    """Static trust information for a publisher domain."""
    reliability: float
    source_type: SourceType


DEFAULT_TRUST_TABLE: Mapping[str, DomainTrust] = MappingProxyType({
    "snopes.com": DomainTrust(0.95, SourceType.FACT_CHECK),
    "factcheck.org": DomainTrust(0.94, SourceType.FACT_CHECK),
    "politifact.com": DomainTrust(0.92, SourceType.FACT_CHECK),
    "reuters.com": DomainTrust(0.93, SourceType.NEWS),
    "apnews.com": DomainTrust(0.94, SourceType.NEWS),
    "bbc.com": DomainTrust(0.91, SourceType.NEWS),
    "npr.org": DomainTrust(0.90, SourceType.NEWS),
    "pubmed.ncbi.nlm.nih.gov": DomainTrust(0.96, SourceType.ACADEMIC),
    "scholar.google.com": DomainTrust(0.88, SourceType.ACADEMIC),
    "jstor.org": DomainTrust(0.94, SourceType.ACADEMIC),
    "cdc.gov": DomainTrust(0.95, SourceType.GOVERNMENT),
    "who.int": DomainTrust(0.94, SourceType.GOVERNMENT),
    "fda.gov": DomainTrust(0.93, SourceType.GOVERNMENT),
    "nih.gov": DomainTrust(0.95, SourceType.GOVERNMENT),
    "wikipedia.org": DomainTrust(0.82, SourceType.REFERENCE),
    "britannica.com": DomainTrust(0.89, SourceType.REFERENCE),
})

DEFAULT_NEWS_TRUST = DomainTrust(0.85, SourceType.NEWS)

HEALTH_KEYWORDS = (
    "vaccine", "covid", "medicine", "drug", "disease", "health",
    "medical", "treatment", "symptom", "virus", "bacteria",
)

MAX_TOPICS = 10
NEWS_TOPICS = 2
NEWS_HITS_PER_TOPIC = 2
SUGGESTED_CANDIDATES = 8

CURATED_RELEVANCE = 0.85
NEWS_RELEVANCE = 0.8
ACADEMIC_RELEVANCE = 0.9


class _CuratedSite(NamedTuple):
    domain: str
    url_template: str
    title_template: str
    excerpt_template: str


CURATED_SITES = (
    _CuratedSite(
        "snopes.com",
        "https://www.snopes.com/search/{topic}/",
        "Snopes fact-check search: {topic}",
        "Fact-checking information about {topic}",
    ),
    _CuratedSite(
        "factcheck.org",
        "https://www.factcheck.org/?s={topic}",
        "FactCheck.org search: {topic}",
        "Fact-checking analysis of {topic}",
    ),
    _CuratedSite(
        "politifact.com",
        "https://www.politifact.com/search/?q={topic}",
        "PolitiFact search: {topic}",
        "Political fact-checking of {topic}",
    ),
)


def normalize_domain(url_or_host: str) -> str:
    """Lowercase host of a URL without a leading ``www.``."""
    host = urlparse(url_or_host).hostname if "://" in url_or_host else url_or_host
    host = (host or "").lower()
    return host[4:] if host.startswith("www.") else host


def is_health_related(topic: str) -> bool:
    topic = topic.lower()
    return any(keyword in topic for keyword in HEALTH_KEYWORDS)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def deduplicate_sources(sources: List[Source]) -> List[Source]:
    """Keep the first source for each domain and title pair."""
    seen = set()
    unique = []
    for source in sources:
        key = f"{source.domain}:{source.title}"
        if key not in seen:
            seen.add(key)
            unique.append(source)
    return unique


class SourceGenerationService:
    """Service that builds one verified evidence pool for a text."""

    def __init__(
        self,
        link_prober: LinkProber,
        news_provider: Optional[NewsSearchProvider] = None,
        reasoning_provider: Optional[ReasoningProvider] = None,
        trust_table: Mapping[str, DomainTrust] = DEFAULT_TRUST_TABLE,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """Initialize the service.

        Args:
            link_prober: URL liveness checker
            news_provider: News search API, optional
            reasoning_provider: Generative model for topics and suggestions, optional
            trust_table: Read-only domain trust data
            rate_limiter: Pacing between liveness probes
        """
        self._prober = link_prober
        self._news = news_provider
        self._reasoning = reasoning_provider
        self._trust = MappingProxyType(dict(trust_table))
        self._limiter = rate_limiter or RateLimiter(1, 0.3)
        logger.info("🔧 SourceGenerationService initialized")

    @property
    def trust_table(self) -> Mapping[str, DomainTrust]:
        return self._trust

    async def generate_sources(
        self,
        full_text: str,
        options: Optional[SourceGenerationOptions] = None,
    ) -> List[Source]:
        """Generate ranked, verified sources for a text.

        Args:
            full_text: Text the sources should support or refute
            options: Generation options

        Returns:
            At most ``max_sources`` sources, best first. Empty when every
            strategy fails.
        """
        options = options or SourceGenerationOptions()
        logger.info(f"📚 Generating sources for content: {full_text[:50]}...")

        topics = await self.extract_topics(full_text)
        logger.info(f"🏷️ Topics: {topics}")

        outcomes = await asyncio.gather(
            self._suggested_sources(full_text, options),
            self._curated_sources(topics, options),
            self._news_sources(topics),
            self._academic_sources(topics),
            return_exceptions=True,
        )

        candidates: List[Source] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                logger.warning(f"⚠️ Source strategy failed: {outcome}")
                continue
            candidates.extend(outcome)

        candidates = deduplicate_sources(candidates)
        logger.info(f"🔗 {len(candidates)} unique source candidates")

        if options.verify_urls:
            candidates = await self.verify_sources(candidates)
            candidates = [
                source for source in candidates
                if source.verification_status == SourceVerificationStatus.VERIFIED
            ]

        eligible = [source for source in candidates if source.reliability >= options.min_reliability]
        ranked = sorted(eligible, key=lambda source: source.rank_score, reverse=True)
        selected = ranked[: options.max_sources]
        logger.info(f"✅ Selected {len(selected)} sources")
        return selected

    async def extract_topics(self, text: str) -> List[str]:
        """Search topics from the reasoning provider, or from term frequency."""
        if self._reasoning is not None and self._reasoning.is_available:
            try:
                topics = await self._reasoning.extract_topics(text)
                if isinstance(topics, list):
                    cleaned = [topic.strip() for topic in topics if isinstance(topic, str) and topic.strip()]
                    if cleaned:
                        return cleaned[:MAX_TOPICS]
                logger.warning("⚠️ Reasoning provider returned no usable topics")
            except Exception as e:
                logger.warning(f"⚠️ Topic extraction failed, using term frequency: {e}")
        return term_frequency_topics(text, MAX_TOPICS)

    async def verify_sources(self, sources: List[Source]) -> List[Source]:
        """Probe each source URL in turn and record the outcome."""
        verified: List[Source] = []
        for index, source in enumerate(sources, start=1):
            await self._limiter.acquire()
            status = await self._probe(source.url)
            verified.append(source.with_status(status))
            if status == SourceVerificationStatus.VERIFIED:
                logger.info(f"✅ URL {index}/{len(sources)} verified: {source.url}")
            else:
                logger.warning(f"❌ URL {index}/{len(sources)} failed: {source.url}")
        return verified

    async def _probe(self, url: str) -> SourceVerificationStatus:
        try:
            status_code = await self._prober.probe(url)
        except Exception as e:
            logger.debug(f"Probe failed for {url}: {e}")
            return SourceVerificationStatus.FAILED
        if 200 <= status_code < 400:
            return SourceVerificationStatus.VERIFIED
        return SourceVerificationStatus.FAILED

    def _trust_for(self, domain: str, default: DomainTrust) -> DomainTrust:
        return self._trust.get(domain, default)

    async def _suggested_sources(self, text: str, options: SourceGenerationOptions) -> List[Source]:
        if self._reasoning is None or not self._reasoning.is_available:
            return []

        suggestions = await self._reasoning.suggest_sources(text, max(SUGGESTED_CANDIDATES, options.max_sources))
        sources = []
        for suggestion in suggestions:
            domain = normalize_domain(suggestion.domain or suggestion.url) or "unknown"
            sources.append(Source(
                url=suggestion.url,
                title=suggestion.title,
                domain=domain,
                reliability=_clamp(suggestion.reliability, 0.7, 0.98),
                relevance_score=_clamp(suggestion.relevance_score, 0.7, 1.0),
                publish_date=suggestion.publish_date,
                author=suggestion.author,
                excerpt=suggestion.excerpt,
                fact_check_result=suggestion.fact_check_result,
                source_type=suggestion.source_type,
            ))
        logger.info(f"🤖 Reasoning provider suggested {len(sources)} candidates")
        return sources

    async def _curated_sources(self, topics: List[str], options: SourceGenerationOptions) -> List[Source]:
        sources = []
        for topic in topics[: options.max_topics]:
            for site in CURATED_SITES:
                trust = self._trust_for(site.domain, DomainTrust(0.9, SourceType.FACT_CHECK))
                sources.append(Source(
                    url=site.url_template.format(topic=quote(topic, safe="")),
                    title=site.title_template.format(topic=topic),
                    domain=site.domain,
                    reliability=trust.reliability,
                    relevance_score=CURATED_RELEVANCE,
                    excerpt=site.excerpt_template.format(topic=topic),
                    source_type=SourceType.FACT_CHECK,
                ))
        return sources[: options.max_sources]

    async def _news_sources(self, topics: List[str]) -> List[Source]:
        if self._news is None or not self._news.is_available:
            return []

        sources = []
        for topic in topics[:NEWS_TOPICS]:
            try:
                hits = await self._news.search(topic)
            except Exception as e:
                logger.warning(f"⚠️ News search failed for topic '{topic}': {e}")
                continue
            for hit in hits[:NEWS_HITS_PER_TOPIC]:
                domain = normalize_domain(hit.url)
                trust = self._trust_for(domain, DEFAULT_NEWS_TRUST)
                sources.append(Source(
                    url=hit.url,
                    title=hit.title,
                    domain=domain,
                    reliability=trust.reliability,
                    publish_date=hit.published_at,
                    author=hit.author,
                    relevance_score=NEWS_RELEVANCE,
                    excerpt=hit.description,
                    source_type=trust.source_type,
                ))
        return sources

    async def _academic_sources(self, topics: List[str]) -> List[Source]:
        sources = []
        for topic in topics[:1]:
            if is_health_related(topic):
                trust = self._trust_for("pubmed.ncbi.nlm.nih.gov", DomainTrust(0.96, SourceType.ACADEMIC))
                sources.append(Source(
                    url=f"https://pubmed.ncbi.nlm.nih.gov/?term={quote(topic, safe='')}",
                    title=f"PubMed search results for: {topic}",
                    domain="pubmed.ncbi.nlm.nih.gov",
                    reliability=trust.reliability,
                    relevance_score=ACADEMIC_RELEVANCE,
                    excerpt=f"Academic research related to {topic}",
                    source_type=SourceType.ACADEMIC,
                    fact_check_result=SourceStance.NEUTRAL,
                ))
        return sources
