"""Service for extracting checkable claims from prose."""

import logging
import time
import uuid
from typing import Callable, List, Optional, Tuple

from ..errors import InputTooLongError, InputTooShortError, PipelineError
from ..models.analysis import HealthStatus, ServiceHealth
from ..models.claim import (
    Claim,
    ClaimCategory,
    ClaimExtractionOptions,
    ClaimExtractionResult,
    TextPosition,
)
from ..ports.ml_provider import QuestionAnswerer, ZeroShotClassifier
from .rate_limiter import RateLimiter
from .text_analysis import Sentence, deduplicate, detect_language, extract_keywords, split_sentences

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 50
MAX_TEXT_LENGTH = 50_000

CLAIM_LABELS = ["factual statement", "opinion", "prediction", "statistical claim", "unknown"]

FACTUAL_QUESTIONS = (
    "What facts are stated?",
    "What claims are made?",
    "What assertions are presented?",
    "What statements can be verified?",
    "What data or statistics are mentioned?",
)

MIN_ANSWER_SCORE = 0.3
MIN_ANSWER_LENGTH = 10
DUPLICATE_THRESHOLD = 0.8


def new_claim_id() -> str:
    """Default claim identifier factory."""
    return f"claim_{uuid.uuid4().hex}"


def category_for_label(label: str) -> ClaimCategory:
    """Map a classifier label to a claim category by substring."""
    label = label.lower()
    if "factual" in label:
        return ClaimCategory.FACTUAL
    elif "opinion" in label:
        return ClaimCategory.OPINION
    elif "prediction" in label:
        return ClaimCategory.PREDICTION
    elif "statistical" in label:
        return ClaimCategory.STATISTICAL
    return ClaimCategory.UNKNOWN


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class ClaimExtractionService:
    """Service for extracting claims with a zero-shot classifier and extractive QA."""

    def __init__(
        self,
        classifier: ZeroShotClassifier,
        question_answerer: Optional[QuestionAnswerer] = None,
        rate_limiter: Optional[RateLimiter] = None,
        id_factory: Callable[[], str] = new_claim_id,
    ):
        """Initialize the service.

        Args:
            classifier: Zero-shot classifier used to label sentences
            question_answerer: Extractive QA model, optional
            rate_limiter: Pacing between model calls
            id_factory: Produces claim identifiers
        """
        self._classifier = classifier
        self._qa = question_answerer
        self._limiter = rate_limiter or RateLimiter(1, 0.1)
        self._new_id = id_factory
        logger.info("🔧 ClaimExtractionService initialized")

    async def extract_claims(
        self,
        text: str,
        options: Optional[ClaimExtractionOptions] = None,
    ) -> ClaimExtractionResult:
        """Extract candidate claims from text.

        Args:
            text: Text to analyze
            options: Extraction options

        Returns:
            Extracted claims sorted by confidence

        Raises:
            InputTooShortError: If the trimmed text is under 50 characters
            InputTooLongError: If the text exceeds 50,000 characters
            PipelineError: If no sentence survives segmentation
        """
        options = options or ClaimExtractionOptions()
        started = time.perf_counter()

        if not text or len(text.strip()) < MIN_TEXT_LENGTH:
            raise InputTooShortError(MIN_TEXT_LENGTH)
        if len(text) > MAX_TEXT_LENGTH:
            raise InputTooLongError(MAX_TEXT_LENGTH)

        logger.info(f"🔍 Starting claim extraction for text of {len(text)} characters")
        language, _ = detect_language(text)

        sentences = split_sentences(text)
        if not sentences:
            raise PipelineError("No valid sentences found in text", stage="claim_extraction")

        logger.info(f"📝 Processing {len(sentences)} sentences")
        sentence_claims = await self._claims_from_sentences(sentences, text, options)
        answer_claims = await self._claims_from_answers(text, options)

        unique = deduplicate(sentence_claims + answer_claims, key=lambda claim: claim.text, threshold=DUPLICATE_THRESHOLD)
        claims = sorted(unique, key=lambda claim: claim.confidence, reverse=True)[: options.max_claims]

        elapsed = (time.perf_counter() - started) * 1000
        logger.info(f"✅ Extracted {len(claims)} claims in {elapsed:.0f}ms")
        return ClaimExtractionResult(
            claims=claims,
            total_claims=len(claims),
            processing_time=elapsed,
            text_length=len(text),
            language=language,
        )

    async def _classify(self, sentence: str) -> Tuple[ClaimCategory, float]:
        await self._limiter.acquire()
        result = await self._classifier.classify(sentence, CLAIM_LABELS)
        return category_for_label(result.top_label), _clamp(result.top_score)

    async def _claims_from_sentences(
        self,
        sentences: List[Sentence],
        text: str,
        options: ClaimExtractionOptions,
    ) -> List[Claim]:
        claims: List[Claim] = []
        for sentence in sentences:
            if len(sentence.text) < options.min_claim_length:
                continue

            try:
                category, confidence = await self._classify(sentence.text)
            except Exception as e:
                logger.warning(f"⚠️ Failed to classify sentence '{sentence.text[:50]}...': {e}")
                continue

            if category == ClaimCategory.OPINION and not options.include_opinions:
                continue
            if confidence < options.min_confidence:
                continue

            claims.append(self._build_claim(
                sentence.text, confidence, category, text, sentence.start, sentence.end, options.context_window,
            ))
            if len(claims) >= options.max_claims:
                break
        return claims

    async def _claims_from_answers(self, text: str, options: ClaimExtractionOptions) -> List[Claim]:
        if self._qa is None:
            return []

        claims: List[Claim] = []
        for question in FACTUAL_QUESTIONS:
            try:
                await self._limiter.acquire()
                result = await self._qa.answer(question, text)
            except Exception as e:
                logger.warning(f"⚠️ Question '{question}' failed: {e}")
                continue

            answer = result.answer.strip()
            if result.score <= MIN_ANSWER_SCORE or len(answer) <= MIN_ANSWER_LENGTH:
                continue

            start = max(0, min(result.start, len(text)))
            end = max(start, min(result.end or start + len(answer), len(text)))
            claims.append(self._build_claim(
                answer, _clamp(result.score), ClaimCategory.FACTUAL, text, start, end, options.context_window,
            ))
        return claims

    def _build_claim(
        self,
        claim_text: str,
        confidence: float,
        category: ClaimCategory,
        text: str,
        start: int,
        end: int,
        window: int,
    ) -> Claim:
        context = text[max(0, start - window):min(len(text), end + window)].strip()
        return Claim(
            id=self._new_id(),
            text=claim_text,
            confidence=confidence,
            category=category,
            context=context,
            position=TextPosition(start=start, end=end),
            keywords=extract_keywords(claim_text),
        )

    async def get_health_status(self) -> ServiceHealth:
        """Probe the classifier with a test sentence."""
        try:
            result = await self._classifier.classify("This is a test sentence.", ["test", "example"])
            return ServiceHealth(
                name="claim_extraction",
                status=HealthStatus.HEALTHY,
                details={
                    "question_answering": self._qa is not None,
                    "test_response": "success" if result.labels else "empty",
                },
            )
        except Exception as e:
            logger.warning(f"⚠️ Claim extraction health check failed: {e}")
            return ServiceHealth(
                name="claim_extraction",
                status=HealthStatus.UNHEALTHY,
                details={"error": str(e)},
            )
