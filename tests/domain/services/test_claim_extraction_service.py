"""Tests for the claim extraction service."""

import pytest

from conftest import FakeClassifier, FakeQuestionAnswerer, SequentialIds, fast_limiter
from credibility_checker.domain.errors import InputTooLongError, InputTooShortError, PipelineError
from credibility_checker.domain.models.analysis import HealthStatus
from credibility_checker.domain.models.claim import ClaimCategory, ClaimExtractionOptions
from credibility_checker.domain.ports.ml_provider import AnswerResult
from credibility_checker.domain.services.claim_extraction_service import (
    FACTUAL_QUESTIONS,
    ClaimExtractionService,
    category_for_label,
)
from credibility_checker.domain.services.text_analysis import jaccard_similarity

TEXT = (
    "The Eiffel Tower was completed in 1889 for the World Fair. "
    "I think Paris is the most beautiful city in the world. "
    "Unemployment fell to four percent in the last quarter. "
    "Electric cars will outsell petrol cars by the year 2035."
)


def make_service(classifier=None, qa=None):
    return ClaimExtractionService(
        classifier or FakeClassifier(),
        question_answerer=qa,
        rate_limiter=fast_limiter(),
        id_factory=SequentialIds("claim"),
    )


def test_category_for_label():
    assert category_for_label("factual statement") == ClaimCategory.FACTUAL
    assert category_for_label("Opinion") == ClaimCategory.OPINION
    assert category_for_label("prediction") == ClaimCategory.PREDICTION
    assert category_for_label("statistical claim") == ClaimCategory.STATISTICAL
    assert category_for_label("other") == ClaimCategory.UNKNOWN


@pytest.mark.asyncio
async def test_rejects_short_text():
    with pytest.raises(InputTooShortError):
        await make_service().extract_claims("x" * 40)


@pytest.mark.asyncio
async def test_rejects_long_text():
    with pytest.raises(InputTooLongError):
        await make_service().extract_claims("word " * 10_001)


@pytest.mark.asyncio
async def test_text_without_sentences_fails():
    with pytest.raises(PipelineError) as exc_info:
        await make_service().extract_claims("... !!! ??? " * 10)

    assert exc_info.value.stage == "claim_extraction"


@pytest.mark.asyncio
async def test_extracts_labeled_claims():
    classifier = FakeClassifier(rules=[
        ("I think", "opinion", 0.95),
        ("Unemployment", "statistical claim", 0.8),
        ("Electric cars", "prediction", 0.7),
    ])
    result = await make_service(classifier).extract_claims(TEXT)

    texts = [claim.text for claim in result.claims]
    assert "I think Paris is the most beautiful city in the world" not in texts
    assert result.total_claims == 3
    assert result.language == "en"
    assert [claim.confidence for claim in result.claims] == sorted(
        (claim.confidence for claim in result.claims), reverse=True,
    )

    first = result.claims[0]
    assert first.id == "claim_1"
    assert first.category == ClaimCategory.FACTUAL
    assert TEXT[first.position.start:first.position.end] == first.text
    assert first.text in first.context
    assert "eiffel" in first.keywords


@pytest.mark.asyncio
async def test_opinions_kept_when_requested():
    classifier = FakeClassifier(rules=[("I think", "opinion", 0.95)])
    result = await make_service(classifier).extract_claims(
        TEXT, ClaimExtractionOptions(include_opinions=True),
    )

    assert any(claim.category == ClaimCategory.OPINION for claim in result.claims)


@pytest.mark.asyncio
async def test_low_confidence_and_failed_sentences_are_skipped():
    classifier = FakeClassifier(
        rules=[("Unemployment", "statistical claim", 0.2)],
        fail_on=["Electric cars"],
    )
    result = await make_service(classifier).extract_claims(TEXT)

    texts = [claim.text for claim in result.claims]
    assert texts == [
        "The Eiffel Tower was completed in 1889 for the World Fair",
        "I think Paris is the most beautiful city in the world",
    ]


@pytest.mark.asyncio
async def test_max_claims_and_confidence_bounds():
    result = await make_service().extract_claims(TEXT, ClaimExtractionOptions(max_claims=2))

    assert len(result.claims) <= 2
    assert all(0.0 <= claim.confidence <= 1.0 for claim in result.claims)


@pytest.mark.asyncio
async def test_question_answering_adds_claims_and_deduplicates():
    answer_text = "Unemployment fell to four percent in the last quarter"
    start = TEXT.index(answer_text)
    qa = FakeQuestionAnswerer({
        FACTUAL_QUESTIONS[0]: AnswerResult(answer=answer_text, score=0.95, start=start, end=start + len(answer_text)),
        FACTUAL_QUESTIONS[1]: AnswerResult(answer="1889", score=0.9, start=0, end=4),
        FACTUAL_QUESTIONS[2]: AnswerResult(answer="the World Fair in Paris", score=0.2, start=0, end=0),
    })
    classifier = FakeClassifier(rules=[("I think", "opinion", 0.9)])

    result = await make_service(classifier, qa).extract_claims(TEXT)

    texts = [claim.text for claim in result.claims]
    assert len(qa.questions) == len(FACTUAL_QUESTIONS)
    assert texts.count(answer_text) == 1
    assert "1889" not in texts
    assert "the World Fair in Paris" not in texts
    for i, first in enumerate(texts):
        for second in texts[i + 1:]:
            assert jaccard_similarity(first, second) <= 0.8


@pytest.mark.asyncio
async def test_question_answering_failures_are_ignored():
    result = await make_service(qa=FakeQuestionAnswerer(fail=True)).extract_claims(TEXT)

    assert result.total_claims == 4


@pytest.mark.asyncio
async def test_health_status():
    healthy = await make_service().get_health_status()
    unhealthy = await make_service(FakeClassifier(fail_on=["test"])).get_health_status()

    assert healthy.status == HealthStatus.HEALTHY
    assert unhealthy.status == HealthStatus.UNHEALTHY
    assert "error" in unhealthy.details
