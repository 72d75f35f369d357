"""Protocols for hosted machine learning inference."""

from typing import List, Protocol

from pydantic import BaseModel, Field


class ClassificationResult(BaseModel):
    """Result of zero-shot classification, labels sorted by score."""
    labels: List[str] = Field(default_factory=list)
    scores: List[float] = Field(default_factory=list)

    @property
    def top_label(self) -> str:
        """Highest scoring label."""
        return self.labels[0] if self.labels else ""

    @property
    def top_score(self) -> float:
        """Score of the highest scoring label."""
        return self.scores[0] if self.scores else 0.0


class AnswerResult(BaseModel):
    """Extractive answer to a question about a passage."""
    answer: str
    score: float
    start: int = 0
    end: int = 0


class ZeroShotClassifier(Protocol):
    """Protocol for zero-shot text classification."""

    async def classify(self, text: str, labels: List[str]) -> ClassificationResult:
        """Score text against candidate labels."""
        ...


class QuestionAnswerer(Protocol):
    """Protocol for extractive question answering."""

    async def answer(self, question: str, context: str) -> AnswerResult:
        """Answer a question from a context passage."""
        ...


class Translator(Protocol):
    """Protocol for machine translation."""

    async def translate(self, text: str, source_language: str, target_language: str = "en") -> str:
        """Translate text between languages."""
        ...
