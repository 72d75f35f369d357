"""Hugging Face Inference API implementation of the machine learning ports."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import ExternalServiceError, ServiceUnavailableError
from ...domain.ports.ml_provider import (
    AnswerResult,
    ClassificationResult,
    QuestionAnswerer,
    Translator,
    ZeroShotClassifier,
)

logger = logging.getLogger(__name__)


class HuggingFaceConfig(BaseModel):
    """Configuration for the Hugging Face adapter."""

    api_key: str = Field(default="", description="Hugging Face API token, optional")
    base_url: str = Field(default="https://api-inference.huggingface.co", description="Inference API root")
    classification_model: str = Field(default="facebook/bart-large-mnli", description="Zero-shot model")
    question_answering_model: str = Field(default="deepset/roberta-base-squad2", description="Extractive QA model")
    translation_models: Dict[str, str] = Field(
        default={
            "es": "Helsinki-NLP/opus-mt-es-en",
            "fr": "Helsinki-NLP/opus-mt-fr-en",
            "de": "Helsinki-NLP/opus-mt-de-en",
            "zh": "Helsinki-NLP/opus-mt-zh-en",
        },
        description="Source language to English translation models",
    )
    fallback_translation_model: str = Field(
        default="Helsinki-NLP/opus-mt-mul-en",
        description="Multilingual to English model",
    )
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class HuggingFaceAdapter(ZeroShotClassifier, QuestionAnswerer, Translator):
    """Hosted zero-shot classification, question answering and translation."""

    def __init__(
        self,
        config: Optional[HuggingFaceConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            transport: Custom httpx transport
        """
        self._config = config or HuggingFaceConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        if not self._config.api_key:
            logger.warning("⚠️ HUGGINGFACE_API_KEY not set - using the public inference API with rate limits")

    async def initialize(self) -> None:
        """Create the HTTP client."""
        try:
            if self._client is None:
                headers = {"Content-Type": "application/json"}
                if self._config.api_key:
                    headers["Authorization"] = f"Bearer {self._config.api_key}"
                self._client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    headers=headers,
                    transport=self._transport,
                )
        except Exception as e:
            self._client = None
            raise ConnectionError(f"Failed to initialize Hugging Face provider: {e}")

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def provider_name(self) -> str:
        return "huggingface"

    @property
    def is_available(self) -> bool:
        return self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {
            "zero_shot_classification": True,
            "question_answering": True,
            "translation": True,
        }

    def translation_model_for(self, source_language: str, target_language: str = "en") -> str:
        """Pick the translation model for a language pair."""
        if target_language == "en" and source_language in self._config.translation_models:
            return self._config.translation_models[source_language]
        return self._config.fallback_translation_model

    async def _infer(self, model: str, payload: Dict[str, Any]) -> Any:
        if self._client is None:
            raise ServiceUnavailableError(self.provider_name, "Provider not initialized")
        try:
            response = await self._client.post(f"/models/{model}", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ExternalServiceError(self.provider_name, f"{model} request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError(self.provider_name, f"{model} returned invalid JSON") from e

        if isinstance(data, dict) and "error" in data:
            raise ExternalServiceError(self.provider_name, f"{model}: {data['error']}")
        return data

    async def classify(self, text: str, labels: List[str]) -> ClassificationResult:
        """Zero-shot classify text against candidate labels."""
        data = await self._infer(
            self._config.classification_model,
            {"inputs": text, "parameters": {"candidate_labels": labels}},
        )
        # Newer deployments return [{"label", "score"}], older ones {"labels", "scores"}.
        if isinstance(data, list):
            ranked = sorted(
                (item for item in data if isinstance(item, dict) and "label" in item),
                key=lambda item: item.get("score", 0.0),
                reverse=True,
            )
            return ClassificationResult(
                labels=[item["label"] for item in ranked],
                scores=[float(item.get("score", 0.0)) for item in ranked],
            )
        if isinstance(data, dict) and "labels" in data:
            return ClassificationResult(labels=data["labels"], scores=data.get("scores", []))
        raise ExternalServiceError(self.provider_name, "Unexpected classification response")

    async def answer(self, question: str, context: str) -> AnswerResult:
        """Answer a question from a passage."""
        data = await self._infer(
            self._config.question_answering_model,
            {"inputs": {"question": question, "context": context}},
        )
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise ExternalServiceError(self.provider_name, "Unexpected question answering response")

        answer = data.get("answer") or ""
        return AnswerResult(
            answer=answer,
            score=float(data.get("score") or 0.0),
            start=int(data.get("start") or 0),
            end=int(data.get("end") or len(answer)),
        )

    async def translate(self, text: str, source_language: str, target_language: str = "en") -> str:
        """Translate text with the model for the language pair."""
        model = self.translation_model_for(source_language, target_language)
        data = await self._infer(model, {"inputs": text})
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise ExternalServiceError(self.provider_name, "Unexpected translation response")

        translated = data.get("translation_text") or data.get("generated_text")
        if not translated:
            raise ExternalServiceError(self.provider_name, "Empty translation")
        return translated
