"""Service for normalizing input text to English before analysis."""

import logging
from typing import List, Optional, Tuple

from ..models.analysis import NormalizedText
from ..ports.ml_provider import Translator
from .rate_limiter import RateLimiter
from .text_analysis import UNKNOWN_LANGUAGE, detect_language, split_sentences

logger = logging.getLogger(__name__)

TARGET_LANGUAGE = "en"
MAX_CHUNK_LENGTH = 1000
TRANSLATION_CONFIDENCE = 0.8


def split_for_translation(text: str, max_length: int = MAX_CHUNK_LENGTH) -> List[str]:
    """Pack sentences into chunks no longer than max_length characters."""
    sentences = [sentence.text for sentence in split_sentences(text, min_length=1)]
    if not sentences:
        return [text.strip()] if text.strip() else []

    chunks: List[str] = []
    current = ""
    for sentence in sentences:
        sentence = f"{sentence}."
        while len(sentence) > max_length:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(sentence[:max_length])
            sentence = sentence[max_length:]
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) > max_length:
            chunks.append(current)
            current = sentence
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


class LanguageNormalizationService:
    """Detects the input language and translates non-English text."""

    def __init__(
        self,
        translator: Optional[Translator] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """Initialize the service.

        Args:
            translator: Machine translation provider, optional
            rate_limiter: Pacing between translated chunks
        """
        self._translator = translator
        self._limiter = rate_limiter or RateLimiter(1, 0.2)
        logger.info("🔧 LanguageNormalizationService initialized")

    @property
    def can_translate(self) -> bool:
        return self._translator is not None

    def detect_language(self, text: str) -> Tuple[str, float]:
        """Return ``(language, confidence)`` for text."""
        return detect_language(text)

    async def prepare_text(self, text: str) -> NormalizedText:
        """Prepare text for analysis, translating it to English when needed.

        Any failure yields the original text with an unknown language.
        """
        try:
            language, confidence = detect_language(text)
            logger.info(f"🌐 Detected language '{language}' (confidence {confidence:.2f})")

            if language in (TARGET_LANGUAGE, UNKNOWN_LANGUAGE) or not self.can_translate:
                return NormalizedText(processed_text=text, original_language=language)

            translated = await self._translate(text, language)
            logger.info(f"✅ Translated {len(text)} chars from '{language}' to English")
            return NormalizedText(
                processed_text=translated,
                original_language=language,
                was_translated=True,
                translation_confidence=TRANSLATION_CONFIDENCE,
            )
        except Exception as e:
            logger.error(f"❌ Failed to prepare text for analysis: {e}")
            return NormalizedText(processed_text=text, original_language=UNKNOWN_LANGUAGE)

    async def _translate(self, text: str, source_language: str) -> str:
        translated: List[str] = []
        for chunk in split_for_translation(text):
            await self._limiter.acquire()
            translated.append(await self._translator.translate(chunk, source_language, TARGET_LANGUAGE))
        return " ".join(translated)
