"""Application configuration loaded from the environment."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .ai.huggingface_adapter import HuggingFaceConfig
from .ai.openai_reasoning_adapter import OpenAIConfig
from .fact_check_db.google_fact_check_adapter import GoogleFactCheckConfig
from .search.link_prober import LinkProberConfig
from .search.news_api_adapter import NewsAPIConfig

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"⚠️ Ignoring non-numeric {name}={value!r}, using {default}")
        return default


class AppConfig(BaseModel):
    """Configuration for every adapter and throttle in the service."""

    huggingface: HuggingFaceConfig = Field(default_factory=HuggingFaceConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    news_api: NewsAPIConfig = Field(default_factory=NewsAPIConfig)
    google_fact_check: GoogleFactCheckConfig = Field(default_factory=GoogleFactCheckConfig)
    link_prober: LinkProberConfig = Field(default_factory=LinkProberConfig)
    extraction_interval: float = Field(default=0.1, description="Seconds between model calls during extraction")
    probe_interval: float = Field(default=0.3, description="Seconds between URL probes")
    translation_interval: float = Field(default=0.2, description="Seconds between translated chunks")
    cors_origins: str = Field(default="*", description="Comma separated allowed CORS origins")

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "AppConfig":
        """Create configuration from environment variables."""
        if load_dotenv_file:
            load_dotenv()
            logger.info("📁 Environment variables loaded from .env file via python-dotenv")

        config = cls(
            huggingface=HuggingFaceConfig(api_key=os.getenv("HUGGINGFACE_API_KEY", "")),
            openai=OpenAIConfig(
                api_key=os.getenv("OPENAI_API_KEY", ""),
                model=os.getenv("OPENAI_MODEL", OpenAIConfig().model),
            ),
            news_api=NewsAPIConfig(api_key=os.getenv("NEWS_API_KEY", "")),
            google_fact_check=GoogleFactCheckConfig(api_key=os.getenv("GOOGLE_FACTCHECK_API_KEY", "")),
            extraction_interval=_env_float("EXTRACTION_INTERVAL_SECONDS", 0.1),
            probe_interval=_env_float("PROBE_INTERVAL_SECONDS", 0.3),
            translation_interval=_env_float("TRANSLATION_INTERVAL_SECONDS", 0.2),
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
        )

        for name, key in (
            ("HUGGINGFACE_API_KEY", config.huggingface.api_key),
            ("OPENAI_API_KEY", config.openai.api_key),
            ("NEWS_API_KEY", config.news_api.api_key),
            ("GOOGLE_FACTCHECK_API_KEY", config.google_fact_check.api_key),
        ):
            if key:
                logger.info(f"✅ {name} loaded: {len(key)} chars")
            else:
                logger.warning(f"⚠️ {name} not found in environment variables")
        return config

    @property
    def allowed_origins(self):
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
