from __future__ import annotations

import logging
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[2] / ".env")

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 3600
MAX_HISTORY_MESSAGES = 10
MAX_OUTPUT_TOKENS = 200
TEMPERATURE = 0.7
MAX_MESSAGE_LENGTH = 5000

DEFAULT_DATABASE_PATH = "data/chat.db"


class LLMProvider(str, Enum):
    OPENAI = "openai"
    GROQ = "groq"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, value: Optional[str]) -> "LLMProvider":
        normalized = (value or cls.OPENAI.value).lower().strip()
        try:
            return cls(normalized)
        except ValueError:
            logger.warning("Unknown LLM_PROVIDER=%r, falling back to openai", value)
            return cls.OPENAI


def _int_env(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables.

    Every credential and connection string lives here; nothing else in the
    package reads the environment.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _int_env("PORT", 3001)
        self.cors_origins: List[str] = _split_csv(os.getenv("CORS_ORIGINS", "*"))

        self.llm_provider: LLMProvider = LLMProvider.parse(os.getenv("LLM_PROVIDER"))
        self.openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
        self.openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
        self.groq_api_key: Optional[str] = os.getenv("GROQ_API_KEY")
        self.groq_model: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
        self.groq_base_url: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
        self.gemini_api_key: Optional[str] = os.getenv("GEMINI_API_KEY")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

        self.redis_url: Optional[str] = os.getenv("REDIS_URL")
        self.redis_host: Optional[str] = os.getenv("REDIS_HOST")
        self.redis_port: Optional[int] = _int_env("REDIS_PORT")
        self.redis_username: str = os.getenv("REDIS_USERNAME", "default")
        self.redis_password: Optional[str] = os.getenv("REDIS_PASSWORD")

        self.database_path: str = os.getenv("DATABASE_PATH", DEFAULT_DATABASE_PATH)
        self.database_url: str = os.getenv("DATABASE_URL") or f"sqlite:///{self.database_path}"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def cache_configured(self) -> bool:
        return bool(self.redis_url or self.redis_host)

    def api_key_for(self, provider: LLMProvider) -> Optional[str]:
        return {
            LLMProvider.OPENAI: self.openai_api_key,
            LLMProvider.GROQ: self.groq_api_key,
            LLMProvider.GEMINI: self.gemini_api_key,
        }[provider]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
