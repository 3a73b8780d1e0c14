from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import httpx

from app.config.config import MAX_HISTORY_MESSAGES, MAX_OUTPUT_TOKENS, TEMPERATURE
from app.errors import (
    BackendUnavailableError,
    ConfigurationError,
    EmptyResponseError,
    InvalidCredentialError,
    ProviderError,
    ProviderTimeoutError,
    RateLimitedError,
    UnknownBackendError,
)
from app.model.conversation.conversation import MessageRecord

logger = logging.getLogger(__name__)


def _status_of(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "status", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return True
    text = str(exc).lower()
    return "timeout" in text or "timed out" in text


def normalize_provider_error(exc: BaseException, provider: str) -> ProviderError:
    """Map an SDK exception onto the provider error taxonomy."""
    if isinstance(exc, ProviderError):
        return exc

    status = _status_of(exc)
    if status == 401:
        return InvalidCredentialError(provider, exc)
    if status == 429:
        return RateLimitedError(provider, exc)
    if status == 503:
        return BackendUnavailableError(provider, exc)
    if _is_timeout(exc):
        return ProviderTimeoutError(provider, exc)

    logger.error("%s error: %r", provider, exc)
    return UnknownBackendError(provider, exc)


class ReplyProvider(ABC):
    """Turns a user message plus prior turns into a support reply."""

    name: str = ""
    env_var: str = ""
    key_url: str = ""

    max_history_messages = MAX_HISTORY_MESSAGES
    max_tokens = MAX_OUTPUT_TOKENS
    temperature = TEMPERATURE

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key

    def credential_is_valid(self) -> bool:
        key = (self.api_key or "").strip()
        placeholder = f"your_{self.name.lower()}_api_key_here"
        return bool(key) and key != placeholder

    def validate_credential(self) -> None:
        if not self.credential_is_valid():
            raise ConfigurationError(
                f"{self.name} API key not configured. Please set a valid {self.env_var} "
                f"in the .env file. Get a key at {self.key_url}"
            )

    def recent_history(self, history: Sequence[MessageRecord]) -> List[MessageRecord]:
        return list(history)[-self.max_history_messages:]

    def generate_reply(self, user_message: str, history: Sequence[MessageRecord]) -> str:
        self.validate_credential()
        recent = self.recent_history(history)
        try:
            reply = (self._complete(user_message, recent) or "").strip()
        except Exception as exc:
            raise normalize_provider_error(exc, self.name) from exc
        if not reply:
            raise EmptyResponseError(self.name)
        return reply

    @abstractmethod
    def _complete(self, user_message: str, history: List[MessageRecord]) -> Optional[str]:
        """Call the backend and return its raw text."""
