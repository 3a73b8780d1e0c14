import logging

from app.client.llm.base import ReplyProvider
from app.client.llm.chatgpt import GroqProvider, OpenAIProvider
from app.client.llm.gemini import GeminiProvider
from app.config.config import LLMProvider, Settings

logger = logging.getLogger(__name__)


def build_provider(settings: Settings) -> ReplyProvider:
    provider = settings.llm_provider
    if provider == LLMProvider.GROQ:
        llm = GroqProvider(settings.groq_api_key, settings.groq_model, settings.groq_base_url)
    elif provider == LLMProvider.GEMINI:
        llm = GeminiProvider(settings.gemini_api_key, settings.gemini_model)
    else:
        llm = OpenAIProvider(settings.openai_api_key, settings.openai_model)

    logger.info("LLM provider: %s", provider.value.upper())
    if not settings.api_key_for(provider):
        logger.warning("%s not set", llm.env_var)
    return llm
