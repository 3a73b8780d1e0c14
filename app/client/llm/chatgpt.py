from typing import List, Optional

from openai import OpenAI

from app.client.llm.base import ReplyProvider
from app.client.llm.prompt import STORE_KNOWLEDGE
from app.model.conversation.conversation import MessageRecord, Sender


def build_chat_messages(user_message: str, history: List[MessageRecord]) -> List[dict]:
    messages = [{"role": "system", "content": STORE_KNOWLEDGE}]
    for msg in history:
        role = "user" if msg.sender == Sender.USER else "assistant"
        messages.append({"role": role, "content": msg.text})
    messages.append({"role": "user", "content": user_message})
    return messages


class OpenAIProvider(ReplyProvider):
    name = "OpenAI"
    env_var = "OPENAI_API_KEY"
    key_url = "https://platform.openai.com/api-keys"
    key_prefix = "sk-"
    base_url: Optional[str] = None

    def __init__(self, api_key: Optional[str], model: str, client: Optional[OpenAI] = None):
        super().__init__(api_key)
        self.model = model
        self._client = client

    def credential_is_valid(self) -> bool:
        return super().credential_is_valid() and self.api_key.strip().startswith(self.key_prefix)

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            # no retries: failures surface once
            self._client = OpenAI(api_key=self.api_key.strip(), base_url=self.base_url, max_retries=0)
        return self._client

    def _complete(self, user_message: str, history: List[MessageRecord]) -> Optional[str]:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=build_chat_messages(user_message, history),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


class GroqProvider(OpenAIProvider):
    """Groq serves an OpenAI-compatible API, so only the endpoint and key differ."""

    name = "Groq"
    env_var = "GROQ_API_KEY"
    key_url = "https://console.groq.com/keys"
    key_prefix = "gsk_"

    def __init__(self, api_key: Optional[str], model: str, base_url: str, client: Optional[OpenAI] = None):
        super().__init__(api_key, model, client)
        self.base_url = base_url
