from typing import Any, List, Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from app.client.llm.base import ReplyProvider
from app.client.llm.prompt import STORE_KNOWLEDGE
from app.model.conversation.conversation import MessageRecord, Sender


def build_gemini_prompt(user_message: str, history: List[MessageRecord]) -> str:
    lines = [STORE_KNOWLEDGE, "", "Conversation History:"]
    for msg in history:
        speaker = "Customer" if msg.sender == Sender.USER else "Agent"
        lines.append(f"{speaker}: {msg.text}")
    lines.append("")
    lines.append(f"Customer: {user_message}")
    lines.append("Agent:")
    return "\n".join(lines)


def _content_text(content: Any) -> str:
    # newer Gemini models may return a list of content parts
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class GeminiProvider(ReplyProvider):
    name = "Gemini"
    env_var = "GEMINI_API_KEY"
    key_url = "https://aistudio.google.com/app/apikey"

    def __init__(self, api_key: Optional[str], model: str, llm: Optional[ChatGoogleGenerativeAI] = None):
        super().__init__(api_key)
        self.model = model
        self._llm = llm

    @property
    def llm(self) -> ChatGoogleGenerativeAI:
        if self._llm is None:
            self._llm = ChatGoogleGenerativeAI(
                model=self.model,
                google_api_key=self.api_key.strip(),
                temperature=self.temperature,
                max_output_tokens=self.max_tokens,
                max_retries=0,
            )
        return self._llm

    def _complete(self, user_message: str, history: List[MessageRecord]) -> Optional[str]:
        result = self.llm.invoke(build_gemini_prompt(user_message, history))
        return _content_text(getattr(result, "content", None))
