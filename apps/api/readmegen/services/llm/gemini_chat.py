from __future__ import annotations
from typing import Any, Optional
from google import genai
from google.genai.errors import ClientError

from readmegen.core.config import settings


class LLMRateLimitError(Exception):
    pass


class GeminiChatLLM:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Any = None,
    ):
        if client is None:
            key = api_key or settings.GEMINI_API_KEY
            if not key:
                raise RuntimeError("GEMINI_API_KEY is not set")
            client = genai.Client(api_key=key)
        self.client = client
        self.model = model or settings.GEMINI_CHAT_MODEL
        self.temperature = settings.GEMINI_TEMPERATURE if temperature is None else temperature

    async def generate_json(self, prompt: str) -> str:
        """Ask for a JSON reply and return its raw text."""
        try:
            res = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config={
                    "temperature": self.temperature,
                    "response_mime_type": "application/json",
                },
            )
            return (res.text or "").strip()
        except ClientError as e:
            # 429 quota/rate-limit
            if getattr(e, "code", None) == 429 or getattr(e, "status_code", None) == 429:
                raise LLMRateLimitError(str(e)) from e
            raise
