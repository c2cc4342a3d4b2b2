import logging

import httpx

from cortexia.config import GROQ_MODEL, LLM_TIMEOUT
from cortexia.providers.base import BaseProvider

logger = logging.getLogger(__name__)


class GroqProvider(BaseProvider):
    """Provider for the Groq OpenAI-compatible chat completions API."""

    endpoint = "https://api.groq.com/openai/v1/chat/completions"

    def __init__(self, api_key: str, temperature: float = 0.7, max_tokens: int = 1024):
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def name(self) -> str:
        return "groq"

    async def chat(self, messages: list[dict], model: str | None = None) -> dict:
        used_model = model or GROQ_MODEL
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        body = {
            "model": used_model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        try:
            async with httpx.AsyncClient(timeout=LLM_TIMEOUT) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException:
            return self._failed(used_model, "Timeout")
        except httpx.HTTPStatusError as e:
            # Keep the status code in the message; the router looks for 429
            return self._failed(used_model, f"HTTP {e.response.status_code}: {e.response.text[:200]}")
        except httpx.HTTPError as e:
            return self._failed(used_model, str(e))

        choices = data.get("choices") or []
        text = choices[0]["message"]["content"] if choices else None
        if not text:
            return self._failed(used_model, "Empty response")
        return {
            "text": text,
            "provider": self.name,
            "model": used_model,
            "status": "success",
            "error": None,
        }
