import asyncio
import logging

import google.generativeai as genai

from cortexia.config import GEMINI_MODEL, LLM_TIMEOUT
from cortexia.providers.base import BaseProvider

logger = logging.getLogger(__name__)


class GeminiProvider(BaseProvider):
    """Provider for Google Gemini API using the official SDK."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    @property
    def name(self) -> str:
        return "gemini"

    @staticmethod
    def _split_messages(messages: list[dict]) -> tuple[str | None, list[dict], str]:
        """OpenAI-style messages -> (system_instruction, history, last user message)."""
        system_instruction = None
        history = []
        for msg in messages:
            if msg["role"] == "system":
                system_instruction = msg["content"]
            elif msg["role"] == "user":
                history.append({"role": "user", "parts": [msg["content"]]})
            elif msg["role"] == "assistant":
                history.append({"role": "model", "parts": [msg["content"]]})

        last_message = ""
        if history and history[-1]["role"] == "user":
            last_message = history[-1]["parts"][0]
            history = history[:-1]
        return system_instruction, history, last_message

    async def chat(self, messages: list[dict], model: str | None = None) -> dict:
        used_model = model or GEMINI_MODEL
        try:
            # genai is configured module-wide, so set the key before every call
            genai.configure(api_key=self.api_key)
            system_instruction, history, last_message = self._split_messages(messages)

            g_model = genai.GenerativeModel(
                model_name=used_model,
                system_instruction=system_instruction,
            )
            chat_session = g_model.start_chat(history=history)
            response = await asyncio.wait_for(
                chat_session.send_message_async(content=last_message),
                timeout=LLM_TIMEOUT,
            )
            return {
                "text": response.text,
                "provider": self.name,
                "model": used_model,
                "status": "success",
                "error": None,
            }
        except asyncio.TimeoutError:
            return self._failed(used_model, "Timeout")
        except Exception as e:
            # The SDK raises a wide range of google.api_core errors
            logger.warning(f"Gemini call failed: {e}")
            return self._failed(used_model, str(e))
