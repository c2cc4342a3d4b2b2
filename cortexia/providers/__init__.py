from cortexia.providers.base import BaseProvider
from cortexia.providers.groq_provider import GroqProvider
from cortexia.providers.gemini_provider import GeminiProvider


__all__ = [
    "BaseProvider",
    "GroqProvider",
    "GeminiProvider",
]
