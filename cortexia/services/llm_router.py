"""
llm_router.py: picks an LLM provider for each request.

Providers with at least one configured key are ranked by
priority + 5 * recent failures + 0.1 * average latency (lower first).
Within a provider every usable key is tried; a rate-limited key is parked
and the next one used. Callers always get a dict back, never an exception.
"""

import logging
import time

from cortexia.services.key_manager import KeyManager
from cortexia.services.cache_service import ResponseCache
from cortexia.providers.groq_provider import GroqProvider
from cortexia.providers.gemini_provider import GeminiProvider
from cortexia.utils import utcnow

logger = logging.getLogger(__name__)

# Lower priority is tried first
_DEFAULT_PROVIDERS = [
    {"name": "groq", "provider_class": GroqProvider, "priority": 1},
    {"name": "gemini", "provider_class": GeminiProvider, "priority": 2},
]


_RATE_LIMIT_MARKERS = ("429", "rate limit", "rate_limit", "ratelimit", "too many requests")


def _is_rate_limit(error: str) -> bool:
    lowered = error.lower()
    return any(marker in lowered for marker in _RATE_LIMIT_MARKERS)


class LLMRouter:
    def __init__(self, key_manager: KeyManager | None = None, providers: list[dict] | None = None):
        self.key_manager = key_manager or KeyManager()
        self.cache = ResponseCache()
        self.providers: list[dict] = [
            {
                **provider,
                "failure_count": 0,
                "avg_response_time": 0.0,
                "total_calls": 0,
                "last_used": None,
            }
            for provider in (providers or _DEFAULT_PROVIDERS)
            if self.key_manager.keys.get(provider["name"])
        ]
        if not self.providers:
            logger.info("No LLM keys configured; AI features will use rule-based fallbacks")

    @property
    def is_configured(self) -> bool:
        return bool(self.providers)

    def _score(self, entry: dict) -> float:
        return entry["priority"] + entry["failure_count"] * 5 + entry["avg_response_time"] * 0.1

    def _ranked(self, preferred: str | None) -> list[dict]:
        ranked = sorted(self.providers, key=self._score)
        if preferred:
            ranked.sort(key=lambda e: e["name"] != preferred)
        return ranked

    @staticmethod
    def _error(message: str) -> dict:
        return {
            "text": None,
            "provider": None,
            "model": None,
            "status": "error",
            "error": message,
            "response_time": 0,
            "cached": False,
        }

    @staticmethod
    def _record_success(entry: dict, elapsed: float):
        entry["total_calls"] += 1
        n = entry["total_calls"]
        entry["avg_response_time"] = round((entry["avg_response_time"] * (n - 1) + elapsed) / n, 3)
        entry["failure_count"] = max(0, entry["failure_count"] - 1)
        entry["last_used"] = utcnow().isoformat()

    async def _try_provider(self, entry: dict, messages: list, model: str | None) -> tuple[dict | None, str]:
        """Walk the provider's keys. Returns (response, "") on success or (None, last error)."""
        name = entry["name"]
        error = f"{name}: no usable API key"
        # each key is tried at most once per call
        for _ in range(self.key_manager.get_key_count(name)):
            api_key = self.key_manager.get_next_key(name)
            if api_key is None:
                return None, error
            started = time.time()
            try:
                result = await entry["provider_class"](api_key=api_key).chat(messages, model)
            except Exception as exc:
                logger.exception(f"Provider {name} raised")
                entry["failure_count"] += 1
                return None, f"{name}: {exc}"
            elapsed = round(time.time() - started, 3)

            if result.get("status") == "success":
                self._record_success(entry, elapsed)
                logger.info(f"LLM call ok: provider={name} model={result.get('model')} time={elapsed}s")
                return {
                    "text": result.get("text") or "",
                    "provider": result.get("provider") or name,
                    "model": result.get("model") or model,
                    "status": "success",
                    "error": None,
                    "response_time": elapsed,
                    "cached": False,
                }, ""

            error = str(result.get("error") or f"{name} returned an error")
            if _is_rate_limit(error):
                logger.warning(f"Key rate-limited for {name}, rotating")
                self.key_manager.mark_exhausted_by_value(name, api_key)
                continue

            entry["failure_count"] += 1
            logger.warning(f"LLM call failed: provider={name} error={error}")
            return None, error
        return None, error

    async def route(
        self,
        messages: list,
        preferred_provider: str | None = None,
        model: str | None = None,
        cache_ttl: int = 0,
    ) -> dict:
        """
        Send an OpenAI-style message list to the best provider.

        cache_ttl > 0 serves and stores replies through the response cache.
        Returns {text, provider, model, status, error, response_time, cached};
        status is "error" when nothing is configured or every provider failed.
        """
        if not self.providers:
            return self._error("No LLM provider configured")

        system_prompt, user_message = ResponseCache.split_messages(messages)
        if cache_ttl > 0:
            hit = self.cache.get(system_prompt, user_message, model or "")
            if hit is not None:
                return {**hit, "cached": True}

        last_error = "All providers failed"
        for entry in self._ranked(preferred_provider):
            response, error = await self._try_provider(entry, messages, model)
            if response is not None:
                if cache_ttl > 0:
                    self.cache.set(system_prompt, user_message, model or "", response, cache_ttl)
                return response
            last_error = error or last_error

        return self._error(last_error)

    def get_provider_status(self) -> list:
        return [
            {
                "name": e["name"],
                "available_keys": self.key_manager.get_active_key_count(e["name"]),
                "failure_count": e["failure_count"],
                "avg_response_time": e["avg_response_time"],
                "last_used": e["last_used"],
                "priority": e["priority"],
            }
            for e in self.providers
        ]


_router_instance: LLMRouter | None = None


def get_llm_router() -> LLMRouter:
    """FastAPI dependency: process-wide router singleton."""
    global _router_instance
    if _router_instance is None:
        _router_instance = LLMRouter()
    return _router_instance
