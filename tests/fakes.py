# tests/fakes.py

from cortexia.services.cache_service import ResponseCache


class FakeLLMRouter:
    """
    Deterministic stand-in for LLMRouter.

    - Captures prompts for assertions
    - Returns next_text as a successful reply, or an error when next_text is None
    """

    def __init__(self, next_text: str | None = "ok") -> None:
        self.next_text = next_text
        self.calls: list[list[dict]] = []
        self.cache = ResponseCache()

    @property
    def is_configured(self) -> bool:
        return True

    async def route(self, messages: list, preferred_provider=None, model=None, cache_ttl: int = 0) -> dict:
        self.calls.append(messages)
        if self.next_text is None:
            return {"text": None, "provider": None, "model": None, "status": "error",
                    "error": "All providers failed", "response_time": 0, "cached": False}
        return {"text": self.next_text, "provider": "fake", "model": "fake-1", "status": "success",
                "error": None, "response_time": 0.01, "cached": False}

    def get_provider_status(self) -> list:
        return [{"name": "fake", "available_keys": 1, "failure_count": 0,
                 "avg_response_time": 0.0, "last_used": None, "priority": 1}]

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][-1]["content"]


class FakeProvider:
    """Provider double for router tests; behaviour is scripted per API key."""

    script: dict[str, dict] = {}
    seen_keys: list[str] = []

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    @property
    def name(self) -> str:
        return "fake"

    async def chat(self, messages: list[dict], model: str | None = None) -> dict:
        FakeProvider.seen_keys.append(self.api_key)
        outcome = FakeProvider.script.get(self.api_key, {"status": "success", "text": f"reply from {self.api_key}"})
        return {"provider": self.name, "model": model or "fake-model", "error": None, "text": None, **outcome}
