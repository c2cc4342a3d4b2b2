"""
key_manager.py: API key pool per LLM provider.
Keys are handed out round-robin. A key that hits a rate limit is parked for
the rest of the UTC day and comes back automatically the next day.
"""

from datetime import date

from cortexia.config import GROQ_API_KEYS, GEMINI_API_KEYS
from cortexia.utils import today


def _slot(key: str) -> dict:
    return {"key": key, "limited_on": None, "uses_today": 0, "used_on": None}


class KeyManager:
    """Round-robin key pool with per-day rate-limit parking."""

    def __init__(self, provider_keys: dict[str, list[str]] | None = None):
        if provider_keys is None:
            provider_keys = {"groq": GROQ_API_KEYS, "gemini": GEMINI_API_KEYS}
        # provider -> list of key slots, in configured order, duplicates dropped
        self.keys: dict[str, list[dict]] = {
            provider: [_slot(k) for k in dict.fromkeys(k for k in raw if k)]
            for provider, raw in provider_keys.items()
        }
        self._cursor: dict[str, int] = {provider: 0 for provider in self.keys}

    @staticmethod
    def _available(slot: dict, day: date) -> bool:
        return slot["limited_on"] != day

    def get_next_key(self, provider: str) -> str | None:
        """Next usable key for *provider*, or None when every key is parked."""
        slots = self.keys.get(provider) or []
        day = today()
        start = self._cursor.get(provider, 0)
        for step in range(len(slots)):
            idx = (start + step) % len(slots)
            slot = slots[idx]
            if not self._available(slot, day):
                continue
            if slot["used_on"] != day:
                slot["uses_today"] = 0
            slot["uses_today"] += 1
            slot["used_on"] = day
            self._cursor[provider] = idx + 1
            return slot["key"]
        return None

    def mark_exhausted_by_value(self, provider: str, key_value: str):
        """Park *key_value* until tomorrow (after a 429 / rate-limit reply)."""
        for slot in self.keys.get(provider, []):
            if slot["key"] == key_value:
                slot["limited_on"] = today()

    def reset_daily(self):
        """Un-park every key now instead of waiting for the day to roll over."""
        for slots in self.keys.values():
            for slot in slots:
                slot["limited_on"] = None
                slot["uses_today"] = 0

    def get_key_count(self, provider: str) -> int:
        return len(self.keys.get(provider, []))

    def get_active_key_count(self, provider: str) -> int:
        day = today()
        return sum(1 for s in self.keys.get(provider, []) if self._available(s, day))

    def get_key_stats(self) -> dict:
        """Counts per provider. Key values are never included."""
        day = today()
        return {
            provider: {
                "total_keys": len(slots),
                "active_keys": sum(1 for s in slots if self._available(s, day)),
                "total_requests_today": sum(s["uses_today"] for s in slots if s["used_on"] == day),
            }
            for provider, slots in self.keys.items()
        }
