"""
cache_service.py: TTL cache for LLM replies.
Entries are keyed by a SHA-256 digest of the system prompt, the user message
and the model, so identical prompts within the TTL skip the provider call.
"""

import hashlib
import time

MAX_ENTRIES = 512


class ResponseCache:
    def __init__(self, max_entries: int = MAX_ENTRIES):
        self.max_entries = max_entries
        # digest -> {"response", "expires_at", "hits"}
        self._entries: dict[str, dict] = {}
        self._hits = 0
        self._misses = 0

    @staticmethod
    def split_messages(messages: list[dict]) -> tuple[str, str]:
        """(system prompt, user message) used as the cache key; the last of each role wins."""
        parts = {"system": "", "user": ""}
        for m in messages:
            if m.get("role") in parts:
                parts[m["role"]] = m.get("content", "")
        return parts["system"], parts["user"]

    @staticmethod
    def digest(system_prompt: str, user_message: str, model: str) -> str:
        material = "\x1f".join((system_prompt, user_message, model))
        return hashlib.sha256(material.encode("utf-8")).hexdigest()

    def get(self, system_prompt: str, user_message: str, model: str) -> dict | None:
        key = self.digest(system_prompt, user_message, model)
        entry = self._entries.get(key)
        if entry is not None and entry["expires_at"] < time.time():
            del self._entries[key]
            entry = None
        if entry is None:
            self._misses += 1
            return None
        entry["hits"] += 1
        self._hits += 1
        return entry["response"]

    def set(self, system_prompt: str, user_message: str, model: str, response: dict, ttl_seconds: int = 3600):
        """Store *response* for *ttl_seconds*. A TTL of 0 or less stores nothing."""
        if ttl_seconds <= 0:
            return
        if len(self._entries) >= self.max_entries:
            self.clear_expired()
        if len(self._entries) >= self.max_entries:
            # dicts keep insertion order, so the first key is the oldest
            del self._entries[next(iter(self._entries))]
        self._entries[self.digest(system_prompt, user_message, model)] = {
            "response": response,
            "expires_at": time.time() + ttl_seconds,
            "hits": 0,
        }

    def clear_expired(self) -> int:
        now = time.time()
        stale = [k for k, e in self._entries.items() if e["expires_at"] < now]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def get_stats(self) -> dict:
        lookups = self._hits + self._misses
        return {
            "total_entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / lookups, 4) if lookups else 0.0,
        }
