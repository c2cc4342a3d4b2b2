"""
settings_service.py: Per-user preferences stored as a single JSON document.
"""

import copy
import json

from sqlalchemy.orm import Session

from cortexia.models.user_settings import UserSettings
from cortexia.utils import utcnow

DEFAULTS = {
    "theme": "system",
    "notifications": {
        "enabled": True,
        "tasks": True,
        "habits": True,
        "insights": True,
    },
    "privacy": {
        "data_collection": True,
        "ai_analysis": True,
    },
    "preferences": {
        "start_of_week": "monday",
        "time_format": "24h",
        "language": "en",
    },
}


def deep_merge(base: dict, patch: dict) -> dict:
    """Recursively merge *patch* into a copy of *base*; nested dicts merge, everything else replaces."""
    out = copy.deepcopy(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


class SettingsService:
    @staticmethod
    def get(db: Session, user_id: int) -> dict:
        row = db.query(UserSettings).filter_by(user_id=user_id).first()
        if not row or not row.settings:
            return copy.deepcopy(DEFAULTS)
        return deep_merge(DEFAULTS, json.loads(row.settings))

    @staticmethod
    def _save(db: Session, user_id: int, settings: dict):
        row = db.query(UserSettings).filter_by(user_id=user_id).first()
        try:
            if row is None:
                row = UserSettings(user_id=user_id)
                db.add(row)
            row.settings = json.dumps(settings)
            row.updated_at = utcnow()
            db.commit()
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def update(db: Session, user_id: int, patch: dict) -> dict:
        merged = deep_merge(SettingsService.get(db, user_id), patch)
        SettingsService._save(db, user_id, merged)
        return merged

    @staticmethod
    def reset(db: Session, user_id: int) -> dict:
        db.query(UserSettings).filter_by(user_id=user_id).delete()
        db.commit()
        return copy.deepcopy(DEFAULTS)

    @staticmethod
    def start_of_week(db: Session, user_id: int) -> str:
        return SettingsService.get(db, user_id)["preferences"].get("start_of_week", "monday")
