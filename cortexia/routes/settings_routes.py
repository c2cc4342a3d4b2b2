# ---------- routes/settings_routes.py ----------
from typing import Optional, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.settings_service import SettingsService

router = APIRouter(prefix="/api/v1/settings", tags=["Settings"])


class _Section(BaseModel):
    # unknown keys are kept so client-side preferences round-trip
    model_config = ConfigDict(extra="allow")


class NotificationSettings(_Section):
    enabled: Optional[bool] = None
    tasks: Optional[bool] = None
    habits: Optional[bool] = None
    insights: Optional[bool] = None


class PrivacySettings(_Section):
    data_collection: Optional[bool] = None
    ai_analysis: Optional[bool] = None


class PreferenceSettings(_Section):
    start_of_week: Optional[Literal["monday", "sunday"]] = None
    time_format: Optional[Literal["12h", "24h"]] = None
    language: Optional[str] = None


class SettingsUpdate(_Section):
    theme: Optional[Literal["light", "dark", "system"]] = None
    notifications: Optional[NotificationSettings] = None
    privacy: Optional[PrivacySettings] = None
    preferences: Optional[PreferenceSettings] = None

    def to_patch(self) -> dict:
        """Only the keys the client actually sent; explicit nulls are ignored."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


@router.get("")
def get_settings(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return SettingsService.get(db, user_id)


@router.put("")
def update_settings(body: SettingsUpdate, user_id: int = Depends(get_current_user),
                    db: Session = Depends(get_db)):
    """Deep-merge a partial settings document into the saved one."""
    return {"status": "success", "data": SettingsService.update(db, user_id, body.to_patch())}


@router.delete("")
def reset_settings(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"status": "success", "data": SettingsService.reset(db, user_id)}
