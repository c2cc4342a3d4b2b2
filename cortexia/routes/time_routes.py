# ---------- routes/time_routes.py ----------
import logging
from datetime import date as Date
from typing import Optional, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.time_service import TimeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/time", tags=["Time"])

Category = Literal["work", "study", "health", "personal", "leisure"]
Focus = Literal["deep", "moderate", "shallow"]


class TimeEntryCreate(BaseModel):
    task: str = Field(..., min_length=1, max_length=500)
    category: Category = "work"
    duration: int = Field(..., ge=1)
    date: Optional[Date] = None
    focus_quality: Focus = "moderate"
    interruptions: int = Field(0, ge=0)
    notes: Optional[str] = None


class TimeEntryUpdate(BaseModel):
    task: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[Category] = None
    duration: Optional[int] = Field(None, ge=1)
    date: Optional[Date] = None
    focus_quality: Optional[Focus] = None
    interruptions: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


@router.get("/entries")
def list_entries(category: Optional[Category] = None, date: Optional[Date] = None,
                 user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return [e.to_dict() for e in TimeService.get_all(db, user_id, {"category": category, "date": date})]


@router.post("/entries", status_code=201)
def create_entry(body: TimeEntryCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        entry = TimeService.create(db, user_id, body.model_dump())
    except Exception:
        logger.exception("Time entry create failed")
        raise HTTPException(status_code=500, detail="Failed to create time entry")
    return {"status": "success", "data": entry.to_dict()}


@router.get("/entries/{entry_id}")
def get_entry(entry_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    entry = TimeService.get_by_id(db, user_id, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Time entry not found")
    return entry.to_dict()


@router.put("/entries/{entry_id}")
def update_entry(entry_id: int, body: TimeEntryUpdate, user_id: int = Depends(get_current_user),
                 db: Session = Depends(get_db)):
    entry = TimeService.update(db, user_id, entry_id, body.model_dump(exclude_unset=True))
    if not entry:
        raise HTTPException(status_code=404, detail="Time entry not found")
    return {"status": "success", "data": entry.to_dict()}


@router.delete("/entries/{entry_id}")
def delete_entry(entry_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not TimeService.delete(db, user_id, entry_id):
        raise HTTPException(status_code=404, detail="Time entry not found")
    return {"status": "success"}


@router.get("/stats/today")
def today_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return TimeService.today_stats(db, user_id)


@router.get("/stats/weekly")
def weekly_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return TimeService.weekly_stats(db, user_id)


@router.get("/stats/focus")
def focus_breakdown(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return TimeService.focus_breakdown(db, user_id)
