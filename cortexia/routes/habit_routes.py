# ---------- routes/habit_routes.py ----------
import logging
from datetime import date as Date
from typing import Optional, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.habit_service import HabitService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/habits", tags=["Habits"])

Category = Literal["health", "productivity", "learning", "fitness", "mindfulness", "social"]
Frequency = Literal["daily", "weekly", "monthly"]


class HabitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Category = "health"
    frequency: Frequency = "daily"
    color: Optional[str] = None
    target_days_per_week: Optional[int] = Field(None, ge=1, le=7)
    active: bool = True


class HabitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[Category] = None
    frequency: Optional[Frequency] = None
    color: Optional[str] = None
    target_days_per_week: Optional[int] = Field(None, ge=1, le=7)
    active: Optional[bool] = None


class CheckInRequest(BaseModel):
    date: Optional[Date] = None
    completed: Optional[bool] = None
    note: Optional[str] = None


@router.get("")
def list_habits(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return [h.to_dict() for h in HabitService.get_all(db, user_id)]


@router.post("", status_code=201)
def create_habit(body: HabitCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        habit = HabitService.create(db, user_id, body.model_dump())
    except Exception:
        logger.exception("Habit create failed")
        raise HTTPException(status_code=500, detail="Failed to create habit")
    return {"status": "success", "data": habit.to_dict()}


@router.get("/today")
def today_habits(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return HabitService.get_today(db, user_id)


@router.get("/stats")
def habit_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return HabitService.get_stats(db, user_id)


@router.get("/{habit_id}")
def get_habit(habit_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    habit = HabitService.get_by_id(db, user_id, habit_id)
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")
    HabitService.refresh_streaks(db, [habit])
    return habit.to_dict()


@router.put("/{habit_id}")
def update_habit(habit_id: int, body: HabitUpdate, user_id: int = Depends(get_current_user),
                 db: Session = Depends(get_db)):
    habit = HabitService.update(db, user_id, habit_id, body.model_dump(exclude_unset=True))
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"status": "success", "data": habit.to_dict()}


@router.delete("/{habit_id}")
def delete_habit(habit_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not HabitService.delete(db, user_id, habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"status": "success"}


@router.post("/{habit_id}/check")
def check_in(habit_id: int, body: Optional[CheckInRequest] = None,
             user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Toggle today's completion (or the given date's)."""
    body = body or CheckInRequest()
    try:
        result = HabitService.check_in(db, user_id, habit_id, body.date, body.completed, body.note)
    except Exception:
        logger.exception("Habit check-in failed")
        raise HTTPException(status_code=500, detail="Failed to check in habit")
    if result is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"status": "success", "data": result}


@router.get("/{habit_id}/logs")
def habit_logs(habit_id: int, days: int = Query(30, ge=1, le=366),
               user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    logs = HabitService.get_logs(db, user_id, habit_id, days)
    if logs is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return [log.to_dict() for log in logs]
