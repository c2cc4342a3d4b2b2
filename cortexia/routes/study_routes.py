# ---------- routes/study_routes.py ----------
import logging
from datetime import datetime
from typing import Optional, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.study_service import StudyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/study", tags=["Study"])

Difficulty = Literal["easy", "medium", "hard"]


class StudySessionCreate(BaseModel):
    subject: str = Field(..., min_length=1, max_length=200)
    topic: Optional[str] = None
    duration: int = Field(..., ge=1)
    pomodoros: int = Field(0, ge=0)
    difficulty: Difficulty = "medium"
    focus_quality: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class StudySessionUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1, max_length=200)
    topic: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    pomodoros: Optional[int] = Field(None, ge=0)
    difficulty: Optional[Difficulty] = None
    focus_quality: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


@router.get("/sessions")
def list_sessions(subject: Optional[str] = None, user_id: int = Depends(get_current_user),
                  db: Session = Depends(get_db)):
    return [s.to_dict() for s in StudyService.get_all(db, user_id, subject)]


@router.post("/sessions", status_code=201)
def create_session(body: StudySessionCreate, user_id: int = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    try:
        s = StudyService.create(db, user_id, body.model_dump())
    except Exception:
        logger.exception("Study session create failed")
        raise HTTPException(status_code=500, detail="Failed to create study session")
    return {"status": "success", "data": s.to_dict()}


@router.get("/stats")
def study_stats(days: int = Query(30, ge=1), user_id: int = Depends(get_current_user),
                db: Session = Depends(get_db)):
    return StudyService.get_stats(db, user_id, days)


@router.get("/sessions/{session_id}")
def get_session(session_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    s = StudyService.get_by_id(db, user_id, session_id)
    if not s:
        raise HTTPException(status_code=404, detail="Study session not found")
    return s.to_dict()


@router.put("/sessions/{session_id}")
def update_session(session_id: int, body: StudySessionUpdate, user_id: int = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    s = StudyService.update(db, user_id, session_id, body.model_dump(exclude_unset=True))
    if not s:
        raise HTTPException(status_code=404, detail="Study session not found")
    return {"status": "success", "data": s.to_dict()}


@router.delete("/sessions/{session_id}")
def delete_session(session_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not StudyService.delete(db, user_id, session_id):
        raise HTTPException(status_code=404, detail="Study session not found")
    return {"status": "success"}
