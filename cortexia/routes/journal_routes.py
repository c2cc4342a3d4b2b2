# ---------- routes/journal_routes.py ----------
import logging
from datetime import date as Date
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.journal_service import JournalService
from cortexia.services.llm_router import get_llm_router

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/journal", tags=["Journal"])


class JournalCreate(BaseModel):
    date: Optional[Date] = None
    title: Optional[str] = Field(None, max_length=300)
    content: str = Field(..., min_length=1)
    mood: Optional[int] = Field(None, ge=1, le=10)
    energy: Optional[int] = Field(None, ge=1, le=10)
    stress: Optional[int] = Field(None, ge=1, le=10)
    focus: Optional[int] = Field(None, ge=1, le=10)
    tags: List[str] = []
    gratitude: List[str] = []
    wins: List[str] = []


class JournalUpdate(BaseModel):
    date: Optional[Date] = None
    title: Optional[str] = Field(None, max_length=300)
    content: Optional[str] = Field(None, min_length=1)
    mood: Optional[int] = Field(None, ge=1, le=10)
    energy: Optional[int] = Field(None, ge=1, le=10)
    stress: Optional[int] = Field(None, ge=1, le=10)
    focus: Optional[int] = Field(None, ge=1, le=10)
    tags: Optional[List[str]] = None
    gratitude: Optional[List[str]] = None
    wins: Optional[List[str]] = None


@router.get("")
def list_entries(limit: Optional[int] = Query(None, ge=1), user_id: int = Depends(get_current_user),
                 db: Session = Depends(get_db)):
    return [e.to_dict() for e in JournalService.get_all(db, user_id, limit)]


@router.post("", status_code=201)
def create_entry(body: JournalCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        entry = JournalService.create(db, user_id, body.model_dump())
    except Exception:
        logger.exception("Journal create failed")
        raise HTTPException(status_code=500, detail="Failed to create journal entry")
    return {"status": "success", "data": entry.to_dict()}


@router.get("/stats")
def journal_stats(days: int = Query(30, ge=1), user_id: int = Depends(get_current_user),
                  db: Session = Depends(get_db)):
    return JournalService.get_stats(db, user_id, days)


@router.get("/date/{entry_date}")
def get_by_date(entry_date: Date, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    entry = JournalService.get_by_date(db, user_id, entry_date)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return entry.to_dict()


@router.get("/{entry_id}")
def get_entry(entry_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    entry = JournalService.get_by_id(db, user_id, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return entry.to_dict()


@router.put("/{entry_id}")
def update_entry(entry_id: int, body: JournalUpdate, user_id: int = Depends(get_current_user),
                 db: Session = Depends(get_db)):
    entry = JournalService.update(db, user_id, entry_id, body.model_dump(exclude_unset=True))
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return {"status": "success", "data": entry.to_dict()}


@router.delete("/{entry_id}")
def delete_entry(entry_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not JournalService.delete(db, user_id, entry_id):
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return {"status": "success"}


@router.post("/{entry_id}/summarize")
async def summarize_entry(entry_id: int, user_id: int = Depends(get_current_user),
                          db: Session = Depends(get_db), llm_router=Depends(get_llm_router)):
    entry = await JournalService.summarize(db, user_id, entry_id, llm_router)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return {"status": "success", "data": entry.to_dict()}
