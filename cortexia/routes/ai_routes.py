# ---------- routes/ai_routes.py ----------
import logging
from typing import Optional, List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.models.task import Task
from cortexia.models.habit import Habit
from cortexia.models.goal import Goal
from cortexia.models.journal import JournalEntry
from cortexia.services.ai_service import AIService
from cortexia.services.llm_router import get_llm_router
from cortexia.services.quick_add_service import QuickAddService
from cortexia.utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ai", tags=["AI"])


# ── Pydantic schemas ──────────────────────────────────────────────
class AskContext(BaseModel):
    tasks: List[dict] = []
    habits: List[dict] = []
    goals: List[dict] = []
    avg_mood: Optional[float] = Field(None, ge=1, le=10)


class AskRequest(BaseModel):
    question: str = Field(..., min_length=1)
    context: Optional[AskContext] = None


class PriorityRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[str] = None
    domain: Optional[str] = None


class PrioritizeRequest(BaseModel):
    tasks: List[dict]


class ParseRequest(BaseModel):
    input: str = Field(..., min_length=1)


def _user_context(db: Session, user_id: int) -> dict:
    moods = [m[0] for m in db.query(JournalEntry.mood).filter_by(user_id=user_id).all() if m[0]]
    return {
        "tasks": [t.to_dict() for t in db.query(Task).filter_by(user_id=user_id).all()],
        "habits": [h.to_dict() for h in db.query(Habit).filter_by(user_id=user_id, active=True).all()],
        "goals": [g.to_dict() for g in db.query(Goal).filter_by(user_id=user_id, status="active").all()],
        "avg_mood": round(sum(moods) / len(moods), 1) if moods else None,
    }


# ── Routes ────────────────────────────────────────────────────────
@router.post("/ask")
async def ask(body: AskRequest, user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
              llm_router=Depends(get_llm_router)):
    """Coach-style answer; the user's records are used when no context is sent."""
    context = body.context.model_dump() if body.context is not None else _user_context(db, user_id)
    return {"response": await AIService.ask(body.question, context, llm_router)}


@router.post("/priority")
async def task_priority(body: PriorityRequest, user_id: int = Depends(get_current_user),
                        llm_router=Depends(get_llm_router)):
    return await AIService.calculate_task_priority(body.model_dump(), llm_router)


@router.post("/prioritize")
def prioritize(body: PrioritizeRequest, user_id: int = Depends(get_current_user)):
    return {"tasks": AIService.prioritize_tasks(body.tasks)}


@router.post("/parse")
def parse(body: ParseRequest, user_id: int = Depends(get_current_user)):
    return QuickAddService.parse(body.input)


@router.get("/suggestions")
def suggestions(context: str = "general", hour: Optional[int] = Query(None, ge=0, le=23),
                user_id: int = Depends(get_current_user)):
    time = utcnow().hour if hour is None else hour
    return {"suggestions": AIService.suggestions(time), "context": context, "time": time}


@router.get("/status")
def provider_status(user_id: int = Depends(get_current_user), llm_router=Depends(get_llm_router)):
    return {
        "configured": llm_router.is_configured,
        "providers": llm_router.get_provider_status(),
        "cache": llm_router.cache.get_stats(),
    }
