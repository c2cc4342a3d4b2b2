# ---------- routes/goal_routes.py ----------
import logging
from datetime import datetime
from typing import Optional, List, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.goal_service import GoalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])

Category = Literal["personal", "health", "career", "financial", "education", "family"]
Status = Literal["active", "completed", "paused", "abandoned"]


class Milestone(BaseModel):
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    target_date: Optional[str] = None
    completed: bool = False
    completed_at: Optional[str] = None


class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    category: Category = "personal"
    priority: Literal["low", "medium", "high"] = "medium"
    target_date: Optional[datetime] = None
    milestones: List[Milestone] = []


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[Category] = None
    priority: Optional[Literal["low", "medium", "high"]] = None
    target_date: Optional[datetime] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    status: Optional[Status] = None
    milestones: Optional[List[Milestone]] = None


@router.get("")
def list_goals(status: Optional[Status] = None, category: Optional[Category] = None,
               user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return [g.to_dict() for g in GoalService.get_all(db, user_id, {"status": status, "category": category})]


@router.post("", status_code=201)
def create_goal(body: GoalCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        goal = GoalService.create(db, user_id, body.model_dump())
    except Exception:
        logger.exception("Goal create failed")
        raise HTTPException(status_code=500, detail="Failed to create goal")
    return {"status": "success", "data": goal.to_dict()}


@router.get("/stats")
def goal_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return GoalService.get_stats(db, user_id)


@router.get("/{goal_id}")
def get_goal(goal_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    goal = GoalService.get_by_id(db, user_id, goal_id)
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal.to_dict()


@router.put("/{goal_id}")
def update_goal(goal_id: int, body: GoalUpdate, user_id: int = Depends(get_current_user),
                db: Session = Depends(get_db)):
    goal = GoalService.update(db, user_id, goal_id, body.model_dump(exclude_unset=True))
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"status": "success", "data": goal.to_dict()}


@router.delete("/{goal_id}")
def delete_goal(goal_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not GoalService.delete(db, user_id, goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"status": "success"}


@router.post("/{goal_id}/milestones/{milestone_id}/toggle")
def toggle_milestone(goal_id: int, milestone_id: str, user_id: int = Depends(get_current_user),
                     db: Session = Depends(get_db)):
    try:
        goal = GoalService.toggle_milestone(db, user_id, goal_id, milestone_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Milestone not found")
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"status": "success", "data": goal.to_dict()}
