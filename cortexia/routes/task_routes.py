# ---------- routes/task_routes.py ----------
import logging
from datetime import datetime
from typing import Optional, List, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.llm_router import get_llm_router
from cortexia.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])

Domain = Literal["work", "health", "study", "personal", "finance"]
Priority = Literal["low", "medium", "high", "urgent"]
Status = Literal["todo", "in-progress", "completed"]


class Subtask(BaseModel):
    id: str
    title: str
    completed: bool = False
    completed_at: Optional[datetime] = None


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    domain: Domain = "personal"
    priority: Priority = "medium"
    status: Status = "todo"
    due_date: Optional[datetime] = None
    time_estimate: Optional[int] = Field(None, ge=0)
    tags: List[str] = []
    subtasks: List[Subtask] = []


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    domain: Optional[Domain] = None
    priority: Optional[Priority] = None
    status: Optional[Status] = None
    due_date: Optional[datetime] = None
    time_estimate: Optional[int] = Field(None, ge=0)
    time_spent: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    subtasks: Optional[List[Subtask]] = None
    order: Optional[int] = None


class ReorderItem(BaseModel):
    id: int
    order: int


class ReorderRequest(BaseModel):
    updates: List[ReorderItem]


def _dump(model: BaseModel) -> dict:
    data = model.model_dump(exclude_unset=True)
    if "subtasks" in data:
        data["subtasks"] = [
            {**s.model_dump(), "completed_at": s.completed_at.isoformat() if s.completed_at else None}
            for s in model.subtasks or []
        ]
    return data


@router.get("")
def list_tasks(status: Optional[Status] = None, priority: Optional[Priority] = None,
               domain: Optional[Domain] = None,
               user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    filters = {"status": status, "priority": priority, "domain": domain}
    return [t.to_dict() for t in TaskService.get_all(db, user_id, filters)]


@router.post("", status_code=201)
async def create_task(body: TaskCreate, user_id: int = Depends(get_current_user),
                      db: Session = Depends(get_db), llm_router=Depends(get_llm_router)):
    try:
        task = await TaskService.create(db, user_id, _dump(body), llm_router)
    except Exception:
        logger.exception("Task create failed")
        raise HTTPException(status_code=500, detail="Failed to create task")
    return {"status": "success", "data": task.to_dict()}


@router.get("/stats")
def task_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return TaskService.get_stats(db, user_id)


@router.get("/overdue")
def overdue_tasks(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return [t.to_dict() for t in TaskService.get_overdue(db, user_id)]


@router.post("/reorder")
def reorder_tasks(body: ReorderRequest, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        updated = TaskService.reorder(db, user_id, [u.model_dump() for u in body.updates])
    except Exception:
        logger.exception("Task reorder failed")
        raise HTTPException(status_code=500, detail="Failed to reorder tasks")
    return {"status": "success", "updated": updated}


@router.get("/{task_id}")
def get_task(task_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    task = TaskService.get_by_id(db, user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task.to_dict()


@router.put("/{task_id}")
def update_task(task_id: int, body: TaskUpdate, user_id: int = Depends(get_current_user),
                db: Session = Depends(get_db)):
    try:
        task = TaskService.update(db, user_id, task_id, _dump(body))
    except Exception:
        logger.exception("Task update failed")
        raise HTTPException(status_code=500, detail="Failed to update task")
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "success", "data": task.to_dict()}


@router.post("/{task_id}/complete")
def complete_task(task_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    task = TaskService.complete(db, user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "success", "data": task.to_dict()}


@router.delete("/{task_id}")
def delete_task(task_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not TaskService.delete(db, user_id, task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "success"}
