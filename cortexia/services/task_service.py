"""
task_service.py: Task management
Handles CRUD for Tasks, ordering, completion and statistics.
"""

import json
import logging

from sqlalchemy.orm import Session
from sqlalchemy import desc, asc

from cortexia.models.task import Task
from cortexia.services.ai_service import AIService
from cortexia.utils import utcnow, to_naive_utc

logger = logging.getLogger(__name__)

_JSON_FIELDS = ("tags", "subtasks")


def _apply(task: Task, data: dict):
    for key, value in data.items():
        if not hasattr(task, key) or key in ("id", "user_id"):
            continue
        if key in _JSON_FIELDS:
            setattr(task, key, json.dumps(value or []))
        elif key == "due_date":
            setattr(task, key, to_naive_utc(value))
        else:
            setattr(task, key, value)

    if task.status == "completed":
        if not task.completed_at:
            task.completed_at = utcnow()
    else:
        task.completed_at = None


class TaskService:
    @staticmethod
    async def create(db: Session, user_id: int, data: dict, llm_router=None) -> Task:
        """Create a task; when an LLM is configured, store its priority score."""
        task = Task(user_id=user_id, status="todo", priority="medium", domain="personal")
        _apply(task, data)

        if llm_router is not None and llm_router.is_configured:
            result = await AIService.calculate_task_priority(data, llm_router)
            task.ai_priority_score = result["score"]
            task.ai_reasoning = result["reasoning"]

        try:
            db.add(task)
            db.commit()
            db.refresh(task)
            return task
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, filters: dict | None = None) -> list[Task]:
        query = db.query(Task).filter(Task.user_id == user_id)
        filters = filters or {}
        if filters.get("status"):
            query = query.filter(Task.status == filters["status"])
        if filters.get("priority"):
            query = query.filter(Task.priority == filters["priority"])
        if filters.get("domain"):
            query = query.filter(Task.domain == filters["domain"])
        return query.order_by(asc(Task.order), desc(Task.created_at), desc(Task.id)).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, task_id: int) -> Task | None:
        return db.query(Task).filter_by(id=task_id, user_id=user_id).first()

    @staticmethod
    def update(db: Session, user_id: int, task_id: int, data: dict) -> Task | None:
        """Partial update. Status changes stamp or clear completed_at."""
        task = TaskService.get_by_id(db, user_id, task_id)
        if not task:
            return None
        try:
            _apply(task, data)
            task.updated_at = utcnow()
            db.commit()
            db.refresh(task)
            return task
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def complete(db: Session, user_id: int, task_id: int) -> Task | None:
        return TaskService.update(db, user_id, task_id, {"status": "completed"})

    @staticmethod
    def delete(db: Session, user_id: int, task_id: int) -> bool:
        task = TaskService.get_by_id(db, user_id, task_id)
        if not task:
            return False
        try:
            db.delete(task)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def reorder(db: Session, user_id: int, updates: list[dict]) -> int:
        """Bulk-set the order field. Ids that aren't the user's are skipped."""
        ids = [u["id"] for u in updates]
        tasks = {t.id: t for t in db.query(Task).filter(Task.user_id == user_id, Task.id.in_(ids)).all()}
        try:
            for u in updates:
                task = tasks.get(u["id"])
                if task is not None:
                    task.order = u["order"]
            db.commit()
        except Exception:
            db.rollback()
            raise
        return len(tasks)

    @staticmethod
    def get_overdue(db: Session, user_id: int) -> list[Task]:
        return db.query(Task).filter(
            Task.user_id == user_id,
            Task.status != "completed",
            Task.due_date.isnot(None),
            Task.due_date < utcnow(),
        ).order_by(asc(Task.due_date)).all()

    @staticmethod
    def get_stats(db: Session, user_id: int) -> dict:
        """Task completion statistics."""
        total = db.query(Task).filter_by(user_id=user_id).count()
        completed = db.query(Task).filter_by(user_id=user_id, status="completed").count()
        overdue = len(TaskService.get_overdue(db, user_id))
        return {
            "total": total,
            "completed": completed,
            "pending": total - completed,
            "overdue": overdue,
            "completion_rate": round(completed / total, 2) if total > 0 else 0.0,
        }
