"""
goal_service.py: Goals, milestones, and progress tracking.
"""

import json
import uuid

from sqlalchemy.orm import Session
from sqlalchemy import desc

from cortexia.models.goal import Goal
from cortexia.utils import utcnow, to_naive_utc


def _normalize_milestones(milestones: list[dict] | None) -> list[dict]:
    """Give every milestone a string id and the completed flags."""
    out = []
    for m in milestones or []:
        m = dict(m)
        m["id"] = str(m.get("id") or uuid.uuid4().hex[:8])
        m.setdefault("completed", False)
        m.setdefault("completed_at", None)
        m.setdefault("target_date", None)
        out.append(m)
    return out


class GoalService:
    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> Goal:
        goal = Goal(
            user_id=user_id,
            title=data["title"],
            description=data.get("description"),
            category=data.get("category") or "personal",
            priority=data.get("priority") or "medium",
            target_date=to_naive_utc(data.get("target_date")),
            progress=0,
            status="active",
            milestones=json.dumps(_normalize_milestones(data.get("milestones"))),
        )
        try:
            db.add(goal)
            db.commit()
            db.refresh(goal)
            return goal
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, filters: dict | None = None) -> list[Goal]:
        query = db.query(Goal).filter(Goal.user_id == user_id)
        filters = filters or {}
        if filters.get("status"):
            query = query.filter(Goal.status == filters["status"])
        if filters.get("category"):
            query = query.filter(Goal.category == filters["category"])
        return query.order_by(desc(Goal.created_at), desc(Goal.id)).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, goal_id: int) -> Goal | None:
        return db.query(Goal).filter_by(id=goal_id, user_id=user_id).first()

    @staticmethod
    def update(db: Session, user_id: int, goal_id: int, data: dict) -> Goal | None:
        goal = GoalService.get_by_id(db, user_id, goal_id)
        if not goal:
            return None
        try:
            for key, value in data.items():
                if key == "milestones":
                    goal.milestones = json.dumps(_normalize_milestones(value))
                elif key == "target_date":
                    goal.target_date = to_naive_utc(value)
                elif hasattr(goal, key) and key not in ("id", "user_id"):
                    setattr(goal, key, value)

            if "status" in data:
                goal.completed_at = utcnow() if goal.status == "completed" else None
            goal.updated_at = utcnow()
            db.commit()
            db.refresh(goal)
            return goal
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, goal_id: int) -> bool:
        goal = GoalService.get_by_id(db, user_id, goal_id)
        if not goal:
            return False
        try:
            db.delete(goal)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def toggle_milestone(db: Session, user_id: int, goal_id: int, milestone_id: str) -> Goal | None:
        """Flip one milestone and recompute progress. Raises KeyError for an unknown milestone."""
        goal = GoalService.get_by_id(db, user_id, goal_id)
        if not goal:
            return None

        milestones = json.loads(goal.milestones) if goal.milestones else []
        target = next((m for m in milestones if str(m.get("id")) == str(milestone_id)), None)
        if target is None:
            raise KeyError(milestone_id)

        target["completed"] = not target.get("completed", False)
        target["completed_at"] = utcnow().isoformat() if target["completed"] else None
        done = sum(1 for m in milestones if m.get("completed"))
        try:
            goal.milestones = json.dumps(milestones)
            goal.progress = round(done / len(milestones) * 100)
            goal.updated_at = utcnow()
            db.commit()
            db.refresh(goal)
            return goal
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_stats(db: Session, user_id: int) -> dict:
        goals = db.query(Goal).filter_by(user_id=user_id).all()
        total = len(goals)
        return {
            "total": total,
            "completed": sum(1 for g in goals if g.status == "completed"),
            "in_progress": sum(1 for g in goals if g.status == "active"),
            "avg_progress": round(sum(g.progress or 0 for g in goals) / total) if total else 0,
        }
