"""
finance_service.py: Finance & Budgets
Transactions CRUD, period summaries, and budget health.
"""

from datetime import date, timedelta

from sqlalchemy.orm import Session

from cortexia.models.transaction import Transaction
from cortexia.models.budget import Budget
from cortexia.utils import today

DEFAULT_BUDGET_LIMIT = 500.0


def period_start(period: str, ref: date | None = None) -> date:
    """month = first of the current month, week = the last 7 days."""
    ref = ref or today()
    if period == "week" or period == "weekly":
        return ref - timedelta(days=7)
    return ref.replace(day=1)


class FinanceService:
    @staticmethod
    def create_transaction(db: Session, user_id: int, data: dict) -> Transaction:
        t = Transaction(
            user_id=user_id,
            amount=data["amount"],
            type=data.get("type", "expense"),
            category=data.get("category") or "other",
            description=data.get("description") or "",
            date=data.get("date") or today(),
        )
        try:
            db.add(t)
            db.commit()
            db.refresh(t)
            return t
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_transactions(db: Session, user_id: int, filters: dict | None = None) -> list[Transaction]:
        filters = filters or {}
        query = db.query(Transaction).filter_by(user_id=user_id)
        days = filters.get("days")
        if days:
            query = query.filter(Transaction.date >= today() - timedelta(days=days))
        if filters.get("type"):
            query = query.filter_by(type=filters["type"])
        if filters.get("category"):
            query = query.filter_by(category=filters["category"])
        return query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()

    @staticmethod
    def get_transaction(db: Session, user_id: int, transaction_id: int) -> Transaction | None:
        return db.query(Transaction).filter_by(id=transaction_id, user_id=user_id).first()

    @staticmethod
    def update_transaction(db: Session, user_id: int, transaction_id: int, data: dict) -> Transaction | None:
        t = FinanceService.get_transaction(db, user_id, transaction_id)
        if not t:
            return None
        try:
            for k, v in data.items():
                if hasattr(t, k) and k not in ("id", "user_id"):
                    setattr(t, k, v)
            db.commit()
            db.refresh(t)
            return t
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete_transaction(db: Session, user_id: int, transaction_id: int) -> bool:
        t = FinanceService.get_transaction(db, user_id, transaction_id)
        if not t:
            return False
        try:
            db.delete(t)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def _expenses_since(db: Session, user_id: int, start: date, category: str | None = None) -> float:
        query = db.query(Transaction).filter(
            Transaction.user_id == user_id,
            Transaction.type == "expense",
            Transaction.date >= start,
        )
        if category:
            query = query.filter(Transaction.category == category)
        return sum(t.amount for t in query.all())

    @staticmethod
    def get_stats(db: Session, user_id: int, period: str = "month") -> dict:
        """Total income, expenses, and savings rate for the period."""
        rows = db.query(Transaction).filter(
            Transaction.user_id == user_id,
            Transaction.date >= period_start(period),
        ).all()
        income = sum(t.amount for t in rows if t.type == "income")
        expenses = sum(t.amount for t in rows if t.type == "expense")
        by_category: dict[str, float] = {}
        for t in rows:
            if t.type == "expense":
                by_category[t.category] = by_category.get(t.category, 0) + t.amount

        return {
            "period": period,
            "income": income,
            "expenses": expenses,
            "balance": income - expenses,
            "savings_rate": round((income - expenses) / income, 2) if income > 0 else 0.0,
            "by_category": by_category,
            "transaction_count": len(rows),
        }

    # --- Budgets ---

    @staticmethod
    def _with_spent(db: Session, user_id: int, category: str, limit: float, period: str) -> dict:
        spent = FinanceService._expenses_since(db, user_id, period_start(period), category)
        percentage = round(spent / limit * 100) if limit else 0
        if percentage > 100:
            status = "exceeded"
        elif percentage >= 80:
            status = "warning"
        else:
            status = "ok"
        return {
            "spent": spent,
            "remaining": limit - spent,
            "percentage": percentage,
            "status": status,
        }

    @staticmethod
    def get_budgets(db: Session, user_id: int) -> list[dict]:
        budgets = db.query(Budget).filter_by(user_id=user_id).order_by(Budget.category).all()
        return [
            {**b.to_dict(), **FinanceService._with_spent(db, user_id, b.category, b.limit, b.period)}
            for b in budgets
        ]

    @staticmethod
    def set_budget(db: Session, user_id: int, data: dict) -> tuple[Budget, bool]:
        """Create or replace the budget for (category, period). Returns (budget, created)."""
        period = data.get("period") or "monthly"
        b = db.query(Budget).filter_by(user_id=user_id, category=data["category"], period=period).first()
        created = b is None
        try:
            if created:
                b = Budget(user_id=user_id, category=data["category"], period=period, limit=data["limit"])
                db.add(b)
            else:
                b.limit = data["limit"]
            db.commit()
            db.refresh(b)
            return b, created
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete_budget(db: Session, user_id: int, budget_id: int) -> bool:
        b = db.query(Budget).filter_by(id=budget_id, user_id=user_id).first()
        if not b:
            return False
        try:
            db.delete(b)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def budget_status(db: Session, user_id: int, category: str) -> dict:
        """Status for a category; falls back to a default monthly limit when no budget exists."""
        b = db.query(Budget).filter_by(user_id=user_id, category=category).order_by(Budget.period).first()
        limit = b.limit if b else DEFAULT_BUDGET_LIMIT
        period = b.period if b else "monthly"
        return {
            "category": category,
            "limit": limit,
            "period": period,
            "is_default": b is None,
            **FinanceService._with_spent(db, user_id, category, limit, period),
        }
