# ---------- routes/finance_routes.py ----------
import logging
from datetime import date as Date
from typing import Optional, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.finance_service import FinanceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/finance", tags=["Finance"])

TxType = Literal["income", "expense"]


class TransactionCreate(BaseModel):
    type: TxType
    amount: float = Field(..., gt=0)
    category: str = Field("other", min_length=1, max_length=50)
    description: Optional[str] = None
    date: Optional[Date] = None


class TransactionUpdate(BaseModel):
    type: Optional[TxType] = None
    amount: Optional[float] = Field(None, gt=0)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    date: Optional[Date] = None


class BudgetCreate(BaseModel):
    category: str = Field(..., min_length=1, max_length=50)
    limit: float = Field(..., gt=0)
    period: Literal["weekly", "monthly"] = "monthly"


@router.get("/transactions")
def list_transactions(days: int = Query(30, ge=1), type: Optional[TxType] = None,
                      category: Optional[str] = None,
                      user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    filters = {"days": days, "type": type, "category": category}
    return [t.to_dict() for t in FinanceService.get_transactions(db, user_id, filters)]


@router.post("/transactions", status_code=201)
def create_transaction(body: TransactionCreate, user_id: int = Depends(get_current_user),
                       db: Session = Depends(get_db)):
    try:
        t = FinanceService.create_transaction(db, user_id, body.model_dump())
    except Exception:
        logger.exception("Transaction create failed")
        raise HTTPException(status_code=500, detail="Failed to create transaction")
    return {"status": "success", "data": t.to_dict()}


@router.get("/transactions/{transaction_id}")
def get_transaction(transaction_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    t = FinanceService.get_transaction(db, user_id, transaction_id)
    if not t:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return t.to_dict()


@router.put("/transactions/{transaction_id}")
def update_transaction(transaction_id: int, body: TransactionUpdate, user_id: int = Depends(get_current_user),
                       db: Session = Depends(get_db)):
    t = FinanceService.update_transaction(db, user_id, transaction_id, body.model_dump(exclude_unset=True))
    if not t:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"status": "success", "data": t.to_dict()}


@router.delete("/transactions/{transaction_id}")
def delete_transaction(transaction_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not FinanceService.delete_transaction(db, user_id, transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"status": "success"}


@router.get("/stats")
def finance_stats(period: Literal["month", "week"] = "month",
                  user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return FinanceService.get_stats(db, user_id, period)


@router.get("/budgets")
def list_budgets(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return FinanceService.get_budgets(db, user_id)


@router.post("/budgets")
def set_budget(body: BudgetCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Create or replace the budget for a category and period."""
    try:
        budget, created = FinanceService.set_budget(db, user_id, body.model_dump())
    except Exception:
        logger.exception("Budget save failed")
        raise HTTPException(status_code=500, detail="Failed to save budget")
    return {"status": "success", "created": created, "data": budget.to_dict()}


@router.get("/budgets/status/{category}")
def budget_status(category: str, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return FinanceService.budget_status(db, user_id, category)


@router.delete("/budgets/{budget_id}")
def delete_budget(budget_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if not FinanceService.delete_budget(db, user_id, budget_id):
        raise HTTPException(status_code=404, detail="Budget not found")
    return {"status": "success"}
