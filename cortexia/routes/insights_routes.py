# ---------- routes/insights_routes.py ----------
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.insights_service import InsightsService
from cortexia.services.llm_router import get_llm_router

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/insights", tags=["Insights"])


@router.get("/life-score")
async def life_score(user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
                     llm_router=Depends(get_llm_router)):
    try:
        return await InsightsService.life_score(db, user_id, llm_router)
    except Exception:
        logger.exception("Life score failed")
        raise HTTPException(status_code=500, detail="Failed to calculate life score")


@router.get("/life-state")
def life_state(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return InsightsService.life_state(db, user_id)


@router.get("/local")
def local_insights(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"insights": InsightsService.local_insights(db, user_id)}


@router.get("/weekly-synthesis")
async def weekly_synthesis(user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
                           llm_router=Depends(get_llm_router)):
    try:
        return await InsightsService.weekly_synthesis(db, user_id, llm_router)
    except Exception:
        logger.exception("Weekly synthesis failed")
        raise HTTPException(status_code=500, detail="Failed to generate synthesis")


@router.get("/morning-briefing")
async def morning_briefing(user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
                           llm_router=Depends(get_llm_router)):
    try:
        return await InsightsService.morning_briefing(db, user_id, llm_router)
    except Exception:
        logger.exception("Morning briefing failed")
        raise HTTPException(status_code=500, detail="Failed to generate morning briefing")
