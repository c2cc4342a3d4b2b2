# ---------- routes/quick_add_routes.py ----------
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.services.llm_router import get_llm_router
from cortexia.services.quick_add_service import QuickAddService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/quick-add", tags=["Quick Add"])


class QuickAddRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=500)


@router.post("/parse")
def parse(body: QuickAddRequest, user_id: int = Depends(get_current_user)):
    """Preview how the text would be classified."""
    return QuickAddService.parse(body.text)


@router.post("", status_code=201)
async def quick_add(body: QuickAddRequest, user_id: int = Depends(get_current_user),
                    db: Session = Depends(get_db), llm_router=Depends(get_llm_router)):
    try:
        result = await QuickAddService.commit(db, user_id, body.text, llm_router)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Quick add failed")
        raise HTTPException(status_code=500, detail="Failed to add item")
    return {"status": "success", "data": result}
