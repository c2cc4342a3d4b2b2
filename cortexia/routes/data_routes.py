# ---------- routes/data_routes.py ----------
import logging

from fastapi import APIRouter, Depends, HTTPException, Body
from pydantic import ValidationError
from sqlalchemy.orm import Session

from cortexia.auth import get_current_user
from cortexia.database import get_db
from cortexia.routes.settings_routes import SettingsUpdate
from cortexia.services.data_service import DataService
from cortexia.supabase_client import is_supabase_configured

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/data", tags=["Data"])


@router.get("/export")
def export_data(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return DataService.export(db, user_id)


@router.post("/import")
def import_data(doc: dict = Body(...), user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Replace everything the user owns with the contents of an export document."""
    if doc.get("settings") is not None:
        try:
            doc["settings"] = SettingsUpdate.model_validate(doc["settings"]).to_patch()
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=f"Invalid settings: {e.errors()}")
    try:
        counts = DataService.import_data(db, user_id, doc)
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid export document: {e}")
    except Exception:
        logger.exception("Import failed")
        raise HTTPException(status_code=500, detail="Failed to import data")
    return {"status": "success", "imported": counts}


@router.delete("")
def delete_all(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        counts = DataService.delete_all(db, user_id)
    except Exception:
        logger.exception("Delete-all failed")
        raise HTTPException(status_code=500, detail="Failed to delete data")
    return {"status": "success", "deleted": counts}


@router.post("/sync")
def sync(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Mirror the user's store to Supabase."""
    if not is_supabase_configured():
        raise HTTPException(status_code=503, detail="Supabase is not configured")
    try:
        synced = DataService.sync(db, user_id)
    except Exception:
        logger.exception("Supabase sync failed")
        raise HTTPException(status_code=500, detail="Failed to sync data")
    return {"status": "success", "synced": synced}
