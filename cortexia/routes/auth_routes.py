# ---------- routes/auth_routes.py ----------
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cortexia.auth import hash_password, verify_password, create_token, get_current_user
from cortexia.database import get_db
from cortexia.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# ── Pydantic schemas ──────────────────────────────────────────────
class AuthRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


def _token_response(user: User) -> dict:
    token = create_token({"user_id": user.id, "username": user.username})
    return {"status": "success", "data": {"token": token, "username": user.username}}


# ── Routes ────────────────────────────────────────────────────────
@router.post("/register", status_code=201)
def register(body: AuthRequest, db: Session = Depends(get_db)):
    """Create an account and return a token for it."""
    if db.query(User).filter_by(username=body.username).first():
        raise HTTPException(status_code=400, detail="Username already taken")
    try:
        user = User(username=body.username, hashed_password=hash_password(body.password))
        db.add(user)
        db.commit()
        db.refresh(user)
    except Exception:
        db.rollback()
        logger.exception("Registration failed")
        raise HTTPException(status_code=500, detail="Failed to register")
    logger.info(f"Registered user {user.username}")
    return _token_response(user)


@router.post("/login")
def login(body: AuthRequest, db: Session = Depends(get_db)):
    """Authenticate with username + password."""
    user = db.query(User).filter_by(username=body.username).first()
    if not user or not verify_password(body.password, user.hashed_password):
        logger.warning(f"Failed login for {body.username}")
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return _token_response(user)


@router.get("/me")
def me(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.query(User).filter_by(id=user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user.to_dict()
