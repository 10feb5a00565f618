"""Auth API - login / logout / me"""
import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from woodyard.core.auth import (
    clear_session_cookie,
    create_session,
    require_user,
    set_session_cookie,
)
from woodyard.core.security import hash_password, verify_password
from woodyard.database import get_db
from woodyard.models import User
from woodyard.schemas.auth import ChangePasswordRequest, LoginRequest, UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])
log = structlog.get_logger(__name__)


@router.post("/login")
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """Sets the HttpOnly session cookie on success"""
    user = db.execute(select(User).where(User.username == data.username)).scalar_one_or_none()
    if not user or not user.is_active or not verify_password(data.password, user.password_hash):
        log.info("login_failed", username=data.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    session_id = create_session(db, user)
    set_session_cookie(response, session_id)
    log.info("login_ok", user_id=user.id)
    return {"ok": True, "user": UserResponse.model_validate(user)}


@router.post("/logout")
def logout(response: Response):
    clear_session_cookie(response)
    return {"ok": True}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(require_user)):
    return current_user


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    if not verify_password(data.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Current password does not match")
    current_user.password_hash = hash_password(data.new_password)
    db.commit()
