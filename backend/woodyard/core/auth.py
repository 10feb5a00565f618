"""Cookie sessions backed by the sessions table"""
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from woodyard.config import get_settings
from woodyard.core.security import generate_session_id
from woodyard.database import get_db
from woodyard.models import DbSession, User
from woodyard.models.user import Role

settings = get_settings()


def _get_expires_at() -> datetime:
    return datetime.now(timezone.utc) + timedelta(seconds=settings.session_max_age_seconds)


def create_session(db: Session, user: User) -> str:
    """Persist a new session, return its id"""
    session_id = generate_session_id()
    db.add(DbSession(session_id=session_id, user_id=user.id, expires_at=_get_expires_at()))
    db.commit()
    return session_id


def get_user_from_session(
    db: Annotated[Session, Depends(get_db)],
    response: Response,
    session_cookie: Annotated[str | None, Cookie(alias=settings.session_cookie_name)] = None,
) -> User | None:
    """User for the session cookie; None when missing, expired or deactivated."""
    if not session_cookie:
        return None
    stmt = (
        select(DbSession)
        .join(User)
        .where(DbSession.session_id == session_cookie)
        .where(DbSession.expires_at > datetime.now(timezone.utc))
    )
    row = db.execute(stmt).scalar_one_or_none()
    if not row or not row.user.is_active:
        response.delete_cookie(settings.session_cookie_name)
        return None
    return row.user


def require_user(
    user: Annotated[User | None, Depends(get_user_from_session)],
) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return user


def require_role(role: Role):
    """Only the given role passes"""

    def _check(current_user: Annotated[User, Depends(require_user)]) -> User:
        if current_user.role != role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
        return current_user

    return _check


RequireAdmin = Depends(require_role(Role.ADMIN))


def set_session_cookie(response: Response, session_id: str) -> None:
    """HttpOnly, SameSite=Lax; Secure per settings"""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
        domain=settings.cookie_domain if settings.cookie_domain != "localhost" else None,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name, path="/")
