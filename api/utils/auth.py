import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, Cookie, Response, status, Depends
from fastapi import WebSocket
from sqlalchemy.orm import Session

from api.config import get_db, settings
from api.models.models import User as DbUser, ROLE_MANAGER, ROLE_TECHNICIAN
from api.schemas.auth_schemas import AuthTokenPayload
from api.schemas.user_schemas import User
from api.services.records import ViewerContext
from api.utils.jwt import decode_token, verify_token, get_password_hash, create_access_token, verify_password

logger = logging.getLogger("uvicorn")


def _token_from_ws_scope(scope: dict) -> Optional[str]:
    """Extract access_token from Cookie or query (?token=) in WebSocket scope. Returns None if missing."""
    qs = scope.get("query_string") or b""
    if qs:
        for part in qs.split(b"&"):
            if part.startswith(b"token="):
                return part[6:].decode("utf-8", errors="replace").strip()
    for name, value in scope.get("headers") or []:
        if name.lower() == b"cookie":
            cookie = value.decode("utf-8", errors="replace")
            for part in cookie.split(";"):
                part = part.strip()
                if part.startswith("access_token="):
                    return part[13:].strip()
            break
    return None


def _to_schema(user: DbUser) -> User:
    return User(
        id=int(user.id),
        email=user.email,
        full_name=user.full_name or "",
        role=user.role or ROLE_TECHNICIAN,
        hashed_password=user.hashed_password,
    )


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> User:
    payload = verify_token(access_token)
    user = get_user_by_email(payload.sub, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return _to_schema(user)


def require_manager(current_user: User = Depends(get_current_user)) -> User:
    """Role is always read from the stored profile, never from the client."""
    if current_user.role != ROLE_MANAGER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Manager role required")
    return current_user


def viewer_context(current_user: User, manager_override: bool = False) -> ViewerContext:
    return ViewerContext(user_id=current_user.id, role=current_user.role, manager_override=manager_override)


def set_auth_cookie(response: Response, user: DbUser) -> None:
    minutes = settings.access_token_expire_minutes
    token = create_access_token(
        AuthTokenPayload(sub=user.email, exp=datetime.now(timezone.utc) + timedelta(minutes=minutes), role=user.role)
    )
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=minutes * 60,
    )

def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )

def get_user_from_websocket(websocket: WebSocket, db: Session) -> Optional[User]:
    """Authenticate a WebSocket via cookie or ?token=. Returns None if unauthenticated."""
    payload = decode_token(_token_from_ws_scope(websocket.scope))
    if payload is None:
        return None
    user = get_user_by_email(payload.sub, db)
    if user is None:
        return None
    return _to_schema(user)


def get_user_by_email(email: str, db: Session) -> Optional[DbUser]:
    return db.query(DbUser).filter(DbUser.email == email.strip().lower()).first()

def create_user(email: str, password: str, db: Session, *, full_name: str = "", role: str = ROLE_TECHNICIAN) -> DbUser:
    email = email.strip().lower()
    logger.info("Creating user: %s role=%s", email, role)
    user = DbUser(
        email=email,
        full_name=full_name.strip() or email.split("@", 1)[0],
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def authenticate_user(email: str, password: str, db: Session) -> Optional[DbUser]:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
