from jose import JWTError
from jose.jwt import encode, decode
import bcrypt
import logging
from api.config import settings
from api.schemas.auth_schemas import AuthTokenPayload
from typing import Optional
from fastapi import HTTPException, status

ALGORITHM = "HS256"

logger = logging.getLogger("uvicorn")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.warning("Error verifying password: %s", e)
        return False

def get_password_hash(password: str) -> str:
    """Hash a password for storing."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def create_access_token(data: AuthTokenPayload) -> str:
    """Create a JWT access token."""
    return encode(data.model_dump(exclude_none=True), settings.secret_key, algorithm=ALGORITHM)

def decode_token(token: Optional[str]) -> Optional[AuthTokenPayload]:
    """Decode without raising; None for a missing, expired or tampered token."""
    if not token:
        return None
    try:
        payload = decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return AuthTokenPayload(**payload)
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        return None

def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    payload = decode_token(token)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return payload
