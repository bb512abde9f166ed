# app/core/jwt.py

from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.config import settings

ALGORITHM = settings.JWT_ALGORITHM
EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=EXPIRE_MINUTES))
    payload = {
        "sub": str(user_id),
        "exp": expire
    }
    return jwt.encode(payload, settings.jwt_secret(), algorithm=ALGORITHM)

def decode_access_token(token: str):
    try:
        payload = jwt.decode(token, settings.jwt_secret(), algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None
