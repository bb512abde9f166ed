from typing import Optional
from uuid import UUID

from fastapi import Request
from fastapi.security import OAuth2PasswordBearer
from app.core.jwt import decode_access_token
from fastapi import Depends, HTTPException, status

# auto_error=False: 헤더 없으면 쿠키로 한 번 더 확인
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

# ✅ 쿠키 또는 헤더에서 토큰을 가져오는 함수
def get_current_user(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> str:
    jwt_token = token or request.cookies.get("access_token")
    if not jwt_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(jwt_token)
    if payload is None or "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        UUID(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    return payload["sub"]
