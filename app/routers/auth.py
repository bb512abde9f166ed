from __future__ import annotations

import logging
import os

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from app.core.config import settings
from app.core.jwt import create_access_token
from app.core.security import hash_password, verify_password
from app.db.session import get_session
from app.models.user import User
from app.schemas.auth import AuthTokenModel, LoginRequest, SignupRequest, UserOut

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])

# ──────────────────────────────────────────────────────────────────────────────
# 환경변수 & 상수
# ──────────────────────────────────────────────────────────────────────────────
# AT를 쿠키로도 내려줄지(웹 혼용 환경에서만 권장; 기본 False)
AUTH_SET_COOKIE_ON_POST = os.getenv("AUTH_SET_COOKIE_ON_POST", "false").lower() == "true"
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"  # 배포시 true 권장
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")  # cross-site면 "none"
COOKIE_MAX_AGE = 60 * settings.ACCESS_TOKEN_EXPIRE_MINUTES

# ──────────────────────────────────────────────────────────────────────────────
# 내부 헬퍼
# ──────────────────────────────────────────────────────────────────────────────
def _set_access_cookie_if_enabled(response: Response, jwt_token: str) -> None:
    """
    Access Token을 쿠키로도 내려야 하는 환경(웹)에서만 사용.
    """
    if response is not None and AUTH_SET_COOKIE_ON_POST:
        response.set_cookie(
            key="access_token",
            value=jwt_token,
            httponly=True,
            secure=COOKIE_SECURE,
            samesite=COOKIE_SAMESITE,
            max_age=COOKIE_MAX_AGE,
            path="/",
        )

def _build_auth_response(user: User, response: Response) -> AuthTokenModel:
    access_token = create_access_token(str(user.user_id))
    _set_access_cookie_if_enabled(response, access_token)
    return AuthTokenModel(
        access_token=access_token,
        expires_in=COOKIE_MAX_AGE,
        user=UserOut(id=str(user.user_id), email=user.email, name=user.name),
    )

def _find_user(db: Session, email: str) -> User | None:
    return db.exec(select(User).where(User.email == email)).first()

def _authenticate(db: Session, email: str, password: str) -> User:
    user = _find_user(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

# ──────────────────────────────────────────────────────────────────────────────
# 회원가입 / 로그인
# ──────────────────────────────────────────────────────────────────────────────
@auth_router.post("/signup", response_model=AuthTokenModel, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    response: Response,
    db: Session = Depends(get_session),
):
    if _find_user(db, body.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(email=body.email, name=body.name, password_hash=hash_password(body.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user signed up | user_id=%s", user.user_id)
    return _build_auth_response(user, response)

@auth_router.post("/login", response_model=AuthTokenModel)
def login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_session),
):
    user = _authenticate(db, body.email, body.password)
    return _build_auth_response(user, response)

# (Swagger Authorize 버튼용) OAuth2 password form
@auth_router.post("/token", response_model=AuthTokenModel)
def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_session),
):
    user = _authenticate(db, form_data.username.strip().lower(), form_data.password)
    return _build_auth_response(user, response)

# ──────────────────────────────────────────────────────────────────────────────
# 로그아웃 (쿠키 사용 시)
# ──────────────────────────────────────────────────────────────────────────────
@auth_router.post("/logout")
def logout(response: Response):
    response.delete_cookie("access_token", path="/")
    return {"ok": True}
