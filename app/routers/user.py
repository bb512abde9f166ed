from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.db.session import get_session
from app.dependencies.auth import get_current_user
from app.models.user import User
from app.schemas.auth import UserOut

user_router = APIRouter(tags=["user"])

# ✅ /me: 현재 로그인한 사용자 정보
@user_router.get("/me", response_model=UserOut)
def get_me(
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    user = db.get(User, UUID(user_id))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut(id=str(user.user_id), email=user.email, name=user.name)
