from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    # DB에는 항상 tz-aware UTC로 기록
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    user_id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: Optional[str] = None
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
