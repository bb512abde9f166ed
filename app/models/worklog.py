# app/models/worklog.py
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from app.models.user import utcnow


# 1. 하루치 업무 기록 (user, 날짜)당 1개
class WorkLog(SQLModel, table=True):
    __tablename__ = "worklog"
    __table_args__ = (UniqueConstraint("user_id", "log_date", name="uq_worklog_user_date"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.user_id", index=True)
    log_date: date = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    tasks: List["Task"] = Relationship(
        back_populates="worklog",
        sa_relationship_kwargs={
            "order_by": "Task.position",
            "cascade": "all, delete-orphan",
        },
    )


# 2. 개별 업무 항목. id는 전역 유일(uuid4) → 백그라운드 태그 패치가 id만으로 찾아감
class Task(SQLModel, table=True):
    __tablename__ = "task"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    worklog_id: UUID = Field(foreign_key="worklog.id", index=True)
    content: str
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    position: int = 0
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    worklog: Optional[WorkLog] = Relationship(back_populates="tasks")
