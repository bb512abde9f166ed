# app/schemas/worklog.py
import datetime as dt
import re
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.worklog import Task, WorkLog

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def parse_day(value: str, field: str = "date") -> dt.date:
    """'YYYY-MM-DD' → date. 형식/달력 오류면 ValueError.

    fromisoformat은 20240501, 2024-W18-3 같은 형식도 받아주므로 패턴을 먼저 확인한다.
    """
    if not isinstance(value, str) or not re.fullmatch(DATE_PATTERN, value):
        raise ValueError(f"{field} must be a valid YYYY-MM-DD date")
    try:
        return dt.date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a valid YYYY-MM-DD date")


# ── task 추가 요청 ─────────────────────────────────────────────
class WorkLogCreate(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    content: str

    @field_validator("date")
    @classmethod
    def _valid_day(cls, v: str) -> str:
        parse_day(v)
        return v

    @field_validator("content")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Content cannot be empty")
        return v


# ── task 수정 요청 ─────────────────────────────────────────────
class TaskUpdate(BaseModel):
    content: str
    tags: Optional[List[str]] = None

    @field_validator("content")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Content cannot be empty")
        return v


# ── AI 요약 요청 (POST 바디) ───────────────────────────────────
class AiSummaryRequest(BaseModel):
    start: Optional[str] = Field(None, pattern=DATE_PATTERN)
    end: Optional[str] = Field(None, pattern=DATE_PATTERN)


# ── 응답 ──────────────────────────────────────────────────────
class TaskRead(BaseModel):
    id: UUID
    content: str
    tags: List[str] = []
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class WorkLogRead(BaseModel):
    # 해당 날짜 기록이 없으면 id=None, tasks=[] 자리표시
    id: Optional[UUID] = None
    date: Optional[dt.date] = None
    tasks: List[TaskRead] = []
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class WorkLogPage(BaseModel):
    logs: List[WorkLogRead]
    page: int
    limit: int
    total: int
    total_pages: int


class SearchHit(BaseModel):
    task_id: UUID
    log_id: UUID
    date: dt.date
    content: str
    tags: List[str]
    created_at: dt.datetime


class StatItem(BaseModel):
    date: str
    count: int
    level: int


class SummaryResponse(BaseModel):
    summary: str


class StandupResponse(BaseModel):
    standup: str


def worklog_to_read(log: Optional[WorkLog], day: Optional[dt.date] = None) -> WorkLogRead:
    if log is None:
        return WorkLogRead(date=day)
    return WorkLogRead(
        id=log.id,
        date=log.log_date,
        tasks=[TaskRead.model_validate(t) for t in log.tasks],
        created_at=log.created_at,
        updated_at=log.updated_at,
    )


def search_hit(task: Task, log: WorkLog) -> SearchHit:
    return SearchHit(
        task_id=task.id,
        log_id=log.id,
        date=log.log_date,
        content=task.content,
        tags=list(task.tags or []),
        created_at=task.created_at,
    )
