# app/routers/worklog.py
import logging
import math
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query, Response
from sqlmodel import Session

from app.db.session import get_session
from app.dependencies.auth import get_current_user
from app.schemas.worklog import (
    DATE_PATTERN,
    AiSummaryRequest,
    SearchHit,
    StandupResponse,
    StatItem,
    SummaryResponse,
    TaskUpdate,
    WorkLogCreate,
    WorkLogPage,
    WorkLogRead,
    parse_day,
    search_hit,
    worklog_to_read,
)
from app.services import worklog_service as store
from app.services.enrichment import enrich_task_tags
from app.services.export import XLSX_MEDIA_TYPE, build_summary_workbook
from app.services.gap_detector import find_missing_dates
from app.services.llm_service import generate_completion
from app.services.summary import (
    NO_LOGS_SUMMARY,
    STANDUP_MAX_TOKENS,
    SUMMARY_MAX_TOKENS,
    build_standup_prompt,
    build_summary_prompt,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/worklogs", tags=["WorkLogs"])


def _day(value: str, field: str = "date") -> date:
    try:
        return parse_day(value, field)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ──────────────────────────────────────────────────────────────────────────────
# 기록 추가 (+ 백그라운드 태그 보강)

@router.post("", response_model=WorkLogRead)
def add_or_update_log(
    payload: WorkLogCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    log = store.add_task(db, UUID(current_user), _day(payload.date), payload.content)
    result = worklog_to_read(log)

    # 응답 먼저, 태그는 응답 이후 (실패해도 로그만 남음)
    new_task = result.tasks[-1]
    background_tasks.add_task(enrich_task_tags, new_task.id, new_task.content)
    return result


# ──────────────────────────────────────────────────────────────────────────────
# 조회

@router.get("", response_model=WorkLogPage)
def get_all_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    date_: Optional[str] = Query(None, alias="date", pattern=DATE_PATTERN),
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    day = _day(date_) if date_ else None
    logs, total = store.list_logs(db, UUID(current_user), page=page, limit=limit, day=day)
    return WorkLogPage(
        logs=[worklog_to_read(log) for log in logs],
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if total else 0,
    )


@router.get("/date/{date_str}", response_model=WorkLogRead)
def get_log_by_date(
    date_str: str,
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    day = _day(date_str)
    log = store.get_log_for_date(db, UUID(current_user), day)
    return worklog_to_read(log, day)


@router.get("/range", response_model=List[WorkLogRead])
def get_logs_by_range(
    from_: Optional[str] = Query(None, alias="from", pattern=DATE_PATTERN),
    to: Optional[str] = Query(None, pattern=DATE_PATTERN),
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    if not from_ or not to:
        raise HTTPException(status_code=400, detail="Both 'from' and 'to' dates are required for a range query")
    logs = store.logs_in_range(db, UUID(current_user), _day(from_, "from"), _day(to, "to"))
    return [worklog_to_read(log) for log in logs]


# ──────────────────────────────────────────────────────────────────────────────
# 수정 / 삭제

@router.put("/task/{log_id}/{task_id}", response_model=WorkLogRead)
def update_task(
    log_id: UUID,
    task_id: UUID,
    payload: TaskUpdate,
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    try:
        log = store.update_task(
            db, UUID(current_user), log_id, task_id,
            content=payload.content, tags=payload.tags,
        )
    except store.WorkLogNotFound:
        raise HTTPException(status_code=404, detail="Task not found")
    return worklog_to_read(log)


@router.delete("/task/{log_id}/{task_id}", response_model=WorkLogRead)
def delete_task(
    log_id: UUID,
    task_id: UUID,
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    try:
        log = store.delete_task(db, UUID(current_user), log_id, task_id)
    except store.WorkLogNotFound:
        raise HTTPException(status_code=404, detail="Task not found")
    return worklog_to_read(log)


# ──────────────────────────────────────────────────────────────────────────────
# 검색 / 통계 / 엑셀

@router.get("/search", response_model=List[SearchHit])
def search_logs(
    q: str = Query(""),
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    q = q.strip()
    if len(q) < 2:
        return []
    return [search_hit(task, log) for task, log in store.search_tasks(db, UUID(current_user), q)]


@router.get("/stats", response_model=List[StatItem])
def get_worklog_stats(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    return store.daily_counts(db, UUID(current_user), year or date.today().year)


@router.get("/summary")
def download_summary(
    start: Optional[str] = Query(None, pattern=DATE_PATTERN),
    end: Optional[str] = Query(None, pattern=DATE_PATTERN),
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    user_id = UUID(current_user)
    if start and end:
        logs = store.logs_in_range(db, user_id, _day(start, "start"), _day(end, "end"))
    else:
        logs = store.logs_in_range(db, user_id, date.min, date.max)

    return Response(
        content=build_summary_workbook(logs),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=worklog_summary.xlsx"},
    )


# ──────────────────────────────────────────────────────────────────────────────
# AI 요약 / 스탠드업

def _ai_summary(db: Session, user_id: UUID, start: Optional[str], end: Optional[str]) -> SummaryResponse:
    if not start or not end:
        raise HTTPException(status_code=400, detail="Start and end dates are required")
    start_day, end_day = _day(start, "start"), _day(end, "end")
    if start_day > end_day:
        raise HTTPException(status_code=400, detail="start must be on or before end")

    logs = store.logs_in_range(db, user_id, start_day, end_day)
    if not logs:
        return SummaryResponse(summary=NO_LOGS_SUMMARY)

    missing = find_missing_dates(start_day, end_day, (log.log_date for log in logs))
    prompt = build_summary_prompt(logs, missing)
    try:
        text = generate_completion(prompt, max_tokens=SUMMARY_MAX_TOKENS)
    except Exception:
        logger.exception("AI summary failed | user_id=%s %s~%s", user_id, start, end)
        raise HTTPException(status_code=502, detail="AI summary generation failed")
    return SummaryResponse(summary=text)


@router.get("/ai-summary", response_model=SummaryResponse)
def get_ai_summary(
    start: Optional[str] = Query(None, pattern=DATE_PATTERN),
    end: Optional[str] = Query(None, pattern=DATE_PATTERN),
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    return _ai_summary(db, UUID(current_user), start, end)


@router.post("/ai-summary", response_model=SummaryResponse)
def post_ai_summary(
    payload: Optional[AiSummaryRequest] = Body(None),
    start: Optional[str] = Query(None, pattern=DATE_PATTERN),
    end: Optional[str] = Query(None, pattern=DATE_PATTERN),
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    # 쿼리 우선, 없으면 바디
    body = payload or AiSummaryRequest()
    return _ai_summary(db, UUID(current_user), start or body.start, end or body.end)


@router.get("/standup", response_model=StandupResponse)
def get_standup(
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    user_id = UUID(current_user)
    today = date.today()
    current = store.get_log_for_date(db, user_id, today)
    previous = store.latest_log_before(db, user_id, today)
    if current is None and previous is None:
        return StandupResponse(standup="")

    try:
        text = generate_completion(build_standup_prompt(previous, current, today), max_tokens=STANDUP_MAX_TOKENS)
    except Exception:
        logger.exception("standup generation failed | user_id=%s", user_id)
        raise HTTPException(status_code=502, detail="Standup generation failed")
    return StandupResponse(standup=text)
