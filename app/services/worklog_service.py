# app/services/worklog_service.py
"""
WorkLog/Task 저장소 조작 모음. 라우터와 백그라운드 태그 보강이 같이 쓴다.

모든 함수는 호출자가 넘긴 세션을 쓰고, 변경 함수는 직접 commit 한다.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.user import utcnow
from app.models.worklog import Task, WorkLog

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


class WorkLogNotFound(LookupError):
    pass


def _clean_tags(tags: Iterable[str]) -> List[str]:
    # 순서 유지 + 중복/공백 제거
    out: List[str] = []
    for t in tags:
        t = (t or "").strip()
        if t and t not in out:
            out.append(t)
    return out


# ─────────────────────────────────────────────────────────────
# 조회

def get_log_for_date(db: Session, user_id: UUID, day: date) -> Optional[WorkLog]:
    stmt = select(WorkLog).where(WorkLog.user_id == user_id, WorkLog.log_date == day)
    return db.exec(stmt).first()


def get_owned_log(db: Session, user_id: UUID, log_id: UUID) -> WorkLog:
    log = db.get(WorkLog, log_id)
    if not log or log.user_id != user_id:
        raise WorkLogNotFound(f"worklog {log_id} not found")
    return log


def logs_in_range(db: Session, user_id: UUID, start: date, end: date) -> List[WorkLog]:
    stmt = (
        select(WorkLog)
        .where(WorkLog.user_id == user_id, WorkLog.log_date >= start, WorkLog.log_date <= end)
        .order_by(WorkLog.log_date)
    )
    return list(db.exec(stmt).all())


def list_logs(
    db: Session,
    user_id: UUID,
    *,
    page: int = 1,
    limit: int = 10,
    day: Optional[date] = None,
) -> Tuple[List[WorkLog], int]:
    stmt = select(WorkLog).where(WorkLog.user_id == user_id)
    if day is not None:
        stmt = stmt.where(WorkLog.log_date == day)

    total = db.exec(select(func.count()).select_from(stmt.subquery())).one()
    logs = db.exec(
        stmt.order_by(WorkLog.log_date.desc()).offset((page - 1) * limit).limit(limit)
    ).all()
    return list(logs), total


def latest_log_before(db: Session, user_id: UUID, day: date) -> Optional[WorkLog]:
    stmt = (
        select(WorkLog)
        .where(WorkLog.user_id == user_id, WorkLog.log_date < day)
        .order_by(WorkLog.log_date.desc())
        .limit(1)
    )
    return db.exec(stmt).first()


# ─────────────────────────────────────────────────────────────
# 변경

def add_task(db: Session, user_id: UUID, day: date, content: str) -> WorkLog:
    """
    그날 WorkLog를 upsert하고 태그가 빈 Task를 뒤에 붙인다. commit 후 전체 로그 반환.
    """
    log = get_log_for_date(db, user_id, day)
    if log is None:
        log = WorkLog(user_id=user_id, log_date=day)
        db.add(log)
        try:
            db.flush()
        except IntegrityError:
            # 같은 (user, date) 첫 등록이 동시에 들어온 경우 → 먼저 생긴 행 사용
            db.rollback()
            log = get_log_for_date(db, user_id, day)
            if log is None:
                raise

    next_position = max((t.position for t in log.tasks), default=-1) + 1
    log.tasks.append(Task(content=content, tags=[], position=next_position))
    log.updated_at = utcnow()
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


def patch_task_tags(db: Session, task_id: UUID, tags: List[str]) -> bool:
    """
    task id만으로 찾아서 tags만 덮어쓴다 (content는 건드리지 않음). 같은 값으로 여러 번 호출해도 결과 동일.
    task가 이미 삭제됐으면 False.
    """
    task = db.get(Task, task_id)
    if task is None:
        return False
    task.tags = list(tags)
    db.add(task)
    db.commit()
    return True


def update_task(
    db: Session,
    user_id: UUID,
    log_id: UUID,
    task_id: UUID,
    *,
    content: str,
    tags: Optional[List[str]] = None,
) -> WorkLog:
    log = get_owned_log(db, user_id, log_id)
    task = next((t for t in log.tasks if t.id == task_id), None)
    if task is None:
        raise WorkLogNotFound(f"task {task_id} not found")

    task.content = content
    if tags is not None:
        task.tags = _clean_tags(tags)
    log.updated_at = utcnow()
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


def delete_task(db: Session, user_id: UUID, log_id: UUID, task_id: UUID) -> Optional[WorkLog]:
    """
    마지막 task를 지우면 WorkLog 자체를 삭제하고 None 반환.
    """
    log = get_owned_log(db, user_id, log_id)
    task = next((t for t in log.tasks if t.id == task_id), None)
    if task is None:
        raise WorkLogNotFound(f"task {task_id} not found")

    log.tasks.remove(task)
    if not log.tasks:
        db.delete(log)
        db.commit()
        return None

    log.updated_at = utcnow()
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


# ─────────────────────────────────────────────────────────────
# 검색 / 통계

def _matches(task: Task, needle: str) -> bool:
    # 태그는 JSON 문자열이 아니라 원소 단위로 비교
    if needle in (task.content or "").casefold():
        return True
    return any(needle in (t or "").casefold() for t in (task.tags or []))


def search_tasks(db: Session, user_id: UUID, q: str, limit: int = SEARCH_LIMIT) -> List[Tuple[Task, WorkLog]]:
    needle = q.casefold()
    stmt = (
        select(Task, WorkLog)
        .join(WorkLog, Task.worklog_id == WorkLog.id)
        .where(WorkLog.user_id == user_id)
        .order_by(WorkLog.log_date.desc(), Task.position.desc())
    )
    hits: List[Tuple[Task, WorkLog]] = []
    for task, log in db.exec(stmt):
        if _matches(task, needle):
            hits.append((task, log))
            if len(hits) >= limit:
                break
    return hits


def activity_level(count: int) -> int:
    # 0 / 1-2 / 3-4 / 5-6 / 7+
    if count <= 0:
        return 0
    return min(4, (count + 1) // 2)


def daily_counts(db: Session, user_id: UUID, year: int) -> List[dict]:
    stmt = (
        select(WorkLog.log_date, func.count(Task.id))
        .join(Task, Task.worklog_id == WorkLog.id)
        .where(
            WorkLog.user_id == user_id,
            WorkLog.log_date >= date(year, 1, 1),
            WorkLog.log_date <= date(year, 12, 31),
        )
        .group_by(WorkLog.log_date)
        .order_by(WorkLog.log_date)
    )
    return [
        {"date": d.isoformat(), "count": c, "level": activity_level(c)}
        for d, c in db.exec(stmt).all()
    ]


# ─────────────────────────────────────────────────────────────
# 태그 관리

def _user_tasks_with_tag(db: Session, user_id: UUID, tag: Optional[str] = None) -> List[Task]:
    stmt = select(Task).join(WorkLog, Task.worklog_id == WorkLog.id).where(WorkLog.user_id == user_id)
    tasks = db.exec(stmt).all()
    if tag is None:
        return list(tasks)
    return [t for t in tasks if tag in (t.tags or [])]


def tag_counts(db: Session, user_id: UUID) -> List[dict]:
    counter: Counter = Counter()
    for task in _user_tasks_with_tag(db, user_id):
        counter.update(set(task.tags or []))
    ordered = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return [{"tag": tag, "count": count} for tag, count in ordered]


def rename_tag(db: Session, user_id: UUID, old_tag: str, new_tag: str) -> int:
    tasks = _user_tasks_with_tag(db, user_id, old_tag)
    for task in tasks:
        task.tags = _clean_tags(new_tag if t == old_tag else t for t in task.tags)
        db.add(task)
    db.commit()
    logger.info("tag renamed | user_id=%s %r→%r tasks=%d", user_id, old_tag, new_tag, len(tasks))
    return len(tasks)


def delete_tag(db: Session, user_id: UUID, tag: str) -> int:
    tasks = _user_tasks_with_tag(db, user_id, tag)
    for task in tasks:
        task.tags = [t for t in task.tags if t != tag]
        db.add(task)
    db.commit()
    logger.info("tag deleted | user_id=%s %r tasks=%d", user_id, tag, len(tasks))
    return len(tasks)
