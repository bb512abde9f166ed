# app/client/tag_poller.py
"""
새로 추가한 task의 태그를 폴링으로 기다린다 (서버 push 채널 없음).

등록 직후 delay 만큼 기다렸다가 그날 task 목록을 다시 받아오고,
해당 id의 task에 태그가 생겼으면 멈춘다. 최대 max_attempts 회 (기본 3초 x 5회 ≒ 15초).
cancel 이벤트가 set 되면 다음 조회 전에 멈춘다 (화면 이탈 등).
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

POLL_DELAY_SEC = 3.0
POLL_MAX_ATTEMPTS = 5

TaskList = List[Dict[str, Any]]


@dataclass
class PollResult:
    tasks: TaskList = field(default_factory=list)  # 마지막으로 받은 서버 기준 목록
    tags: List[str] = field(default_factory=list)
    attempts: int = 0
    cancelled: bool = False

    @property
    def found(self) -> bool:
        return bool(self.tags)


def _find_task(tasks: TaskList, task_id: str) -> Optional[Dict[str, Any]]:
    return next((t for t in tasks if str(t.get("id")) == str(task_id)), None)


async def _wait(delay: float, cancel: Optional[asyncio.Event]) -> bool:
    """delay 동안 대기. 그 사이 취소되면 True."""
    if cancel is None:
        await asyncio.sleep(delay)
        return False
    try:
        await asyncio.wait_for(cancel.wait(), timeout=delay)
        return True
    except asyncio.TimeoutError:
        return False


async def poll_for_tags(
    fetch_tasks: Callable[[], Awaitable[TaskList]],
    task_id: str,
    *,
    delay: float = POLL_DELAY_SEC,
    max_attempts: int = POLL_MAX_ATTEMPTS,
    cancel: Optional[asyncio.Event] = None,
) -> PollResult:
    result = PollResult()

    while result.attempts < max_attempts:
        if await _wait(delay, cancel):
            result.cancelled = True
            break

        result.attempts += 1
        try:
            result.tasks = await fetch_tasks()
        except Exception:
            # 백그라운드 조회 실패는 다음 시도로 넘김
            logger.warning("tag poll fetch failed | task_id=%s attempt=%d", task_id, result.attempts, exc_info=True)
            continue

        task = _find_task(result.tasks, task_id)
        if task and task.get("tags"):
            result.tags = list(task["tags"])
            break

    logger.debug(
        "tag poll finished | task_id=%s attempts=%d found=%s cancelled=%s",
        task_id, result.attempts, result.found, result.cancelled,
    )
    return result
