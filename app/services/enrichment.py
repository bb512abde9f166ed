# app/services/enrichment.py
"""
태스크 태그 자동 생성 (백그라운드).

POST /worklogs 응답이 나간 뒤 BackgroundTasks로 실행된다.
원 요청은 이미 성공했으므로 여기서 나는 모든 실패는 로그로만 남긴다.
"""
from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from app.core.prompt_loader import get_tag_prompt
from app.db.session import session_scope
from app.services.llm_service import generate_completion
from app.services.worklog_service import patch_task_tags

logger = logging.getLogger(__name__)

TAG_MAX_TOKENS = 30
TAG_MARKER = "#"


def extract_tags(raw: str) -> List[str]:
    """
    "#BugFix, #Frontend" → ["BugFix", "Frontend"]
    콤마 분리 → 공백/선행 '#' 제거 → 빈 조각 버림.
    """
    tags: List[str] = []
    for piece in (raw or "").split(","):
        piece = piece.strip()
        if piece.startswith(TAG_MARKER):
            piece = piece[len(TAG_MARKER):].strip()
        if piece:
            tags.append(piece)
    return tags


def enrich_task_tags(task_id: UUID, content: str) -> List[str]:
    """
    LLM으로 태그를 뽑아 task에 패치. 반환값은 저장한 태그(실패/0개면 []).
    재시도는 없음 (클라이언트 폴러가 일정 횟수까지만 다시 조회한다).
    """
    try:
        raw = generate_completion(
            get_tag_prompt().format(content=content),
            max_tokens=TAG_MAX_TOKENS,
        )
    except Exception:
        logger.warning("tag enrichment: LLM call failed | task_id=%s", task_id, exc_info=True)
        return []

    tags = extract_tags(raw)
    if not tags:
        logger.info("tag enrichment: no usable tags | task_id=%s raw=%r", task_id, raw[:80])
        return []

    try:
        with session_scope() as db:
            if not patch_task_tags(db, task_id, tags):
                # 응답 이후 사용자가 삭제한 경우
                logger.info("tag enrichment: task gone, skip | task_id=%s", task_id)
                return []
    except Exception:
        logger.exception("tag enrichment: DB patch failed | task_id=%s", task_id)
        return []

    logger.info("tag enrichment: done | task_id=%s tags=%s", task_id, tags)
    return tags
