# app/client/worklog_client.py
from __future__ import annotations

import asyncio
from datetime import date
from typing import Any, Dict, Optional

import httpx

from app.client.tag_poller import POLL_DELAY_SEC, POLL_MAX_ATTEMPTS, PollResult, poll_for_tags


class WorkLogClient:
    """
    WorkLog REST API용 얇은 비동기 클라이언트.

    transport를 넘기면 (예: httpx.ASGITransport(app)) 실제 네트워크 없이 쓸 수 있다.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "WorkLogClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def add_task(self, day: date, content: str) -> Dict[str, Any]:
        r = await self._http.post("/worklogs", json={"date": day.isoformat(), "content": content})
        r.raise_for_status()
        return r.json()

    async def get_by_date(self, day: date) -> Dict[str, Any]:
        r = await self._http.get(f"/worklogs/date/{day.isoformat()}")
        r.raise_for_status()
        return r.json()

    async def add_task_and_wait_for_tags(
        self,
        day: date,
        content: str,
        *,
        delay: float = POLL_DELAY_SEC,
        max_attempts: int = POLL_MAX_ATTEMPTS,
        cancel: Optional[asyncio.Event] = None,
    ) -> PollResult:
        log = await self.add_task(day, content)
        tasks = log.get("tasks") or []
        if not tasks:
            return PollResult()
        new_task_id = tasks[-1]["id"]

        async def _fetch():
            return (await self.get_by_date(day)).get("tasks") or []

        result = await poll_for_tags(_fetch, new_task_id, delay=delay, max_attempts=max_attempts, cancel=cancel)
        if not result.tasks:
            result.tasks = tasks
        return result
