# app/services/summary.py
from datetime import date
from typing import List, Optional, Sequence

from app.core.prompt_loader import get_standup_prompt, get_summary_prompt
from app.models.worklog import WorkLog

NO_LOGS_SUMMARY = "No logs found for the selected date range."
SUMMARY_MAX_TOKENS = 512
STANDUP_MAX_TOKENS = 300


def _logs_block(logs: Sequence[WorkLog]) -> str:
    return "\n\n".join(
        f"Date: {log.log_date.isoformat()}\nTasks: {', '.join(t.content for t in log.tasks)}"
        for log in logs
    )


def build_summary_prompt(logs: Sequence[WorkLog], missing_dates: List[str]) -> str:
    missing = ", ".join(missing_dates) if missing_dates else "none"
    return get_summary_prompt().format(logs=_logs_block(logs), missing=missing)


def _bullets(log: Optional[WorkLog]) -> str:
    if log is None or not log.tasks:
        return "- Nothing logged"
    return "\n".join(f"- {t.content}" for t in log.tasks)


def build_standup_prompt(previous: Optional[WorkLog], current: Optional[WorkLog], today: date) -> str:
    return get_standup_prompt().format(
        yesterday_date=previous.log_date.isoformat() if previous else "n/a",
        yesterday=_bullets(previous),
        today_date=today.isoformat(),
        today=_bullets(current),
    )
