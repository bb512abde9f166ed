# app/core/logging_setup.py
from __future__ import annotations

import logging
import sys


class _NoiseFilter(logging.Filter):
    """
    app.* 로그는 전부, 서드파티(httpx/openai 등)는 WARNING 이상만.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(("app.", "uvicorn")):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO") -> None:
    """
    콘솔 핸들러 하나. 앱 시작 시 한 번만 호출.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # 중복 핸들러 방지 (reload / 테스트에서 여러 번 import)
    for h in list(root.handlers):
        if getattr(h, "_worklog_handler", False):
            root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch._worklog_handler = True  # type: ignore[attr-defined]
    ch.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    ch.addFilter(_NoiseFilter())
    root.addHandler(ch)

    logging.captureWarnings(True)
