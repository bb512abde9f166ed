from pathlib import Path
import logging
from functools import lru_cache
import os

# ─────────────────────────────
# 환경 설정 (DEBUG 여부)
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# ─────────────────────────────
# 프롬프트 경로 설정
BASE_DIR = Path(__file__).resolve().parent.parent.parent
PROMPT_DIR = BASE_DIR / "resources"

FALLBACK_TAG_PROMPT = (
    "Generate 1 to 3 short tags (single words or short phrases) that categorize "
    "the following work task. Reply with the tags only, separated by commas, "
    "each prefixed with '#'.\n\nTask: {content}\n\nTags:"
)

FALLBACK_SUMMARY_PROMPT = (
    "Summarize the following work logs into a concise weekly report highlighting "
    "key achievements and progress.\n\n{logs}\n\n"
    "Days with no recorded work: {missing}\n"
    "Mention those days explicitly in the report.\n\nSummary:"
)

FALLBACK_STANDUP_PROMPT = (
    "Write a short daily standup update with three sections: Yesterday, Today, "
    "Blockers. Use bullet points and keep it under 120 words. If a section has no "
    "entries, write 'Nothing logged'.\n\n"
    "Yesterday ({yesterday_date}):\n{yesterday}\n\n"
    "Today ({today_date}):\n{today}\n\nStandup:"
)

def _load(path: Path, fallback: str) -> str:
    try:
        txt = path.read_text(encoding="utf-8")
        if DEBUG:
            logging.info(f"[PromptLoader] ✅ prompt loaded from '{path}'.")
        return txt.strip()
    except FileNotFoundError:
        logging.warning(
            f"[PromptLoader] ⚠️ '{path}' not found. Using fallback prompt.")
        return fallback

@lru_cache(maxsize=1)
def get_tag_prompt() -> str:
    return _load(PROMPT_DIR / "tag_prompt.txt", FALLBACK_TAG_PROMPT)

@lru_cache(maxsize=1)
def get_summary_prompt() -> str:
    return _load(PROMPT_DIR / "summary_prompt.txt", FALLBACK_SUMMARY_PROMPT)

@lru_cache(maxsize=1)
def get_standup_prompt() -> str:
    return _load(PROMPT_DIR / "standup_prompt.txt", FALLBACK_STANDUP_PROMPT)
