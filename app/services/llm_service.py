# app/services/llm_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI, BadRequestError

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[OpenAI] = None


def _client_singleton() -> OpenAI:
    global _client
    if _client is None:
        # Hugging Face router는 OpenAI 호환 엔드포인트
        _client = OpenAI(
            base_url=settings.LLM_BASE_URL,
            api_key=settings.LLM_API_KEY or None,
            timeout=settings.LLM_TIMEOUT_SEC,
            max_retries=1,
        )
    return _client


# ===== Model / Param helpers =====

def _is_reasoning_model(model: str) -> bool:
    """
    reasoning 계열은 temperature/top_p 미지원.
    """
    m = (model or "").lower()
    return m.startswith(("o1", "o3", "gpt-5")) or "reason" in m


def _build_messages(system_prompt: str | None, user_prompt: str) -> List[Dict[str, str]]:
    msgs: List[Dict[str, str]] = []
    if system_prompt:
        msgs.append({"role": "system", "content": system_prompt})
    msgs.append({"role": "user", "content": user_prompt})
    return msgs


def _normalize_for_model(params: Dict[str, Any], model: str) -> Dict[str, Any]:
    p = dict(params)
    if _is_reasoning_model(model) or p.get("temperature") is None:
        p.pop("temperature", None)
    if p.get("max_tokens") is None:
        p.pop("max_tokens", None)
    return p


# ===== Public API =====

def generate_completion(
    prompt: str,
    *,
    system_prompt: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    model: str | None = None,
) -> str:
    """
    단발(비스트림) 텍스트 생성.
    파라미터 오류(BadRequest)면 최소 파라미터로 한 번 더 시도하고, 그 외 실패는 그대로 raise.
    """
    client = _client_singleton()
    m = model or settings.LLM_MODEL
    messages = _build_messages(system_prompt, prompt)

    base_params = {
        "model": m,
        "messages": messages,
        "temperature": temperature if temperature is not None else settings.LLM_TEMPERATURE,
        "max_tokens": max_tokens if max_tokens is not None else settings.LLM_MAX_TOKENS,
    }
    try:
        comp = client.chat.completions.create(**_normalize_for_model(base_params, m))
        return (comp.choices[0].message.content or "").strip()
    except BadRequestError as e:
        logger.warning("Chat create retry minimal: %s", _safe_err(e))
        try:
            comp = client.chat.completions.create(model=m, messages=messages)
            return (comp.choices[0].message.content or "").strip()
        except Exception as e2:
            logger.error("Chat create failed: %s", _safe_err(e2))
            raise
    except Exception as e:
        logger.error("Chat create failed: %s", _safe_err(e))
        raise


def _safe_err(e: Exception) -> str:
    msg = getattr(e, "message", None) or str(e)
    body = getattr(e, "body", None)
    return f"{msg} | {body}" if body else msg
