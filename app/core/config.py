# app/core/config.py
import os
import logging

from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)


def _float_or_none(raw: str | None) -> float | None:
    # 빈 문자열/잘못된 값은 None (모델 기본값 사용)
    try:
        return float(raw) if raw not in (None, "") else None
    except ValueError:
        return None


class Settings:
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # ── 인증
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

    # ── LLM (Hugging Face router, OpenAI 호환)
    LLM_API_KEY: str = os.getenv("LLM_API_KEY") or os.getenv("HF_ACCESS_TOKEN", "")
    LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://router.huggingface.co/v1")
    LLM_MODEL: str = os.getenv("LLM_MODEL") or os.getenv("HF_MODEL_ID", "meta-llama/Meta-Llama-3-8B-Instruct")
    LLM_TIMEOUT_SEC: float = float(os.getenv("LLM_TIMEOUT_SEC", "30"))
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "512"))
    LLM_TEMPERATURE: float | None = _float_or_none(os.getenv("LLM_TEMPERATURE", "0.7"))

    # ── CORS
    FRONTEND_ORIGIN: str = os.getenv("FRONTEND_ORIGIN", "")

    _dev_secret_warned: bool = False

    @property
    def is_dev(self) -> bool:
        return self.ENV == "dev"

    def jwt_secret(self) -> str:
        if self.JWT_SECRET_KEY:
            return self.JWT_SECRET_KEY
        if not self.is_dev:
            raise RuntimeError("JWT_SECRET_KEY 미설정 (.env 확인 필요)")
        if not self._dev_secret_warned:
            log.warning("JWT_SECRET_KEY not set; using insecure dev secret")
            self._dev_secret_warned = True
        return "dev-insecure-secret"


settings = Settings()
