# app/main.py
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import text

from app.core.config import settings
from app.core.logging_setup import setup_logging
from app.db.session import engine, create_all_tables
from app.routers import auth, user, worklog, tags, health_llm

setup_logging(settings.LOG_LEVEL)

# 운영에서 JWT 키 없으면 기동 단계에서 실패
settings.jwt_secret()

logger = logging.getLogger(__name__)

app = FastAPI(title="WorkLog Backend", version="0.1.0")


# 콤마/공백 구분 FRONTEND_ORIGIN. 비어 있으면 "*" + credentials 비활성
def _parse_origins(env_value: str) -> list[str]:
    origins: list[str] = []
    for chunk in (env_value or "").split(","):
        for o in chunk.split():
            o = o.rstrip("/")
            if o and o not in origins:
                origins.append(o)
    return origins

_frontend_origins = _parse_origins(settings.FRONTEND_ORIGIN)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_frontend_origins or ["*"],
    allow_credentials=bool(_frontend_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── 에러 핸들러 ───────────────────────────────────────────────
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        messages.append(f"{loc or 'field'}: {err.get('msg')}")
    return JSONResponse(status_code=400, content={"detail": f"Validation failed. {', '.join(messages)}"})


@app.exception_handler(SQLAlchemyError)
async def db_exception_handler(request: Request, exc: SQLAlchemyError):
    # 내부 상세는 로그에 남기고, 외부엔 일반화된 메시지
    logger.error("DB error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


app.include_router(auth.auth_router)
app.include_router(user.user_router)
app.include_router(worklog.router)
app.include_router(tags.router)
app.include_router(health_llm.router)


@app.get("/", include_in_schema=False)
def root():
    return {"status": "ok", "message": "API is running..."}


@app.get("/health/db")
def health_db():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception:
        logger.exception("DB health check failed")
        raise HTTPException(status_code=500, detail="Database connection failed")

if settings.is_dev:
    create_all_tables()
