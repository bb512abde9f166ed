from fastapi import APIRouter, HTTPException
from app.services.llm_service import generate_completion

router = APIRouter(prefix="/health", tags=["health"])

@router.get("/llm")
def health_llm():
    try:
        txt = generate_completion("ping", system_prompt="Answer with a single word: pong", max_tokens=5)
        if txt and "pong" in txt.lower():
            return {"ok": True}
        return {"ok": False, "detail": "unexpected_content"}
    except Exception as e:
        raise HTTPException(503, f"llm_error: {e}")
