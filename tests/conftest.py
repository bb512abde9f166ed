# tests/conftest.py
import os
import sys
import tempfile
import uuid
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

tmp_dir = tempfile.mkdtemp()
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(tmp_dir, 'test.db')}"
os.environ["ENV"] = "dev"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.db.session import create_all_tables  # noqa: E402

create_all_tables()


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def signup(client: TestClient, email: str | None = None, password: str = "secret123") -> dict:
    email = email or f"user-{uuid.uuid4().hex[:10]}@example.com"
    resp = client.post("/auth/signup", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def auth_headers(client: TestClient) -> dict:
    """테스트마다 새 사용자 → 날짜가 겹쳐도 서로 간섭 없음."""
    data = signup(client)
    return {"Authorization": f"Bearer {data['access_token']}"}


@pytest.fixture(autouse=True)
def llm_unavailable(monkeypatch):
    """
    기본값: LLM 호출은 항상 실패 (네트워크 차단). 필요한 테스트에서 다시 patch.
    """
    def _fail(*args, **kwargs):
        raise RuntimeError("LLM disabled in tests")

    monkeypatch.setattr("app.services.enrichment.generate_completion", _fail)
    monkeypatch.setattr("app.routers.worklog.generate_completion", _fail)
