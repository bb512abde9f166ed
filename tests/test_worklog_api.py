from datetime import date
from io import BytesIO
from uuid import uuid4

from openpyxl import load_workbook


def _add(client, headers, day, content):
    resp = client.post("/worklogs", json={"date": day, "content": content}, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_submit_appends_exactly_one_task_with_empty_tags(client, auth_headers):
    first = _add(client, auth_headers, "2024-05-01", "Fixed login bug")
    assert len(first["tasks"]) == 1
    assert first["tasks"][0]["tags"] == []
    assert first["date"] == "2024-05-01"

    second = _add(client, auth_headers, "2024-05-01", "Reviewed PR")
    assert second["id"] == first["id"]
    assert len(second["tasks"]) == 2
    assert second["tasks"][-1]["content"] == "Reviewed PR"
    assert second["tasks"][-1]["tags"] == []
    # 기존 task id 유지
    assert second["tasks"][0]["id"] == first["tasks"][0]["id"]


def test_submit_validation_errors(client, auth_headers):
    for body in (
        {"date": "2024-13-01", "content": "x"},
        {"date": "05/01/2024", "content": "x"},
        {"date": "2024-05-01", "content": "   "},
        {"content": "missing date"},
    ):
        resp = client.post("/worklogs", json=body, headers=auth_headers)
        assert resp.status_code == 400, body
        assert "Validation failed" in resp.json()["detail"]


def test_get_by_date_placeholder_when_empty(client, auth_headers):
    resp = client.get("/worklogs/date/2024-02-29", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] is None
    assert data["tasks"] == []

    assert client.get("/worklogs/date/2024-02-30", headers=auth_headers).status_code == 400
    # ISO 주차/붙여쓴 형식은 거부
    for bad in ("2024-W18-3", "20240501", "2024-5-1"):
        assert client.get(f"/worklogs/date/{bad}", headers=auth_headers).status_code == 400, bad


def test_logs_are_private_per_user(client, auth_headers):
    from conftest import signup

    _add(client, auth_headers, "2024-05-01", "mine")
    other = {"Authorization": f"Bearer {signup(client)['access_token']}"}
    assert client.get("/worklogs/date/2024-05-01", headers=other).json()["tasks"] == []


def test_range_and_pagination(client, auth_headers):
    for day in ("2024-04-01", "2024-04-03", "2024-04-05"):
        _add(client, auth_headers, day, f"work on {day}")

    resp = client.get("/worklogs/range", params={"from": "2024-04-02", "to": "2024-04-05"}, headers=auth_headers)
    assert resp.status_code == 200
    assert [log["date"] for log in resp.json()] == ["2024-04-03", "2024-04-05"]

    assert client.get("/worklogs/range", params={"from": "2024-04-02"}, headers=auth_headers).status_code == 400

    page = client.get("/worklogs", params={"page": 1, "limit": 2}, headers=auth_headers).json()
    assert page["total"] == 3
    assert page["total_pages"] == 2
    assert [log["date"] for log in page["logs"]] == ["2024-04-05", "2024-04-03"]

    only = client.get("/worklogs", params={"date": "2024-04-01"}, headers=auth_headers).json()
    assert [log["date"] for log in only["logs"]] == ["2024-04-01"]


def test_update_task(client, auth_headers):
    log = _add(client, auth_headers, "2024-06-01", "draft")
    task_id = log["tasks"][0]["id"]

    resp = client.put(
        f"/worklogs/task/{log['id']}/{task_id}",
        json={"content": "final", "tags": ["Docs", " Docs ", ""]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    task = resp.json()["tasks"][0]
    assert task["content"] == "final"
    assert task["tags"] == ["Docs"]

    # 다른 사용자 로그는 404
    from conftest import signup
    other = {"Authorization": f"Bearer {signup(client)['access_token']}"}
    resp = client.put(f"/worklogs/task/{log['id']}/{task_id}", json={"content": "hijack"}, headers=other)
    assert resp.status_code == 404


def test_deleting_last_task_deletes_log(client, auth_headers):
    log = _add(client, auth_headers, "2024-06-02", "one")
    log = _add(client, auth_headers, "2024-06-02", "two")
    first_id, second_id = (t["id"] for t in log["tasks"])

    resp = client.delete(f"/worklogs/task/{log['id']}/{first_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()["tasks"]] == [second_id]

    resp = client.delete(f"/worklogs/task/{log['id']}/{second_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["id"] is None

    assert client.get("/worklogs/date/2024-06-02", headers=auth_headers).json()["id"] is None
    assert client.delete(f"/worklogs/task/{log['id']}/{second_id}", headers=auth_headers).status_code == 404


def test_search(client, auth_headers):
    _add(client, auth_headers, "2024-07-01", "Fixed Login bug")
    _add(client, auth_headers, "2024-07-02", "Wrote 100% coverage report")

    hits = client.get("/worklogs/search", params={"q": "login"}, headers=auth_headers).json()
    assert [h["content"] for h in hits] == ["Fixed Login bug"]
    assert hits[0]["date"] == "2024-07-01"

    assert client.get("/worklogs/search", params={"q": "%"}, headers=auth_headers).json() == []
    hits = client.get("/worklogs/search", params={"q": "0%"}, headers=auth_headers).json()
    assert [h["content"] for h in hits] == ["Wrote 100% coverage report"]


def test_search_matches_tag_elements(client, auth_headers):
    def tagged(day, content, tags):
        log = _add(client, auth_headers, day, content)
        task_id = log["tasks"][-1]["id"]
        resp = client.put(f"/worklogs/task/{log['id']}/{task_id}", json={"content": content, "tags": tags}, headers=auth_headers)
        assert resp.status_code == 200

    tagged("2024-07-03", "alpha", ["버그수정"])
    tagged("2024-07-04", "beta", ["Frontend", "Review"])

    hits = client.get("/worklogs/search", params={"q": "버그"}, headers=auth_headers).json()
    assert [h["content"] for h in hits] == ["alpha"]
    assert hits[0]["tags"] == ["버그수정"]

    hits = client.get("/worklogs/search", params={"q": "front"}, headers=auth_headers).json()
    assert [h["content"] for h in hits] == ["beta"]

    # JSON 구분자는 태그 내용이 아님
    assert client.get("/worklogs/search", params={"q": "\", "}, headers=auth_headers).json() == []


def test_stats_levels(client, auth_headers):
    today = date.today().isoformat()
    for i in range(3):
        _add(client, auth_headers, today, f"task {i}")

    stats = client.get("/worklogs/stats", headers=auth_headers).json()
    assert stats == [{"date": today, "count": 3, "level": 2}]


def test_excel_export(client, auth_headers):
    _add(client, auth_headers, "2024-08-01", "Ship release")
    _add(client, auth_headers, "2024-08-01", "Write notes")

    resp = client.get("/worklogs/summary", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    ws = load_workbook(BytesIO(resp.content)).active
    assert ws.title == "Work Log Summary"
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0] == ("Date", "Tasks", "Tags")
    assert rows[1][:2] == ("2024-08-01", "Ship release, Write notes")


def test_ai_summary_mentions_missing_days(client, auth_headers, monkeypatch):
    prompts = []

    def fake_completion(prompt, **kwargs):
        prompts.append(prompt)
        return "A productive week."

    monkeypatch.setattr("app.routers.worklog.generate_completion", fake_completion)
    _add(client, auth_headers, "2024-05-01", "Fixed login bug")
    _add(client, auth_headers, "2024-05-03", "Deployed hotfix")

    resp = client.get(
        "/worklogs/ai-summary", params={"start": "2024-05-01", "end": "2024-05-03"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {"summary": "A productive week."}
    assert "Days with no recorded work: 2024-05-02" in prompts[0]
    assert "Fixed login bug" in prompts[0]

    # POST 바디도 지원
    resp = client.post(
        "/worklogs/ai-summary", json={"start": "2024-05-01", "end": "2024-05-01"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert "Days with no recorded work: none" in prompts[1]


def test_ai_summary_errors(client, auth_headers):
    assert client.get("/worklogs/ai-summary", params={"start": "2024-05-01"}, headers=auth_headers).status_code == 400
    resp = client.get(
        "/worklogs/ai-summary", params={"start": "2024-05-03", "end": "2024-05-01"}, headers=auth_headers
    )
    assert resp.status_code == 400

    # 로그가 없으면 LLM 호출 없이 안내 문구
    resp = client.get(
        "/worklogs/ai-summary", params={"start": "2023-01-01", "end": "2023-01-07"}, headers=auth_headers
    )
    assert resp.json() == {"summary": "No logs found for the selected date range."}

    # LLM 실패는 호출자에게 그대로 실패로 전달
    _add(client, auth_headers, "2023-01-02", "something")
    resp = client.get(
        "/worklogs/ai-summary", params={"start": "2023-01-01", "end": "2023-01-07"}, headers=auth_headers
    )
    assert resp.status_code == 502


def test_standup(client, auth_headers, monkeypatch):
    assert client.get("/worklogs/standup", headers=auth_headers).json() == {"standup": ""}

    prompts = []

    def fake_completion(prompt, **kwargs):
        prompts.append(prompt)
        return "Yesterday: ...\nToday: ...\nBlockers: None"

    monkeypatch.setattr("app.routers.worklog.generate_completion", fake_completion)
    _add(client, auth_headers, "2024-01-10", "Paired on search")
    _add(client, auth_headers, date.today().isoformat(), "Writing tests")

    resp = client.get("/worklogs/standup", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["standup"].startswith("Yesterday")
    assert "Paired on search" in prompts[0]
    assert "Writing tests" in prompts[0]


def test_timestamps_are_timezone_aware(client):
    from conftest import signup

    from app.models.user import User
    from app.models.worklog import Task, WorkLog

    for model, cols in ((User, ("created_at",)), (WorkLog, ("created_at", "updated_at")), (Task, ("created_at",))):
        for col in cols:
            assert model.__table__.c[col].type.timezone is True, f"{model.__name__}.{col}"
    assert WorkLog(user_id=uuid4(), log_date=date(2024, 1, 1)).created_at.tzinfo is not None

    # 가입 → 등록 → 수정까지 DB 쓰기가 모두 통과해야 함
    headers = {"Authorization": f"Bearer {signup(client)['access_token']}"}
    log = _add(client, headers, "2024-01-02", "first")
    task_id = log["tasks"][0]["id"]
    resp = client.put(f"/worklogs/task/{log['id']}/{task_id}", json={"content": "edited"}, headers=headers)
    assert resp.status_code == 200
    assert len(_add(client, headers, "2024-01-02", "second")["tasks"]) == 2
