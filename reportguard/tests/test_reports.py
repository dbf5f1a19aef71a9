"""
Tests for the Reports routes:
- POST /reports outcomes (missing parameters, duplicate, self-report, success, internal error)
- Cascade effects visible through the HTTP boundary
- Ledger reads for moderators
"""

import pytest
from fastapi.testclient import TestClient

from reportguard.config import get_settings
from reportguard.errors import StoreUnavailable
from reportguard.main import app
from reportguard.reports import schemas
from reportguard.storage.documents import JsonDocumentStore

client = TestClient(app)


# --- Fixtures ---
@pytest.fixture
def api_settings(make_settings):
    settings = make_settings(item_block_threshold=2, profile_block_threshold=1, account_block_threshold=1)
    app.dependency_overrides[get_settings] = lambda: settings
    yield settings
    app.dependency_overrides.clear()


@pytest.fixture
def api_store(api_settings, seed):
    seed(profiles=2)
    return JsonDocumentStore(api_settings.data_dir)


def _report(post_id="acc1-p0-post0", reporter_id="u1", reason="spam"):
    return client.post("/reports/", json={"postId": post_id, "reporterId": reporter_id, "reason": reason})


# --- Tests ---
def test_submit_report_success(api_store):
    """POST /reports → first valid report is accepted and counted."""
    response = _report()
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": schemas.REPORT_SUBMITTED}
    assert api_store.get("posts", "acc1-p0-post0")["report_count"] == 1


@pytest.mark.parametrize("body", [
    {"postId": "acc1-p0-post0", "reporterId": "u1"},
    {"postId": "", "reporterId": "u1", "reason": "spam"},
    {"postId": "acc1-p0-post0", "reporterId": "   ", "reason": "spam"},
    {"postId": 42, "reporterId": "u1", "reason": "spam"},
])
def test_submit_report_missing_parameters(api_store, body):
    """POST /reports → incomplete payloads are rejected without touching the store."""
    response = client.post("/reports/", json=body)
    assert response.status_code == 200
    assert response.json() == {"success": False, "message": schemas.MISSING_PARAMETERS}
    assert api_store.list("reports").total == 0


@pytest.mark.parametrize("raw", [b"", b"not json", b"[1, 2, 3]", b'"text"'])
def test_submit_report_malformed_body(api_store, raw):
    response = client.post("/reports/", content=raw, headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    assert response.json()["message"] == schemas.MISSING_PARAMETERS


@pytest.mark.parametrize("raw", [
    b"[" * 100000 + b"]" * 100000,
    b'{"a":' * 100000 + b"1" + b"}" * 100000,
])
def test_submit_report_deeply_nested_body(api_store, raw):
    """POST /reports → a body too deep to decode still gets a structured answer."""
    response = client.post("/reports/", content=raw, headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    assert response.json() == {"success": False, "message": schemas.MISSING_PARAMETERS}
    assert api_store.list("reports").total == 0


def test_submit_report_unreadable_body_is_internal_error(api_store, monkeypatch):
    async def broken_body(self):
        raise RuntimeError("client disconnected")

    monkeypatch.setattr("starlette.requests.Request.body", broken_body)
    response = _report()
    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": schemas.INTERNAL_ERROR,
        "error": "client disconnected",
    }


def test_submit_report_duplicate(api_store):
    """POST /reports → same reporter twice on one post."""
    _report()
    response = _report(reason="again")
    assert response.json() == {"success": False, "message": schemas.DUPLICATE_REPORT}
    assert api_store.get("posts", "acc1-p0-post0")["report_count"] == 1


def test_submit_report_self_report(api_store):
    """POST /reports → the owning profile cannot report its own post."""
    response = _report(reporter_id="acc1-p0")
    assert response.json() == {"success": False, "message": schemas.SELF_REPORT}
    assert api_store.list("reports").total == 0


def test_submit_report_unknown_post_is_internal_error(api_store):
    response = _report(post_id="ghost")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert data["message"] == schemas.INTERNAL_ERROR
    assert "ghost" in data["error"]


def test_submit_report_store_failure_is_internal_error(api_store, monkeypatch):
    def broken(*args, **kwargs):
        raise StoreUnavailable("disk unavailable")

    monkeypatch.setattr(JsonDocumentStore, "increment_once", broken)
    response = _report()
    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": schemas.INTERNAL_ERROR,
        "error": "disk unavailable",
    }


def test_retry_after_store_failure_is_accepted(api_store, monkeypatch):
    """POST /reports → re-sending a report whose cascade failed completes it instead of rejecting it."""
    original = JsonDocumentStore.increment_once
    calls = {"n": 0}

    def fail_once(self, *args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            raise StoreUnavailable("disk unavailable")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(JsonDocumentStore, "increment_once", fail_once)
    assert _report().json()["success"] is False

    retry = _report()
    assert retry.json() == {"success": True, "message": schemas.REPORT_SUBMITTED}
    assert api_store.get("posts", "acc1-p0-post0")["report_count"] == 1

    again = _report()
    assert again.json() == {"success": False, "message": schemas.DUPLICATE_REPORT}


def test_cascade_through_http(api_store):
    """Two reports block the post, which blocks the profile, which suspends the account."""
    _report(reporter_id="u1")
    response = _report(reporter_id="u2")
    assert response.json()["success"] is True

    assert api_store.get("posts", "acc1-p0-post0")["is_blocked"] is True
    assert api_store.get("profiles", "acc1-p0")["is_blocked"] is True
    assert api_store.get("accounts", "acc1")["status"] == "suspended"
    assert api_store.get("profiles", "acc1-p1")["is_blocked"] is True


def test_get_report(api_store):
    _report()
    listed = client.get("/reports/post/acc1-p0-post0")
    assert listed.status_code == 200
    assert len(listed.json()) == 1

    report_id = listed.json()[0]["id"]
    response = client.get(f"/reports/{report_id}")
    assert response.status_code == 200
    assert response.json()["reporter_id"] == "u1"


def test_get_report_not_found(api_store):
    response = client.get("/reports/invalid123")
    assert response.status_code == 404


def test_health():
    assert client.get("/health").json() == {"status": "ok"}
