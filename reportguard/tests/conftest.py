"""
Shared fixtures: a throw-away JSON store under tmp_path and helpers to seed
accounts, profiles and posts into it.
"""

import pytest

from reportguard.cascade.controller import CascadeController
from reportguard.config import Settings
from reportguard.storage.documents import JsonDocumentStore


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides):
        return Settings(data_dir=tmp_path / "data", **overrides)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def store(settings):
    return JsonDocumentStore(settings.data_dir)


@pytest.fixture
def controller(settings, store):
    return CascadeController.from_settings(settings, store)


@pytest.fixture
def seed(store):
    """
    seed(account_id, profiles=1, posts_per_profile=1) creates an active account,
    its profiles "<account>-p<i>" and posts "<profile>-post<j>".
    Returns {profile_id: [post_id, ...]}.
    """

    def _seed(account_id="acc1", profiles=1, posts_per_profile=1):
        store.seed("accounts", [{"id": account_id, "status": "active"}])
        layout = {}
        for i in range(profiles):
            profile_id = f"{account_id}-p{i}"
            store.seed("profiles", [{
                "id": profile_id,
                "owner_account_id": account_id,
                "blocked_item_count": 0,
                "is_blocked": False,
            }])
            posts = [{
                "id": f"{profile_id}-post{j}",
                "owner_profile_id": profile_id,
                "report_count": 0,
                "is_blocked": False,
            } for j in range(posts_per_profile)]
            store.seed("posts", posts)
            layout[profile_id] = [p["id"] for p in posts]
        return layout

    return _seed


@pytest.fixture
def report_n_times():
    def _report(controller, post_id, n, start=0):
        """Submit n reports from distinct reporters; return the last CascadeResult."""
        result = None
        for i in range(start, start + n):
            result = controller.submit_report(post_id, f"reporter-{i}", "spam")
        return result

    return _report
