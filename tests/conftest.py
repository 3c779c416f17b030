"""Shared fixtures for the pullscout test suite."""
from __future__ import annotations

import threading
from typing import Any, Dict, Optional

import pytest

from pullscout.config import Settings
from pullscout.ingest.models import Submission

RECIPE_DIFF = (
    "diff --git a/recipes/pkg b/recipes/pkg\n"
    "new file mode 100644\n"
    "--- /dev/null\n"
    "+++ b/recipes/pkg\n"
    "@@ -1,2 +1,3 @@\n"
    "-(old :fetcher git)\n"
    '+(pkg :fetcher github :repo "a/b")\n'
)


def recipe_diff(name: str, fetcher: str = "github", extra: str = "") -> str:
    return (
        f"diff --git a/recipes/{name} b/recipes/{name}\n"
        "--- /dev/null\n"
        f"+++ b/recipes/{name}\n"
        "@@ -0,0 +1 @@\n"
        f'+({name} :fetcher {fetcher} :repo "owner/{name}"{extra})\n'
        "\\ No newline at end of file\n"
    )


def pull_payload(number: int, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "number": number,
        "title": f"Add recipe #{number}",
        "html_url": f"https://github.com/melpa/melpa/pull/{number}",
        "diff_url": f"https://github.com/melpa/melpa/pull/{number}.diff",
        "issue_url": f"https://api.github.com/repos/melpa/melpa/issues/{number}",
        "created_at": "2024-05-01T12:30:00Z",
        "body": "### Brief summary of what the package does\n\nDoes things.\n\n### Direct link\n",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        github_token=None,
        cache_path=tmp_path / "catalog.json",
        aggregate_timeout=5.0,
        max_workers=8,
    )


@pytest.fixture
def make_submission():
    def _make(number: int = 8000, **overrides: Any) -> Submission:
        return Submission.from_api(pull_payload(number, **overrides))

    return _make


class FakeClient:
    """Stands in for ``PullRequestClient`` with canned submissions and diffs."""

    def __init__(self, submissions=None, diffs: Optional[Dict[int, str]] = None) -> None:
        self.submissions = submissions or []
        self.diffs = diffs or {}
        self.list_calls = 0
        self.diff_calls = 0
        self._lock = threading.Lock()

    def list_submissions(self):
        self.list_calls += 1
        return list(self.submissions)

    def fetch_diff(self, submission: Submission) -> str:
        with self._lock:
            self.diff_calls += 1
        value = self.diffs[submission.number]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value()
        return value
