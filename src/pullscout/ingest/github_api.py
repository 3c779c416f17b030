"""Client for listing open package submissions and retrieving their diffs."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol
from urllib.parse import urlsplit

import requests
from pydantic import ValidationError

from pullscout.config import Settings, get_settings
from pullscout.ingest.models import Submission

logger = logging.getLogger(__name__)

JSON_ACCEPT = "application/vnd.github+json"
DIFF_ACCEPT = "text/plain"


class PullscoutError(RuntimeError):
    """Base class for errors surfaced by the pipeline."""


class FetchError(PullscoutError):
    """Raised when an HTTP request fails or returns an error status."""


class ListError(PullscoutError):
    """Raised when the open submissions cannot be listed."""


@dataclass
class HTTPResponse:
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int = 200

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Minimal interface for blocking HTTP GET."""

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HTTPResponse:
        ...


class RequestsTransport:
    """Transport backed by ``requests`` with a per-request timeout."""

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HTTPResponse:
        try:
            response = self.session.get(url, headers=headers or {}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"GET {url} failed: {exc}") from exc
        if not response.ok:
            raise FetchError(f"GET {url} returned {response.status_code}: {response.text[:200]}")
        return HTTPResponse(body=response.content, headers=dict(response.headers), status_code=response.status_code)


def raw_diff_url(diff_url: str, mirror: str) -> str:
    """Move ``diff_url`` onto the raw diff mirror, keeping its path."""
    return mirror.rstrip("/") + urlsplit(diff_url).path


class PullRequestClient:
    """Thin wrapper around the index's pull request API."""

    def __init__(self, transport: Optional[Transport] = None, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.transport = transport or RequestsTransport(timeout=self.settings.request_timeout)

    def _headers(self, accept: str) -> Dict[str, str]:
        headers = {"Accept": accept, "User-Agent": self.settings.user_agent}
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        return headers

    def list_submissions(self) -> List[Submission]:
        """Fetch the first page of open pull requests."""
        url = f"{self.settings.pulls_url}?per_page={self.settings.page_size}"
        try:
            response = self.transport.get(url, self._headers(JSON_ACCEPT))
        except FetchError as exc:
            raise ListError(f"Could not list submissions: {exc}") from exc

        try:
            payload = json.loads(response.body)
        except ValueError as exc:
            raise ListError(f"Submission listing is not valid JSON: {exc}") from exc
        if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
            raise ListError("Submission listing is not an array of objects")

        try:
            submissions = [Submission.from_api(item) for item in payload]
        except ValidationError as exc:
            raise ListError(f"Unexpected submission shape: {exc}") from exc
        logger.info("Listed %d open submissions from %s", len(submissions), self.settings.pulls_url)
        return submissions

    def fetch_diff(self, submission: Submission) -> str:
        """Retrieve the unified diff of ``submission`` as text."""
        if not submission.diff_url:
            raise FetchError(f"Submission {submission.number} has no diff URL")
        url = raw_diff_url(submission.diff_url, self.settings.diff_mirror)
        return self.transport.get(url, self._headers(DIFF_ACCEPT)).text()
