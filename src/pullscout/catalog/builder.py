"""Catalog entry construction utilities."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from pullscout.config import Settings, get_settings
from pullscout.ingest.models import CatalogEntry, Link, Recipe, RichText, Submission
from pullscout.processing.text import summarize

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "n/a"
HOSTED_FORGES = ("github", "gitlab")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        logger.debug("Ignoring unparsable timestamp %r", value)
        return None


class CatalogEntryBuilder:
    """Combines a recipe with its submission into a catalog entry."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        label = self.settings.source_label
        self.source = RichText(
            text=label,
            links=[Link(label=label, target=self.settings.review_queue_url, start=0, end=len(label))],
        )

    def build(self, recipe: Recipe, submission: Submission) -> CatalogEntry:
        return CatalogEntry(
            package=recipe.package,
            source=self.source,
            date=parse_timestamp(submission.created_at),
            description=self.describe(submission),
            url=self.resolve_url(recipe, submission),
            recipe=recipe,
            number=submission.number,
            title=submission.title,
        )

    def describe(self, submission: Submission) -> RichText:
        description = summarize(submission.body) or RichText(text=NO_DESCRIPTION)
        if submission.issue_url:
            thread = submission.issue_url.rstrip("/").rsplit("/", 1)[-1]
            description = description.prepend_link(f"#{thread}", self.thread_web_url(submission.issue_url))
        return description

    def thread_web_url(self, issue_url: str) -> str:
        """Rewrite an API issue URL to the page a browser can open."""
        api_prefix = self.settings.issue_api_prefix
        if issue_url.startswith(api_prefix):
            return self.settings.issue_web_prefix + issue_url[len(api_prefix) :]
        return issue_url

    def resolve_url(self, recipe: Recipe, submission: Submission) -> str:
        if recipe.url:
            return str(recipe.url)
        if recipe.fetcher in HOSTED_FORGES and recipe.repo:
            return f"https://www.{recipe.fetcher}.com/{recipe.repo}"
        return submission.html_url or self.settings.review_queue_url
