"""Concurrent diff retrieval and recipe extraction."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError, as_completed
from typing import Dict, Iterable, List, Optional, Sequence

from pullscout.catalog.builder import CatalogEntryBuilder
from pullscout.config import SUPPORTED_FETCHERS
from pullscout.ingest.github_api import PullRequestClient
from pullscout.ingest.models import CatalogEntry, Submission
from pullscout.processing.diff import extract_recipe

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class CatalogAggregator:
    """Fans out one diff task per submission and collects what finishes in time.

    Tasks still running at the deadline are left alone: they are neither
    cancelled nor retried, and whatever they produce afterwards is dropped.
    Entries come back in completion order.
    """

    def __init__(
        self,
        client: PullRequestClient,
        builder: CatalogEntryBuilder,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = 8,
        supported_fetchers: Sequence[str] = SUPPORTED_FETCHERS,
    ) -> None:
        self.client = client
        self.builder = builder
        self.timeout = timeout
        self.max_workers = max_workers
        self.supported_fetchers = tuple(supported_fetchers)

    def process(self, submission: Submission) -> Optional[CatalogEntry]:
        diff = self.client.fetch_diff(submission)
        recipe = extract_recipe(diff, self.supported_fetchers)
        if recipe is None:
            logger.debug("No recipe recovered from submission %s", submission.number)
            return None
        return self.builder.build(recipe, submission)

    def collect(self, submissions: Iterable[Submission]) -> List[CatalogEntry]:
        entries: List[CatalogEntry] = []
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="pullscout")
        try:
            future_map: Dict[Future, Submission] = {}
            for submission in submissions:
                if not submission.diff_url:
                    logger.debug("Skipping submission %s without a diff URL", submission.number)
                    continue
                future_map[executor.submit(self.process, submission)] = submission

            finished = 0
            try:
                for future in as_completed(future_map, timeout=self.timeout):
                    finished += 1
                    submission = future_map[future]
                    try:
                        entry = future.result()
                    except Exception as exc:
                        logger.warning("Failed to process submission %s: %s", submission.number, exc)
                        continue
                    if entry is not None:
                        entries.append(entry)
            except TimeoutError:
                logger.warning(
                    "Timed out after %ss with %d of %d submissions processed; returning partial results",
                    self.timeout,
                    finished,
                    len(future_map),
                )
        finally:
            executor.shutdown(wait=False)
        return entries
