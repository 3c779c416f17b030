"""Entry point wiring submission listing, extraction and caching together."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable, Optional, Union

from pullscout.catalog.aggregator import CatalogAggregator
from pullscout.catalog.builder import CatalogEntryBuilder
from pullscout.catalog.cache import Catalog, CatalogCache, CatalogStore, JSONCatalogStore
from pullscout.config import Settings, get_settings
from pullscout.ingest.github_api import PullRequestClient, Transport
from pullscout.ingest.models import CatalogEntry

logger = logging.getLogger(__name__)


class Request(str, Enum):
    LIST = "list"
    REFRESH = "refresh"


class CatalogPipeline:
    """Lists open submissions and turns the ones with a usable recipe into entries."""

    def __init__(self, client: PullRequestClient, aggregator: CatalogAggregator) -> None:
        self.client = client
        self.aggregator = aggregator

    def compute(self) -> Catalog:
        submissions = self.client.list_submissions()
        entries = index_by_package(self.aggregator.collect(submissions))
        logger.info("Built %d catalog entries from %d submissions", len(entries), len(submissions))
        return entries


def index_by_package(entries: Iterable[CatalogEntry]) -> Catalog:
    catalog: Dict[str, CatalogEntry] = {}
    for entry in entries:
        if entry.package in catalog:
            logger.info("Dropping duplicate submission #%s for %s", entry.number, entry.package)
            continue
        catalog[entry.package] = entry
    return catalog


def build_pipeline(settings: Optional[Settings] = None, transport: Optional[Transport] = None) -> CatalogPipeline:
    settings = settings or get_settings()
    client = PullRequestClient(transport=transport, settings=settings)
    aggregator = CatalogAggregator(
        client,
        CatalogEntryBuilder(settings),
        timeout=settings.aggregate_timeout,
        max_workers=settings.max_workers,
        supported_fetchers=settings.supported_fetchers,
    )
    return CatalogPipeline(client, aggregator)


def build_cache(
    settings: Optional[Settings] = None,
    transport: Optional[Transport] = None,
    store: Optional[CatalogStore] = None,
) -> CatalogCache:
    """Create a cache backed by the configured pipeline and load what was stored."""
    settings = settings or get_settings()
    pipeline = build_pipeline(settings, transport)
    return CatalogCache(pipeline.compute, store or JSONCatalogStore(settings.cache_path)).load()


def run(request: Union[Request, str], cache: CatalogCache) -> Catalog:
    """Serve a ``list`` or ``refresh`` request from ``cache``."""
    request = Request(request)
    if request is Request.REFRESH:
        return cache.refresh()
    return cache.list()
