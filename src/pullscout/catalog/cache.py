"""Process-wide catalog state with pluggable persistence."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Protocol

from pydantic import ValidationError

from pullscout.ingest.models import CatalogEntry

logger = logging.getLogger(__name__)

CACHE_VERSION = 1

Catalog = Dict[str, CatalogEntry]


class CatalogStore(Protocol):
    """Load/save capability for the persisted catalog."""

    def load(self) -> Catalog:
        ...

    def save(self, entries: Mapping[str, CatalogEntry]) -> None:
        ...


class JSONCatalogStore:
    """Stores the catalog as a JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Catalog:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return {
                package: CatalogEntry.model_validate(entry)
                for package, entry in payload["entries"].items()
            }
        except (OSError, ValueError, KeyError, TypeError, AttributeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable catalog cache %s: %s", self.path, exc)
            return {}

    def save(self, entries: Mapping[str, CatalogEntry]) -> None:
        payload = {
            "version": CACHE_VERSION,
            "entries": {package: entry.model_dump(mode="json") for package, entry in entries.items()},
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Catalog of %d entries written to %s", len(entries), self.path)


class CatalogCache:
    """Serves the last computed catalog until a refresh is requested.

    Refreshes are serialized; a failing computation leaves both the in-memory
    and the stored catalog as they were.
    """

    def __init__(self, compute: Callable[[], Catalog], store: CatalogStore) -> None:
        self._compute = compute
        self._store = store
        self._entries: Catalog = {}
        self._lock = threading.Lock()

    def load(self) -> "CatalogCache":
        self._entries = dict(self._store.load())
        logger.debug("Loaded %d cached catalog entries", len(self._entries))
        return self

    @property
    def entries(self) -> Catalog:
        return dict(self._entries)

    def get(self, package: str) -> Optional[CatalogEntry]:
        return self._entries.get(package)

    def list(self) -> Catalog:
        if self._entries:
            return dict(self._entries)
        return self._refresh(force=False)

    def refresh(self) -> Catalog:
        return self._refresh(force=True)

    def _refresh(self, force: bool) -> Catalog:
        with self._lock:
            if not force and self._entries:
                return dict(self._entries)
            entries = dict(self._compute())
            self._entries = entries
            self._store.save(entries)
            return dict(entries)
