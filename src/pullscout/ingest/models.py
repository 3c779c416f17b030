"""Data models for the recipe discovery pipeline."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

DEFAULT_FILES: List[str] = [":defaults"]


class Submission(BaseModel):
    """One open pull request proposing a new package."""

    number: Optional[int] = None
    title: Optional[str] = None
    html_url: Optional[str] = None
    created_at: Optional[str] = None
    body: Optional[str] = None
    diff_url: Optional[str] = None
    issue_url: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict, description="API object with keys preserved as-is")

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Submission":
        created_at = payload.get("created_at")
        return cls(
            number=payload.get("number"),
            title=payload.get("title"),
            html_url=payload.get("html_url"),
            created_at=created_at if isinstance(created_at, str) else None,
            body=payload.get("body"),
            diff_url=payload.get("diff_url"),
            issue_url=payload.get("issue_url"),
            raw=payload,
        )


class Recipe(BaseModel):
    """Package acquisition descriptor recovered from a submission diff.

    ``package`` and ``fetcher`` are always present. Every other keyword of the
    source form lands in ``properties`` untouched, keyed without its leading colon.
    """

    package: str = Field(..., min_length=1)
    fetcher: str = Field(..., min_length=1)
    files: Any = Field(default_factory=lambda: list(DEFAULT_FILES))
    properties: Dict[str, Any] = Field(default_factory=dict)

    @property
    def repo(self) -> Optional[str]:
        return self.properties.get("repo")

    @property
    def url(self) -> Optional[str]:
        return self.properties.get("url")

    def as_plist(self) -> Dict[str, Any]:
        """Flatten into a single mapping; the core keys always win."""
        return {**self.properties, "package": self.package, "fetcher": self.fetcher, "files": self.files}


class Link(BaseModel):
    """A (label, target) pair anchored at ``text[start:end]`` of its owner."""

    label: str
    target: str
    start: int
    end: int


class RichText(BaseModel):
    """Plain text with embedded links for the host UI to render."""

    text: str
    links: List[Link] = Field(default_factory=list)

    def prepend_link(self, label: str, target: str, separator: str = " ") -> "RichText":
        offset = len(label) + len(separator)
        shifted = [
            link.model_copy(update={"start": link.start + offset, "end": link.end + offset})
            for link in self.links
        ]
        return RichText(
            text=f"{label}{separator}{self.text}",
            links=[Link(label=label, target=target, start=0, end=len(label))] + shifted,
        )

    def __str__(self) -> str:
        return self.text


class CatalogEntry(BaseModel):
    """One catalog row, keyed by package name."""

    package: str
    source: RichText
    date: Optional[datetime] = None
    description: RichText
    url: str
    recipe: Recipe
    number: Optional[int] = None
    title: Optional[str] = None
