"""Recover package recipes from submission diffs.

A submission adds one recipe file to the index. Its diff may also touch other
files, so only the final hunk is read: deletions and diff annotations are
dropped, markers are stripped from the rest, and the remaining text is read as
a single recipe form of the shape ``(name :keyword value ...)``.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from pullscout.config import SUPPORTED_FETCHERS
from pullscout.ingest.models import DEFAULT_FILES, Recipe
from pullscout.processing import sexp

logger = logging.getLogger(__name__)

HUNK_MARKER = "@@"
ADDITION_MARKER = "+"
DELETION_MARKER = "-"
ANNOTATION_MARKER = "\\"

# Older releases only understood these backends.
LEGACY_FETCHERS = ("git", "github", "gitlab")


def final_hunk(diff: str) -> Optional[List[str]]:
    """Return the lines after the last hunk header, or ``None`` without one."""
    lines = [line[:-1] if line.endswith("\r") else line for line in diff.split("\n")]
    if lines and not lines[-1]:
        lines.pop()
    for index in range(len(lines) - 1, -1, -1):
        if lines[index].startswith(HUNK_MARKER):
            return lines[index + 1 :]
    return None


def added_text(hunk: Iterable[str]) -> str:
    """Rebuild the post-image of a hunk."""
    kept = []
    for line in hunk:
        if line.startswith((DELETION_MARKER, ANNOTATION_MARKER)):
            continue
        kept.append(line[1:] if line[:1] in (ADDITION_MARKER, " ") else line)
    return "\n".join(kept)


def recipe_from_form(form: Any, supported_fetchers: Iterable[str] = SUPPORTED_FETCHERS) -> Optional[Recipe]:
    """Validate a read form and turn it into a :class:`Recipe`."""
    if not isinstance(form, list) or not form:
        return None
    name, plist = form[0], form[1:]
    if not isinstance(name, sexp.Symbol) or isinstance(name, sexp.Keyword):
        return None
    if len(plist) % 2:
        return None

    properties = {}
    for key, value in zip(plist[::2], plist[1::2]):
        if not isinstance(key, sexp.Keyword):
            return None
        properties[key.name] = value

    fetcher = properties.pop("fetcher", None)
    if not isinstance(fetcher, sexp.Symbol) or fetcher not in set(supported_fetchers):
        logger.debug("Rejecting recipe %s with fetcher %r", name, fetcher)
        return None

    if properties.pop("package", None) is not None:
        logger.debug("Ignoring :package keyword in recipe %s", name)
    files = properties.pop("files", None)
    if files == [] or (isinstance(files, sexp.Symbol) and files == "nil"):
        files = None
    return Recipe(
        package=str(name),
        fetcher=str(fetcher),
        files=list(DEFAULT_FILES) if files is None else sexp.to_plain(files),
        properties={key: sexp.to_plain(value) for key, value in properties.items()},
    )


def extract_recipe(diff: str, supported_fetchers: Iterable[str] = SUPPORTED_FETCHERS) -> Optional[Recipe]:
    """Recover the recipe a submission diff adds, or ``None``."""
    hunk = final_hunk(diff)
    if hunk is None:
        return None
    try:
        form = sexp.read(added_text(hunk))
    except sexp.SexpError as exc:
        logger.debug("Diff does not hold a readable recipe: %s", exc)
        return None
    return recipe_from_form(form, supported_fetchers)
