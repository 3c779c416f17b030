"""Text processing utilities for submission descriptions."""
from __future__ import annotations

import re
from typing import List, Optional

from pullscout.ingest.models import Link, RichText

PLACEHOLDER = "[Please write a quick summary of the package.]"
SUMMARY_PATTERN = re.compile(
    r"^[ \t]*#+[ \t]*Brief summary[^\n]*\n?(?P<summary>.*?)(?=^[ \t]*#|\Z)",
    re.MULTILINE | re.DOTALL,
)
LINK_PATTERN = re.compile(r"\[(?P<label>[^\[\]]+)\]\((?P<target>(?:[^()\s]|\([^()\s]*\))+)\)")


def render_links(text: str) -> RichText:
    """Replace markdown ``[label](target)`` links by their label and record them."""
    parts: List[str] = []
    links: List[Link] = []
    cursor = 0
    length = 0
    for match in LINK_PATTERN.finditer(text):
        before = text[cursor : match.start()]
        parts.append(before)
        length += len(before)
        label = match.group("label")
        links.append(Link(label=label, target=match.group("target"), start=length, end=length + len(label)))
        parts.append(label)
        length += len(label)
        cursor = match.end()
    parts.append(text[cursor:])
    return RichText(text="".join(parts), links=links)


def summary_line(body: Optional[str]) -> Optional[str]:
    """Return the first non-blank line of the body's brief summary section."""
    if not body:
        return None
    text = body.replace(PLACEHOLDER, "")
    match = SUMMARY_PATTERN.search(text)
    candidate = match.group("summary") if match else text
    for line in candidate.splitlines():
        line = line.strip()
        if line:
            return line
    return None


def summarize(body: Optional[str]) -> Optional[RichText]:
    """One-line description with its links, or ``None`` when nothing is usable."""
    line = summary_line(body)
    if line is None:
        return None
    return render_links(line)
