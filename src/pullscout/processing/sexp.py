"""Reader for the Lisp-style forms package recipes are written in."""
from __future__ import annotations

import re
from typing import Any, Iterator, List, Tuple

MAX_DEPTH = 64

TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<comment>;[^\n]*)
    |(?P<open>\()
    |(?P<close>\))
    |(?P<string>"(?:[^"\\]|\\.)*")
    |(?P<atom>[^\s()";]+)
    """,
    re.VERBOSE | re.DOTALL,
)
INT_PATTERN = re.compile(r"[+-]?\d+\.?")
FLOAT_PATTERN = re.compile(r"[+-]?(?:\d*\.\d+(?:e[+-]?\d+)?|\d+e[+-]?\d+)", re.IGNORECASE)
ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
ESCAPES = {"n": "\n", "t": "\t", "\n": ""}


class SexpError(ValueError):
    """Raised when text does not hold a readable form."""


class Symbol(str):
    """A bare symbol such as ``github``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"


class Keyword(Symbol):
    """A colon-prefixed symbol such as ``:fetcher``."""

    @property
    def name(self) -> str:
        return self[1:]


class _CloseParen(SexpError):
    pass


def tokenize(text: str) -> Iterator[Tuple[str, str]]:
    pos = 0
    while pos < len(text):
        match = TOKEN_PATTERN.match(text, pos)
        if match is None:
            raise SexpError(f"Unreadable input at offset {pos}: {text[pos:pos + 20]!r}")
        kind = match.lastgroup
        if kind not in ("space", "comment"):
            yield kind, match.group()
        pos = match.end()


def _unescape(body: str) -> str:
    return ESCAPE_PATTERN.sub(lambda m: ESCAPES.get(m.group(1), m.group(1)), body)


def _atom(token: str) -> Any:
    if INT_PATTERN.fullmatch(token):
        return int(token.rstrip("."))
    if FLOAT_PATTERN.fullmatch(token):
        return float(token)
    if token.startswith(":") and len(token) > 1:
        return Keyword(token)
    return Symbol(token)


def _read(tokens: Iterator[Tuple[str, str]], depth: int = 0) -> Any:
    if depth > MAX_DEPTH:
        raise SexpError("Form is nested too deeply")
    try:
        kind, value = next(tokens)
    except StopIteration:
        raise SexpError("Unexpected end of input") from None

    if kind == "open":
        items: List[Any] = []
        while True:
            try:
                items.append(_read(tokens, depth + 1))
            except _CloseParen:
                return items
    if kind == "close":
        raise _CloseParen()
    if kind == "string":
        return _unescape(value[1:-1])
    return _atom(value)


def read(text: str) -> Any:
    """Read the first form in ``text``; whatever follows it is left unread."""
    try:
        return _read(tokenize(text))
    except _CloseParen:
        raise SexpError("Unexpected ')'") from None


def to_plain(value: Any) -> Any:
    """Convert a read form to plain ``str``/``int``/``float``/``list`` values."""
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    if isinstance(value, Symbol):
        return str(value)
    return value
