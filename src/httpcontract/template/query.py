from __future__ import annotations

from typing import Optional
from urllib.parse import unquote_plus

from httpcontract.template.paths import append_path

QueryEntries = dict[str, list[Optional[str]]]


def split_query(literal: str) -> tuple[str, Optional[str]]:
    """
    Split a path literal on its first "?".

    Returns (path, raw_query); raw_query is None when there is no "?".
    """
    path, sep, query = literal.partition("?")
    if not sep:
        return literal, None
    return path, query


def parse_query(raw: Optional[str], decode: bool = True) -> QueryEntries:
    """
    Decompose a raw query string into an ordered multi-map.

      "a=1&flag&a=2" -> {"a": ["1", "2"], "flag": [None]}

    Keys keep first-seen order; repeated keys accumulate values. Empty tokens
    ("a=1&&b=2", trailing "&") are skipped.
    """
    entries: QueryEntries = {}
    if not raw:
        return entries

    for token in raw.split("&"):
        if not token:
            continue
        key, sep, value = token.partition("=")
        if decode:
            key = unquote_plus(key)
            value = unquote_plus(value)
        entries.setdefault(key, []).append(value if sep else None)
    return entries


def extract(url: str, fragment: str, decode: bool = True) -> tuple[str, QueryEntries]:
    """
    Append a path literal (which may carry a query string) to url.

    The query part never reaches the url; it comes back as ordered entries for the
    caller to merge into the template's queries.
    """
    path, raw = split_query(append_path(url, fragment))
    return path, parse_query(raw, decode=decode)


def merge_queries(
    existing: dict[str, tuple[Optional[str], ...]],
    entries: QueryEntries,
) -> dict[str, tuple[Optional[str], ...]]:
    merged = dict(existing)
    for key, values in entries.items():
        merged[key] = merged.get(key, ()) + tuple(values)
    return merged
