"""Ordering and filtering of a document collection for rendering.

These functions work on anything exposing ``title``, ``date``, ``draft``,
``tags`` and ``nav`` attributes: parsed files and indexed rows alike.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, Protocol, TypeVar


class Listable(Protocol):
    title: str
    date: dt.date | None
    draft: bool
    tags: frozenset[str]
    nav: Any


T = TypeVar("T", bound=Listable)


def _newest_first(document: Listable) -> tuple[bool, int, str]:
    # Undated documents sort after every dated one
    if document.date is None:
        return (True, 0, document.title)
    return (False, -document.date.toordinal(), document.title)


def published_listing(documents: Iterable[T]) -> list[T]:
    """Drop drafts and order the rest newest first, ties broken by title."""
    return sorted((d for d in documents if not d.draft), key=_newest_first)


def navigation_menu(documents: Iterable[T]) -> list[tuple[Any, T]]:
    """
    Build the navigation menu.

    Returns:
        (nav, document) pairs for published documents carrying a navigation
        entry, ordered by rank then label
    """
    entries = [(d.nav, d) for d in documents if d.nav is not None and not d.draft]
    entries.sort(key=lambda pair: (pair[0].order, pair[0].key))
    return entries


def tag_index(documents: Iterable[T]) -> dict[str, list[T]]:
    """Map each tag of a published document to that tag's listing."""
    index: dict[str, list[T]] = {}
    for document in published_listing(documents):
        for tag in document.tags:
            index.setdefault(tag, []).append(document)
    return dict(sorted(index.items()))
