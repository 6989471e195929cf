"""Exceções do pipeline de montagem do feed."""

from __future__ import annotations

from typing import Optional


class FeedError(Exception):
    """Base for every error the feed build can raise."""


class FetchError(FeedError):
    """HTTP request failed (non-2xx status or transport error)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: Optional[str] = None):
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            msg = f"Fetch failed {status} for {url}"
        else:
            msg = f"Fetch failed for {url}: {reason or 'unknown error'}"
        super().__init__(msg)


class ParseError(FeedError):
    """Document could not be parsed. Never leaves markup.py."""


class SourceError(FeedError):
    """Source fetched fine but had nothing usable in it."""


class InsufficientItemsError(FeedError):
    def __init__(self, found: int, wanted: int, detail: str = ""):
        self.found = found
        self.wanted = wanted
        msg = f"Only found {found}/{wanted} items with title, link and image"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


__all__ = ["FeedError", "FetchError", "ParseError", "SourceError", "InsufficientItemsError"]
