"""
Records exchanged between the upstream adapter and the tool handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class SearchQuery:
    """Normalized search request, already validated and clamped."""

    query: str
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    organisation: Optional[str] = None
    format: Optional[str] = None
    public_timestamp_from: Optional[datetime] = None
    public_timestamp_to: Optional[datetime] = None

    @property
    def start(self) -> int:
        """Upstream offset for the requested page."""
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class SearchResultItem:
    """A single search hit with a title and an absolute URL."""

    title: str
    url: str
    summary: Optional[str] = None
    public_updated_at: Optional[str] = None
    content_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the item, omitting absent fields."""
        payload: Dict[str, Any] = {
            "title": self.title,
            "url": self.url,
        }

        if self.summary is not None:
            payload["summary"] = self.summary
        if self.public_updated_at is not None:
            payload["public_updated_at"] = self.public_updated_at
        if self.content_id is not None:
            payload["content_id"] = self.content_id
        return payload


@dataclass(frozen=True)
class SearchResultSet:
    """Ordered search hits; ``total`` is the upstream count, not ``len(results)``."""

    results: List[SearchResultItem]
    total: int
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [item.to_dict() for item in self.results],
            "page": self.page,
            "pageSize": self.page_size,
            "total": self.total,
        }


@dataclass(frozen=True)
class ContentItem:
    """Content document fetched by path, built fresh for each request."""

    url: Optional[str]
    public_updated_at: Optional[str]
    content_id: Optional[str]
    raw: Any = field(default=None, repr=False)

    @property
    def document(self) -> Dict[str, Any]:
        """The raw document when it is a JSON object, otherwise an empty object."""
        return self.raw if isinstance(self.raw, dict) else {}
