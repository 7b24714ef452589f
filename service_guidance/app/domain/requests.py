"""
Parsing of inbound tool payloads into domain requests.

Payloads are tolerant: wrongly-typed optional fields fall back to their
defaults. The exceptions are a missing query and a timestamp filter that
is present but unparsable, both rejected before any upstream call.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from shared.errors import InvalidRequestError, ParameterError

from .models import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MIN_PAGE_SIZE, SearchQuery
from .timestamps import parse_timestamp


@dataclass(frozen=True)
class ContentOptions:
    """Per-request options accepted by the content tools."""

    include_enrichment: bool = False
    strict_upstream_errors: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ContentOptions":
        options = payload.get("options")
        if not isinstance(options, dict):
            return cls()
        # Only a literal JSON true enables an option
        return cls(
            include_enrichment=options.get("include_enrichment") is True,
            strict_upstream_errors=options.get("strict_upstream_errors") is True,
        )


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid page number
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_filter_timestamp(filters: Dict[str, Any], name: str):
    value = filters.get(name)
    if not isinstance(value, str):
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ParameterError(f"Invalid {name}", details={"field": name, "value": value})
    return parsed


def parse_search_query(payload: Dict[str, Any]) -> SearchQuery:
    """Build a SearchQuery from a search_guidance body."""
    query = _as_str(payload.get("query"))
    if query is None or not query.strip():
        raise InvalidRequestError("query is required")

    page = _as_int(payload.get("page"))
    page = max(1, page) if page is not None else 1

    page_size = _as_int(payload.get("pageSize"))
    if page_size is None:
        page_size = DEFAULT_PAGE_SIZE
    page_size = min(max(page_size, MIN_PAGE_SIZE), MAX_PAGE_SIZE)

    organisation = format_ = None
    timestamp_from = timestamp_to = None
    filters = payload.get("filters")
    if isinstance(filters, dict):
        organisation = _as_str(filters.get("organisation"))
        format_ = _as_str(filters.get("format"))
        timestamp_from = _parse_filter_timestamp(filters, "public_timestamp_from")
        timestamp_to = _parse_filter_timestamp(filters, "public_timestamp_to")

    return SearchQuery(
        query=query,
        page=page,
        page_size=page_size,
        organisation=organisation,
        format=format_,
        public_timestamp_from=timestamp_from,
        public_timestamp_to=timestamp_to,
    )


def parse_lookup_value(payload: Dict[str, Any], name: str) -> Optional[str]:
    """Return a non-blank string field, or None when missing or blank."""
    value = _as_str(payload.get(name))
    if value is None or not value.strip():
        return None
    return value
