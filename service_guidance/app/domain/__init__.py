"""
Domain utilities for the Guidance Service.

Includes the records exchanged with the upstream adapter, inbound request
parsing, result projection and the fixed error taxonomy.
"""

from .models import ContentItem, SearchQuery, SearchResultItem, SearchResultSet
from .projector import ResultProjector

__all__ = [
    "ContentItem",
    "ResultProjector",
    "SearchQuery",
    "SearchResultItem",
    "SearchResultSet",
]
