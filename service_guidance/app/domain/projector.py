"""
Projection of upstream search results into the public response shape.
"""

from typing import Iterable, List

from .models import SearchResultItem, SearchResultSet
from .timestamps import EARLIEST, parse_timestamp


class ResultProjector:
    """Orders search hits newest first.

    Upstream ordering is only a hint, so every result set is re-sorted here.
    Items whose ``public_updated_at`` is missing or unparsable rank as the
    earliest possible instant and therefore sink to the end. The sort is
    stable, so ties keep their upstream relative order.
    """

    @staticmethod
    def sort_key(item: SearchResultItem):
        return parse_timestamp(item.public_updated_at) or EARLIEST

    def order(self, items: Iterable[SearchResultItem]) -> List[SearchResultItem]:
        return sorted(items, key=self.sort_key, reverse=True)

    def project(self, result_set: SearchResultSet) -> SearchResultSet:
        """Return a copy of ``result_set`` with deterministically ordered results."""
        return SearchResultSet(
            results=self.order(result_set.results),
            total=result_set.total,
            page=result_set.page,
            page_size=result_set.page_size,
        )
