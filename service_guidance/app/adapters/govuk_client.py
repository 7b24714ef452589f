"""
GOV.UK content API client for the Guidance service.
"""

from typing import Any, Dict, List, Optional, Protocol

import httpx

from shared.correlation import propagate_correlation_header
from shared.errors import ParameterError, TransportFailure, UpstreamError
from shared.logging import get_logger
from shared.retry import RetryConfig, RetryError, retry_on_exception

from ..domain.models import ContentItem, SearchQuery, SearchResultItem, SearchResultSet
from ..domain.timestamps import format_iso

SEARCH_PATH = "/api/search.json"
CONTENT_PATH = "/api/content"


class UpstreamClient(Protocol):
    """Capability the tool handlers need from the upstream content API."""

    async def search(self, query: SearchQuery) -> SearchResultSet:
        ...

    async def get_content_by_path(self, path: str) -> Optional[ContentItem]:
        ...

    async def get_content_by_id(self, content_id: str) -> Optional[ContentItem]:
        ...


class RetryableStatusError(Exception):
    """Upstream answered with a status worth retrying (5xx or 429)."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Upstream returned status {status_code}")
        self.status_code = status_code
        self.body = body


RETRYABLE_EXCEPTIONS = (httpx.TransportError, RetryableStatusError)


def build_search_params(query: SearchQuery) -> Dict[str, str]:
    """Translate a SearchQuery into the upstream search query-string dialect."""
    params: Dict[str, str] = {
        "q": query.query,
        "start": str(query.start),
        "count": str(query.page_size),
    }
    if query.organisation is not None:
        params["filter_organisations"] = query.organisation
    if query.format is not None:
        params["filter_format"] = query.format

    bounds: List[str] = []
    if query.public_timestamp_from is not None:
        bounds.append(f">={format_iso(query.public_timestamp_from)}")
    if query.public_timestamp_to is not None:
        bounds.append(f"<={format_iso(query.public_timestamp_to)}")
    if bounds:
        params["filter_public_timestamp"] = ",".join(bounds)

    # Ordering hint only; results are re-sorted downstream
    params["order"] = "-public_timestamp"
    return params


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class GovUkClient:
    """Client for the GOV.UK search and content APIs.

    Every outbound call goes through a single send function wrapped by the
    retry policy and carries the current correlation id.
    """

    def __init__(
        self,
        base_url: str = "https://www.gov.uk",
        public_site_url: str = "https://www.gov.uk",
        timeout: float = 10.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.public_site_url = public_site_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("guidance.govuk_client")
        self.retry_config = retry_config or RetryConfig.from_retries(3, base_delay=0.2)
        self._send = retry_on_exception(RETRYABLE_EXCEPTIONS, config=self.retry_config)(self._send_once)

    async def search(self, query: SearchQuery) -> SearchResultSet:
        """Run a search and parse hits that have a title and a resolvable link."""
        params = build_search_params(query)
        response = await self._get(SEARCH_PATH, params)

        if response.status_code == 422:
            self.logger.warning("Upstream rejected search parameters", params=params)
            raise ParameterError(
                "Invalid parameters for search",
                details={"status_code": response.status_code}
            )
        self._ensure_success(response, SEARCH_PATH)

        document = self._decode(response, SEARCH_PATH)
        results: List[SearchResultItem] = []
        total = 0
        if isinstance(document, dict):
            raw_total = document.get("total")
            if isinstance(raw_total, int) and not isinstance(raw_total, bool):
                total = raw_total
            raw_results = document.get("results")
            if isinstance(raw_results, list):
                for entry in raw_results:
                    item = self._parse_search_item(entry)
                    if item is not None:
                        results.append(item)

        self.logger.debug("Search completed", returned=len(results), total=total)
        return SearchResultSet(
            results=results,
            total=total,
            page=query.page,
            page_size=query.page_size,
        )

    async def get_content_by_path(self, path: str) -> Optional[ContentItem]:
        """Fetch a content document; None when upstream reports 404."""
        normalized = normalize_path(path)
        upstream_path = f"{CONTENT_PATH}{normalized}"
        response = await self._get(upstream_path)

        if response.status_code == 404:
            self.logger.info("Content not found", path=normalized)
            return None
        self._ensure_success(response, upstream_path)

        document = self._decode(response, upstream_path)
        if not isinstance(document, dict):
            return ContentItem(
                url=self._absolute_url(normalized),
                public_updated_at=None,
                content_id=None,
                raw=document,
            )

        base_path = _optional_str(document.get("base_path")) or normalized
        return ContentItem(
            url=self._absolute_url(base_path),
            public_updated_at=_optional_str(document.get("public_updated_at")),
            content_id=_optional_str(document.get("content_id")),
            raw=document,
        )

    async def get_content_by_id(self, content_id: str) -> Optional[ContentItem]:
        """Resolve an id through a narrowed search, then fetch by the hit's link."""
        params = {"filter_content_id": content_id, "count": "1"}
        response = await self._get(SEARCH_PATH, params)

        if response.status_code == 404:
            return None
        self._ensure_success(response, SEARCH_PATH)

        document = self._decode(response, SEARCH_PATH)
        results = document.get("results") if isinstance(document, dict) else None
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            self.logger.info("Content id did not resolve", content_id=content_id)
            return None

        link = _optional_str(results[0].get("link"))
        if link is None or not link.strip():
            return None
        return await self.get_content_by_path(link)

    def _parse_search_item(self, entry: Any) -> Optional[SearchResultItem]:
        if not isinstance(entry, dict):
            return None
        title = _optional_str(entry.get("title"))
        link = _optional_str(entry.get("link"))
        if not title or not link:
            return None
        return SearchResultItem(
            title=title,
            url=self._absolute_url(link),
            summary=_optional_str(entry.get("description")),
            public_updated_at=_optional_str(entry.get("public_timestamp")),
            content_id=_optional_str(entry.get("content_id")),
        )

    def _absolute_url(self, link: str) -> str:
        if link.startswith(("http://", "https://")):
            return link
        return f"{self.public_site_url}{normalize_path(link)}"

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        """Issue a GET through the retry policy, mapping exhaustion to TransportFailure."""
        try:
            return await self._send(path, params)
        except RetryError as exc:
            last = exc.last_exception
            last_status = getattr(last, "status_code", None)
            self.logger.error(
                "Upstream unavailable",
                path=path,
                attempts=exc.attempts,
                last_status=last_status,
                error=str(last)
            )
            raise TransportFailure(
                message=f"Upstream unavailable after {exc.attempts} attempts: {last}",
                attempts=exc.attempts,
                last_status=last_status,
            ) from exc

    async def _send_once(self, path: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
            event_hooks={"request": [propagate_correlation_header]},
        ) as client:
            response = await client.get(path, params=params)

        self.logger.debug("Upstream response", path=path, status_code=response.status_code)
        if response.status_code == 429 or response.status_code >= 500:
            raise RetryableStatusError(response.status_code, response.text)
        return response

    def _ensure_success(self, response: httpx.Response, path: str) -> None:
        if response.is_success:
            return
        self.logger.error(
            "Upstream request failed",
            path=path,
            status_code=response.status_code,
            response=response.text
        )
        raise UpstreamError(
            f"Upstream returned status {response.status_code}",
            details={"status_code": response.status_code}
        )

    def _decode(self, response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self.logger.error("Upstream returned invalid JSON", path=path, error=str(exc))
            raise UpstreamError(
                "Upstream returned an invalid JSON body",
                details={"status_code": response.status_code}
            ) from exc
