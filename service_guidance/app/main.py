"""
Guidance gateway service.

Exposes tool-style endpoints (search, fetch by path or id, metadata, error
taxonomy, force refresh) backed by the GOV.UK search and content APIs.
"""

import json
from typing import Any, Dict, Optional

from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import InvalidRequestError, NotFoundOrRedirected
from shared.metrics import RequestTelemetry
from shared.retry import RetryConfig

from .adapters.govuk_client import GovUkClient, UpstreamClient
from .domain.models import ContentItem
from .domain.projector import ResultProjector
from .domain.requests import ContentOptions, parse_lookup_value, parse_search_query
from .domain.taxonomy import ENRICHMENT_STUB, SOURCE_METADATA, error_taxonomy
from .domain.timestamps import utc_now_iso

NIL_CONTENT_ID = "00000000-0000-0000-0000-000000000000"


class GuidanceService(BaseService):
    """Guidance gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        upstream_client: Optional[UpstreamClient] = None,
        telemetry: Optional[RequestTelemetry] = None,
    ):
        super().__init__("guidance", config=config, telemetry=telemetry)
        self.upstream = upstream_client or GovUkClient(
            base_url=self.config.upstream_base_url,
            public_site_url=self.config.public_site_url,
            timeout=self.config.upstream_timeout_seconds,
            retry_config=RetryConfig.from_retries(
                self.config.upstream_max_retries,
                base_delay=self.config.upstream_retry_base_delay,
            ),
        )
        self.projector = ResultProjector()

        self._setup_tool_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.guidance_service = self

    async def _read_body(self, request: Request) -> Dict[str, Any]:
        """Decode the JSON body; an empty body reads as an empty object."""
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise InvalidRequestError("request body must be valid JSON") from exc
        if not isinstance(payload, dict):
            raise InvalidRequestError("request body must be a JSON object")
        return payload

    def _content_envelope(
        self,
        item: Optional[ContentItem],
        options: ContentOptions,
        fallback_content_id: str = NIL_CONTENT_ID,
    ) -> Dict[str, Any]:
        """Shape a content response, with placeholder provenance when item is None."""
        payload: Dict[str, Any] = {
            "content": item.document if item else {},
            "url": (item.url if item else None) or f"{self.config.public_site_url.rstrip('/')}/",
            "public_updated_at": (item.public_updated_at if item else None) or utc_now_iso(),
            "attribution": self.config.attribution,
            "disclaimer": self.config.disclaimer,
            "content_id": (item.content_id if item else None) or fallback_content_id,
        }
        if options.include_enrichment:
            payload["enrichment"] = dict(ENRICHMENT_STUB)
        return payload

    def _setup_tool_routes(self):
        """Set up tool routes."""

        @self.app.post("/tools/search_guidance")
        async def search_guidance(request: Request):
            """Search published guidance."""
            query = parse_search_query(await self._read_body(request))
            upstream = await self.upstream.search(query)
            result_set = self.projector.project(upstream)
            return result_set.to_dict()

        @self.app.post("/tools/get_content_by_path")
        async def get_content_by_path(request: Request):
            """Fetch a content document by its path."""
            payload = await self._read_body(request)
            options = ContentOptions.from_payload(payload)
            path = parse_lookup_value(payload, "path")

            item = await self.upstream.get_content_by_path(path) if path else None
            if item is None and options.strict_upstream_errors:
                raise NotFoundOrRedirected(
                    "Requested path not found or redirected",
                    details={"path": path}
                )
            return self._content_envelope(item, options)

        @self.app.post("/tools/get_content_by_id")
        async def get_content_by_id(request: Request):
            """Fetch a content document by its content id."""
            payload = await self._read_body(request)
            options = ContentOptions.from_payload(payload)
            content_id = parse_lookup_value(payload, "content_id")

            item = await self.upstream.get_content_by_id(content_id) if content_id else None
            if item is None and content_id and options.strict_upstream_errors:
                raise NotFoundOrRedirected(
                    "Requested content not found or redirected",
                    details={"content_id": content_id}
                )
            return self._content_envelope(
                item,
                options,
                fallback_content_id=content_id or NIL_CONTENT_ID,
            )

        @self.app.get("/tools/get_source_metadata")
        async def get_source_metadata():
            """Describe the upstream source."""
            return dict(SOURCE_METADATA)

        @self.app.get("/tools/get_error_taxonomy")
        async def get_error_taxonomy():
            """List the domain error codes."""
            return error_taxonomy()

        @self.app.post("/tools/force_refresh")
        async def force_refresh():
            """Acknowledge a refresh request; nothing is cached."""
            return {"status": "ok", "cached": False}


def create_app(
    config: Optional[ServiceConfig] = None,
    upstream_client: Optional[UpstreamClient] = None,
    telemetry: Optional[RequestTelemetry] = None,
):
    """Create FastAPI application."""
    service = GuidanceService(config=config, upstream_client=upstream_client, telemetry=telemetry)
    return service.app


if __name__ == "__main__":
    service = GuidanceService()
    service.run()
