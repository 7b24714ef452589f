"""
Base service class for guidance gateway services.
"""

import time
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from shared.config import ServiceConfig, get_config
from shared.correlation import CORRELATION_HEADER, resolve_correlation_id
from shared.errors import GatewayException, ErrorResponse
from shared.logging import clear_context, configure_logging, get_logger, set_correlation_id
from shared.metrics import PROMETHEUS_CONTENT_TYPE, RequestTelemetry


class BaseService:
    """Base service class with common functionality."""

    def __init__(
        self,
        service_name: str,
        config: Optional[ServiceConfig] = None,
        telemetry: Optional[RequestTelemetry] = None,
    ):
        self.service_name = service_name
        self.config = config or get_config(service_name)
        self.logger = get_logger(f"{service_name}.service")
        self.telemetry = telemetry or RequestTelemetry(service_name)

        configure_logging(service_name, self.config.log_level)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"Guidance gateway - {self.service_name.title()} Service",
            version="1.0.0",
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url="/redoc" if self.config.env == "local" else None,
        )

    def _setup_middleware(self):
        """Set up correlation and telemetry middleware."""

        @self.app.middleware("http")
        async def correlate_and_measure(request: Request, call_next):
            correlation_id = resolve_correlation_id(request.headers.get(CORRELATION_HEADER))
            set_correlation_id(correlation_id)
            start_time = time.perf_counter()
            status_code = 500

            try:
                try:
                    response = await call_next(request)
                except Exception as exc:
                    self.logger.error(
                        "Unhandled exception",
                        method=request.method,
                        path=request.url.path,
                        error=str(exc),
                        exc_info=True
                    )
                    response = JSONResponse(
                        status_code=500,
                        content=ErrorResponse(error="Internal server error").model_dump(exclude_none=True)
                    )

                status_code = response.status_code
                response.headers[CORRELATION_HEADER] = correlation_id
                return response
            finally:
                duration = time.perf_counter() - start_time
                # populated by the router once a route matches
                route = request.scope.get("route")
                self.telemetry.record(
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration=duration,
                    endpoint=getattr(route, "path", None)
                )
                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=round(duration * 1000, 2)
                )
                clear_context()

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/healthz")
        async def healthz():
            """Liveness endpoint."""
            return {"status": "ok"}

        @self.app.get("/metrics")
        async def metrics_snapshot():
            """Aggregated request counters."""
            return self.telemetry.snapshot()

        @self.app.get("/metrics/prom")
        async def metrics_prometheus():
            """Prometheus metrics endpoint."""
            return Response(
                content=self.telemetry.render_prometheus(),
                media_type=PROMETHEUS_CONTENT_TYPE
            )

        @self.app.exception_handler(GatewayException)
        async def gateway_exception_handler(request: Request, exc: GatewayException):
            """Render GatewayException as a {code, error} body."""
            log = self.logger.warning if exc.status_code < 500 else self.logger.error
            log(
                "Request failed",
                path=request.url.path,
                status_code=exc.status_code,
                code=exc.code.value if exc.code else None,
                message=exc.message,
                details=exc.details
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_response().model_dump(exclude_none=True)
            )

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
