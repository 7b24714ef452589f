"""
Shared utilities for the guidance gateway.

This package aggregates common building blocks consumed by the service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with correlation context
- correlation: Correlation id resolution and outbound propagation
- metrics: Request telemetry and Prometheus exposition
- errors: Canonical error types and responses
- retry: Retry decorators for outbound calls
- base_service: FastAPI application scaffolding

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
