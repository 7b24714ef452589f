"""
Guidance gateway service package.

The gateway fronts tool-style requests for published guidance, handling:
- Request validation and mapping onto the upstream search dialect
- Upstream calls with retry-with-backoff and correlation propagation
- Deterministic projection of upstream results into public envelopes
- Translation of upstream failures into domain error codes

Structure:
- app.main: FastAPI app, tool routes and service wiring.
- app.adapters: HTTP client for the upstream content API.
- app.domain: Records, request parsing, projection and error taxonomy.
"""
