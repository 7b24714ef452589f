"""
Correlation id handling shared by inbound middleware and upstream clients.
"""

import uuid
from typing import Optional

import httpx

from shared.logging import get_correlation_id

CORRELATION_HEADER = "X-Correlation-ID"


def resolve_correlation_id(value: Optional[str]) -> str:
    """Return the inbound correlation id, or a fresh one when missing or blank."""
    if value is not None and value.strip():
        return value
    return uuid.uuid4().hex


async def propagate_correlation_header(request: httpx.Request) -> None:
    """httpx request hook copying the current correlation id onto an outbound call."""
    correlation_id = get_correlation_id()
    if not correlation_id:
        return
    request.headers[CORRELATION_HEADER] = correlation_id
