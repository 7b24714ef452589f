"""
Adapters package for the Guidance Service.

Contains the HTTP client wrapper for the upstream content API. The
adapter encapsulates:

- Base URLs and query-string dialect
- Retry policy and correlation propagation
- Error handling that maps to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .govuk_client import GovUkClient, UpstreamClient

__all__ = [
    "GovUkClient",
    "UpstreamClient",
]
