"""
Fixed descriptors published by the metadata tools.
"""

from typing import Any, Dict, List

from shared.errors import ErrorCode

# STALE_CACHE_SERVED and CONTENT_OUT_OF_SCOPE are published but reserved;
# no code path emits them.
ERROR_DESCRIPTIONS: Dict[ErrorCode, str] = {
    ErrorCode.UPSTREAM_RATE_LIMITED: "GOV.UK API rate limit exceeded",
    ErrorCode.NOT_FOUND_OR_REDIRECTED: "Requested path not found or redirected",
    ErrorCode.STALE_CACHE_SERVED: "Stale cache served due to upstream failure",
    ErrorCode.CONTENT_OUT_OF_SCOPE: "Content is not part of Charity Commission guidance",
    ErrorCode.UPSTREAM_PARAMETER_ERROR: "Invalid parameters supplied to upstream GOV.UK API",
}

SOURCE_METADATA: Dict[str, str] = {
    "organisation": "charity-commission",
    "source": "GOV.UK Content API",
    "base_url": "https://www.gov.uk/api",
    "documentation_url": "https://www.gov.uk/api",
}

ENRICHMENT_STUB: Dict[str, Any] = {
    "is_enrichment": True,
    "notes": "stubbed enrichment",
}


def error_taxonomy() -> Dict[str, List[Dict[str, str]]]:
    return {
        "errors": [
            {"code": code.value, "description": description}
            for code, description in ERROR_DESCRIPTIONS.items()
        ]
    }
