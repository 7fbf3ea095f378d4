"""The public_api package is the data access layer for the department pages.

It encapsulates configuration loading, department identity resolution, the
asynchronous transport with its revalidation window, the typed domain records
and the resource accessors. Nothing in this package recovers from failures;
recovery belongs to `deptsite.pipeline.website_generator.composition`.

Modules exported
----------------
PublicApiClient
    The asyncio GET client with the TTL revalidation cache.
PublicApiConfig
    Process-wide configuration for the API base URL and department scope.
department_slug_from_code
    Pure department code -> slug resolution.
"""

from __future__ import annotations

from .client import PublicApiClient, RevalidationCache, build_url, encode_query
from .config import PublicApiConfig
from .identity import department_slug_from_code

__all__ = [
    "PublicApiClient",
    "PublicApiConfig",
    "RevalidationCache",
    "build_url",
    "department_slug_from_code",
    "encode_query",
]
