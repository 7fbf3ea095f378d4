"""Configuration and environment loader for the public API client.

This module provides PublicApiConfig, which loads, validates, and exposes
all process-wide settings required to talk to the remote public API and to
scope pages to one department.

Role in Architecture
--------------------
- Forms the boundary between the process environment (and an optional `.env`
  file) and the pipeline's typed runtime config.
- Provides a single source of truth for the API base URL, the configured
  department code, timeouts, the revalidation window and the request rate.
- No business or client logic: only configuration loading, structuring, and validation.

Examples
--------
>>> from deptsite.pipeline.public_api.config import PublicApiConfig
>>> cfg = PublicApiConfig()
>>> assert cfg.base_url.startswith("http")
>>> assert cfg.revalidate_seconds >= 0
"""

import os
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

import deptsite.config as _project_config
from deptsite.config import (
    DEFAULT_PUBLIC_API_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_REVALIDATE_SECONDS,
    DEFAULT_TARGET_RPM,
)
from deptsite.exceptions import ConfigurationError


def parse_slug_overrides(raw: str | None) -> dict[str, str]:
    """Parse a ``"CODE=slug,CODE2=slug2"`` string into a code->slug mapping.

    Blank entries are skipped; codes are upper-cased. An entry without ``=``
    or with an empty side raises ``ConfigurationError``.
    """
    overrides: dict[str, str] = {}
    if not raw:
        return overrides
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        code, sep, slug = entry.partition("=")
        code, slug = code.strip().upper(), slug.strip()
        if not sep or not code or not slug:
            raise ConfigurationError(
                "Invalid DEPARTMENT_SLUG_OVERRIDES entry",
                context={"entry": entry},
            )
        overrides[code] = slug
    return overrides


def _int_setting(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{name} must be an integer", context={"value": raw}
        ) from exc
    if value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}", context={"value": value}
        )
    return value


class PublicApiConfig:
    r"""Configuration loader and validator for the public API and department scope.

    Loads configuration from environment variables and an optional `.env`
    file at the project root. Values are resolved once at startup and treated
    as immutable for the process lifetime.

    Attributes
    ----------
    base_url : str
        Base URL of the public API, without a trailing slash.
    department_code : str | None
        The configured department code; ``None`` when unset (an unconfigured
        state, not an error).
    slug_overrides : dict[str, str]
        Extra code->slug entries layered on top of the built-in table.
    request_timeout : int
        Total timeout (seconds) for an individual request.
    revalidate_seconds : int
        Revalidation window (seconds) of the transport cache.
    target_rpm : int
        Target requests per minute for the client's rate limiter.

    Examples
    --------
    >>> import os
    >>> os.environ["DEPARTMENT_CODE"] = "CS"
    >>> from deptsite.pipeline.public_api.config import PublicApiConfig
    >>> PublicApiConfig().department_code
    'CS'
    """

    def __init__(self) -> None:
        r"""Initialize a PublicApiConfig from the environment.

        Raises
        ------
        ConfigurationError
            If the base URL is not an absolute http(s) URL, if a numeric
            setting is not an integer, or if the slug overrides are malformed.
        """
        # Resolve the project root through deptsite.config so tests can
        # monkeypatch ``deptsite.config.PROJECT_ROOT``.
        env_path = Path(_project_config.PROJECT_ROOT) / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=True)
        base_url = os.getenv("PUBLIC_API_BASE_URL") or DEFAULT_PUBLIC_API_BASE_URL
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                "PUBLIC_API_BASE_URL must be an absolute http(s) URL",
                context={"value": base_url},
            )
        self.base_url: str = base_url.rstrip("/")
        self.department_code: str | None = (
            os.getenv("DEPARTMENT_CODE") or ""
        ).strip() or None
        self.slug_overrides = parse_slug_overrides(
            os.getenv("DEPARTMENT_SLUG_OVERRIDES")
        )
        self.request_timeout = _int_setting(
            "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, minimum=1
        )
        self.revalidate_seconds = _int_setting(
            "REVALIDATE_SECONDS", DEFAULT_REVALIDATE_SECONDS
        )
        self.target_rpm = _int_setting("TARGET_RPM", DEFAULT_TARGET_RPM, minimum=1)
