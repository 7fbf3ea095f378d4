"""Generate the department public pages from the remote public API.

This module provides a headless runner that composes the requested pages
against the configured department and writes one HTML file per page. It is
intended for programmatic invocation and is wrapped by the CLI in
`deptsite.program_generate_pages`.

Usage Examples
--------------
Typical programmatic usage with config defaults::

    from deptsite.pipeline.website_generator.runner import run_from_config
    result = run_from_config()
    assert result is True

Explicit pages and output directory::

    from pathlib import Path
    from deptsite.pipeline.website_generator.runner import run_from_config

    run_from_config(pages=["projects"], output_dir=Path("site"))

"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Iterable

from deptsite.config import (
    ALL_PAGES,
    DEFAULT_OUTPUT_DIR,
    PAGE_HIGHLIGHTS,
    PAGE_TEMPLATE_PATH,
)
from deptsite.exceptions import ConfigurationError
from deptsite.pipeline.public_api.client import PublicApiClient
from deptsite.pipeline.public_api.config import PublicApiConfig

from .composition import (
    COLLECTION_PAGES,
    HighlightsState,
    PageState,
    compose_highlights_page,
    compose_page,
)
from .renderer import generate_page_html, write_html_output

logger = logging.getLogger(__name__)


def _validate_pages(pages: Iterable[str] | None) -> list[str]:
    selected = list(pages) if pages else list(ALL_PAGES)
    unknown = [page for page in selected if page not in ALL_PAGES]
    if unknown:
        raise ConfigurationError(
            "Unknown page requested", context={"pages": unknown}
        )
    return selected


async def build_pages(
    config: Any,
    pages: Iterable[str] | None = None,
    client: PublicApiClient | None = None,
) -> dict[str, PageState[Any] | HighlightsState]:
    """Compose each requested page in turn with one shared client.

    Pages are built one after the other; within a page the department lookup
    always precedes the collection lookup. The shared client means all pages
    share one revalidation window.

    Parameters
    ----------
    config : Any
        A `PublicApiConfig` (or compatible object) supplying the department
        code and slug overrides as well as the transport settings.
    pages : Iterable[str] or None, optional
        Page names from ``ALL_PAGES``; ``None`` builds all of them.
    client : PublicApiClient or None, optional
        Pre-built client (tests); otherwise one is created and closed here.

    Returns
    -------
    dict[str, PageState | HighlightsState]
        Terminal state per page name, in request order.
    """
    selected = _validate_pages(pages)
    owned = client is None
    api = client or PublicApiClient(config)
    code = getattr(config, "department_code", None)
    overrides = getattr(config, "slug_overrides", None)
    states: dict[str, PageState[Any] | HighlightsState] = {}
    try:
        for page in selected:
            if page == PAGE_HIGHLIGHTS:
                states[page] = await compose_highlights_page(api)
            else:
                states[page] = await compose_page(
                    api, COLLECTION_PAGES[page], code, overrides
                )
            logger.info("Composed %s page", page)
    finally:
        if owned:
            await api.close()
    return states


def run_from_config(
    config: Any | None = None,
    pages: Iterable[str] | None = None,
    output_dir: Path | None = None,
    template_path: Path | None = None,
) -> bool:
    """Compose and write the requested pages.

    Remote failures never make this function fail: they are already folded
    into page state. ``False`` is returned only if configuration, the
    template or writing the output failed; those errors are logged.

    Parameters
    ----------
    config : Any or None, optional
        Runtime configuration; ``None`` loads `PublicApiConfig` from the
        environment.
    pages : Iterable[str] or None, optional
        Page names to build; ``None`` builds all pages.
    output_dir : pathlib.Path or None, optional
        Destination directory; defaults to ``DEFAULT_OUTPUT_DIR``.
    template_path : pathlib.Path or None, optional
        HTML template; defaults to ``PAGE_TEMPLATE_PATH``.

    Returns
    -------
    bool
        ``True`` when every page was written.
    """
    output_dir = Path(output_dir) if output_dir is not None else DEFAULT_OUTPUT_DIR
    template_path = (
        Path(template_path) if template_path is not None else PAGE_TEMPLATE_PATH
    )
    try:
        config = config if config is not None else PublicApiConfig()
        states = asyncio.run(build_pages(config, pages))
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc.to_dict())
        return False

    ok = True
    for page, state in states.items():
        try:
            html = generate_page_html(state, template_path)
        except OSError:
            logger.exception("Failed to render %s page", page)
            ok = False
            continue
        ok = write_html_output(html, output_dir / f"{page}.html") and ok
    return ok


__all__ = ["build_pages", "run_from_config"]
