"""Website Generator Pipeline Module.

Summary
-------
Provides the import surface for turning remote public API data into the
department pages: stage-by-stage page composition with documented fallbacks,
rendering helpers, and the headless runner.

System Boundaries
-----------------
- This initializer contains no logic; it only re-exports submodule symbols.
- `composition` is the sole recovery boundary for remote failures.
- `renderer` never sees HTTP status codes or raw JSON.

Usage
-----
    >>> from deptsite.pipeline.website_generator import run_from_config
    >>> run_from_config(pages=["gallery"])  # doctest: +SKIP
    True

"""

from .composition import (
    Degraded,
    HighlightsState,
    Ok,
    PageState,
    compose_gallery_page,
    compose_highlights_page,
    compose_page,
    compose_projects_page,
    compose_research_page,
)
from .renderer import generate_page_html, page_context, write_html_output
from .runner import build_pages, run_from_config

__all__ = [
    "Degraded",
    "HighlightsState",
    "Ok",
    "PageState",
    "build_pages",
    "compose_gallery_page",
    "compose_highlights_page",
    "compose_page",
    "compose_projects_page",
    "compose_research_page",
    "generate_page_html",
    "page_context",
    "run_from_config",
    "write_html_output",
]
