"""Rendering helpers for the department public pages.

This module is the thin view collaborator of the page pipeline. It turns a
composed `PageState` (or `HighlightsState`) into a JSON-ready page context,
chooses between "being populated" copy and the literal error sentence, and
injects the context into the HTML page template.

System Boundaries
-----------------
- Accepts only already composed page state; never talks to the remote API.
- Never sees HTTP status codes or raw JSON; only decoded records and the
  page-level ``error_message``.
- Copy and fallbacks come from `deptsite/config.py`.

Example
-------
>>> from deptsite.pipeline.website_generator import renderer
>>> from deptsite.pipeline.website_generator.composition import PageState
>>> ctx = renderer.page_context(PageState("projects"))
>>> ctx["empty_message"].startswith("Projects will appear")
True
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from deptsite.config import (
    EMPTY_STATE_MESSAGES,
    FALLBACK_DEPARTMENT_NAME,
    FUNDING_CURRENCY,
    PAGE_CONTEXT_PLACEHOLDER,
    PAGE_GALLERY,
    PAGE_PROJECTS,
    PAGE_RESEARCH,
)
from deptsite.pipeline.public_api.models import (
    Department,
    GalleryItem,
    Project,
    Research,
    Tag,
)

from .composition import HighlightsState, PageState

logger = logging.getLogger(__name__)


def titleize(value: str | None) -> str:
    r"""Turn ``snake_case`` or spaced API enums into Title Case.

    Examples
    --------
    >>> titleize("final_year_project")
    'Final Year Project'
    >>> titleize(None)
    ''
    """
    if not value:
        return ""
    parts = value.replace("_", " ").split()
    return " ".join(part[:1].upper() + part[1:].lower() for part in parts)


def format_date(value: str | None) -> str:
    r"""Format an ISO date/datetime string as ``'Jan 05, 2024'``.

    Unparseable values are returned unchanged; empty values become ``''``.

    Examples
    --------
    >>> format_date("2024-01-05")
    'Jan 05, 2024'
    >>> format_date("soon")
    'soon'
    """
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%b %d, %Y")


def format_currency(value: float | None, currency: str = FUNDING_CURRENCY) -> str:
    r"""Format a funding amount without decimals, e.g. ``'NPR 1,500,000'``.

    Examples
    --------
    >>> format_currency(1500000)
    'NPR 1,500,000'
    >>> format_currency(0)
    ''
    """
    if not value:
        return ""
    return f"{currency} {round(value):,}"


def _tags(tags: tuple[Tag, ...]) -> list[dict[str, Any]]:
    return [{"id": tag.id, "name": tag.name, "color": tag.color} for tag in tags]


def _department_names(department: Department | None) -> tuple[str, str]:
    name = department.name if department and department.name else FALLBACK_DEPARTMENT_NAME
    short = department.short_name if department and department.short_name else name
    return name, short


def project_card(item: Project) -> dict[str, Any]:
    supervisor = f"Supervisor: {item.supervisor_name or 'N/A'}"
    if item.members_count:
        supervisor += f" • {item.members_count} members"
    links = []
    if item.demo_url:
        links.append({"label": "Live demo", "url": item.demo_url})
    if item.github_url:
        links.append({"label": "Source", "url": item.github_url})
    return {
        "id": item.id,
        "title": item.title,
        "abstract": item.abstract,
        "thumbnail": item.thumbnail,
        "badges": [titleize(item.project_type), titleize(item.status)],
        "meta": item.academic_year or "",
        "tags": _tags(item.tags),
        "byline": supervisor,
        "links": links,
    }


def research_card(item: Research) -> dict[str, Any]:
    dates = format_date(item.start_date)
    if dates and item.end_date:
        dates += f" – {format_date(item.end_date)}"
    byline = f"PI: {item.principal_investigator_short or 'TBD'}"
    if item.funding_agency:
        byline += f" • Funding: {item.funding_agency}"
    if item.funding_amount:
        byline += f" ({format_currency(item.funding_amount)})"
    return {
        "id": item.id,
        "title": item.title,
        "abstract": item.abstract,
        "thumbnail": item.thumbnail,
        "badges": [titleize(item.research_type), titleize(item.status)],
        "meta": dates,
        "tags": _tags(item.categories),
        "byline": byline,
        "links": [],
    }


def gallery_card(item: GalleryItem, department: Department | None) -> dict[str, Any]:
    short = department.short_name if department else None
    return {
        "id": item.uuid,
        "image": item.image,
        "alt": item.caption or short or "Department gallery image",
        "caption": item.caption or short or "Gallery image",
        "meta": format_date(item.created_at),
    }


def _header(state: PageState[Any]) -> dict[str, str]:
    name, short = _department_names(state.department)
    if state.page == PAGE_PROJECTS:
        return {
            "eyebrow": "Department Projects",
            "heading": f"{name} projects & showcases",
            "intro": (
                f"Explore student and faculty-led projects from {short}, "
                "including capstone work, prototypes, and research builds."
            ),
        }
    if state.page == PAGE_RESEARCH:
        return {
            "eyebrow": "Research & Projects",
            "heading": f"{name} scholarly work",
            "intro": (
                "Explore published research, funded initiatives, and "
                f"student-led projects emerging from {short}."
            ),
        }
    department = state.department
    return {
        "eyebrow": "Department gallery",
        "heading": department.name if department and department.name else "Department gallery",
        "intro": (
            f"A curated album of {department.short_name} labs, events, and research moments."
            if department and department.short_name
            else "Photos and visuals from departments across the campus community."
        ),
    }


def _empty_message(page: str, is_empty: bool, error_message: str | None) -> str | None:
    if is_empty and not error_message:
        return EMPTY_STATE_MESSAGES.get(page)
    return None


def page_context(state: PageState[Any] | HighlightsState) -> dict[str, Any]:
    r"""Build the JSON-ready context consumed by the page template.

    Parameters
    ----------
    state : PageState or HighlightsState
        Terminal state produced by the composition layer.

    Returns
    -------
    dict[str, Any]
        Header copy, ``sections`` (each with ``cards``, ``error_message`` and
        ``empty_message``). Exactly one of the two messages can be set for a
        section: the error sentence wins, and "being populated" copy is only
        used for a successful but empty collection.
    """
    if isinstance(state, HighlightsState):
        return {
            "page": state.page,
            "eyebrow": "Featured work",
            "heading": "Featured projects & research",
            "intro": "Curated highlights from across the campus.",
            "sections": [
                {
                    "title": "Featured projects",
                    "kind": "card",
                    "cards": [project_card(p) for p in state.featured_projects],
                    "error_message": state.projects_error,
                    "empty_message": _empty_message(
                        state.page, not state.featured_projects, state.projects_error
                    ),
                },
                {
                    "title": "Featured research",
                    "kind": "card",
                    "cards": [research_card(r) for r in state.featured_research],
                    "error_message": state.research_error,
                    "empty_message": _empty_message(
                        state.page, not state.featured_research, state.research_error
                    ),
                },
            ],
        }

    if state.page == PAGE_GALLERY:
        title, kind = "Gallery", "image"
        cards = [gallery_card(item, state.department) for item in state.items]
    elif state.page == PAGE_RESEARCH:
        title, kind = "Research initiatives", "card"
        cards = [research_card(item) for item in state.items]
    else:
        title, kind = "Projects", "card"
        cards = [project_card(item) for item in state.items]
    return {
        "page": state.page,
        **_header(state),
        "sections": [
            {
                "title": title,
                "kind": kind,
                "cards": cards,
                "error_message": state.error_message,
                "empty_message": _empty_message(
                    state.page, state.is_empty, state.error_message
                ),
            }
        ],
    }


def generate_page_html(
    state: PageState[Any] | HighlightsState, template_path: Path
) -> str:
    r"""Render a page by injecting its context into the HTML template.

    The template must contain the ``{page_context_json}`` placeholder. The
    JSON is escaped so it cannot close the surrounding ``<script>`` tag.

    Raises
    ------
    OSError
        If the template file cannot be read.
    """
    with template_path.open("r", encoding="utf-8") as fh:
        tpl = fh.read()
    payload = json.dumps(page_context(state), ensure_ascii=False).replace("</", "<\\/")
    return tpl.replace(PAGE_CONTEXT_PLACEHOLDER, payload)


def write_html_output(html_content: str, output_file: Path) -> bool:
    """Write rendered HTML, creating parent directories; log and return False on failure."""
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(html_content, encoding="utf-8")
    except OSError:
        logger.exception("Failed to write HTML output to %s", output_file)
        return False
    return True
