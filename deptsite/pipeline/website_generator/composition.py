"""Page composition: the recovery boundary between accessors and rendering.

Each department page is built by a short, sequential pipeline of fallible
stages:

1. Department resolution (code -> slug -> remote department record).
2. Identity selection (the slug for projects/research, the department uuid
   for the gallery).
3. Collection fetch.

Every stage returns ``Ok(value)`` or ``Degraded(reason, advisory, error)``.
A degraded stage falls back to a documented default (no department, no
items, an optional page-level advisory) and later stages decide for
themselves whether they can still run. Nothing raised by an accessor ever
escapes `compose_page`; the terminal `PageState` tells the renderer whether
an empty page is "not populated yet" (no ``error_message``) or "failed"
(``error_message`` set).

Examples
--------
>>> from deptsite.pipeline.public_api import PublicApiClient, PublicApiConfig
>>> async def main():
...     config = PublicApiConfig()
...     async with PublicApiClient(config) as client:
...         return await compose_projects_page(client, config.department_code)
>>> # asyncio.run(main()).items
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar, Union

from deptsite.config import (
    DEPARTMENT_NOT_CONFIGURED_MESSAGE,
    FEATURED_FALLBACK_ERROR,
    GALLERY_FALLBACK_ERROR,
    GALLERY_PAGE_LIMIT,
    GALLERY_STATUS_ERROR_FORMAT,
    HIGHLIGHTS_LIMIT,
    PAGE_GALLERY,
    PAGE_HIGHLIGHTS,
    PAGE_PROJECTS,
    PAGE_RESEARCH,
    PROJECTS_DEFAULT_ORDERING,
    PROJECTS_FALLBACK_ERROR,
    RESEARCH_DEFAULT_ORDERING,
    RESEARCH_FALLBACK_ERROR,
)
from deptsite.exceptions import AppError, TransportError
from deptsite.pipeline.public_api.accessors import (
    get_department,
    list_featured_projects,
    list_featured_research,
    list_gallery_items,
    list_projects_by_department,
    list_research_by_department,
)
from deptsite.pipeline.public_api.client import PublicApiClient
from deptsite.pipeline.public_api.identity import department_slug_from_code
from deptsite.pipeline.public_api.models import (
    Department,
    GalleryItem,
    Project,
    Research,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

REASON_NOT_CONFIGURED = "not_configured"
REASON_DEPARTMENT_UNAVAILABLE = "department_unavailable"
REASON_FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Degraded:
    """A stage that fell back to its default.

    ``advisory`` is the page-level sentence to show (``None`` for silent
    fallbacks); ``error`` keeps the original exception for logging.
    """

    reason: str
    advisory: str | None = None
    error: Exception | None = None


StageResult = Union[Ok[T], Degraded]


@dataclass(frozen=True)
class PageState(Generic[T]):
    """Terminal state of one department page composition."""

    page: str
    department: Department | None = None
    items: list[T] = field(default_factory=list)
    error_message: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class HighlightsState:
    """Terminal state of the featured-work page; each section fails alone."""

    featured_projects: list[Project] = field(default_factory=list)
    featured_research: list[Research] = field(default_factory=list)
    projects_error: str | None = None
    research_error: str | None = None
    page: str = PAGE_HIGHLIGHTS

    @property
    def is_empty(self) -> bool:
        return not self.featured_projects and not self.featured_research


async def run_stage(
    label: str,
    operation: Callable[[], Awaitable[T]],
    describe: Callable[[Exception], str | None],
    *,
    reason: str = REASON_FETCH_FAILED,
    level: int = logging.WARNING,
) -> StageResult[T]:
    """Await ``operation`` and convert any failure into ``Degraded``.

    Parameters
    ----------
    label : str
        Human-readable stage name for the log line.
    operation : Callable[[], Awaitable[T]]
        Zero-argument coroutine factory performing the stage's work.
    describe : Callable[[Exception], str | None]
        Maps the failure to the page-level advisory (or ``None``).
    reason : str, optional
        Machine-readable reason recorded on the ``Degraded`` result.
    level : int, optional
        Logging level used for the failure.
    """
    try:
        return Ok(await operation())
    except Exception as exc:
        details: Any = exc.to_dict() if isinstance(exc, AppError) else repr(exc)
        logger.log(level, "%s failed: %s", label, details)
        return Degraded(reason, advisory=describe(exc), error=exc)


def message_or_fallback(fallback: str) -> Callable[[Exception], str]:
    """Use the error's own short message when it has one, else ``fallback``."""

    def describe(exc: Exception) -> str:
        if isinstance(exc, AppError) and exc.message:
            return exc.message
        return fallback

    return describe


def describe_gallery_error(exc: Exception) -> str:
    if isinstance(exc, TransportError):
        return GALLERY_STATUS_ERROR_FORMAT.format(status=exc.status)
    return GALLERY_FALLBACK_ERROR


async def resolve_department(
    client: PublicApiClient, slug: str | None, page: str = ""
) -> StageResult[Department]:
    """Stage 1: load the department record; failures are silent fallbacks."""
    if slug is None:
        return Degraded(REASON_NOT_CONFIGURED, advisory=DEPARTMENT_NOT_CONFIGURED_MESSAGE)
    return await run_stage(
        f"Department lookup for {page or 'page'} ({slug})",
        lambda: get_department(client, slug),
        lambda exc: None,
        reason=REASON_DEPARTMENT_UNAVAILABLE,
    )


def slug_identity(slug: str | None, department: Department | None) -> StageResult[str]:
    """Stage 2 for projects/research: only the slug is needed."""
    if not slug:
        return Degraded(REASON_NOT_CONFIGURED, advisory=DEPARTMENT_NOT_CONFIGURED_MESSAGE)
    return Ok(slug)


def department_uuid_identity(
    slug: str | None, department: Department | None
) -> StageResult[str]:
    """Stage 2 for the gallery: needs the resolved department's uuid."""
    if not slug:
        return Degraded(REASON_NOT_CONFIGURED, advisory=DEPARTMENT_NOT_CONFIGURED_MESSAGE)
    if department is None or not department.uuid:
        return Degraded(REASON_DEPARTMENT_UNAVAILABLE)
    return Ok(department.uuid)


@dataclass(frozen=True)
class CollectionPage(Generic[T]):
    """How one department page selects its identity and fetches its items."""

    name: str
    select_identity: Callable[[str | None, Department | None], StageResult[str]]
    fetch: Callable[[PublicApiClient, str], Awaitable[list[T]]]
    describe_error: Callable[[Exception], str | None]
    failure_level: int = logging.WARNING


def _fetch_projects(client: PublicApiClient, slug: str) -> Awaitable[list[Project]]:
    return list_projects_by_department(client, slug, ordering=PROJECTS_DEFAULT_ORDERING)


def _fetch_research(client: PublicApiClient, slug: str) -> Awaitable[list[Research]]:
    return list_research_by_department(client, slug, ordering=RESEARCH_DEFAULT_ORDERING)


def _fetch_gallery(client: PublicApiClient, uuid: str) -> Awaitable[list[GalleryItem]]:
    return list_gallery_items(client, uuid, limit=GALLERY_PAGE_LIMIT)


PROJECTS_PAGE: CollectionPage[Project] = CollectionPage(
    PAGE_PROJECTS, slug_identity, _fetch_projects, message_or_fallback(PROJECTS_FALLBACK_ERROR)
)
RESEARCH_PAGE: CollectionPage[Research] = CollectionPage(
    PAGE_RESEARCH, slug_identity, _fetch_research, message_or_fallback(RESEARCH_FALLBACK_ERROR)
)
GALLERY_PAGE: CollectionPage[GalleryItem] = CollectionPage(
    PAGE_GALLERY,
    department_uuid_identity,
    _fetch_gallery,
    describe_gallery_error,
    failure_level=logging.ERROR,
)

COLLECTION_PAGES: dict[str, CollectionPage[Any]] = {
    page.name: page for page in (PROJECTS_PAGE, RESEARCH_PAGE, GALLERY_PAGE)
}


async def compose_page(
    client: PublicApiClient,
    page: CollectionPage[T],
    department_code: str | None,
    slug_overrides: Mapping[str, str] | None = None,
) -> PageState[T]:
    """Run the three stages for ``page`` and return its terminal state.

    Never raises for remote failures: department failures are recovered
    silently, collection failures become ``error_message`` with no items.
    """
    slug = department_slug_from_code(department_code, slug_overrides)
    department_stage = await resolve_department(client, slug, page.name)
    department = department_stage.value if isinstance(department_stage, Ok) else None

    identity = page.select_identity(slug, department)
    if isinstance(identity, Degraded):
        logger.info("Skipping %s fetch: %s", page.name, identity.reason)
        return PageState(page.name, department, [], identity.advisory)

    items_stage = await run_stage(
        f"Loading {page.name}",
        lambda: page.fetch(client, identity.value),
        page.describe_error,
        level=page.failure_level,
    )
    if isinstance(items_stage, Degraded):
        return PageState(page.name, department, [], items_stage.advisory)
    return PageState(page.name, department, list(items_stage.value), None)


async def compose_projects_page(
    client: PublicApiClient,
    department_code: str | None,
    slug_overrides: Mapping[str, str] | None = None,
) -> PageState[Project]:
    return await compose_page(client, PROJECTS_PAGE, department_code, slug_overrides)


async def compose_research_page(
    client: PublicApiClient,
    department_code: str | None,
    slug_overrides: Mapping[str, str] | None = None,
) -> PageState[Research]:
    return await compose_page(client, RESEARCH_PAGE, department_code, slug_overrides)


async def compose_gallery_page(
    client: PublicApiClient,
    department_code: str | None,
    slug_overrides: Mapping[str, str] | None = None,
) -> PageState[GalleryItem]:
    return await compose_page(client, GALLERY_PAGE, department_code, slug_overrides)


async def compose_highlights_page(
    client: PublicApiClient, limit: int = HIGHLIGHTS_LIMIT
) -> HighlightsState:
    """Fetch featured projects and featured research as sibling stages.

    Ordering is whatever the server returns; a failure in one section leaves
    the other section intact.
    """
    describe = message_or_fallback(FEATURED_FALLBACK_ERROR)
    projects_stage = await run_stage(
        "Loading featured projects",
        lambda: list_featured_projects(client, limit=limit),
        describe,
    )
    research_stage = await run_stage(
        "Loading featured research",
        lambda: list_featured_research(client, limit=limit),
        describe,
    )
    return HighlightsState(
        featured_projects=(
            list(projects_stage.value) if isinstance(projects_stage, Ok) else []
        ),
        featured_research=(
            list(research_stage.value) if isinstance(research_stage, Ok) else []
        ),
        projects_error=(
            projects_stage.advisory if isinstance(projects_stage, Degraded) else None
        ),
        research_error=(
            research_stage.advisory if isinstance(research_stage, Degraded) else None
        ),
    )
