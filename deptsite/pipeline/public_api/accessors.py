"""Typed query functions for the public API resources.

Every accessor is an instance of one generic `ResourceAccessor` (resource
path, decode function) built on `PublicApiClient.get`. Each accessor knows
which response shape its endpoint returns (bare array, paginated envelope or
the lenient gallery envelope) and never guesses. Accessors never catch:
transport and decode errors propagate unchanged to the caller.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Generic, Mapping, TypeVar
from urllib.parse import quote

from deptsite.config import (
    DEPARTMENTS_PATH,
    GALLERY_PATH,
    GALLERY_SOURCE_TYPE,
    PROJECTS_PATH,
    RESEARCH_PATH,
)

from .client import PublicApiClient, QueryValue
from .models import (
    Department,
    GalleryItem,
    Paginated,
    Project,
    Research,
    decode_department,
    decode_gallery_results,
    decode_list,
    decode_paginated,
    decode_project,
    decode_research,
)

R = TypeVar("R")


class ResourceAccessor(Generic[R]):
    """A fixed resource path plus the decode step for its response shape.

    Parameters
    ----------
    path : str
        Path relative to the API base URL. May contain ``str.format``
        placeholders filled (URL-quoted) from ``path_params`` at call time.
    decode : Callable[[Any], R]
        Turns the decoded JSON body into typed records.
    """

    def __init__(self, path: str, decode: Callable[[Any], R]) -> None:
        self.path = path
        self.decode = decode

    def resolve_path(self, **path_params: str) -> str:
        quoted = {key: quote(str(value), safe="") for key, value in path_params.items()}
        return self.path.format(**quoted)

    async def fetch(
        self,
        client: PublicApiClient,
        query: Mapping[str, QueryValue] | None = None,
        **path_params: str,
    ) -> R:
        payload = await client.get(self.resolve_path(**path_params), query)
        return self.decode(payload)


DEPARTMENT_DETAIL: ResourceAccessor[Department] = ResourceAccessor(
    f"{DEPARTMENTS_PATH}/{{slug}}", decode_department
)
DEPARTMENT_LIST: ResourceAccessor[Paginated[Department]] = ResourceAccessor(
    DEPARTMENTS_PATH, partial(decode_paginated, decode=decode_department)
)
PROJECT_LIST: ResourceAccessor[Paginated[Project]] = ResourceAccessor(
    PROJECTS_PATH, partial(decode_paginated, decode=decode_project)
)
PROJECTS_BY_DEPARTMENT: ResourceAccessor[list[Project]] = ResourceAccessor(
    f"{PROJECTS_PATH}/by_department", partial(decode_list, decode=decode_project)
)
FEATURED_PROJECTS: ResourceAccessor[list[Project]] = ResourceAccessor(
    f"{PROJECTS_PATH}/featured", partial(decode_list, decode=decode_project)
)
RESEARCH_LIST: ResourceAccessor[Paginated[Research]] = ResourceAccessor(
    RESEARCH_PATH, partial(decode_paginated, decode=decode_research)
)
RESEARCH_BY_DEPARTMENT: ResourceAccessor[list[Research]] = ResourceAccessor(
    f"{RESEARCH_PATH}/by_department", partial(decode_list, decode=decode_research)
)
FEATURED_RESEARCH: ResourceAccessor[list[Research]] = ResourceAccessor(
    f"{RESEARCH_PATH}/featured", partial(decode_list, decode=decode_research)
)
GALLERY: ResourceAccessor[list[GalleryItem]] = ResourceAccessor(
    GALLERY_PATH, decode_gallery_results
)


# Departments


async def get_department(client: PublicApiClient, slug: str) -> Department:
    """Fetch one department; raises `NotFoundError` when the slug is unknown remotely."""
    return await DEPARTMENT_DETAIL.fetch(client, slug=slug)


async def list_departments(
    client: PublicApiClient, *, limit: int | None = None, offset: int | None = None
) -> Paginated[Department]:
    return await DEPARTMENT_LIST.fetch(client, {"limit": limit, "offset": offset})


# Projects


async def list_projects(
    client: PublicApiClient,
    *,
    limit: int | None = None,
    offset: int | None = None,
    ordering: str | None = None,
    search: str | None = None,
    department: str | int | None = None,
    project_type: str | None = None,
    status: str | None = None,
    is_featured: bool | None = None,
) -> Paginated[Project]:
    """List projects with server-side filters; returns the paginated envelope."""
    return await PROJECT_LIST.fetch(
        client,
        {
            "limit": limit,
            "offset": offset,
            "ordering": ordering,
            "search": search,
            "department": department,
            "project_type": project_type,
            "status": status,
            "is_featured": is_featured,
        },
    )


async def list_projects_by_department(
    client: PublicApiClient,
    slug: str,
    *,
    limit: int | None = None,
    offset: int | None = None,
    ordering: str | None = None,
) -> list[Project]:
    """List one department's projects in server order.

    No ordering is imposed here; callers pass e.g. ``"-created_at"``.
    """
    return await PROJECTS_BY_DEPARTMENT.fetch(
        client,
        {"department_slug": slug, "limit": limit, "offset": offset, "ordering": ordering},
    )


async def list_featured_projects(
    client: PublicApiClient, *, limit: int | None = None
) -> list[Project]:
    return await FEATURED_PROJECTS.fetch(client, {"limit": limit})


# Research


async def list_research(
    client: PublicApiClient,
    *,
    limit: int | None = None,
    offset: int | None = None,
    ordering: str | None = None,
    search: str | None = None,
    department: str | int | None = None,
    research_type: str | None = None,
    status: str | None = None,
    is_featured: bool | None = None,
) -> Paginated[Research]:
    """List research with server-side filters; returns the paginated envelope."""
    return await RESEARCH_LIST.fetch(
        client,
        {
            "limit": limit,
            "offset": offset,
            "ordering": ordering,
            "search": search,
            "department": department,
            "research_type": research_type,
            "status": status,
            "is_featured": is_featured,
        },
    )


async def list_research_by_department(
    client: PublicApiClient,
    slug: str,
    *,
    limit: int | None = None,
    offset: int | None = None,
    ordering: str | None = None,
) -> list[Research]:
    return await RESEARCH_BY_DEPARTMENT.fetch(
        client,
        {"department_slug": slug, "limit": limit, "offset": offset, "ordering": ordering},
    )


async def list_featured_research(
    client: PublicApiClient, *, limit: int | None = None
) -> list[Research]:
    return await FEATURED_RESEARCH.fetch(client, {"limit": limit})


# Gallery


async def list_gallery_items(
    client: PublicApiClient,
    source_identifier: str,
    *,
    limit: int | None = None,
    source_type: str = GALLERY_SOURCE_TYPE,
) -> list[GalleryItem]:
    """Query the shared gallery endpoint for one source (e.g. a department uuid)."""
    return await GALLERY.fetch(
        client,
        {
            "limit": limit,
            "source_type": source_type,
            "source_identifier": source_identifier,
        },
    )
