"""Typed domain records returned by the public API accessors.

All records are read-only projections of remote state, built fresh for each
page render. Decoders translate the camelCase wire payloads into frozen
dataclasses and raise `DecodeError` when a payload has the wrong shape.
Sequences keep the order the server sent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, TypeVar

from deptsite.exceptions import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Department:
    uuid: str
    name: str
    slug: str | None = None
    code: str | None = None
    short_name: str | None = None


@dataclass(frozen=True)
class Tag:
    """A project tag or research category."""

    id: int | str
    name: str
    color: str | None = None


@dataclass(frozen=True)
class Project:
    id: int | str
    title: str
    abstract: str = ""
    thumbnail: str | None = None
    project_type: str = ""
    status: str = ""
    academic_year: str | None = None
    tags: tuple[Tag, ...] = field(default_factory=tuple)
    supervisor_name: str | None = None
    members_count: int | None = None
    demo_url: str | None = None
    github_url: str | None = None


@dataclass(frozen=True)
class Research:
    id: int | str
    title: str
    abstract: str = ""
    thumbnail: str | None = None
    research_type: str = ""
    status: str = ""
    start_date: str | None = None
    end_date: str | None = None
    categories: tuple[Tag, ...] = field(default_factory=tuple)
    principal_investigator_short: str | None = None
    funding_agency: str | None = None
    funding_amount: float | None = None


@dataclass(frozen=True)
class GalleryItem:
    uuid: str
    image: str
    caption: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Paginated(Generic[T]):
    """A page of results in server order plus the envelope metadata."""

    results: list[T]
    count: int
    next: str | None = None
    previous: str | None = None


def _as_mapping(payload: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise DecodeError(
            f"Expected a JSON object for {kind}.",
            context={"received": type(payload).__name__},
        )
    return payload


def _required(payload: Mapping[str, Any], key: str, kind: str) -> Any:
    value = payload.get(key)
    if value is None:
        raise DecodeError(
            f"{kind} payload is missing '{key}'.", context={"key": key}
        )
    return value


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _optional_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def decode_department(payload: Any) -> Department:
    data = _as_mapping(payload, "department")
    return Department(
        uuid=str(_required(data, "uuid", "Department")),
        name=str(_required(data, "name", "Department")),
        slug=data.get("slug"),
        code=data.get("code"),
        short_name=data.get("shortName"),
    )


def decode_tag(payload: Any) -> Tag:
    data = _as_mapping(payload, "tag")
    return Tag(
        id=_required(data, "id", "Tag"),
        name=str(_required(data, "name", "Tag")),
        color=data.get("color") or None,
    )


def _decode_tags(value: Any) -> tuple[Tag, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise DecodeError("Expected a JSON array of tags.")
    return tuple(decode_tag(item) for item in value)


def decode_project(payload: Any) -> Project:
    data = _as_mapping(payload, "project")
    return Project(
        id=_required(data, "id", "Project"),
        title=str(_required(data, "title", "Project")),
        abstract=data.get("abstract") or "",
        thumbnail=data.get("thumbnail") or None,
        project_type=data.get("projectType") or "",
        status=data.get("status") or "",
        academic_year=data.get("academicYear") or None,
        tags=_decode_tags(data.get("tags")),
        supervisor_name=data.get("supervisorName") or None,
        members_count=_optional_int(data.get("membersCount")),
        demo_url=data.get("demoUrl") or None,
        github_url=data.get("githubUrl") or None,
    )


def decode_research(payload: Any) -> Research:
    data = _as_mapping(payload, "research")
    return Research(
        id=_required(data, "id", "Research"),
        title=str(_required(data, "title", "Research")),
        abstract=data.get("abstract") or "",
        thumbnail=data.get("thumbnail") or None,
        research_type=data.get("researchType") or "",
        status=data.get("status") or "",
        start_date=data.get("startDate") or None,
        end_date=data.get("endDate") or None,
        categories=_decode_tags(data.get("categories")),
        principal_investigator_short=data.get("principalInvestigatorShort") or None,
        funding_agency=data.get("fundingAgency") or None,
        funding_amount=_optional_float(data.get("fundingAmount")),
    )


def decode_gallery_item(payload: Any) -> GalleryItem:
    data = _as_mapping(payload, "gallery item")
    return GalleryItem(
        uuid=str(_required(data, "uuid", "Gallery item")),
        image=str(_required(data, "image", "Gallery item")),
        caption=data.get("caption") or None,
        created_at=data.get("createdAt") or None,
    )


def decode_list(payload: Any, decode: Callable[[Any], T]) -> list[T]:
    """Decode a bare JSON array, keeping server order."""
    if not isinstance(payload, list):
        raise DecodeError(
            "Expected a JSON array.", context={"received": type(payload).__name__}
        )
    return [decode(item) for item in payload]


def decode_paginated(payload: Any, decode: Callable[[Any], T]) -> Paginated[T]:
    """Decode a ``{results, count, next, previous}`` envelope."""
    data = _as_mapping(payload, "paginated envelope")
    results = data.get("results")
    if not isinstance(results, list):
        raise DecodeError("Paginated envelope is missing a 'results' array.")
    items = [decode(item) for item in results]
    count = _optional_int(data.get("count"))
    return Paginated(
        results=items,
        count=count if count is not None else len(items),
        next=data.get("next"),
        previous=data.get("previous"),
    )


def decode_gallery_results(payload: Any) -> list[GalleryItem]:
    """Decode the shared gallery envelope leniently.

    A response without a list-valued ``results`` field decodes to an empty
    list instead of failing. Items missing ``uuid`` or ``image`` are logged
    and skipped so the remaining images still render.
    """
    results = payload.get("results") if isinstance(payload, Mapping) else None
    if not isinstance(results, list):
        return []
    items: list[GalleryItem] = []
    for position, item in enumerate(results):
        try:
            items.append(decode_gallery_item(item))
        except DecodeError as exc:
            logger.warning("Skipping gallery item %d: %s", position, exc.to_dict())
    return items
