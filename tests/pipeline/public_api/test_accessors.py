"""Accessor tests: resource paths, query parameters and error propagation."""

from urllib.parse import parse_qs, urlsplit

import aiohttp
import pytest
from conftest import BASE_URL, FakeResponse, json_response

from deptsite.exceptions import DecodeError, NetworkError, NotFoundError, TransportError
from deptsite.pipeline.public_api import accessors


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query)


@pytest.mark.asyncio
async def test_get_department(make_client, department_payload):
    client, session = make_client({"/departments/cs": json_response(department_payload)})
    dept = await accessors.get_department(client, "cs")
    assert dept.name == "Computer Science"
    assert session.urls == [f"{BASE_URL}/departments/cs"]


@pytest.mark.asyncio
async def test_get_department_quotes_slug(make_client):
    client, session = make_client()
    with pytest.raises(TransportError):
        await accessors.get_department(client, "a/b")
    assert session.urls == [f"{BASE_URL}/departments/a%2Fb"]


@pytest.mark.asyncio
async def test_get_department_not_found(make_client):
    client, _ = make_client({"/departments/cs": FakeResponse(404, "")})
    with pytest.raises(NotFoundError):
        await accessors.get_department(client, "cs")


@pytest.mark.asyncio
async def test_list_projects_by_department(make_client, project_payloads):
    client, session = make_client(
        {"/projects/by_department": json_response(project_payloads)}
    )
    projects = await accessors.list_projects_by_department(
        client, "cs", ordering="-created_at"
    )
    assert [p.id for p in projects] == [1, 2]
    assert _query(session.urls[0]) == {
        "department_slug": ["cs"],
        "ordering": ["-created_at"],
    }


@pytest.mark.asyncio
async def test_list_projects_by_department_imposes_no_ordering(make_client):
    client, session = make_client({"/projects/by_department": json_response([])})
    await accessors.list_projects_by_department(client, "cs")
    assert "ordering" not in _query(session.urls[0])


@pytest.mark.asyncio
async def test_list_research_by_department(make_client, research_payloads):
    client, session = make_client(
        {"/research/by_department": json_response(research_payloads)}
    )
    research = await accessors.list_research_by_department(
        client, "cs", ordering="-start_date", limit=5
    )
    assert research[0].title == "Low-resource NLP"
    assert _query(session.urls[0]) == {
        "department_slug": ["cs"],
        "limit": ["5"],
        "ordering": ["-start_date"],
    }


@pytest.mark.asyncio
async def test_featured_lists_keep_server_order(make_client):
    payload = [{"id": 5, "title": "e"}, {"id": 1, "title": "a"}]
    client, session = make_client(
        {
            "/projects/featured": json_response(payload),
            "/research/featured": json_response(payload),
        }
    )
    projects = await accessors.list_featured_projects(client, limit=12)
    research = await accessors.list_featured_research(client)
    assert [p.id for p in projects] == [5, 1]
    assert [r.id for r in research] == [5, 1]
    assert session.urls == [
        f"{BASE_URL}/projects/featured?limit=12",
        f"{BASE_URL}/research/featured",
    ]


@pytest.mark.asyncio
async def test_list_projects_paginated_with_filters(make_client):
    client, session = make_client(
        {
            "/projects": json_response(
                {"results": [{"id": 1, "title": "a"}], "count": 1, "next": None, "previous": None}
            )
        }
    )
    page = await accessors.list_projects(
        client, limit=10, search="drone", project_type="capstone", is_featured=True
    )
    assert page.count == 1 and page.results[0].id == 1
    assert _query(session.urls[0]) == {
        "limit": ["10"],
        "search": ["drone"],
        "project_type": ["capstone"],
        "is_featured": ["true"],
    }


@pytest.mark.asyncio
async def test_list_research_paginated(make_client):
    client, session = make_client(
        {"/research": json_response({"results": [], "count": 0})}
    )
    page = await accessors.list_research(client, research_type="funded", offset=20)
    assert page.results == []
    assert _query(session.urls[0]) == {"offset": ["20"], "research_type": ["funded"]}


@pytest.mark.asyncio
async def test_list_departments(make_client, department_payload):
    client, _ = make_client(
        {"/departments": json_response({"results": [department_payload], "count": 1})}
    )
    page = await accessors.list_departments(client)
    assert page.results[0].slug == "cs"


@pytest.mark.asyncio
async def test_by_department_envelope_mismatch_is_decode_error(make_client):
    client, _ = make_client(
        {"/projects/by_department": json_response({"results": []})}
    )
    with pytest.raises(DecodeError):
        await accessors.list_projects_by_department(client, "cs")


@pytest.mark.asyncio
async def test_gallery_query_parameters(make_client):
    client, session = make_client(
        {"/global-gallery": json_response({"results": [{"uuid": "g", "image": "i"}]})}
    )
    items = await accessors.list_gallery_items(client, "d1", limit=12)
    assert items[0].uuid == "g"
    assert _query(session.urls[0]) == {
        "limit": ["12"],
        "source_type": ["department_gallery"],
        "source_identifier": ["d1"],
    }


@pytest.mark.asyncio
async def test_gallery_without_results_is_empty(make_client):
    client, _ = make_client({"/global-gallery": json_response({})})
    assert await accessors.list_gallery_items(client, "d1") == []


@pytest.mark.asyncio
async def test_accessors_propagate_transport_errors_unchanged(make_client):
    cause = aiohttp.ClientError("dns failure")
    client, _ = make_client({"/research/featured": cause})
    with pytest.raises(NetworkError):
        await accessors.list_featured_research(client)


@pytest.mark.asyncio
async def test_gallery_keeps_valid_items_when_one_is_malformed(make_client):
    client, _ = make_client(
        {
            "/global-gallery": json_response(
                {"results": [{"caption": "no image"}, {"uuid": "g", "image": "i"}]}
            )
        }
    )
    items = await accessors.list_gallery_items(client, "d1")
    assert [i.uuid for i in items] == ["g"]
