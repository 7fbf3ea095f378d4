"""Tests for the headless page generation runner."""

from pathlib import Path

import pytest
from conftest import FakeLimiter, FakeResponse, FakeSession, json_response

from deptsite.pipeline.public_api.client import PublicApiClient
from deptsite.pipeline.website_generator import runner
from deptsite.pipeline.website_generator.composition import HighlightsState, PageState


def _routes(department_payload, project_payloads):
    return {
        "/departments/cs": json_response(department_payload),
        "/projects/by_department": json_response(project_payloads),
        "/research/by_department": FakeResponse(500, ""),
        "/global-gallery": json_response({}),
        "/projects/featured": json_response(project_payloads),
        "/research/featured": json_response([]),
    }


@pytest.mark.asyncio
async def test_build_pages_all(make_client, api_config, department_payload, project_payloads):
    client, session = make_client(_routes(department_payload, project_payloads))
    states = await runner.build_pages(api_config, None, client=client)
    assert list(states) == ["gallery", "projects", "research", "highlights"]
    assert isinstance(states["highlights"], HighlightsState)
    assert len(states["projects"].items) == 2
    assert states["research"].error_message == "Public API returned HTTP 500."
    assert states["gallery"].items == [] and states["gallery"].error_message is None
    # department record is fetched once and then served from the revalidation window
    assert sum("/departments/cs" in url for url in session.urls) == 1


@pytest.mark.asyncio
async def test_build_pages_rejects_unknown_page(make_client, api_config):
    from deptsite.exceptions import ConfigurationError

    client, _ = make_client()
    with pytest.raises(ConfigurationError):
        await runner.build_pages(api_config, ["about"], client=client)


def test_run_from_config_writes_pages(
    monkeypatch, tmp_path: Path, api_config, department_payload, project_payloads
):
    session = FakeSession(_routes(department_payload, project_payloads))
    monkeypatch.setattr(
        runner,
        "PublicApiClient",
        lambda config: PublicApiClient(config, session, limiter=FakeLimiter()),
    )
    ok = runner.run_from_config(api_config, ["projects", "gallery"], tmp_path)
    assert ok is True
    projects_html = (tmp_path / "projects.html").read_text(encoding="utf-8")
    assert "Computer Science projects & showcases" in projects_html
    assert "Campus Navigator" in projects_html
    gallery_html = (tmp_path / "gallery.html").read_text(encoding="utf-8")
    assert "Gallery is being populated" in gallery_html


def test_run_from_config_remote_failures_still_succeed(monkeypatch, tmp_path: Path, api_config):
    session = FakeSession()
    monkeypatch.setattr(
        runner,
        "PublicApiClient",
        lambda config: PublicApiClient(config, session, limiter=FakeLimiter()),
    )
    assert runner.run_from_config(api_config, None, tmp_path) is True
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "gallery.html",
        "highlights.html",
        "projects.html",
        "research.html",
    ]


def test_run_from_config_missing_template_returns_false(monkeypatch, tmp_path: Path, api_config):
    async def fake_build(config, pages):
        return {"projects": PageState("projects")}

    monkeypatch.setattr(runner, "build_pages", fake_build)
    ok = runner.run_from_config(
        api_config, ["projects"], tmp_path, template_path=tmp_path / "missing.html"
    )
    assert ok is False


def test_run_from_config_invalid_configuration(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("PUBLIC_API_BASE_URL", "nonsense")
    monkeypatch.setattr("deptsite.config.PROJECT_ROOT", tmp_path)
    assert runner.run_from_config(None, None, tmp_path) is False
