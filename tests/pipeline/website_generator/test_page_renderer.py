"""Tests for rendering helpers and page context copy selection."""

import json
from pathlib import Path

from deptsite.config import EMPTY_STATE_MESSAGES, PAGE_TEMPLATE_PATH
from deptsite.pipeline.public_api import models
from deptsite.pipeline.website_generator import renderer
from deptsite.pipeline.website_generator.composition import HighlightsState, PageState

DEPT = models.Department(uuid="d1", name="Computer Science", short_name="DoCS")


def test_titleize():
    assert renderer.titleize("final_year_project") == "Final Year Project"
    assert renderer.titleize("ONGOING") == "Ongoing"
    assert renderer.titleize("") == ""


def test_format_date():
    assert renderer.format_date("2024-01-05") == "Jan 05, 2024"
    assert renderer.format_date("2024-03-01T10:00:00Z") == "Mar 01, 2024"
    assert renderer.format_date("not a date") == "not a date"
    assert renderer.format_date(None) == ""


def test_format_currency():
    assert renderer.format_currency(1500000) == "NPR 1,500,000"
    assert renderer.format_currency(None) == ""


def test_empty_success_shows_populating_copy_not_error():
    ctx = renderer.page_context(PageState("gallery", DEPT))
    section = ctx["sections"][0]
    assert section["error_message"] is None
    assert section["empty_message"] == EMPTY_STATE_MESSAGES["gallery"]


def test_error_shows_literal_message_not_populating_copy():
    ctx = renderer.page_context(PageState("projects", None, [], "Public API returned HTTP 502."))
    section = ctx["sections"][0]
    assert section["error_message"] == "Public API returned HTTP 502."
    assert section["empty_message"] is None


def test_missing_department_falls_back_to_generic_copy():
    ctx = renderer.page_context(PageState("projects"))
    assert ctx["heading"] == "Department projects & showcases"
    gallery = renderer.page_context(PageState("gallery"))
    assert gallery["heading"] == "Department gallery"
    assert gallery["intro"].startswith("Photos and visuals")


def test_research_header_uses_short_name():
    ctx = renderer.page_context(PageState("research", DEPT))
    assert ctx["heading"] == "Computer Science scholarly work"
    assert "DoCS" in ctx["intro"]


def test_project_card(project_payloads):
    card = renderer.project_card(models.decode_project(project_payloads[0]))
    assert card["badges"] == ["Final Year Project", "Completed"]
    assert card["byline"] == "Supervisor: Dr. Rai • 4 members"
    assert card["links"] == [{"label": "Live demo", "url": "https://demo.example.test"}]
    assert card["tags"][0]["color"] == "#ff0000"


def test_research_card(research_payloads):
    card = renderer.research_card(models.decode_research(research_payloads[0]))
    assert card["meta"] == "Jan 05, 2024 – Jun 30, 2025"
    assert card["byline"] == "PI: Prof. Shrestha • Funding: UGC (NPR 1,500,000)"


def test_gallery_card_alt_fallbacks():
    item = models.GalleryItem(uuid="g", image="i")
    assert renderer.gallery_card(item, DEPT)["alt"] == "DoCS"
    assert renderer.gallery_card(item, None)["caption"] == "Gallery image"


def test_highlights_context_sections():
    state = HighlightsState(featured_research=[], research_error="down")
    ctx = renderer.page_context(state)
    projects, research = ctx["sections"]
    assert projects["empty_message"] == EMPTY_STATE_MESSAGES["highlights"]
    assert research["error_message"] == "down"
    assert research["empty_message"] is None


def test_generate_page_html_injects_escaped_json(tmp_path: Path):
    template = tmp_path / "tpl.html"
    template.write_text("<script>const ctx = {page_context_json};</script>", encoding="utf-8")
    item = models.GalleryItem(uuid="g", image="i", caption="</script><b>x</b>")
    html = renderer.generate_page_html(PageState("gallery", DEPT, [item]), template)
    assert html.count("</script>") == 1
    payload = html[len("<script>const ctx = "):-len(";</script>")]
    assert json.loads(payload)["sections"][0]["cards"][0]["caption"] == "</script><b>x</b>"


def test_bundled_template_has_placeholder():
    html = renderer.generate_page_html(PageState("projects"), PAGE_TEMPLATE_PATH)
    assert "{page_context_json}" not in html
    assert "Department projects & showcases" in html


def test_write_html_output(tmp_path: Path):
    target = tmp_path / "nested" / "page.html"
    assert renderer.write_html_output("<html></html>", target) is True
    assert target.read_text(encoding="utf-8") == "<html></html>"


def test_write_html_output_failure_returns_false(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    assert renderer.write_html_output("<html></html>", blocker / "page.html") is False
