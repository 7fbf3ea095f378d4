"""Global configuration constants for the project.

Defines paths, remote API defaults and the page copy used across the
pipeline and the CLI entrypoint.
"""

from __future__ import annotations

from pathlib import Path

# Project directories
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
PACKAGE_DIR: Path = PROJECT_ROOT / "deptsite"
LOG_DIR: Path = PROJECT_ROOT / "logs"
TEMPLATES_DIR: Path = PROJECT_ROOT / "templates"

# Public API defaults
DEFAULT_PUBLIC_API_BASE_URL: str = "http://localhost:8000/api/v1/public"
DEFAULT_REQUEST_TIMEOUT: int = 30
DEFAULT_REVALIDATE_SECONDS: int = 120
DEFAULT_TARGET_RPM: int = 600
ACCEPT_HEADER: str = "application/json"

# Remote resource paths (relative to the base URL)
DEPARTMENTS_PATH: str = "/departments"
PROJECTS_PATH: str = "/projects"
RESEARCH_PATH: str = "/research"
GALLERY_PATH: str = "/global-gallery"

# Department code -> routable slug
DEPARTMENT_CODE_SLUGS: dict[str, str] = {
    "CS": "cs",
    "CSE": "cs",
    "CE": "ce",
    "CIVIL": "civil",
    "EE": "ee",
    "EEE": "ee",
    "ECE": "ece",
    "ME": "me",
    "ARCH": "architecture",
    "CHEM": "chemistry",
    "PHY": "physics",
    "MATH": "math",
    "BIO": "biotechnology",
    "PHARM": "pharmacy",
    "MGMT": "management",
}

# Page composition defaults
PAGE_GALLERY: str = "gallery"
PAGE_PROJECTS: str = "projects"
PAGE_RESEARCH: str = "research"
PAGE_HIGHLIGHTS: str = "highlights"
ALL_PAGES: tuple[str, ...] = (PAGE_GALLERY, PAGE_PROJECTS, PAGE_RESEARCH, PAGE_HIGHLIGHTS)

PROJECTS_DEFAULT_ORDERING: str = "-created_at"
RESEARCH_DEFAULT_ORDERING: str = "-start_date"
GALLERY_PAGE_LIMIT: int = 12
GALLERY_SOURCE_TYPE: str = "department_gallery"
HIGHLIGHTS_LIMIT: int = 6

# Page advisory / error copy
DEPARTMENT_NOT_CONFIGURED_MESSAGE: str = "Department code is not configured."
PROJECTS_FALLBACK_ERROR: str = "Unable to load projects right now."
RESEARCH_FALLBACK_ERROR: str = "Unable to load research items right now."
FEATURED_FALLBACK_ERROR: str = "Unable to load featured work right now."
GALLERY_STATUS_ERROR_FORMAT: str = "Gallery service returned {status}"
GALLERY_FALLBACK_ERROR: str = "Failed to load gallery images."

# Empty-state copy ("being populated", never an error)
EMPTY_STATE_MESSAGES: dict[str, str] = {
    PAGE_PROJECTS: "Projects will appear here once they are published for this department.",
    PAGE_RESEARCH: "Research portfolio is being curated. Check back soon for published items.",
    PAGE_GALLERY: "Gallery is being populated. Check back after the next event for fresh pictures.",
    PAGE_HIGHLIGHTS: "Featured work will appear here soon.",
}

# Rendering defaults
FALLBACK_DEPARTMENT_NAME: str = "Department"
FUNDING_CURRENCY: str = "NPR"
PAGE_TEMPLATE_PATH: Path = TEMPLATES_DIR / "page_template.html"
PAGE_CONTEXT_PLACEHOLDER: str = "{page_context_json}"

# CLI defaults and logging
DEFAULT_OUTPUT_DIR: Path = PROJECT_ROOT / "output"
LOG_FILENAME_GENERATE_PAGES: str = "generate_pages.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
