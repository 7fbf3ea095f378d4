"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides fake aiohttp session/response objects so no test touches the network.
"""

import json
import os
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

BASE_URL = "https://api.example.test/api/v1/public"


class FakeLimiter:
    async def __aenter__(self):
        """Enter async context (test stub)."""
        return None

    async def __aexit__(self, exc_type, exc, tb):
        """Exit async context (test stub)."""
        return False


class FakeResponse:
    def __init__(self, status: int, text: str | bytes):
        self.status = status
        self._body = text.encode("utf-8") if isinstance(text, str) else text
        self.body_reads = 0

    async def read(self):
        self.body_reads += 1
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


def json_response(data, status: int = 200) -> FakeResponse:
    return FakeResponse(status, json.dumps(data))


class FakeSession:
    """Route GET calls by path (the URL without base and query).

    A route value may be a `FakeResponse`, an exception instance (raised when
    the request is issued) or a list of those consumed in order. Unrouted
    paths answer HTTP 500.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls: list[dict] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        path = url.split("?", 1)[0][len(BASE_URL):]
        outcome = self.routes.get(path, FakeResponse(500, "server error"))
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def urls(self) -> list[str]:
        return [call["url"] for call in self.calls]


@pytest.fixture
def api_config():
    return SimpleNamespace(
        base_url=BASE_URL,
        department_code="CS",
        slug_overrides={},
        request_timeout=5,
        revalidate_seconds=120,
        target_rpm=1000,
    )


@pytest.fixture
def make_client(api_config):
    """Build a `PublicApiClient` over a `FakeSession` with the given routes."""
    from deptsite.pipeline.public_api.client import PublicApiClient, RevalidationCache

    def _make(routes=None, *, clock=None, ttl=None):
        session = FakeSession(routes)
        cache_kwargs = {"clock": clock} if clock is not None else {}
        cache = RevalidationCache(
            ttl if ttl is not None else api_config.revalidate_seconds, **cache_kwargs
        )
        client = PublicApiClient(
            api_config, session, cache=cache, limiter=FakeLimiter()
        )
        return client, session

    return _make


@pytest.fixture
def department_payload():
    return {
        "uuid": "d1",
        "slug": "cs",
        "code": "CS",
        "name": "Computer Science",
        "shortName": "DoCS",
    }


@pytest.fixture
def project_payloads():
    return [
        {
            "id": 1,
            "title": "Campus Navigator",
            "abstract": "Indoor wayfinding.",
            "projectType": "final_year_project",
            "status": "completed",
            "academicYear": "2024",
            "tags": [{"id": 3, "name": "Mobile", "color": "#ff0000"}],
            "supervisorName": "Dr. Rai",
            "membersCount": 4,
            "demoUrl": "https://demo.example.test",
            "githubUrl": None,
        },
        {
            "id": 2,
            "title": "Crop Yield Model",
            "abstract": "Forecasting with satellite data.",
            "projectType": "research_project",
            "status": "ongoing",
            "tags": [],
        },
    ]


@pytest.fixture
def research_payloads():
    return [
        {
            "id": 10,
            "title": "Low-resource NLP",
            "abstract": "Language models for Nepali.",
            "researchType": "funded",
            "status": "active",
            "startDate": "2024-01-05",
            "endDate": "2025-06-30",
            "categories": [{"id": 1, "name": "AI"}],
            "principalInvestigatorShort": "Prof. Shrestha",
            "fundingAgency": "UGC",
            "fundingAmount": 1500000,
        }
    ]
