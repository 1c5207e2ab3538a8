"""
Pytest Configuration and Fixtures.
===================================

Shared fixtures for all test modules:
- Token factory (signed JWTs with chosen claims)
- Fake HTTP responses and a mocked requests session
- A client wired to the mocked session
- Sample projects, applications and roadmaps
"""

import json
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Generator
from unittest.mock import MagicMock

import pytest
import requests
from jose import jwt


# ─────────────────────────────────────────────────────────────────────────────
# Path Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return project_root / "config" / "settings.yaml"


# ─────────────────────────────────────────────────────────────────────────────
# Auth Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Build a signed JWT.

    Defaults to a student token valid for one hour; keyword arguments
    override claims (``exp=None`` drops the expiry).
    """

    def _make(**overrides: Any) -> str:
        claims: dict[str, Any] = {
            "userId": "u-123",
            "name": "Ada Lovelace",
            "email": "ada@uni.edu",
            "type": "stu",
            "iat": int(time.time()),
            "exp": int(time.time()) + 3600,
        }
        claims.update(overrides)
        claims = {k: v for k, v in claims.items() if v is not None}
        return jwt.encode(claims, "test-secret", algorithm="HS256")

    return _make


@pytest.fixture
def token_store():
    """In-memory token store."""
    from researchconnect.api.auth import MemoryTokenStore

    return MemoryTokenStore()


# ─────────────────────────────────────────────────────────────────────────────
# HTTP Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Build a real ``requests.Response`` with a JSON body."""

    def _make(status_code: int = 200, body: Any = None, reason: str = "") -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response.reason = reason
        response._content = b"" if body is None else json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
        return response

    return _make


@pytest.fixture
def mock_session() -> MagicMock:
    """A mocked ``requests.Session``; set ``request.side_effect`` per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(mock_session: MagicMock, token_store):
    """Client talking to the mocked session, with instant retries."""
    from researchconnect.api.client import ResearchConnectClient

    return ResearchConnectClient(
        base_url="http://api.test/v1",
        token_store=token_store,
        timeout=5,
        max_retries=3,
        refresh_buffer_seconds=30,
        retry_min_wait=0,
        retry_max_wait=0,
        session=mock_session,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Sample Data Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_project_data() -> dict:
    """A project as the API returns it."""
    return {
        "ID": 7,
        "pid": "p-quantum",
        "name": "Quantum Error Correction",
        "sdesc": "Simulate surface codes",
        "ldesc": "Build and benchmark decoders for surface codes on noisy simulators.",
        "tags": ["quantum", "python"],
        "isActive": "true",
        "uid": "prof-1",
        "user": {"uid": "prof-1", "name": "Grace Hopper", "email": "grace@uni.edu"},
        "fieldOfStudy": "physics",
        "specialization": "quantum-computing",
        "duration": "Short-term (1-3 months)",
        "positionType": ["Paid", "Academic Credit"],
        "deadline": "2026-11-01",
    }


@pytest.fixture
def sample_projects(sample_project_data: dict):
    """A few projects covering different fields, durations and deadlines."""
    from researchconnect.shared.schemas import Project

    second = dict(
        sample_project_data,
        ID=8,
        pid="p-bio",
        name="Protein Folding Pipelines",
        sdesc="Data pipelines for folding predictions",
        ldesc="Scale inference for protein structure prediction.",
        tags=["biology", "ml"],
        isActive=True,
        user={"uid": "prof-2", "name": "Rosalind Franklin"},
        fieldOfStudy="biology",
        specialization="bioinformatics",
        duration="Long-term (6+ months)",
        positionType=["Volunteer"],
        deadline="2027-03-01",
    )
    third = dict(
        sample_project_data,
        ID=9,
        pid="p-optics",
        name="Optical Tweezers",
        sdesc="Trap particles with light",
        ldesc="Calibrate optical traps.",
        tags=["optics"],
        isActive=False,
        specialization="optics",
        duration="Medium-term (3-6 months)",
        positionType=["Thesis"],
        deadline=None,
    )
    return [Project.model_validate(p) for p in (sample_project_data, second, third)]


@pytest.fixture
def sample_application_data() -> dict:
    """A student's application as returned by ``GET /applications/my``."""
    return {
        "ID": 41,
        "PID": "p-quantum",
        "uid": "u-123",
        "status": "under_review",
        "time_created": "2026-10-01T09:00:00Z",
        "availability": "10 hours/week",
        "motivation": "I love error correction",
        "Project": {"project_name": "Quantum Error Correction", "project_id": "p-quantum"},
        "User": {"uid": "prof-1", "name": "Grace Hopper"},
    }


@pytest.fixture
def sample_project_applications(sample_project_data: dict):
    """A professor's projects with applicants in different states."""
    from researchconnect.shared.schemas import ProjectApplications

    return [
        ProjectApplications.model_validate(
            {
                "project": sample_project_data,
                "applications": [
                    {"id": 1, "name": "Ada Lovelace", "email": "ada@uni.edu", "status": "under_review"},
                    {"id": 2, "name": "Alan Turing", "email": "alan@uni.edu", "status": "interview"},
                    {"id": 3, "name": "Emmy Noether", "email": "emmy@uni.edu", "status": "accepted"},
                ],
                "count": 3,
            }
        ),
        ProjectApplications.model_validate(
            {
                "project": dict(sample_project_data, pid="p-bio", name="Protein Folding"),
                "applications": [
                    {"id": 4, "name": "Barbara McClintock", "email": "barbara@uni.edu", "status": "rejected"},
                ],
                "count": 1,
            }
        ),
    ]


@pytest.fixture
def sample_roadmap_data() -> dict:
    """A generated roadmap with every level, an unknown category and a dangling edge."""
    return {
        "title": "Quantum Research Path",
        "description": "From linear algebra to fault tolerance",
        "total_time": "6 months",
        "nodes": [
            {"id": 1, "title": "Linear Algebra", "category": "Foundation", "next_nodes": [2, 3]},
            {"id": 2, "title": "Quantum Mechanics", "next_nodes": [4]},
            {"id": 3, "title": "Quantum Circuits", "category": "core", "next_nodes": [4, 99]},
            {"id": 4, "title": "Error Correction", "category": "advanced", "next_nodes": [5]},
            {"id": 5, "title": "Surface Codes", "category": "specialization", "next_nodes": []},
            {"id": 6, "title": "Side Quest", "category": "bonus", "next_nodes": [1]},
        ],
    }


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "requires_api: marks tests that require a running API server"
    )


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset the cached settings between tests."""
    from researchconnect.shared.config import get_settings

    get_settings.cache_clear()

    yield

    get_settings.cache_clear()
