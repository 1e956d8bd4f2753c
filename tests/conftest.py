"""Shared test fixtures for gl-branch tests."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_branch.client import GitLabClient
from gl_branch.logging_utils import LOGGER_NAME
from gl_branch.models import RemoteRepo, RepositoryPlanEntry, ResolvedState

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_GITLAB_URL = "https://gitlab.example.com"
MOCK_API_URL = f"{MOCK_GITLAB_URL}/api/v4"


@pytest.fixture(autouse=True)
def clean_gitlab_env(monkeypatch):
    """Keep a developer's GITLAB_* variables out of the tests."""
    for name in ("GITLAB_TOKEN", "GITLAB_URL", "GITLAB_REPOS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by setup_logging() so they don't outlive capsys."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def mock_client():
    """GitLabClient pointing at mock server."""
    return GitLabClient(MOCK_GITLAB_URL, "test-token", dry_run=False)


@pytest.fixture
def dry_run_client():
    """GitLabClient in dry-run mode."""
    return GitLabClient(MOCK_GITLAB_URL, "test-token", dry_run=True)


@pytest.fixture
def config_path(tmp_path) -> Path:
    return tmp_path / "gl-branch" / "config.yml"


@pytest.fixture
def sample_project() -> dict[str, Any]:
    """Sample project API response."""
    return {
        "id": 123,
        "name": "my-project",
        "path_with_namespace": "myorg/my-project",
        "default_branch": "main",
        "web_url": f"{MOCK_GITLAB_URL}/myorg/my-project",
    }


@pytest.fixture
def sample_state() -> ResolvedState:
    return ResolvedState(
        branch_name="release/1.0",
        repos=["myorg/my-project"],
        gitlab_api="test-token",
        gitlab_url=MOCK_GITLAB_URL,
    )


def make_args(**kwargs) -> argparse.Namespace:
    """Helper to create argparse.Namespace with default values."""
    defaults = {
        "branch_name": "release/1.0",
        "repos": None,
        "gitlab_api_key": None,
        "gitlab_url": None,
        "update_config": False,
        "config": None,
        "dry_run": False,
        "yes": False,
        "json_output": False,
        "verbose": False,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


def make_entry(name: str, project_id: int | None, skipped: bool = False) -> RepositoryPlanEntry:
    """Helper to build a plan entry; project_id=None means the fetch failed."""
    if project_id is None:
        return RepositoryPlanEntry(repo_name=name, remote_repo=None, skipped=True)
    return RepositoryPlanEntry(
        repo_name=name,
        remote_repo=RemoteRepo(id=project_id, default_branch="main", web_url=f"{MOCK_GITLAB_URL}/{name}"),
        skipped=skipped,
    )
