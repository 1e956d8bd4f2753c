"""Data models and constants for gl-branch."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_GITLAB_URL = "https://gitlab.com"
API_V4 = "/api/v4"
DEFAULT_TIMEOUT = 30  # seconds, per request

TOOL_NAME = "gl-branch"
DEFAULT_CONFIG_PATH = Path("~") / ".config" / TOOL_NAME / "config.yml"

CONFIRM_ANSWERS = ("y", "yes")


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class Configuration:
    """Contents of the on-disk config file. Every field is optional."""

    repos: list[str] | None = None
    gitlab_api_key: str | None = None
    gitlab_url: str | None = None

    def to_dict(self) -> dict:
        return {
            "repos": list(self.repos) if self.repos is not None else None,
            "gitlab_api_key": self.gitlab_api_key,
            "gitlab_url": self.gitlab_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Configuration:
        repos = data.get("repos")
        return cls(
            repos=list(repos) if repos is not None else None,
            gitlab_api_key=data.get("gitlab_api_key"),
            gitlab_url=data.get("gitlab_url"),
        )


@dataclass(frozen=True)
class ResolvedState:
    """Fully merged settings for a single run."""

    branch_name: str
    repos: list[str]
    gitlab_api: str
    gitlab_url: str = DEFAULT_GITLAB_URL


@dataclass
class RemoteRepo:
    """Project metadata returned by GitLab."""

    id: int
    default_branch: str
    web_url: str


@dataclass
class RepositoryPlanEntry:
    """One repository's eligibility for branch creation, computed before any write."""

    repo_name: str
    remote_repo: RemoteRepo | None = None
    skipped: bool = True
    detail: str = ""

    def __post_init__(self):
        if self.remote_repo is None:
            self.skipped = True

    @property
    def actionable(self) -> bool:
        return self.remote_repo is not None and not self.skipped


@dataclass
class ActionResult:
    """Outcome of the execute stage for a single repository."""

    repo_name: str
    action: str  # "created", "would_create", "skipped", "failed"
    detail: str = ""
    url: str = ""
    dry_run: bool = False
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        d = {
            "repo_name": self.repo_name,
            "action": self.action,
            "detail": self.detail,
        }
        if self.url:
            d["url"] = self.url
        if self.dry_run:
            d["dry_run"] = True
        d.update(self.extra)
        return d
