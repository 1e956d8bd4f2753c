"""
gl-branch: create the same branch across a set of GitLab repositories.

Reads the GitLab URL, token and repository list from a YAML config file merged
with command-line values, previews which repositories already have the branch,
asks for confirmation, then creates the branch from each repository's default
branch and reports the outcome per repository.

Environment:
    GITLAB_TOKEN - GitLab Personal Access Token
    GITLAB_URL   - GitLab instance URL (default: https://gitlab.com)
    GITLAB_REPOS - Comma-separated repository paths
"""

from gl_branch.cli import main
from gl_branch.client import GitLabClient
from gl_branch.config import load_config, resolve_state, save_config
from gl_branch.confirm import confirm
from gl_branch.errors import (
    BranchCheckError,
    BranchCreateError,
    ConfigError,
    FetchError,
    MissingRequiredField,
)
from gl_branch.executor import Executor
from gl_branch.models import (
    DEFAULT_GITLAB_URL,
    ActionResult,
    Configuration,
    RemoteRepo,
    RepositoryPlanEntry,
    ResolvedState,
)
from gl_branch.plan import build_plan

__version__ = "0.1.0"
__all__ = [
    "main",
    "__version__",
    "GitLabClient",
    "load_config",
    "save_config",
    "resolve_state",
    "build_plan",
    "confirm",
    "Executor",
    "ConfigError",
    "MissingRequiredField",
    "FetchError",
    "BranchCheckError",
    "BranchCreateError",
    "DEFAULT_GITLAB_URL",
    "ActionResult",
    "Configuration",
    "RemoteRepo",
    "RepositoryPlanEntry",
    "ResolvedState",
]
