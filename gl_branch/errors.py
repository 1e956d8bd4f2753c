"""Exceptions raised by gl-branch."""

from __future__ import annotations


class GlBranchError(Exception):
    """Base class for all gl-branch errors."""


class ConfigError(GlBranchError):
    """Config file unreadable, unwritable or malformed, or settings invalid."""


class MissingRequiredField(ConfigError):
    """A required setting is absent from both the config file and the CLI."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class FetchError(GlBranchError):
    """Project metadata could not be fetched. Recovered per repository."""

    def __init__(self, repo_name: str, reason: str):
        self.repo_name = repo_name
        self.reason = reason
        super().__init__(f"Could not fetch '{repo_name}': {reason}")


class BranchCheckError(GlBranchError):
    """The branch existence check failed at the transport level."""


class BranchCreateError(GlBranchError):
    """GitLab did not create the branch."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
