"""Config file handling and settings resolution for gl-branch.

Settings come from three places. For ``repos`` and ``gitlab_api_key`` the
config file wins, then the command line, then the ``GITLAB_*`` environment
variables. ``gitlab_url`` additionally falls back to https://gitlab.com.
``branch_name`` is only ever taken from the command line.

The config file is created from the command-line flags the first time the
tool runs, and rewritten from them when ``--update-config`` is given.
Environment values are never written to it.
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from gl_branch.errors import ConfigError, MissingRequiredField
from gl_branch.logging_utils import LOGGER_NAME
from gl_branch.models import DEFAULT_CONFIG_PATH, DEFAULT_GITLAB_URL, Configuration, ResolvedState

logger = logging.getLogger(LOGGER_NAME)

ENV_TOKEN = "GITLAB_TOKEN"
ENV_URL = "GITLAB_URL"
ENV_REPOS = "GITLAB_REPOS"


def default_config_path() -> Path:
    return DEFAULT_CONFIG_PATH.expanduser()


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def load_config(path: Path) -> Configuration:
    """Read and validate the YAML config file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return Configuration()
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    repos = data.get("repos")
    if repos is not None:
        if isinstance(repos, str) or not isinstance(repos, list) or not all(isinstance(r, str) for r in repos):
            raise ConfigError(f"'repos' in {path} must be a list of strings")
    for key in ("gitlab_api_key", "gitlab_url"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"'{key}' in {path} must be a string")

    return Configuration.from_dict(data)


def save_config(path: Path, config: Configuration) -> None:
    """Write the config file, creating parent directories. Owner-only permissions."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
        path.chmod(0o600)
    except OSError as e:
        raise ConfigError(f"Cannot write config file {path}: {e}") from e
    logger.debug(f"Wrote config file {path}")


# ---------------------------------------------------------------------------
# Command-line and environment values
# ---------------------------------------------------------------------------


def config_from_environment(environ: Mapping[str, str] | None = None) -> Configuration:
    """Settings taken from GITLAB_* environment variables. Never written to the config file."""
    environ = os.environ if environ is None else environ
    repos = [r.strip() for r in environ.get(ENV_REPOS, "").split(",") if r.strip()]
    return Configuration(
        repos=repos or None,
        gitlab_api_key=environ.get(ENV_TOKEN) or None,
        gitlab_url=environ.get(ENV_URL) or None,
    )


def config_from_args(args: argparse.Namespace) -> Configuration:
    repos = getattr(args, "repos", None)
    return Configuration(
        repos=list(repos) if repos else None,
        gitlab_api_key=getattr(args, "gitlab_api_key", None),
        gitlab_url=getattr(args, "gitlab_url", None),
    )


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_state(
    args: argparse.Namespace,
    config_path: Path | str | None = None,
    update: bool = False,
    environ: Mapping[str, str] | None = None,
) -> ResolvedState:
    """
    Produce the ResolvedState for this run.

    Side effects: creates the config file from CLI values if it is missing,
    and overwrites it when ``update`` is set. Environment values are only
    used as a fallback and never written to the file.

    Raises:
        MissingRequiredField: branch_name, repos or gitlab_api_key is absent.
        ConfigError: the config file cannot be read, written or parsed,
            or the token is malformed.
    """
    path = Path(config_path).expanduser() if config_path else default_config_path()
    cli_config = config_from_args(args)

    if not path.exists():
        logger.info(f"Creating config file {path}")
        save_config(path, cli_config)
    elif update:
        logger.info(f"Updating config file {path}")
        save_config(path, cli_config)

    branch_name = getattr(args, "branch_name", None)
    if not branch_name:
        raise MissingRequiredField("branch_name")

    file_config = load_config(path)
    env_config = config_from_environment(environ)

    repos = file_config.repos or cli_config.repos or env_config.repos
    if not repos:
        raise MissingRequiredField("repos")

    token = file_config.gitlab_api_key or cli_config.gitlab_api_key or env_config.gitlab_api_key
    if not token:
        raise MissingRequiredField("gitlab_api_key")
    if any(c.isspace() for c in token):
        raise ConfigError("Malformed gitlab_api_key: token must not contain whitespace")

    gitlab_url = file_config.gitlab_url or cli_config.gitlab_url or env_config.gitlab_url or DEFAULT_GITLAB_URL

    return ResolvedState(
        branch_name=branch_name,
        repos=list(repos),
        gitlab_api=token,
        gitlab_url=gitlab_url.rstrip("/"),
    )


def describe_state(state: ResolvedState) -> list[str]:
    """Human-readable summary of what is about to happen. Never includes the token."""
    lines = [
        f"Branch:     {state.branch_name}",
        f"GitLab URL: {state.gitlab_url}",
        f"Repos ({len(state.repos)}):",
    ]
    lines.extend(f"  - {repo}" for repo in state.repos)
    return lines
