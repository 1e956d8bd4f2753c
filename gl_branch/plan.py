"""Build the per-repository plan before anything is written."""

from __future__ import annotations

import logging

from gl_branch.client import GitLabClient
from gl_branch.errors import FetchError
from gl_branch.logging_utils import LOGGER_NAME
from gl_branch.models import RepositoryPlanEntry, ResolvedState


def build_plan(client: GitLabClient, state: ResolvedState) -> list[RepositoryPlanEntry]:
    """
    Check every requested repository, in order, duplicates included.

    A repository that cannot be fetched is marked skipped and the run goes on.
    A transport failure during the branch check (BranchCheckError) is not
    caught here and aborts the whole plan.
    """
    logger = logging.getLogger(LOGGER_NAME)
    plan: list[RepositoryPlanEntry] = []

    for repo_name in state.repos:
        try:
            remote = client.get_project(repo_name)
        except FetchError as e:
            logger.warning(f"→ {repo_name}: skipped ({e.reason})")
            plan.append(RepositoryPlanEntry(repo_name=repo_name, remote_repo=None, skipped=True, detail=e.reason))
            continue

        exists = client.branch_exists(remote.id, state.branch_name)
        marker = "exists" if exists else "creatable"
        plan.append(
            RepositoryPlanEntry(
                repo_name=repo_name,
                remote_repo=remote,
                skipped=exists,
                detail="branch already exists" if exists else f"from {remote.default_branch}",
            )
        )
        icon = "·" if exists else "○"
        logger.info(f"{icon} {remote.web_url} [{marker}]")

    return plan
