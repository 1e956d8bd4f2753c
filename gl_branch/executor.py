"""Create the branch in every actionable repository of a plan."""

from __future__ import annotations

import logging

from gl_branch.client import GitLabClient
from gl_branch.errors import BranchCreateError
from gl_branch.logging_utils import LOGGER_NAME, is_json_mode
from gl_branch.models import ActionResult, RepositoryPlanEntry

ICONS = {
    "created": "✓",
    "would_create": "○",
    "skipped": "→",
    "failed": "✗",
}


class Executor:
    """Runs the create step. One failing repository never stops the others."""

    def __init__(self, client: GitLabClient, branch_name: str):
        self.client = client
        self.branch_name = branch_name
        self.logger = logging.getLogger(LOGGER_NAME)
        self.results: list[ActionResult] = []

    def run(self, plan: list[RepositoryPlanEntry]) -> list[ActionResult]:
        for entry in plan:
            self.apply(entry)
        return self.results

    def apply(self, entry: RepositoryPlanEntry) -> ActionResult:
        remote = entry.remote_repo
        if entry.skipped or remote is None:
            return self._record(ActionResult(repo_name=entry.repo_name, action="skipped", detail=entry.detail))

        url = f"{remote.web_url}/-/tree/{self.branch_name}"
        if self.client.dry_run:
            return self._record(
                ActionResult(
                    repo_name=entry.repo_name,
                    action="would_create",
                    detail=f"from {remote.default_branch}",
                    url=url,
                    dry_run=True,
                )
            )

        try:
            self.client.create_branch(remote.id, self.branch_name, remote.default_branch)
        except BranchCreateError as e:
            extra = {"status_code": e.status_code} if e.status_code is not None else {}
            return self._record(ActionResult(repo_name=entry.repo_name, action="failed", detail=str(e), extra=extra))

        return self._record(
            ActionResult(
                repo_name=entry.repo_name,
                action="created",
                detail=f"from {remote.default_branch}",
                url=url,
            )
        )

    def summary(self) -> dict[str, int]:
        counts = {action: 0 for action in ICONS}
        for result in self.results:
            counts[result.action] = counts.get(result.action, 0) + 1
        counts["total"] = len(self.results)
        return counts

    def _record(self, result: ActionResult) -> ActionResult:
        self.results.append(result)

        if is_json_mode(self.logger):
            record = self.logger.makeRecord(LOGGER_NAME, logging.INFO, "", 0, "", (), None)
            record.action_result = result
            self.logger.handle(record)
            return result

        icon = ICONS.get(result.action, "?")
        prefix = "[DRY-RUN] " if result.dry_run else ""
        level = logging.ERROR if result.action == "failed" else logging.INFO
        self.logger.log(
            level,
            f"{prefix}{icon} {result.repo_name}: {result.action}"
            f"{' (' + result.detail + ')' if result.detail else ''}",
        )
        if result.url:
            self.logger.info(f"  └─ {result.url}")
        return result
