"""CLI entry point for gl-branch."""

from __future__ import annotations

import argparse
import sys

from gl_branch.client import GitLabClient
from gl_branch.config import describe_state, resolve_state
from gl_branch.confirm import confirm
from gl_branch.errors import BranchCheckError, ConfigError
from gl_branch.executor import Executor
from gl_branch.logging_utils import setup_logging
from gl_branch.models import DEFAULT_CONFIG_PATH, DEFAULT_TIMEOUT
from gl_branch.plan import build_plan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gl-branch",
        description="Create the same branch in a set of GitLab repositories.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Settings are read from a YAML config file ({DEFAULT_CONFIG_PATH} by default).
The file is created from the command-line values on first use; values in the
file take precedence over the command line. Use --update-config to rewrite it.

Environment (used when neither the file nor a flag sets the value, never saved):
    GITLAB_TOKEN - GitLab Personal Access Token
    GITLAB_URL   - GitLab instance URL (default: https://gitlab.com)
    GITLAB_REPOS - Comma-separated repository paths

Examples:
    # First run: store settings and create the branch
    gl-branch release/1.4 --repos myorg/api myorg/web \\
        --gitlab-api-key glpat-xxxx --gitlab-url https://gitlab.example.com

    # Later runs reuse the stored settings
    gl-branch release/1.5

    # See what would happen without touching anything
    gl-branch release/1.5 --dry-run

    # Non-interactive, JSON output for machine parsing
    gl-branch release/1.5 --yes --json
""",
    )
    parser.add_argument("branch_name", nargs="?", default=None, help="Name of the branch to create")
    parser.add_argument("--repos", nargs="+", metavar="NAME", default=None, help="Repository paths or URLs")
    parser.add_argument(
        "--gitlab-api-key", "--gitlab-api", dest="gitlab_api_key", default=None, help="GitLab Personal Access Token"
    )
    parser.add_argument("--gitlab-url", default=None, help="GitLab instance URL (default: https://gitlab.com)")
    parser.add_argument(
        "--update-config", "-u", action="store_true", help="Overwrite the config file with the given values"
    )
    parser.add_argument("--config", "-c", default=None, metavar="FILE", help="Path to the YAML config file")
    parser.add_argument("--dry-run", action="store_true", help="Show the plan without creating anything")
    parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output results as JSON lines (to stderr)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    try:
        state = resolve_state(args, config_path=args.config, update=args.update_config)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    for line in describe_state(state):
        logger.info(line)

    client = GitLabClient(base_url=state.gitlab_url, token=state.gitlab_api, dry_run=args.dry_run, timeout=args.timeout)

    try:
        plan = build_plan(client, state)

        if args.dry_run:
            logger.info("DRY-RUN MODE - no changes will be made")
        elif not args.yes and not confirm():
            logger.info("Cancelled, nothing was changed")
            return 0

        executor = Executor(client, state.branch_name)
        executor.run(plan)
    except BranchCheckError as e:
        logger.error(f"Fatal API error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    counts = executor.summary()
    created = counts["would_create"] if args.dry_run else counts["created"]
    logger.info(
        f"Done: {counts['total']} repositories, {created} {'would be created' if args.dry_run else 'created'}, "
        f"{counts['skipped']} skipped, {counts['failed']} failed"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
