"""GitLab API client for the three calls gl-branch makes."""

from __future__ import annotations

import logging
import urllib.parse

import requests

from gl_branch.errors import BranchCheckError, BranchCreateError, FetchError
from gl_branch.logging_utils import LOGGER_NAME
from gl_branch.models import API_V4, DEFAULT_TIMEOUT, RemoteRepo


class GitLabClient:
    """Thin wrapper around GitLab REST API v4. One session per process, no retries."""

    def __init__(self, base_url: str, token: str, dry_run: bool = False, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{API_V4}"
        self.session = requests.Session()
        self.session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Content-Type": "application/json",
            }
        )
        self.dry_run = dry_run
        self.timeout = timeout
        self.logger = logging.getLogger(LOGGER_NAME)

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make a single HTTP request. Status codes are left to the caller."""
        url = f"{self.api_url}{endpoint}"
        self.logger.debug(f"{method.upper()} {url} {kwargs.get('json', '')}")
        kwargs.setdefault("timeout", self.timeout)
        resp = self.session.request(method, url, **kwargs)
        self.logger.debug(f"-> {resp.status_code}")
        return resp

    # -- Project lookup --

    def get_project(self, name: str) -> RemoteRepo:
        """
        Fetch project metadata by path or web URL.

        Raises FetchError on any transport, status or payload problem.
        """
        path = self._extract_path_from_url(name)
        encoded_path = urllib.parse.quote(path, safe="")
        try:
            resp = self._request("GET", f"/projects/{encoded_path}")
            resp.raise_for_status()
            proj = resp.json()
            default_branch = proj["default_branch"]
            if not default_branch:
                raise ValueError("project has no default branch (empty repository?)")
            return RemoteRepo(id=int(proj["id"]), default_branch=default_branch, web_url=proj["web_url"])
        except requests.HTTPError as e:
            raise FetchError(name, f"HTTP {e.response.status_code}") from e
        except requests.RequestException as e:
            raise FetchError(name, str(e)) from e
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(name, f"unexpected response: {e}") from e

    def _extract_path_from_url(self, url: str) -> str:
        """Extract the namespace/project path from a GitLab URL."""
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme and parsed.netloc:
            # Full URL: https://gitlab.com/myorg/myteam/myproject
            path = parsed.path.strip("/")
            if "/-/" in path:
                path = path[: path.index("/-/")]
            return path.removesuffix("/-").removesuffix(".git")
        else:
            # Bare path: myorg/myteam/myproject
            return url.strip("/")

    # -- Branches --

    def branch_exists(self, project_id: int, branch: str) -> bool:
        """True only on HTTP 200. Transport failures raise BranchCheckError."""
        encoded_branch = urllib.parse.quote(branch, safe="")
        try:
            resp = self._request("GET", f"/projects/{project_id}/repository/branches/{encoded_branch}")
        except requests.RequestException as e:
            raise BranchCheckError(f"Branch check failed for project {project_id}: {e}") from e
        return resp.status_code == 200

    def create_branch(self, project_id: int, branch: str, ref: str) -> dict:
        """Create `branch` from `ref`. Anything but HTTP 201 raises BranchCreateError."""
        try:
            resp = self._request(
                "POST",
                f"/projects/{project_id}/repository/branches",
                json={"branch": branch, "ref": ref},
            )
        except requests.RequestException as e:
            raise BranchCreateError(str(e)) from e

        if resp.status_code != 201:
            raise BranchCreateError(f"HTTP {resp.status_code}: {resp.text[:500]}", status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError:
            return {}
