"""Tests for the execute stage."""

import json

import requests
import responses

from conftest import MOCK_API_URL, MOCK_GITLAB_URL, make_entry

from gl_branch.executor import Executor
from gl_branch.logging_utils import setup_logging


def add_create(project_id: int, status: int = 201):
    responses.add(
        responses.POST,
        f"{MOCK_API_URL}/projects/{project_id}/repository/branches",
        json={"name": "feature-x"} if status == 201 else {"message": "error"},
        status=status,
    )


class TestExecutor:
    @responses.activate
    def test_skipped_entry_gets_no_call(self, mock_client):
        """Three entries, the middle one skipped: exactly two creates, in plan order."""
        add_create(1)
        add_create(3)
        plan = [make_entry("org/a", 1), make_entry("org/b", 2, skipped=True), make_entry("org/c", 3)]

        results = Executor(mock_client, "feature-x").run(plan)

        assert len(responses.calls) == 2
        assert responses.calls[0].request.url == f"{MOCK_API_URL}/projects/1/repository/branches"
        assert responses.calls[1].request.url == f"{MOCK_API_URL}/projects/3/repository/branches"
        assert [r.action for r in results] == ["created", "skipped", "created"]
        assert [r.repo_name for r in results] == ["org/a", "org/b", "org/c"]

    @responses.activate
    def test_unfetched_entry_is_skipped(self, mock_client):
        results = Executor(mock_client, "feature-x").run([make_entry("org/missing", None)])

        assert len(responses.calls) == 0
        assert results[0].action == "skipped"

    @responses.activate
    def test_creates_from_default_branch(self, mock_client):
        add_create(1)
        Executor(mock_client, "feature-x").run([make_entry("org/a", 1)])

        body = json.loads(responses.calls[0].request.body)
        assert body == {"branch": "feature-x", "ref": "main"}

    @responses.activate
    def test_created_result_has_tree_url(self, mock_client):
        add_create(1)
        results = Executor(mock_client, "feature-x").run([make_entry("org/a", 1)])
        assert results[0].url == f"{MOCK_GITLAB_URL}/org/a/-/tree/feature-x"

    @responses.activate
    def test_failure_does_not_stop_remaining(self, mock_client):
        add_create(1, status=400)
        add_create(2)

        results = Executor(mock_client, "feature-x").run([make_entry("org/a", 1), make_entry("org/b", 2)])

        assert [r.action for r in results] == ["failed", "created"]
        assert results[0].to_dict()["status_code"] == 400

    @responses.activate
    def test_transport_failure_is_a_failed_result(self, mock_client):
        responses.add(
            responses.POST,
            f"{MOCK_API_URL}/projects/1/repository/branches",
            body=requests.exceptions.ConnectionError("refused"),
        )
        add_create(2)

        results = Executor(mock_client, "feature-x").run([make_entry("org/a", 1), make_entry("org/b", 2)])

        assert [r.action for r in results] == ["failed", "created"]
        assert "status_code" not in results[0].to_dict()

    @responses.activate
    def test_200_is_not_success(self, mock_client):
        add_create(1, status=200)
        results = Executor(mock_client, "feature-x").run([make_entry("org/a", 1)])
        assert results[0].action == "failed"

    @responses.activate
    def test_dry_run_makes_no_calls(self, dry_run_client):
        # NO POST registered - test fails if POST is attempted
        results = Executor(dry_run_client, "feature-x").run([make_entry("org/a", 1), make_entry("org/b", 2, True)])

        assert len(responses.calls) == 0
        assert [r.action for r in results] == ["would_create", "skipped"]
        assert results[0].dry_run is True

    @responses.activate
    def test_summary_counts(self, mock_client):
        add_create(1)
        add_create(3, status=500)
        executor = Executor(mock_client, "feature-x")
        executor.run([make_entry("org/a", 1), make_entry("org/b", 2, True), make_entry("org/c", 3)])

        counts = executor.summary()
        assert counts["total"] == 3
        assert counts["created"] == 1
        assert counts["skipped"] == 1
        assert counts["failed"] == 1


class TestExecutorOutput:
    @responses.activate
    def test_json_lines(self, mock_client, capsys):
        setup_logging(json_mode=True)
        add_create(1)

        Executor(mock_client, "feature-x").run([make_entry("org/a", 1), make_entry("org/b", None)])

        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
        assert lines[0]["repo_name"] == "org/a"
        assert lines[0]["action"] == "created"
        assert lines[1] == {"repo_name": "org/b", "action": "skipped", "detail": ""}

    @responses.activate
    def test_human_readable(self, mock_client, capsys):
        setup_logging(json_mode=False)
        add_create(1, status=403)

        Executor(mock_client, "feature-x").run([make_entry("org/a", 1)])

        err = capsys.readouterr().err
        assert "[ERROR  ]" in err
        assert "org/a: failed" in err
