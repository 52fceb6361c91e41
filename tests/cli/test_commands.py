"""
Tests for CLI app structure and sub-commands.
"""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from agencydesk.cli.app import app
from agencydesk.core.models import PostStatus
from agencydesk.store.sqlite import SqliteStore

runner = CliRunner()


@pytest.fixture()
def db_path(tmp_path, make_post, monkeypatch):
    """SQLite file seeded with one overdue and one future post."""
    monkeypatch.delenv("AGENCYDESK_LLM_API_KEY", raising=False)
    path = tmp_path / "desk.db"
    store = SqliteStore(str(path))
    store.insert_post(make_post("due-1"))
    store.insert_post(make_post("draft-1", status=PostStatus.DRAFT))
    store.close()
    return str(path)


def _status(path: str, post_id: str) -> PostStatus:
    store = SqliteStore(path)
    try:
        return store.get_post(post_id).status
    finally:
        store.close()


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "approvals" in result.output
        assert "serve" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "agency-desk 0.2.0" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)


class TestApprovalsRun:
    def test_approves_due_posts(self, db_path):
        result = runner.invoke(app, ["approvals", "run", "--database", db_path])

        assert result.exit_code == 0
        assert "Posts auto-approved successfully" in result.output
        assert _status(db_path, "due-1") is PostStatus.APPROVED
        assert _status(db_path, "draft-1") is PostStatus.DRAFT

    def test_nothing_due(self, tmp_path):
        result = runner.invoke(app, ["approvals", "run", "-d", str(tmp_path / "empty.db")])

        assert result.exit_code == 0
        assert "No posts to auto-approve" in result.output

    def test_dry_run_leaves_posts_pending(self, db_path):
        result = runner.invoke(app, ["approvals", "run", "--database", db_path, "--dry-run"])

        assert result.exit_code == 0
        assert "1 posts would be auto-approved" in result.output
        assert "due-1" in result.output
        assert _status(db_path, "due-1") is PostStatus.PENDING_APPROVAL

    def test_json_output(self, db_path):
        result = runner.invoke(app, ["approvals", "run", "--database", db_path, "--json"])

        assert result.exit_code == 0
        assert '"success": true' in result.output
        assert '"processed": 1' in result.output

    def test_unconfigured_store_exits_1(self, monkeypatch):
        monkeypatch.delenv("AGENCYDESK_STORE_URL", raising=False)
        monkeypatch.setenv("AGENCYDESK_STORE_BACKEND", "rest")

        result = runner.invoke(app, ["approvals", "run"])

        assert result.exit_code == 1


class TestApprovalsWatch:
    def test_single_pass(self, db_path):
        result = runner.invoke(
            app,
            ["approvals", "watch", "--interval", "0.01", "--database", db_path, "--max-runs", "1"],
        )

        assert result.exit_code == 0
        assert "Watching" in result.output
        assert _status(db_path, "due-1") is PostStatus.APPROVED


class TestHealthCheck:
    def test_degraded_without_llm_key(self, db_path):
        result = runner.invoke(app, ["health", "check", "--database", db_path])

        assert result.exit_code == 0
        assert "degraded" in result.output
        assert "database" in result.output

    def test_json_output(self, db_path):
        result = runner.invoke(app, ["health", "check", "--database", db_path, "--json"])

        assert result.exit_code == 0
        assert '"success": true' in result.output


class TestSubcommandRegistration:
    @pytest.mark.parametrize("group", ["approvals", "health"])
    def test_group_help(self, group):
        result = runner.invoke(app, [group, "--help"])
        assert result.exit_code == 0

    def test_serve_help(self):
        result = runner.invoke(app, ["serve", "--help"])
        assert result.exit_code == 0
        assert "--port" in result.output
