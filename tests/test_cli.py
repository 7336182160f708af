import json
from unittest.mock import MagicMock

import pytest
from github import GithubException
from typer.testing import CliRunner

from pr_narrator import cli
from pr_narrator.github import GitHubClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda verbose=False: None)
    for name in ("GITHUB_TOKEN", "GITHUB_REPOSITORY", "GITHUB_EVENT_NAME", "GITHUB_EVENT_PATH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def summaries(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "run_summary", lambda settings, pr, dry_run: calls.append((settings, pr, dry_run)))
    return calls


class TestSummarizeCommand:
    def test_requires_token(self, summaries):
        result = runner.invoke(cli.app, ["summarize", "--pr", "1", "--repo", "acme/widgets"])
        assert result.exit_code == 1
        assert summaries == []

    def test_overrides(self, summaries):
        result = runner.invoke(
            cli.app,
            ["summarize", "-p", "5", "-r", "acme/widgets", "-t", "tok", "-e", "*.md", "-a", "author", "--dry-run"],
        )
        assert result.exit_code == 0
        [(settings, pr, dry_run)] = summaries
        assert (pr, dry_run) == (5, True)
        assert settings.exclude_patterns == ["*.md"]
        assert settings.attribution == "author"

    def test_bad_attribution(self, summaries):
        result = runner.invoke(cli.app, ["summarize", "-p", "5", "-r", "a/b", "-t", "tok", "-a", "ghost"])
        assert result.exit_code != 0
        assert summaries == []


class TestActionCommand:
    def test_missing_event_path_is_fatal(self, summaries):
        result = runner.invoke(cli.app, ["action"])
        assert result.exit_code == 1
        assert "GITHUB_EVENT_PATH" in result.output

    def test_unsupported_event(self, summaries, tmp_path, monkeypatch):
        path = tmp_path / "event.json"
        path.write_text(json.dumps({"action": "closed"}))
        monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(path))

        result = runner.invoke(cli.app, ["action"])
        assert result.exit_code == 0
        assert summaries == []

    def test_runs_for_opened_pr(self, summaries, tmp_path, monkeypatch):
        path = tmp_path / "event.json"
        path.write_text(json.dumps({
            "action": "opened",
            "number": 9,
            "repository": {"name": "widgets", "owner": {"login": "acme"}},
        }))
        monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(path))
        monkeypatch.setenv("GITHUB_TOKEN", "tok")

        result = runner.invoke(cli.app, ["action"])
        assert result.exit_code == 0
        [(settings, pr, _)] = summaries
        assert pr == 9
        assert settings.github_repository == "acme/widgets"


class TestRunSummary:
    @pytest.fixture
    def github(self, monkeypatch):
        client = GitHubClient.__new__(GitHubClient)
        client.owner, client.repo_name = "acme", "widgets"
        client.repo = MagicMock()
        client.github = MagicMock()
        client.http = MagicMock()
        monkeypatch.setattr(cli, "GitHubClient", lambda token, repo: client)
        monkeypatch.setattr(cli, "LLMClient", lambda settings: MagicMock())
        return client

    def test_commit_fetch_not_found(self, github):
        github.repo.get_pull.return_value.get_commits.side_effect = GithubException(
            404, {"message": "Not Found"}, None
        )
        result = runner.invoke(cli.app, ["summarize", "-p", "3", "-r", "acme/widgets", "-t", "tok"])
        assert result.exit_code == 1
        assert "PR #3 not found in acme/widgets" in result.output
        github.http.close.assert_called_once()

    def test_other_github_error(self, github):
        github.repo.get_pull.side_effect = GithubException(403, {"message": "Resource not accessible"}, None)
        result = runner.invoke(cli.app, ["summarize", "-p", "3", "-r", "acme/widgets", "-t", "tok"])
        assert result.exit_code == 1
        assert "Resource not accessible" in result.output
