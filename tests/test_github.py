"""Tests for GitHub repository fetching."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from hermex.exceptions import RepositoryError
from hermex.github import (
    GitHubRepo,
    RepositoryFetcher,
    get_repo_stats,
    load_repositories_from_config,
    parse_github_url,
)


def completed(returncode: int, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout="", stderr=stderr)


def branch_of(call) -> str:
    command = call.args[0]
    return command[command.index("--branch") + 1]


class TestParseGitHubUrl:
    """Test repository reference parsing."""

    @pytest.mark.parametrize(
        "url",
        [
            "acme/design-system",
            "https://github.com/acme/design-system",
            "https://github.com/acme/design-system.git",
            "https://github.com/acme/design-system/",
            "git@github.com:acme/design-system.git",
            "  acme/design-system  ",
        ],
    )
    def test_accepted_forms(self, url):
        repo = parse_github_url(url)

        assert repo.owner == "acme"
        assert repo.name == "design-system"
        assert repo.shorthand == "acme/design-system"
        assert repo.clone_url == "https://github.com/acme/design-system.git"

    @pytest.mark.parametrize(
        "url",
        ["https://gitlab.com/acme/app", "acme", "https://github.com/acme", "not a url/at all"],
    )
    def test_rejected_forms(self, url):
        with pytest.raises(RepositoryError):
            parse_github_url(url)


class TestRepositoryList:
    """Test loading repository lists from files."""

    def test_list(self, tmp_path: Path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps(["acme/web", "acme/admin"]))

        assert load_repositories_from_config(path) == ["acme/web", "acme/admin"]

    def test_object(self, tmp_path: Path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps({"repositories": ["acme/web"]}))

        assert load_repositories_from_config(path) == ["acme/web"]

    def test_malformed(self, tmp_path: Path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps({"repositories": [1, 2]}))

        with pytest.raises(RepositoryError):
            load_repositories_from_config(path)

    def test_missing(self, tmp_path: Path):
        with pytest.raises(RepositoryError):
            load_repositories_from_config(tmp_path / "missing.json")


class TestRepoStats:
    """Test repository statistics."""

    def test_stats(self, tmp_path: Path):
        (tmp_path / "package.json").write_text('{"name": "web", "version": "1.2.3"}')
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "App.tsx").write_text("")
        (tmp_path / "src" / "index.js").write_text("")
        (tmp_path / "node_modules" / "lib").mkdir(parents=True)
        (tmp_path / "node_modules" / "lib" / "index.js").write_text("")

        stats = get_repo_stats(tmp_path)

        assert stats.package_name == "web"
        assert stats.package_version == "1.2.3"
        assert stats.file_types == {".tsx": 1, ".js": 1}

    def test_no_package_json(self, tmp_path: Path):
        stats = get_repo_stats(tmp_path)

        assert stats.package_name is None
        assert stats.file_types == {}


class TestRepositoryFetcher:
    """Test cloning with git and the GitHub API mocked."""

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        with RepositoryFetcher() as fetcher:
            assert fetcher.token == "secret"
            assert fetcher._client.headers["Authorization"] == "Bearer secret"

    @patch.object(httpx.Client, "get")
    def test_default_branch(self, mock_get):
        response = MagicMock()
        response.json.return_value = {"default_branch": "develop"}
        mock_get.return_value = response

        with RepositoryFetcher(api_url="https://api.example.com/") as fetcher:
            branch = fetcher.get_default_branch(GitHubRepo("acme", "web"))

        assert branch == "develop"
        mock_get.assert_called_once_with("https://api.example.com/repos/acme/web")

    @patch.object(httpx.Client, "get", side_effect=httpx.ConnectError("offline"))
    def test_default_branch_unavailable(self, mock_get):
        with RepositoryFetcher() as fetcher:
            assert fetcher.get_default_branch(GitHubRepo("acme", "web")) is None

    @patch("hermex.github.subprocess.run")
    def test_clone_explicit_branch(self, mock_run, tmp_path: Path):
        mock_run.return_value = completed(0)

        with RepositoryFetcher(depth=1) as fetcher:
            repo = fetcher.clone("acme/web", tmp_path, branch="release")

        assert repo.branch == "release"
        assert repo.local_path == tmp_path / "acme__web"
        command = mock_run.call_args.args[0]
        assert command[:4] == ["git", "clone", "--depth", "1"]
        assert branch_of(mock_run.call_args) == "release"
        assert command[-2:] == ["https://github.com/acme/web.git", str(tmp_path / "acme__web")]

    @patch("hermex.github.subprocess.run")
    def test_clone_falls_back_to_master(self, mock_run, tmp_path: Path):
        """Without a default branch, main is tried before master."""
        mock_run.side_effect = [completed(128, "Remote branch main not found"), completed(0)]

        with RepositoryFetcher() as fetcher:
            with patch.object(fetcher, "get_default_branch", return_value=None):
                repo = fetcher.clone("acme/web", tmp_path)

        assert repo.branch == "master"
        assert [branch_of(call) for call in mock_run.call_args_list] == ["main", "master"]

    @patch("hermex.github.subprocess.run")
    def test_clone_prefers_default_branch(self, mock_run, tmp_path: Path):
        mock_run.side_effect = [completed(128), completed(128), completed(128)]

        with RepositoryFetcher() as fetcher:
            with patch.object(fetcher, "get_default_branch", return_value="trunk"):
                with pytest.raises(RepositoryError):
                    fetcher.clone("acme/web", tmp_path)

        assert [branch_of(call) for call in mock_run.call_args_list] == ["trunk", "main", "master"]

    @patch("hermex.github.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_git_missing(self, mock_run, tmp_path: Path):
        with RepositoryFetcher() as fetcher:
            with pytest.raises(RepositoryError, match="git is not installed"):
                fetcher.clone("acme/web", tmp_path, branch="main")

    @patch("hermex.github.subprocess.run")
    def test_clone_timeout(self, mock_run, tmp_path: Path):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=5)

        with RepositoryFetcher(timeout=5) as fetcher:
            with pytest.raises(RepositoryError, match="timed out"):
                fetcher.clone("acme/web", tmp_path, branch="main")

    @patch("hermex.github.subprocess.run")
    def test_clone_all_collects_errors(self, mock_run, tmp_path: Path):
        mock_run.return_value = completed(0)

        with RepositoryFetcher() as fetcher:
            result = fetcher.clone_all(["acme/web", "gitlab.com/x/y"], tmp_path / "repos", branch="main")

        assert [repo.shorthand for repo in result.cloned] == ["acme/web"]
        assert list(result.errors) == ["gitlab.com/x/y"]
        assert (tmp_path / "repos").is_dir()
