"""Fetch GitHub repositories for analysis."""

import json
import logging
import os
import re
import subprocess
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from hermex.config import get_config
from hermex.exceptions import RepositoryError

logger = logging.getLogger(__name__)

_SHORTHAND = re.compile(r"^([\w.-]+)/([\w.-]+)$")
_HTTPS = re.compile(r"^https?://github\.com/([\w.-]+)/([\w.-]+?)(?:\.git)?/?$")
_SSH = re.compile(r"^git@github\.com:([\w.-]+)/([\w.-]+?)(?:\.git)?$")

FALLBACK_BRANCHES = ("main", "master")


@dataclass
class GitHubRepo:
    """A repository reference, and where it was cloned to."""

    owner: str
    name: str
    local_path: Path | None = None
    branch: str | None = None

    @property
    def shorthand(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def clone_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}.git"


@dataclass
class CloneResult:
    cloned: list[GitHubRepo] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


@dataclass
class RepoStats:
    """Basic facts about a cloned repository."""

    package_name: str | None = None
    package_version: str | None = None
    file_types: dict[str, int] = field(default_factory=dict)


def parse_github_url(url: str) -> GitHubRepo:
    """Parse ``owner/repo``, HTTPS or SSH GitHub references.

    Args:
        url: Repository reference

    Returns:
        Repository with owner and name

    Raises:
        RepositoryError: If the reference is not a GitHub repository
    """
    url = url.strip()
    for pattern in (_HTTPS, _SSH, _SHORTHAND):
        match = pattern.match(url)
        if match:
            return GitHubRepo(owner=match.group(1), name=match.group(2))
    raise RepositoryError(url, "not a GitHub repository reference")


def load_repositories_from_config(config_file: Path) -> list[str]:
    """Read repository references from a JSON file.

    The file may hold a list of strings or ``{"repositories": [...]}``.

    Raises:
        RepositoryError: If the file is missing or malformed
    """
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RepositoryError(str(config_file), f"cannot read repository list: {e}") from e

    if isinstance(data, dict):
        data = data.get("repositories", [])
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise RepositoryError(str(config_file), "expected a list of repository references")
    return data


def get_repo_stats(repo_path: Path) -> RepoStats:
    """Collect package.json metadata and source file counts."""
    stats = RepoStats()

    package_json = repo_path / "package.json"
    if package_json.exists():
        try:
            with open(package_json, "r", encoding="utf-8") as f:
                package = json.load(f)
            stats.package_name = package.get("name")
            stats.package_version = package.get("version")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Cannot read {package_json}: {e}")

    counts: Counter = Counter()
    for path in repo_path.rglob("*"):
        if "node_modules" in path.parts or ".git" in path.parts:
            continue
        if path.is_file() and path.suffix in (".js", ".jsx", ".ts", ".tsx"):
            counts[path.suffix] += 1
    stats.file_types = dict(counts)

    return stats


class RepositoryFetcher:
    """Clones GitHub repositories with git."""

    def __init__(
        self,
        api_url: str | None = None,
        token: str | None = None,
        depth: int | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            api_url: GitHub REST API base URL
            token: API token, ``GITHUB_TOKEN`` from the environment otherwise
            depth: Clone depth
            timeout: Seconds allowed per clone
        """
        config = get_config()
        self.api_url = (api_url or config.get("github.api_url", "https://api.github.com")).rstrip("/")
        self.token = token or os.environ.get("GITHUB_TOKEN")
        self.depth = depth if depth is not None else int(config.get("github.depth", 1))
        self.timeout = timeout if timeout is not None else float(config.get("github.timeout", 120))

        headers = {"Accept": "application/vnd.github+json", "User-Agent": "hermex"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self._client = httpx.Client(timeout=30.0, headers=headers, follow_redirects=True)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RepositoryFetcher":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def get_default_branch(self, repo: GitHubRepo) -> str | None:
        """Ask the GitHub API for a repository's default branch.

        Returns:
            Branch name, or None when the API is unavailable
        """
        try:
            response = self._client.get(f"{self.api_url}/repos/{repo.owner}/{repo.name}")
            response.raise_for_status()
            return response.json().get("default_branch")
        except httpx.HTTPError as e:
            logger.debug(f"Default branch lookup failed for {repo.shorthand}: {e}")
            return None

    def _git_clone(self, repo: GitHubRepo, branch: str, target: Path) -> subprocess.CompletedProcess:
        command = [
            "git", "clone",
            "--depth", str(self.depth),
            "--branch", branch,
            "--single-branch",
            repo.clone_url,
            str(target),
        ]
        logger.debug(f"Running {' '.join(command)}")
        return subprocess.run(command, capture_output=True, text=True, timeout=self.timeout)

    def clone(self, url: str, target_dir: Path, branch: str | None = None) -> GitHubRepo:
        """Clone one repository.

        Without an explicit branch the API default branch is tried first,
        then ``main`` and ``master``.

        Args:
            url: Repository reference
            target_dir: Directory to clone into
            branch: Branch to clone

        Returns:
            Cloned repository

        Raises:
            RepositoryError: If every candidate branch fails
        """
        repo = parse_github_url(url)
        target = target_dir / f"{repo.owner}__{repo.name}"

        if branch:
            candidates = [branch]
        else:
            default = self.get_default_branch(repo)
            candidates = [default] if default else []
            candidates += [b for b in FALLBACK_BRANCHES if b not in candidates]

        last_error = ""
        for candidate in candidates:
            try:
                result = self._git_clone(repo, candidate, target)
            except FileNotFoundError as e:
                raise RepositoryError(url, "git is not installed") from e
            except subprocess.TimeoutExpired as e:
                raise RepositoryError(url, f"clone timed out after {self.timeout}s") from e

            if result.returncode == 0:
                repo.local_path = target
                repo.branch = candidate
                logger.info(f"Cloned {repo.shorthand} ({candidate})")
                return repo

            last_error = result.stderr.strip() or f"git exited with {result.returncode}"
            logger.debug(f"Clone of {repo.shorthand} on {candidate} failed: {last_error}")

        raise RepositoryError(url, last_error)

    def clone_all(self, urls: list[str], target_dir: Path, branch: str | None = None) -> CloneResult:
        """Clone several repositories, collecting failures per URL."""
        result = CloneResult()
        target_dir.mkdir(parents=True, exist_ok=True)

        for url in urls:
            try:
                result.cloned.append(self.clone(url, target_dir, branch))
            except RepositoryError as e:
                logger.warning(str(e))
                result.errors[url] = str(e)

        return result
