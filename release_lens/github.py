"""
GitHub release fetcher for Release Lens.

Uses the GitHub REST API to list releases, then fetches reaction totals and
commit authors for every release concurrently.
"""

import asyncio
import os
from typing import Any
from urllib.parse import urlparse

import httpx
from dotenv import load_dotenv
from rich.console import Console

from release_lens.http_client import _get_async_http_client
from release_lens.models import Contributor, Reaction, ReleaseNote, release_from_dict

# Load environment variables
load_dotenv()
console = Console(stderr=True)

# GitHub API endpoint
GITHUB_REST_API = "https://api.github.com"

# Page size for every listing request
PER_PAGE = 100


class ReleaseFetchError(Exception):
    """Raised when the release list of a repository cannot be fetched."""

    pass


def parse_github_url(value: str) -> tuple[str, str]:
    """
    Parse a repository reference into (owner, repo).

    Accepts 'https://github.com/owner/repo', with or without a trailing
    '.git', or the short 'owner/repo' form.

    Raises:
        ValueError: If the value is neither form.
    """
    value = value.strip()
    parsed = urlparse(value)

    if parsed.scheme in ("http", "https"):
        if parsed.hostname not in ("github.com", "www.github.com"):
            raise ValueError(f"Not a GitHub URL: {value}")
        parts = [part for part in parsed.path.split("/") if part]
    else:
        parts = [part for part in value.split("/") if part]
        if len(parts) != 2:
            parts = []

    if len(parts) < 2:
        raise ValueError(
            "Invalid GitHub repository URL or format. Please use either "
            "https://github.com/owner/repo or owner/repo format."
        )

    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


class GitHubReleaseFetcher:
    """Fetches release notes with reactions and contributors from GitHub."""

    def __init__(self, token: str | None = None):
        """
        Initialize the fetcher.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable.

        Raises:
            ValueError: If token is not provided and GITHUB_TOKEN env var is not set
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GITHUB_TOKEN is required to fetch releases.\n"
                "\n"
                "To get started:\n"
                "1. Create a GitHub Personal Access Token:\n"
                "   → https://github.com/settings/tokens/new\n"
                "2. Select scope: 'public_repo'\n"
                "3. Set the token:\n"
                "   export GITHUB_TOKEN='your_token_here'  # Linux/macOS\n"
                "   or add to your .env file: GITHUB_TOKEN=your_token_here\n"
            )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Execute a GET request against the GitHub REST API.

        Raises:
            httpx.HTTPStatusError: If the API returns an error status.
        """
        client = await _get_async_http_client()
        response = await client.get(
            f"{GITHUB_REST_API}{path}",
            params=params,
            headers=self._headers(),
        )
        response.raise_for_status()
        return response.json()

    async def fetch_release_reactions(
        self, owner: str, repo: str, release_id: int
    ) -> list[Reaction]:
        """Group the reactions of one release by kind."""
        try:
            reactions = await self._get(
                f"/repos/{owner}/{repo}/releases/{release_id}/reactions",
                params={"per_page": PER_PAGE},
            )
        except httpx.HTTPError as e:
            console.print(
                f"[yellow]⚠️  Could not fetch reactions for release {release_id}: {e}[/yellow]"
            )
            return []

        counts: dict[str, int] = {}
        for reaction in reactions:
            content = reaction.get("content")
            if content:
                counts[content] = counts.get(content, 0) + 1

        return [Reaction(type=kind, total_count=count) for kind, count in counts.items()]

    async def fetch_release_contributors(
        self, owner: str, repo: str, tag_name: str
    ) -> list[Contributor]:
        """Count commits per author login reachable from the release tag."""
        try:
            commits = await self._get(
                f"/repos/{owner}/{repo}/commits",
                params={"sha": tag_name, "per_page": PER_PAGE},
            )
        except httpx.HTTPError as e:
            console.print(
                f"[yellow]⚠️  Could not fetch contributors for tag {tag_name}: {e}[/yellow]"
            )
            return []

        counts: dict[str, int] = {}
        for commit in commits:
            author = commit.get("author")
            login = author.get("login") if isinstance(author, dict) else None
            if login:
                counts[login] = counts.get(login, 0) + 1

        return [
            Contributor(login=login, contributions=count)
            for login, count in counts.items()
        ]

    async def _build_release(
        self, owner: str, repo: str, raw: dict[str, Any]
    ) -> ReleaseNote:
        reactions, contributors = await asyncio.gather(
            self.fetch_release_reactions(owner, repo, raw["id"]),
            self.fetch_release_contributors(owner, repo, raw["tag_name"]),
        )
        release = release_from_dict(
            {
                "tagName": raw["tag_name"],
                "name": raw.get("name"),
                "body": raw.get("body"),
                "createdAt": raw["created_at"],
                "url": raw.get("html_url", ""),
            }
        )
        return release._replace(reactions=reactions, contributors=contributors)

    async def fetch_release_notes(self, owner: str, repo: str) -> list[ReleaseNote]:
        """
        Fetch up to 100 releases with reactions and contributors.

        Raises:
            ReleaseFetchError: If the release list cannot be retrieved.
        """
        try:
            raw_releases = await self._get(
                f"/repos/{owner}/{repo}/releases", params={"per_page": PER_PAGE}
            )
        except httpx.HTTPError as e:
            raise ReleaseFetchError(
                f"Failed to fetch release notes for {owner}/{repo}: {e}"
            ) from e

        return list(
            await asyncio.gather(
                *(self._build_release(owner, repo, raw) for raw in raw_releases)
            )
        )
