"""GitHub repository URL parsing and README branch probing."""

import re
from urllib.parse import urlparse

import httpx
from loguru import logger

from npm_docs_mcp.config import settings

GITHUB_HOST = "github.com"

# Probed in this order; the first 2xx response wins.
README_BRANCHES = ("master", "main", "develop")

# npm shorthand: "owner/repo" or "github:owner/repo"
_SHORTHAND_RE = re.compile(r"^(?:github:)?([\w.-]+/[\w.-]+)$")


def _expand_shorthand(repo_url: str) -> str:
    """Turn npm repository shorthands into a full GitHub URL."""
    match = _SHORTHAND_RE.match(repo_url)
    if match:
        return f"https://{GITHUB_HOST}/{match.group(1)}"
    return repo_url


def extract_github_repo_path(repo_url: str | None) -> str | None:
    """Extract ``owner/repo`` from a repository URL hosted on GitHub.

    Accepts the forms found in npm metadata, e.g.
    ``git+https://github.com/owner/repo.git``,
    ``git://github.com/owner/repo.git``, ``github:owner/repo``.

    Returns None when the URL is missing, unparseable or not on GitHub.
    """
    if not repo_url:
        return None

    try:
        clean_url = _expand_shorthand(repo_url.strip())
        if clean_url.startswith("git+"):
            clean_url = clean_url[len("git+") :]

        parsed = urlparse(clean_url)
        if parsed.hostname != GITHUB_HOST:
            return None

        path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
        return path.removesuffix(".git") or None
    except ValueError as e:
        logger.debug(f"Error parsing GitHub URL {repo_url!r}: {e}")
        return None


def raw_readme_url(repo_path: str, branch: str) -> str:
    """Raw README.md URL for a branch of a GitHub repository."""
    return f"{settings.raw_base()}/{repo_path}/refs/heads/{branch}/README.md"


async def fetch_readme_from_branches(
    client: httpx.AsyncClient,
    repo_path: str,
) -> str | None:
    """Fetch README.md from the first common branch that serves it.

    Any error fetching one branch is logged and the next branch is tried.
    Returns None if no branch answered with a success status.
    """
    for branch in README_BRANCHES:
        url = raw_readme_url(repo_path, branch)
        try:
            response = await client.get(url)
        except Exception as e:
            logger.warning(f"Failed to fetch README from {branch} branch: {e}")
            continue

        if response.is_success:
            logger.debug(f"README found on {repo_path}@{branch}")
            return response.text

        logger.debug(f"No README on {repo_path}@{branch} (HTTP {response.status_code})")
    return None
