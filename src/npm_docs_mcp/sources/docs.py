"""README resolution for npm packages.

Pipeline (first non-empty result wins):
1. Registry metadata -- ``<registry>/<package>/latest`` (failure is fatal)
2. GitHub raw README -- master, main, develop branches in that order
3. Package tarball -- README bundled in the published archive

If every source comes up empty the caller gets ``NO_DOCS_FOUND``.
"""

import httpx
from loguru import logger

from npm_docs_mcp.config import settings
from npm_docs_mcp.sources.github import (
    extract_github_repo_path,
    fetch_readme_from_branches,
)
from npm_docs_mcp.sources.registry import fetch_registry_metadata
from npm_docs_mcp.sources.tarball import (
    Extractor,
    extract_tarball,
    get_readme_from_tarball,
)

NO_DOCS_FOUND = "No documentation found in any common branches or package tarball"


def new_http_client() -> httpx.AsyncClient:
    """HTTP client shared by all steps of one lookup."""
    return httpx.AsyncClient(
        timeout=settings.resolve_http_timeout(),
        follow_redirects=True,
    )


async def get_package_docs(
    package_name: str,
    client: httpx.AsyncClient | None = None,
    extractor: Extractor = extract_tarball,
) -> str:
    """Resolve the README text for an npm package.

    Args:
        package_name: npm package name, e.g. ``react`` or ``@types/node``
        client: HTTP client to use; a fresh one is created (and closed) if omitted
        extractor: archive backend for the tarball fallback

    Raises:
        Anything raised while fetching registry metadata. GitHub and tarball
        failures are logged and never escape.
    """
    if client is None:
        async with new_http_client() as own_client:
            return await _resolve(own_client, package_name, extractor)
    return await _resolve(client, package_name, extractor)


async def _resolve(
    client: httpx.AsyncClient, package_name: str, extractor: Extractor
) -> str:
    metadata = await fetch_registry_metadata(client, package_name)

    doc_text = ""

    repo_path = extract_github_repo_path(metadata.repository_url)
    if repo_path:
        logger.debug(f"{package_name}: GitHub repository {repo_path}")
        doc_text = await fetch_readme_from_branches(client, repo_path) or ""

    if not doc_text:
        logger.debug(f"{package_name}: falling back to {metadata.tarball_url}")
        try:
            doc_text = await get_readme_from_tarball(
                client, metadata.tarball_url, package_name, extractor=extractor
            )
        except Exception as e:
            logger.warning(f"Failed to extract tarball for {package_name}: {e}")
            doc_text = ""

    return doc_text or NO_DOCS_FOUND
