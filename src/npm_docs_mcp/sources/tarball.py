"""Package tarball fallback: download, unpack and read the bundled README.

The published tarball of every npm package unpacks to a single top-level
``package/`` directory holding the files that shipped to the registry, so it
is a reliable last resort when the source repository has no README on a
common branch.

Extraction is delegated to an ``Extractor`` callable so callers (and tests)
can swap the archive backend without touching the download and lookup flow.
"""

import asyncio
import shutil
import tarfile
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from urllib.parse import urlparse

import httpx
from loguru import logger

from npm_docs_mcp.config import settings

# Probed in this order, case-sensitive, first hit wins.
README_FILENAMES = ("README.md", "readme.md", "README.txt", "readme.txt", "README")

NO_README_FOUND = "No README file found in package"

PACKAGE_DIR_PREFIX = "package"

# (archive_path, dest_dir) -> names of the top-level entries it unpacked
Extractor = Callable[[Path, Path], list[str]]


class TarballError(RuntimeError):
    """The tarball could not be downloaded, unpacked or located."""


def extract_tarball(archive: Path, dest: Path) -> list[str]:
    """Unpack ``archive`` into ``dest`` and return its top-level entries.

    Members that would land outside ``dest`` (absolute paths, ``..``,
    links pointing out) are rejected by tarfile's ``data`` filter.
    """
    with tarfile.open(archive, "r:*") as tar:
        tar.extractall(dest, filter="data")
        roots = {
            Path(member.name).parts[0]
            for member in tar.getmembers()
            if Path(member.name).parts
        }
    return sorted(roots)


def temp_dir_for(package_name: str) -> Path:
    """Per-call scratch directory: ``<tmp>/<prefix>-<package>-<millis>``."""
    # Scoped names ("@scope/name") must not create nested directories
    safe_name = package_name.replace("/", "-").replace("\\", "-")
    stamp = int(time.time() * 1000)
    dirname = f"{settings.temp_dir_prefix}-{safe_name}-{stamp}"
    return Path(tempfile.gettempdir()) / dirname


def tarball_filename(tarball_url: str) -> str:
    """Last path segment of the tarball URL, or '' if there is none."""
    return urlparse(tarball_url).path.rsplit("/", 1)[-1]


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove temporary directory {path}: {e}")


def _find_package_dir(root: Path, entries: list[str]) -> Path | None:
    for entry in entries:
        candidate = root / entry
        if entry.startswith(PACKAGE_DIR_PREFIX) and candidate.is_dir():
            return candidate
    return None


def _read_first_readme(package_dir: Path) -> str:
    for filename in README_FILENAMES:
        readme_path = package_dir / filename
        if readme_path.is_file():
            return readme_path.read_text(encoding="utf-8", errors="replace")
    return ""


async def get_readme_from_tarball(
    client: httpx.AsyncClient,
    tarball_url: str,
    package_name: str,
    extractor: Extractor = extract_tarball,
) -> str:
    """Download a package tarball and return its README text.

    Returns ``NO_README_FOUND`` when the package ships no README.
    The scratch directory is removed before returning, on every path.

    Raises:
        TarballError: download failed, no filename in the URL,
            unreadable archive, or no ``package*`` directory inside.
        httpx.HTTPError: network failure during the download.
    """
    temp_dir = temp_dir_for(package_name)
    await asyncio.to_thread(temp_dir.mkdir, parents=True, exist_ok=True)
    try:
        return await _download_and_read(client, tarball_url, temp_dir, extractor)
    finally:
        await asyncio.to_thread(_remove_tree, temp_dir)


async def _download_and_read(
    client: httpx.AsyncClient,
    tarball_url: str,
    temp_dir: Path,
    extractor: Extractor,
) -> str:
    response = await client.get(tarball_url)
    if not response.is_success:
        raise TarballError(f"Failed to download tarball: {response.reason_phrase}")

    filename = tarball_filename(tarball_url)
    if not filename:
        raise TarballError("Could not extract filename from tarball URL")

    archive_path = temp_dir / filename
    await asyncio.to_thread(archive_path.write_bytes, response.content)

    try:
        entries = await asyncio.to_thread(extractor, archive_path, temp_dir)
    except tarfile.TarError as e:
        raise TarballError(f"Failed to extract tarball: {e}") from e

    package_dir = await asyncio.to_thread(_find_package_dir, temp_dir, entries)
    if package_dir is None:
        raise TarballError("Could not find package directory in tarball")

    content = await asyncio.to_thread(_read_first_readme, package_dir)
    return content or NO_README_FOUND
