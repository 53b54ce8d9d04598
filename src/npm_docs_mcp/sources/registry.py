"""npm registry metadata lookup."""

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

from npm_docs_mcp.config import settings


class RepositoryDescriptor(BaseModel):
    """The ``repository`` field of a package manifest."""

    model_config = ConfigDict(frozen=True)

    type: str | None = None
    url: str | None = None


class DistInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    tarball: str


class RegistryMetadata(BaseModel):
    """Subset of the registry's "latest version" document we rely on."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    version: str = ""
    repository: RepositoryDescriptor | None = None
    dist: DistInfo

    @field_validator("repository", mode="before")
    @classmethod
    def _coerce_repository(cls, value):
        # Manifests may use a bare string: "repository": "owner/repo"
        if isinstance(value, str):
            return {"url": value}
        if not isinstance(value, dict):
            return None
        url = value.get("url")
        if url is not None and not isinstance(url, str):
            return None
        repo_type = value.get("type")
        return {
            "url": url,
            "type": repo_type if isinstance(repo_type, str) else None,
        }

    @property
    def repository_url(self) -> str | None:
        if self.repository is None:
            return None
        return self.repository.url

    @property
    def tarball_url(self) -> str:
        return self.dist.tarball


def latest_url(package_name: str) -> str:
    return f"{settings.registry_base()}/{package_name}/latest"


async def fetch_registry_metadata(
    client: httpx.AsyncClient, package_name: str
) -> RegistryMetadata:
    """Fetch and parse ``<registry>/<package>/latest``.

    Raises:
        httpx.HTTPError: network failure or non-2xx status.
        ValueError: body is not JSON.
        pydantic.ValidationError: body lacks ``dist.tarball``.
    """
    response = await client.get(latest_url(package_name))
    response.raise_for_status()
    return RegistryMetadata.model_validate(response.json())
