"""Tests for src/npm_docs_mcp/sources/registry.py."""

import httpx
import pytest
from pydantic import ValidationError

from npm_docs_mcp.sources.registry import (
    RegistryMetadata,
    fetch_registry_metadata,
    latest_url,
)

_TARBALL = "https://registry.npmjs.org/left-pad/-/left-pad-1.3.0.tgz"


class TestRegistryMetadata:
    def test_object_repository(self):
        meta = RegistryMetadata.model_validate(
            {
                "name": "left-pad",
                "version": "1.3.0",
                "repository": {"type": "git", "url": "git+https://github.com/a/b.git"},
                "dist": {"tarball": _TARBALL, "shasum": "abc"},
            }
        )
        assert meta.repository_url == "git+https://github.com/a/b.git"
        assert meta.repository.type == "git"
        assert meta.tarball_url == _TARBALL

    def test_string_repository(self):
        meta = RegistryMetadata.model_validate(
            {"repository": "a/b", "dist": {"tarball": _TARBALL}}
        )
        assert meta.repository_url == "a/b"
        assert meta.repository.type is None

    def test_missing_repository(self):
        meta = RegistryMetadata.model_validate({"dist": {"tarball": _TARBALL}})
        assert meta.repository is None
        assert meta.repository_url is None

    @pytest.mark.parametrize(
        "repository",
        [["https://github.com/a/b"], {"url": 123}, {"url": ["x"]}, 42, True],
        ids=["list", "int-url", "list-url", "number", "bool"],
    )
    def test_malformed_repository_is_dropped(self, repository):
        meta = RegistryMetadata.model_validate(
            {"repository": repository, "dist": {"tarball": _TARBALL}}
        )
        assert meta.repository is None
        assert meta.repository_url is None

    def test_non_string_type_is_ignored(self):
        meta = RegistryMetadata.model_validate(
            {"repository": {"type": 1, "url": "a/b"}, "dist": {"tarball": _TARBALL}}
        )
        assert meta.repository_url == "a/b"
        assert meta.repository.type is None

    def test_missing_dist_is_invalid(self):
        with pytest.raises(ValidationError):
            RegistryMetadata.model_validate({"name": "left-pad"})

    def test_not_an_object_is_invalid(self):
        with pytest.raises(ValidationError):
            RegistryMetadata.model_validate("Not Found")

    def test_immutable(self):
        meta = RegistryMetadata.model_validate({"dist": {"tarball": _TARBALL}})
        with pytest.raises(ValidationError):
            meta.name = "other"


def test_latest_url():
    assert latest_url("react") == "https://registry.npmjs.org/react/latest"
    assert latest_url("@types/node") == "https://registry.npmjs.org/@types/node/latest"


class TestFetchRegistryMetadata:
    async def test_success(self, make_client):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(
                200, json={"name": "left-pad", "dist": {"tarball": _TARBALL}}
            )

        meta = await fetch_registry_metadata(make_client(handler), "left-pad")

        assert meta.name == "left-pad"
        assert seen == ["https://registry.npmjs.org/left-pad/latest"]

    async def test_http_error_status(self, make_client):
        client = make_client(lambda request: httpx.Response(404, json="Not Found"))
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_registry_metadata(client, "no-such-package-xyz")

    async def test_network_error(self, make_client):
        def handler(request):
            raise httpx.ConnectError("Name or service not known", request=request)

        with pytest.raises(httpx.ConnectError):
            await fetch_registry_metadata(make_client(handler), "left-pad")

    async def test_non_json_body(self, make_client):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ValueError):
            await fetch_registry_metadata(client, "left-pad")
