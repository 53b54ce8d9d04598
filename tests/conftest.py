"""Pytest configuration and fixtures."""

import io
import tarfile
import tempfile

import httpx
import pytest


def _build_tarball(files: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, text in files.items():
            data = text.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def build_tarball():
    """Build an in-memory .tgz from ``{member_name: text}``."""
    return _build_tarball


@pytest.fixture
async def make_client():
    """Factory for AsyncClients backed by an ``httpx.MockTransport`` handler.

    Example usage::

        async def test_something(make_client):
            client = make_client(lambda request: httpx.Response(200, text="ok"))
            result = await get_package_docs("left-pad", client=client)
    """
    clients: list[httpx.AsyncClient] = []

    def _make(handler) -> httpx.AsyncClient:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), follow_redirects=True
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def scratch_root(tmp_path, monkeypatch):
    """Point the platform temp dir at tmp_path so extraction dirs are visible."""
    root = tmp_path / "scratch"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root
