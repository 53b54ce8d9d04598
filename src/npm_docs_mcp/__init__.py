"""npm package docs MCP server - README lookup for npm packages."""

from importlib.metadata import version

from npm_docs_mcp.__main__ import _cli as main
from npm_docs_mcp.server import mcp

__version__ = version("npm-package-docs-mcp")
__all__ = ["mcp", "main", "__version__"]
