"""npm package docs MCP server entry point."""

import asyncio
import sys


def _get(package_name: str) -> int:
    """Resolve docs for one package and print them to stdout.

    Same pipeline as the MCP tool, useful to check what an agent would see.
    """
    from npm_docs_mcp.sources.docs import get_package_docs

    try:
        doc_text = asyncio.run(get_package_docs(package_name))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(doc_text)
    return 0


def _cli() -> None:
    """CLI dispatcher: server (default), get <package>, or version."""
    if len(sys.argv) >= 2 and sys.argv[1] == "get":
        if len(sys.argv) < 3:
            print("Usage: npm-package-docs-mcp get <package>", file=sys.stderr)
            sys.exit(2)
        sys.exit(_get(sys.argv[2]))
    elif len(sys.argv) >= 2 and sys.argv[1] in ("version", "--version"):
        from importlib.metadata import version

        print(version("npm-package-docs-mcp"))
    else:
        from npm_docs_mcp.server import main

        main()


if __name__ == "__main__":
    _cli()
