"""npm package docs MCP server - tool definition and process lifecycle."""

import asyncio
import signal
import sys
from contextlib import asynccontextmanager
from typing import Annotated

from loguru import logger
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent, ToolAnnotations
from pydantic import Field

from npm_docs_mcp.config import settings
from npm_docs_mcp.sources.docs import get_package_docs

# Configure logging (stdout carries the MCP protocol)
logger.remove()
logger.add(sys.stderr, level=settings.log_level)

_TOOL_NAME = "get_docs_for_npm_package"

# Grace period (seconds) given to a cancelled lookup to remove its
# temporary directory before we abandon it.
_CANCEL_GRACE_PERIOD = 5.0


@asynccontextmanager
async def _lifespan(_server: FastMCP):
    logger.info("NPM Package Docs MCP Server started")
    yield
    logger.info("Shutting down NPM Package Docs MCP Server...")


mcp = FastMCP(
    name="npm-package-docs-mcp",
    instructions=(
        "npm package documentation lookup. "
        f"Use `{_TOOL_NAME}` to fetch the README of an npm package, "
        "from its GitHub repository or, failing that, its published tarball."
    ),
    lifespan=_lifespan,
)


async def _with_timeout(coro, action: str) -> str:
    """Run coroutine with the TOOL_TIMEOUT deadline (0 = wait forever).

    Raises:
        TimeoutError: the deadline expired; the task has been cancelled.
    """
    timeout = settings.tool_timeout
    if timeout <= 0:
        return await coro

    task = asyncio.create_task(coro)
    done, _pending = await asyncio.wait({task}, timeout=timeout)

    if done:
        return task.result()

    task.cancel()
    logger.warning(f"Tool '{action}' timed out after {timeout}s, cancelling...")

    # The caller gets TimeoutError however the task ends; the wait only gives
    # the tarball step time to remove its scratch directory.
    try:
        await asyncio.wait_for(asyncio.shield(task), timeout=_CANCEL_GRACE_PERIOD)
    except asyncio.CancelledError:
        if asyncio.current_task().cancelling():
            raise
    except Exception as e:
        logger.debug(f"Cancelled '{action}' ended with {type(e).__name__}: {e}")

    raise TimeoutError(
        f"'{action}' timed out after {timeout}s. Increase TOOL_TIMEOUT to wait longer."
    )


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=text)],
        isError=is_error,
    )


@mcp.tool(
    name=_TOOL_NAME,
    title="Get docs for an npm package",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=True,
        idempotentHint=True,
    ),
    structured_output=False,
)
async def get_docs_for_npm_package(
    packageName: Annotated[  # noqa: N803 - wire name of the argument
        str, Field(min_length=1, description="Name of the npm package")
    ],
) -> CallToolResult:
    """Get the docs for an npm package.

    Returns the README from the package's GitHub repository (master, main or
    develop branch), falling back to the README inside the published tarball.
    """
    try:
        doc_text = await _with_timeout(get_package_docs(packageName), _TOOL_NAME)
    except Exception as e:
        logger.error(f"{_TOOL_NAME}({packageName!r}) failed: {e}")
        return _text_result(f"Error: {str(e) or type(e).__name__}", is_error=True)
    return _text_result(doc_text)


@mcp.prompt()
def package_docs(package_name: str, question: str) -> str:
    """Generate a prompt to answer a question from an npm package's README."""
    return (
        f"Answer this question about the npm package '{package_name}': {question}\n\n"
        f"Call the {_TOOL_NAME} tool with packageName='{package_name}' and "
        "base the answer on the returned README. Say so if the README does "
        "not cover the question."
    )


def _install_signal_handlers() -> None:
    """Exit cleanly (status 0) on SIGTERM / SIGINT."""

    def _terminate(signum, _frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        raise SystemExit(0)

    signal.signal(signal.SIGTERM, _terminate)
    signal.signal(signal.SIGINT, _terminate)


def main() -> None:
    """Entry point for the MCP server.

    Any error escaping the stdio server (including a transport that fails
    to connect) is logged and turned into exit status 1.
    """
    _install_signal_handlers()
    try:
        mcp.run()
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        logger.exception(f"MCP server stopped with an unhandled error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
