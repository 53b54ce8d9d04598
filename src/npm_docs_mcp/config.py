"""Configuration settings for the npm package docs MCP server."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """npm package docs MCP server configuration.

    Environment variables:
    - NPM_REGISTRY_URL: npm registry base URL (default: https://registry.npmjs.org)
    - GITHUB_RAW_URL: Raw file host for GitHub READMEs
        (default: https://raw.githubusercontent.com)
    - HTTP_TIMEOUT: Per-request timeout in seconds (0 = no timeout)
    - TOOL_TIMEOUT: Whole tool call timeout in seconds (0 = no timeout)
    - TEMP_DIR_PREFIX: Prefix for tarball extraction directories (default: npm-docs)
    - LOG_LEVEL: loguru level for the stderr sink (default: INFO)
    """

    # Upstream hosts
    npm_registry_url: str = "https://registry.npmjs.org"
    github_raw_url: str = "https://raw.githubusercontent.com"

    # Timeouts (seconds, 0 = no timeout)
    http_timeout: float = 0
    tool_timeout: int = 0

    # Tarball fallback
    temp_dir_prefix: str = "npm-docs"

    # Logging
    log_level: str = "INFO"

    model_config = {"env_prefix": "", "case_sensitive": False}

    def registry_base(self) -> str:
        """Registry URL without a trailing slash."""
        return self.npm_registry_url.rstrip("/")

    def raw_base(self) -> str:
        """Raw file host URL without a trailing slash."""
        return self.github_raw_url.rstrip("/")

    def resolve_http_timeout(self) -> float | None:
        """Return the httpx timeout value; None disables it."""
        if self.http_timeout <= 0:
            return None
        return self.http_timeout


settings = Settings()
