# jobtech_mcp/cli_main.py
# SPDX-License-Identifier: Apache-2.0
"""
CLI entry point: run the MCP server over stdio (default) or streamable HTTP.

Environment (see settings.py): TRANSPORT, HOST, PORT, MCP_PATH, LOG_LEVEL, LOG_JSON.
Command-line options override the environment.
"""
from __future__ import annotations

import logging
from typing import Optional

import typer

from . import __version__
from .logging_config import configure_logging
from .settings import SETTINGS, ConfigurationError, ServerConfig
from .tools import TOOL_NAMES

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Arbetsförmedlingen JobTech MCP server")


def resolve_server_config(
    transport: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> ServerConfig:
    """Merge CLI overrides onto the env-driven server settings (validated)."""
    base = SETTINGS.server
    return ServerConfig(
        transport=(transport or base.transport).lower(),
        host=host or base.host,
        port=port if port is not None else base.port,
        path=base.path,
    )


@app.command()
def serve(
    transport: Optional[str] = typer.Option(None, "--transport", "-t", help="stdio or http"),
    host: Optional[str] = typer.Option(None, "--host", help="HTTP bind host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="HTTP listen port"),
) -> None:
    """Start the MCP server."""
    configure_logging(log_level=SETTINGS.log_level, json_format=SETTINGS.log_json)

    try:
        server_cfg = resolve_server_config(transport, host, port)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        raise typer.Exit(code=2)

    from .server import create_mcp_server

    mcp = create_mcp_server()
    logger.info("Arbetsförmedlingen MCP server v%s starting via %s...", __version__, server_cfg.transport)
    logger.info("Tools: %s", ", ".join(TOOL_NAMES))

    try:
        if server_cfg.transport == "http":
            logger.info(
                "Listening on http://%s:%d%s", server_cfg.host, server_cfg.port, server_cfg.path
            )
            mcp.run(transport="http", host=server_cfg.host, port=server_cfg.port, path=server_cfg.path)
        else:
            mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error("Server error in %s mode: %s", server_cfg.transport, e, exc_info=True)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
