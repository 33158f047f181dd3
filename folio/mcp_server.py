"""MCP (Model Context Protocol) server for Folio.

Exposes the content index to AI agents over stdio using the mcp library.
"""

import asyncio
import logging

from mcp import McpError
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import ErrorData, TextContent, Tool

from folio import __version__
from folio.config import get_settings
from folio.logging_config import setup_logging
from folio.mcp.tool_handlers import call_tool_handler
from folio.mcp.tool_schemas import get_tool_schemas
from folio.storage.database import get_db

logger = logging.getLogger(__name__)

app = Server("folio")


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List all available MCP tools."""
    return [Tool(**schema) for schema in get_tool_schemas().values()]


@app.call_tool()
async def call_tool(name: str, arguments: dict | None) -> list[TextContent]:
    """Handle tool calls."""
    if arguments is None:
        arguments = {}

    db = get_db()

    try:
        return await call_tool_handler(name, arguments, db)
    except McpError:
        raise
    except Exception as e:
        logger.exception("Unexpected error handling tool %s", name, extra={"tool_name": name})
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message=f"Internal error: {str(e)}",
            )
        )


async def main():
    """Main entry point for MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="folio",
                server_version=__version__,
                capabilities=app.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def run() -> None:
    """Console script entry point."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    asyncio.run(main())


if __name__ == "__main__":
    run()
