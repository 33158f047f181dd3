"""MCP tool handlers for executing tool operations."""

import json
import logging
from typing import Any

from mcp import McpError
from mcp.types import ErrorData, TextContent

from folio.config import get_settings
from folio.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from folio.frontmatter import parse_front_matter
from folio.mcp.serializers import (
    serialize_document,
    serialize_navigation,
    serialize_parsed,
)
from folio.services.content_service import ContentService
from folio.services.export_service import (
    ExportConfig,
    ExportService,
    GitHubAPIError,
    GitHubAuthenticationError,
)

logger = logging.getLogger(__name__)


def _text(result: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


async def handle_scan_content(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle scan_content tool."""
    with db.session() as session:
        service = ContentService(
            session,
            content_dir=arguments.get("content_dir"),
            strict=arguments.get("strict"),
        )
        result = service.scan()
        return _text(result.to_dict())


async def handle_list_documents(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle list_documents tool."""
    with db.session() as session:
        service = ContentService(session)
        if arguments.get("title_pattern"):
            documents = service.search(
                arguments["title_pattern"], limit=arguments.get("limit", 100)
            )
        else:
            documents = service.list_documents(
                include_drafts=arguments.get("include_drafts", False),
                tag=arguments.get("tag"),
                limit=arguments.get("limit", 100),
                offset=arguments.get("offset", 0),
            )
        return _text([serialize_document(d, include_body=False) for d in documents])


async def handle_get_document(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle get_document tool."""
    with db.session() as session:
        service = ContentService(session)
        document = service.get_document(arguments["slug"])
        return _text(
            serialize_document(document, include_body=arguments.get("include_body", True))
        )


async def handle_get_navigation(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle get_navigation tool."""
    with db.session() as session:
        entries = ContentService(session).get_navigation()
        return _text([serialize_navigation(entry) for entry in entries])


async def handle_list_tags(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle list_tags tool."""
    with db.session() as session:
        tags = ContentService(session).list_tags()
        return _text([{"tag": name, "count": count} for name, count in tags])


async def handle_parse_front_matter(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle parse_front_matter tool. Does not touch the index."""
    parsed = parse_front_matter(arguments["text"], arguments.get("source"))
    return _text(serialize_parsed(parsed))


async def handle_export_to_github(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle export_to_github tool."""
    token = get_settings().get_github_token()
    if not token:
        raise ValidationError("GITHUB_TOKEN is not configured", "github_token")

    config = ExportConfig(
        base_path=arguments.get("base_path", "content"),
        include_drafts=arguments.get("include_drafts", False),
        branch=arguments.get("branch"),
    )
    with db.session() as session:
        service = ExportService(session, token)
        if arguments.get("target", "documents") == "index":
            result = service.export_index(
                arguments["repo_owner"], arguments["repo_name"], config
            )
        else:
            result = service.export_documents(
                arguments["repo_owner"],
                arguments["repo_name"],
                config,
                slugs=arguments.get("slugs"),
            )
        return _text(result)


TOOL_HANDLERS = {
    "scan_content": handle_scan_content,
    "list_documents": handle_list_documents,
    "get_document": handle_get_document,
    "get_navigation": handle_get_navigation,
    "list_tags": handle_list_tags,
    "parse_front_matter": handle_parse_front_matter,
    "export_to_github": handle_export_to_github,
}


async def call_tool_handler(tool_name: str, arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """
    Call the appropriate tool handler.

    Args:
        tool_name: Name of the tool to call
        arguments: Tool arguments
        db: Database instance

    Returns:
        List of TextContent with tool execution result

    Raises:
        McpError: If tool name is unknown or handler raises an error
    """
    if tool_name not in TOOL_HANDLERS:
        raise McpError(
            ErrorData(
                code=-32601,  # Method not found
                message=f"Unknown tool: {tool_name}",
            )
        )

    handler = TOOL_HANDLERS[tool_name]

    try:
        return await handler(arguments, db)
    except McpError:
        raise
    except KeyError as e:
        raise McpError(
            ErrorData(
                code=-32602,  # Invalid params
                message=f"Missing required argument: {e.args[0]}",
            )
        )
    except ValidationError as e:
        raise McpError(
            ErrorData(
                code=-32602,  # Invalid params
                message=f"Validation error: {str(e)}",
            )
        )
    except NotFoundError as e:
        raise McpError(
            ErrorData(
                code=-32001,  # Custom error: not found
                message=str(e),
            )
        )
    except DuplicateError as e:
        raise McpError(
            ErrorData(
                code=-32002,  # Custom error: duplicate
                message=str(e),
            )
        )
    except DatabaseError as e:
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message=f"Database error: {str(e)}",
            )
        )
    except GitHubAuthenticationError as e:
        raise McpError(
            ErrorData(
                code=-32603,
                message=f"GitHub authentication error: {str(e)}",
            )
        )
    except GitHubAPIError as e:
        raise McpError(
            ErrorData(
                code=-32603,
                message=f"GitHub API error: {str(e)}",
            )
        )
    except Exception as e:
        logger.exception("Tool %s failed", tool_name, extra={"tool_name": tool_name})
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message=f"Internal error: {str(e)}",
            )
        )
