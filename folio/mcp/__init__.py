"""MCP module with tool schemas, handlers, and serializers."""

from folio.mcp.tool_handlers import call_tool_handler, TOOL_HANDLERS
from folio.mcp.tool_schemas import get_tool_schemas
from folio.mcp.serializers import serialize_document, serialize_navigation, serialize_parsed

__all__ = [
    "call_tool_handler",
    "TOOL_HANDLERS",
    "get_tool_schemas",
    "serialize_document",
    "serialize_navigation",
    "serialize_parsed",
]
