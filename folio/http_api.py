"""HTTP API for Folio: read-only content endpoints plus the MCP bridge over SSE."""

import asyncio
import json
import logging
from typing import Any, Dict, Generator

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.responses import StreamingResponse
from mcp import McpError
from sqlalchemy.orm import Session

from folio import __version__
from folio.exceptions import NotFoundError, ValidationError
from folio.mcp.serializers import serialize_document, serialize_navigation
from folio.mcp.tool_handlers import call_tool_handler
from folio.mcp.tool_schemas import get_tool_schemas
from folio.services.content_service import ContentService
from folio.storage.database import get_db

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

app = FastAPI(
    title="Folio",
    description="Front-matter index and listings for a Markdown blog",
    version=__version__,
)


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency yielding an index session."""
    with get_db().session() as session:
        yield session


def _tools() -> list[dict[str, Any]]:
    return [
        {
            "name": tool["name"],
            "description": tool["description"],
            "inputSchema": tool["inputSchema"],
        }
        for tool in get_tool_schemas().values()
    ]


async def handle_jsonrpc_request(request: Dict[str, Any]) -> Dict[str, Any]:
    """Handle a JSON-RPC 2.0 request."""
    jsonrpc = request.get("jsonrpc", "2.0")
    request_id = request.get("id")
    method = request.get("method")
    params = request.get("params") or {}

    if method == "initialize":
        result = {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {},
            "serverInfo": {"name": "folio", "version": __version__},
        }
    elif method == "tools/list":
        result = {"tools": _tools()}
    elif method == "tools/call":
        tool_name = params.get("name")
        try:
            content = await call_tool_handler(tool_name, params.get("arguments") or {}, get_db())
        except McpError as e:
            return {
                "jsonrpc": jsonrpc,
                "id": request_id,
                "error": {"code": e.error.code, "message": e.error.message},
            }
        result = {"content": [{"type": "text", "text": item.text} for item in content]}
    elif method == "prompts/list":
        result = {"prompts": []}
    elif method == "resources/list":
        result = {"resources": []}
    else:
        return {
            "jsonrpc": jsonrpc,
            "id": request_id,
            "error": {"code": -32601, "message": f"Method not found: {method}"},
        }

    return {"jsonrpc": jsonrpc, "id": request_id, "result": result}


@app.post("/mcp/sse")
async def mcp_sse_post(request: dict = Body(...)):
    """Server-Sent Events endpoint for MCP (POST)."""
    result = await handle_jsonrpc_request(request)
    return StreamingResponse(
        content=iter([f"data: {json.dumps(result)}\n\n"]), media_type="text/event-stream"
    )


@app.get("/mcp/sse")
async def mcp_sse_get():
    """Server-Sent Events endpoint for MCP (GET): discovery events then keepalives."""

    async def generate_sse_stream():
        discovery = ["initialize", "tools/list", "prompts/list", "resources/list"]
        for request_id, method in enumerate(discovery, start=1):
            response = await handle_jsonrpc_request(
                {"jsonrpc": "2.0", "id": request_id, "method": method, "params": {}}
            )
            yield f"data: {json.dumps(response)}\n\n"
            await asyncio.sleep(0.1)

        try:
            while True:
                await asyncio.sleep(30)
                yield ": keepalive\n\n"
        except asyncio.CancelledError:
            logger.info("MCP SSE GET: connection closed by client")
            raise

    return StreamingResponse(
        generate_sse_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@app.get("/documents")
def list_documents(
    tag: str | None = None,
    include_drafts: bool = False,
    limit: int = Query(100, ge=0, le=ContentService.LIMIT_MAX),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session),
):
    """Published documents, newest first."""
    documents = ContentService(session).list_documents(
        include_drafts=include_drafts, tag=tag, limit=limit, offset=offset
    )
    return [serialize_document(d, include_body=False) for d in documents]


@app.get("/documents/{slug:path}")
def get_document(slug: str, session: Session = Depends(get_session)):
    """A single document with its body."""
    try:
        document = ContentService(session).get_document(slug)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_document(document)


@app.get("/navigation")
def get_navigation(session: Session = Depends(get_session)):
    """Menu entries in display order."""
    return [serialize_navigation(e) for e in ContentService(session).get_navigation()]


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "folio"}


if __name__ == "__main__":
    import uvicorn

    from folio.config import get_settings
    from folio.logging_config import setup_logging

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(app, host="0.0.0.0", port=8005)
