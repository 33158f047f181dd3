"""MCP tool schema definitions."""

from typing import Any


def get_tool_schemas() -> dict[str, dict[str, Any]]:
    """Get all MCP tool schemas."""
    return {
        "scan_content": {
            "name": "scan_content",
            "description": "Index the content directory: parse new and edited files, drop deleted ones",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "content_dir": {
                        "type": "string",
                        "description": "Content directory (default: configured CONTENT_DIR)",
                    },
                    "strict": {
                        "type": "boolean",
                        "description": "Fail on the first malformed file (default: configured value)",
                    },
                },
            },
        },
        "list_documents": {
            "name": "list_documents",
            "description": "List documents newest first, drafts excluded unless requested",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "include_drafts": {
                        "type": "boolean",
                        "description": "Include draft documents (default: false)",
                    },
                    "tag": {"type": "string", "description": "Only documents with this tag"},
                    "title_pattern": {
                        "type": "string",
                        "description": "Case-insensitive title substring",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results (default: 100)",
                    },
                    "offset": {
                        "type": "integer",
                        "description": "Number of results to skip (default: 0)",
                    },
                },
            },
        },
        "get_document": {
            "name": "get_document",
            "description": "Retrieve a document by slug with its front-matter and body",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "slug": {"type": "string", "description": "Document slug"},
                    "include_body": {
                        "type": "boolean",
                        "description": "Include the Markdown body (default: true)",
                    },
                },
                "required": ["slug"],
            },
        },
        "get_navigation": {
            "name": "get_navigation",
            "description": "Navigation menu entries in display order",
            "inputSchema": {"type": "object", "properties": {}},
        },
        "list_tags": {
            "name": "list_tags",
            "description": "Tags of published documents with document counts",
            "inputSchema": {"type": "object", "properties": {}},
        },
        "parse_front_matter": {
            "name": "parse_front_matter",
            "description": "Parse and validate a Markdown document's front-matter without indexing it",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "text": {"type": "string", "description": "Full document text"},
                    "source": {
                        "type": "string",
                        "description": "Optional file name for error messages",
                    },
                },
                "required": ["text"],
            },
        },
        "export_to_github": {
            "name": "export_to_github",
            "description": "Export published documents, or their index page, to a GitHub repository",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "repo_owner": {"type": "string", "description": "Repository owner"},
                    "repo_name": {"type": "string", "description": "Repository name"},
                    "target": {
                        "type": "string",
                        "enum": ["documents", "index"],
                        "description": "What to export (default: documents)",
                    },
                    "slugs": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Only these documents (default: whole listing)",
                    },
                    "base_path": {
                        "type": "string",
                        "description": "Directory in the repository (default: content)",
                    },
                    "include_drafts": {
                        "type": "boolean",
                        "description": "Export drafts too (default: false)",
                    },
                    "branch": {
                        "type": "string",
                        "description": "Target branch, created if missing",
                    },
                },
                "required": ["repo_owner", "repo_name"],
            },
        },
    }
