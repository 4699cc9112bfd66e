"""MCP server for swift-imports-mcp."""

import asyncio
import json
import logging
import os
import sys

from mcp.server import Server
from mcp.types import Tool, TextContent

from .tools.parse_imports import parse_imports
from .tools.index_repo import index_repo
from .tools.index_folder import index_folder
from .tools.list_repos import list_repos
from .tools.get_file_imports import get_file_imports
from .tools.search_imports import search_imports

logger = logging.getLogger(__name__)


# Create server
server = Server("swift-imports-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="parse_imports",
            description="Extract import declarations ([@testable] import [kind] path) from Swift source text. Uses SourceKit syntax tokens when given, otherwise tokenizes the text itself.",
            inputSchema={
                "type": "object",
                "properties": {
                    "contents": {
                        "type": "string",
                        "description": "Swift source text"
                    },
                    "tokens": {
                        "type": "array",
                        "description": "Optional SourceKit syntax map tokens with byte offsets into contents",
                        "items": {
                            "type": "object",
                            "properties": {
                                "type": {"type": "string"},
                                "offset": {"type": "integer", "minimum": 0},
                                "length": {"type": "integer", "minimum": 0}
                            },
                            "required": ["type", "offset", "length"]
                        }
                    }
                },
                "required": ["contents"]
            }
        ),
        Tool(
            name="index_repo",
            description="Index the imports of a GitHub repository's Swift files and save them to local storage.",
            inputSchema={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "GitHub repository URL or owner/repo string"
                    }
                },
                "required": ["url"]
            }
        ),
        Tool(
            name="index_folder",
            description="Index the imports of Swift files in a local folder and save them to local storage.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to local folder (absolute or relative, supports ~ for home directory)"
                    }
                },
                "required": ["path"]
            }
        ),
        Tool(
            name="list_repos",
            description="List all indexed repositories.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="get_file_imports",
            description="Get the import declarations of one file in an indexed repository, in source order.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": {
                        "type": "string",
                        "description": "Repository identifier (owner/repo or just repo name)"
                    },
                    "file_path": {
                        "type": "string",
                        "description": "Path to the file within the repository (e.g., 'Sources/App/main.swift')"
                    }
                },
                "required": ["repo", "file_path"]
            }
        ),
        Tool(
            name="search_imports",
            description="Find files in an indexed repository that import a module, or a symbol under it (e.g. 'Foundation.Date').",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": {
                        "type": "string",
                        "description": "Repository identifier (owner/repo or just repo name)"
                    },
                    "module": {
                        "type": "string",
                        "description": "Module name or dotted import path"
                    },
                    "file_pattern": {
                        "type": "string",
                        "description": "Optional glob pattern to filter files (e.g., 'Sources/**/*.swift')"
                    },
                    "max_results": {
                        "type": "integer",
                        "description": "Maximum number of results to return",
                        "default": 50
                    }
                },
                "required": ["repo", "module"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    storage_path = os.environ.get("IMPORT_INDEX_PATH")

    try:
        if name == "parse_imports":
            result = parse_imports(
                contents=arguments["contents"],
                tokens=arguments.get("tokens"),
            )
        elif name == "index_repo":
            result = await index_repo(
                url=arguments["url"],
                github_token=os.environ.get("GITHUB_TOKEN"),
                storage_path=storage_path
            )
        elif name == "index_folder":
            result = index_folder(
                path=arguments["path"],
                storage_path=storage_path
            )
        elif name == "list_repos":
            result = list_repos(storage_path=storage_path)
        elif name == "get_file_imports":
            result = get_file_imports(
                repo=arguments["repo"],
                file_path=arguments["file_path"],
                storage_path=storage_path
            )
        elif name == "search_imports":
            result = search_imports(
                repo=arguments["repo"],
                module=arguments["module"],
                file_pattern=arguments.get("file_pattern"),
                max_results=arguments.get("max_results", 50),
                storage_path=storage_path
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}, indent=2))]


def configure_logging():
    """Send logs to stderr; stdout carries the MCP stream."""
    level = os.environ.get("SWIFT_IMPORTS_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def run_server():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Main entry point."""
    configure_logging()
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
